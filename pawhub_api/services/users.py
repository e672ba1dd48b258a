"""
Usuários: cadastro, edição de perfil, senha, papéis e listagem.

Invariante global: no máximo MAX_SUPER_ADMINS usuários com o papel SuperAdmin.
A contagem e a escrita acontecem na mesma transação; no Postgres um advisory
lock de transação serializa criações concorrentes.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy import String, and_, cast, func, not_, or_, text

from pawhub_api.extensions import bcrypt, db
from pawhub_api.domain.addresses import AddressFields, only_digits
from pawhub_api.domain.donations import (
    ANONYMOUS_CPF,
    ANONYMOUS_EMAIL_PREFIX,
    ANONYMOUS_EMAIL_SUFFIX,
    ANONYMOUS_NAME,
    anonymous_email,
    is_anonymous_donor,
)
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import (
    Role,
    RoleSet,
    SELF_SERVICE_ROLES,
    has_any,
    parse_role,
    with_role,
    without_role,
)
from pawhub_api.models import User
from pawhub_api.services import authorization
from pawhub_api.services.addresses import upsert_address
from pawhub_api.services.base import clean_str, commit, get_or_404
from pawhub_api.utils.errors import Conflict, Forbidden, InvalidInput

MIN_PASSWORD_LENGTH = 6

# chave arbitrária para pg_advisory_xact_lock
_SUPER_ADMIN_LOCK_KEY = 720_001


def roles_from_payload(raw) -> RoleSet:
    """Valida a lista de roles recebida; token desconhecido é erro de entrada."""
    if raw in (None, "", []):
        return frozenset()
    values = raw if isinstance(raw, list) else [raw]
    roles = set()
    for value in values:
        role = parse_role(value)
        if role is None:
            raise InvalidInput(f"role inválida: {value}")
        roles.add(role)
    return frozenset(roles)


@dataclass(frozen=True)
class UserCreate:
    nome: str
    email: str
    roles: RoleSet
    cpf: Optional[str] = None
    telefone: Optional[str] = None
    foto_url: Optional[str] = None
    senha: Optional[str] = None
    address: AddressFields = field(default_factory=AddressFields)

    @classmethod
    def from_payload(cls, data: Dict[str, Any], default_roles: RoleSet = frozenset()) -> "UserCreate":
        nome = clean_str(data.get("name") or data.get("nome"))
        email = clean_str(data.get("email"))
        if not nome or not email:
            raise InvalidInput("name e email são obrigatórios")
        return cls(
            nome=nome,
            email=email.lower(),
            roles=roles_from_payload(data.get("roles")) or default_roles,
            cpf=only_digits(clean_str(data.get("cpf") or data.get("nationalId"))) or None,
            telefone=clean_str(data.get("phone") or data.get("telefone")),
            foto_url=clean_str(data.get("photoUrl")),
            senha=data.get("password") or None,
            address=AddressFields.from_payload(data),
        )


@dataclass(frozen=True)
class UserUpdate:
    nome: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    telefone: Optional[str] = None
    foto_url: Optional[str] = None
    ativo: Optional[bool] = None
    address: AddressFields = field(default_factory=AddressFields)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "UserUpdate":
        ativo = data.get("active")
        if ativo is not None and not isinstance(ativo, bool):
            raise InvalidInput("active deve ser booleano")
        email = clean_str(data.get("email"))
        return cls(
            nome=clean_str(data.get("name")),
            email=email.lower() if email else None,
            cpf=only_digits(clean_str(data.get("cpf") or data.get("nationalId"))) or None,
            telefone=clean_str(data.get("phone")),
            foto_url=clean_str(data.get("photoUrl")),
            ativo=ativo,
            address=AddressFields.from_payload(data),
        )


# --- SuperAdmin ---------------------------------------------------------------

def count_super_admins() -> int:
    # `roles` é JSON: procura o token serializado, funciona em jsonb e no SQLite
    token = f'%"{Role.SUPER_ADMIN.value}"%'
    return db.session.query(func.count(User.id)).filter(cast(User.roles, String).like(token)).scalar() or 0


def _lock_super_admin_slot():
    if db.engine.dialect.name == "postgresql":
        db.session.execute(text("SELECT pg_advisory_xact_lock(:k)"), {"k": _SUPER_ADMIN_LOCK_KEY})


def ensure_super_admin_slot():
    _lock_super_admin_slot()
    limit = current_app.config.get("MAX_SUPER_ADMINS", 2)
    if count_super_admins() >= limit:
        raise InvalidInput(f"Limite de {limit} SuperAdmins atingido")


# --- Consultas ----------------------------------------------------------------

def _anonymous_clause():
    return or_(
        User.nome == ANONYMOUS_NAME,
        and_(
            User.email.startswith(ANONYMOUS_EMAIL_PREFIX, autoescape=True),
            User.email.endswith(ANONYMOUS_EMAIL_SUFFIX, autoescape=True),
        ),
        func.coalesce(User.cpf, "") == ANONYMOUS_CPF,
    )


def list_users(q: Optional[str] = None, page: int = 1, page_size: int = 20, role: Optional[Role] = None):
    """Listagem geral; doadores anônimos ficam de fora."""
    qry = User.query.filter(not_(_anonymous_clause()))
    if q:
        ilike = f"%{q}%"
        qry = qry.filter(or_(User.nome.ilike(ilike), User.email.ilike(ilike), User.cpf.ilike(ilike)))
    if role is not None:
        qry = qry.filter(cast(User.roles, String).like(f'%"{role.value}"%'))
    total = qry.count()
    items = (
        qry.order_by(User.criado_em.desc(), User.nome)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def get_user(user_id) -> User:
    return get_or_404(User, user_id, "Usuário não encontrado")


def view_user(actor: User, user_id) -> User:
    user = get_user(user_id)
    authorization.require_self_or_staff(actor, user.id, "os dados")
    return user


def find_by_email(email: str) -> Optional[User]:
    return User.query.filter(User.email == email.strip().lower()).one_or_none()


def _ensure_unique(email: Optional[str], cpf: Optional[str], exclude_id=None):
    if email:
        qry = User.query.filter(User.email == email)
        if exclude_id is not None:
            qry = qry.filter(User.id != exclude_id)
        if qry.first() is not None:
            raise Conflict("Email já cadastrado")
    if cpf and cpf != ANONYMOUS_CPF:
        qry = User.query.filter(User.cpf == cpf)
        if exclude_id is not None:
            qry = qry.filter(User.id != exclude_id)
        if qry.first() is not None:
            raise Conflict("CPF já cadastrado")


def _reject_anonymous_markers(nome: Optional[str], email: Optional[str], cpf: Optional[str]):
    # valores reservados ao doador anônimo tiram o usuário das listagens
    if is_anonymous_donor(nome, email, cpf):
        raise InvalidInput("Nome, email ou CPF reservado para doações anônimas")


def _require_elevated_target(actor: User, user: User):
    """Mexer na conta de um SuperAdmin ou Administrador (que não seja a própria) exige SuperAdmin."""
    if actor.id != user.id and has_any(user.role_set, Role.SUPER_ADMIN, Role.ADMINISTRATOR):
        authorization.require(actor, Action.PROMOTE_TO_ADMIN)


def _hash_password(plain: str) -> str:
    if not plain or len(plain) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
    return bcrypt.generate_password_hash(plain).decode("utf-8")


# --- Escrita ------------------------------------------------------------------

def _insert_user(command: UserCreate) -> User:
    if not command.roles:
        raise InvalidInput("O usuário precisa de pelo menos uma role")

    _reject_anonymous_markers(command.nome, command.email, command.cpf)
    _ensure_unique(command.email, command.cpf)
    if Role.SUPER_ADMIN in command.roles:
        ensure_super_admin_slot()

    user = User(
        id=uuid.uuid4(),
        nome=command.nome,
        email=command.email,
        cpf=command.cpf,
        telefone=command.telefone,
        foto_url=command.foto_url,
        ativo=True,
        senha_hash=_hash_password(command.senha) if command.senha else None,
    )
    user.role_set = command.roles
    user.endereco_id = upsert_address(None, command.address)
    db.session.add(user)
    return user


def create_user(command: UserCreate, actor: Optional[User] = None) -> User:
    """Cadastro administrativo. actor=None é o caminho de sistema (seed, doação anônima)."""
    if actor is not None:
        authorization.require(actor, Action.MANAGE_USERS)
        elevated = {Role.SUPER_ADMIN, Role.ADMINISTRATOR} & set(command.roles)
        if elevated and Role.SUPER_ADMIN not in actor.role_set:
            raise Forbidden("Apenas SuperAdmin pode cadastrar SuperAdmin ou Administrador")

    user = _insert_user(command)
    commit()
    current_app.logger.info("User %s created with roles %s", user.id, user.roles)
    return user


def register(command: UserCreate) -> User:
    """Autocadastro público (adotantes, doadores, voluntários)."""
    roles = command.roles or frozenset({Role.ADOPTER})
    if not roles <= SELF_SERVICE_ROLES:
        raise Forbidden("Autocadastro permite apenas Adotante, Doador ou Voluntario")
    if not command.senha:
        raise InvalidInput("password é obrigatório")
    user = _insert_user(
        UserCreate(
            nome=command.nome,
            email=command.email,
            roles=roles,
            cpf=command.cpf,
            telefone=command.telefone,
            foto_url=command.foto_url,
            senha=command.senha,
            address=command.address,
        )
    )
    commit()
    return user


def update_user(actor: User, user_id, command: UserUpdate) -> User:
    user = get_user(user_id)
    authorization.require(actor, Action.EDIT_PROFILE, is_self=actor.id == user.id)
    _require_elevated_target(actor, user)
    _reject_anonymous_markers(command.nome, command.email, command.cpf)

    if command.ativo is not None and command.ativo != user.ativo:
        authorization.require(actor, Action.MANAGE_USERS)
        user.ativo = command.ativo

    _ensure_unique(
        command.email if command.email != user.email else None,
        command.cpf if command.cpf != user.cpf else None,
        exclude_id=user.id,
    )

    if command.nome is not None:
        user.nome = command.nome
    if command.email is not None:
        user.email = command.email
    if command.cpf is not None:
        user.cpf = command.cpf
    if command.telefone is not None:
        user.telefone = command.telefone
    if command.foto_url is not None:
        user.foto_url = command.foto_url

    user.endereco_id = upsert_address(user.endereco_id, command.address)
    commit()
    return user


def set_password(actor: User, user_id, password: str) -> User:
    user = get_user(user_id)
    authorization.require(actor, Action.SET_PASSWORD, is_self=actor.id == user.id)
    _require_elevated_target(actor, user)
    user.senha_hash = _hash_password(password)
    commit()
    return user


def _require_role_management(actor: User, role: Role):
    if role in (Role.SUPER_ADMIN, Role.ADMINISTRATOR):
        authorization.require(actor, Action.PROMOTE_TO_ADMIN)
    else:
        authorization.require(actor, Action.MANAGE_USERS)


def grant_role(actor: User, user_id, role_value) -> User:
    role = parse_role(role_value)
    if role is None:
        raise InvalidInput(f"role inválida: {role_value}")
    _require_role_management(actor, role)

    user = get_user(user_id)
    _require_elevated_target(actor, user)
    if role in user.role_set:
        return user
    if role == Role.SUPER_ADMIN:
        ensure_super_admin_slot()
    user.role_set = with_role(user.role_set, role)
    commit()
    current_app.logger.info("Role %s granted to user %s by %s", role.value, user.id, actor.id)
    return user


def revoke_role(actor: User, user_id, role_value) -> User:
    role = parse_role(role_value)
    if role is None:
        raise InvalidInput(f"role inválida: {role_value}")
    _require_role_management(actor, role)

    user = get_user(user_id)
    _require_elevated_target(actor, user)
    if role not in user.role_set:
        return user
    remaining = without_role(user.role_set, role)
    if not remaining:
        raise InvalidInput("O usuário precisa manter pelo menos uma role")
    user.role_set = remaining
    commit()
    current_app.logger.info("Role %s revoked from user %s by %s", role.value, user.id, actor.id)
    return user


def promote_to_admin(actor: User, user_id) -> User:
    return grant_role(actor, user_id, Role.ADMINISTRATOR)


def delete_user(actor: User, user_id) -> None:
    user = get_user(user_id)
    authorization.require(actor, Action.MANAGE_USERS)
    if user.id == actor.id:
        raise InvalidInput("Você não pode deletar o próprio usuário.")
    _require_elevated_target(actor, user)
    db.session.delete(user)
    commit()


def create_anonymous_donor() -> User:
    """Usuário sintético dono das doações anônimas. Não faz commit."""
    stamp = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    user = User(
        id=uuid.uuid4(),
        nome=ANONYMOUS_NAME,
        email=anonymous_email(stamp),
        cpf=ANONYMOUS_CPF,
        ativo=True,
    )
    user.role_set = frozenset({Role.DONOR})
    db.session.add(user)
    db.session.flush()
    return user
