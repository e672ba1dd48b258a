"""
Política de autorização (funções puras, sem banco).

Regras, em ordem de precedência:
- SuperAdmin pode tudo.
- Administrador pode qualquer ação de nível ADMIN ou STAFF. Não há checagem
  de vínculo com o projeto alvo.
- Funcionário só executa ações STAFF quando tem privilégios no projeto alvo.
  Um lookup de privilégio que falhou (UNKNOWN) conta como sem privilégio.
- Demais papéis só executam as ações de autoatendimento declaradas na ação.

Quem consulta o banco para descobrir o PrivilegeStatus é
services/authorization.py; aqui só se decide.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from pawhub_api.domain.roles import Role


class Tier(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    STAFF = "staff"


class PrivilegeStatus(str, Enum):
    UNKNOWN = "unknown"
    PRIVILEGED = "privileged"
    NOT_PRIVILEGED = "not_privileged"


# Conjunto vazio = qualquer papel pode agir sobre si mesmo
ANY_ROLE: FrozenSet[Role] = frozenset()


class Action(Enum):
    # (descrição, nível, papéis de autoatendimento ou None)
    CREATE_PROJECT = ("cadastrar projetos", Tier.SUPER_ADMIN, None)
    DELETE_PROJECT = ("deletar projetos", Tier.SUPER_ADMIN, None)
    MANAGE_ADMINISTRATORS = ("gerenciar administradores de projetos", Tier.SUPER_ADMIN, None)
    PROMOTE_TO_ADMIN = ("promover usuários a Administrador", Tier.SUPER_ADMIN, None)

    MANAGE_USERS = ("gerenciar usuários", Tier.ADMIN, None)
    MANAGE_EMPLOYEES = ("gerenciar funcionários", Tier.ADMIN, None)
    GRANT_PRIVILEGES = ("conceder ou remover privilégios", Tier.ADMIN, None)
    MANAGE_DONORS = ("gerenciar doadores", Tier.ADMIN, None)
    MANAGE_VOLUNTEERS = ("gerenciar voluntários", Tier.ADMIN, None)
    DELETE_ANIMAL = ("deletar animais", Tier.ADMIN, None)
    UPDATE_DONATION = ("atualizar doações", Tier.ADMIN, None)
    DELETE_DONATION = ("deletar doações", Tier.ADMIN, None)
    DELETE_ADOPTION = ("deletar adoções", Tier.ADMIN, None)
    DELETE_ADOPTION_UPDATE = ("deletar atualizações de adoção", Tier.ADMIN, None)
    EDIT_PROFILE = ("editar o perfil de outro usuário", Tier.ADMIN, ANY_ROLE)
    SET_PASSWORD = ("definir a senha de outro usuário", Tier.ADMIN, ANY_ROLE)

    UPDATE_PROJECT = ("atualizar projetos", Tier.STAFF, None)
    CREATE_ANIMAL = ("cadastrar animais", Tier.STAFF, None)
    UPDATE_ANIMAL = ("atualizar animais", Tier.STAFF, None)
    CREATE_ADOPTION = ("cadastrar adoções", Tier.STAFF, None)
    UPDATE_ADOPTION = ("atualizar adoções", Tier.STAFF, None)
    CREATE_ADOPTION_UPDATE = ("criar atualizações de adoção", Tier.STAFF, None)
    EDIT_ADOPTION_UPDATE = ("editar atualizações de adoção", Tier.STAFF, None)
    CREATE_DONATION = ("cadastrar doações", Tier.STAFF, frozenset({Role.DONOR}))

    def __init__(self, label: str, tier: Tier, self_service: Optional[FrozenSet[Role]]):
        self.label = label
        self.tier = tier
        self.self_service = self_service


_WHO = {
    Tier.SUPER_ADMIN: "Apenas SuperAdmin pode",
    Tier.ADMIN: "Apenas SuperAdmin ou Administrador podem",
    Tier.STAFF: "Apenas SuperAdmin, Administrador ou Funcionário com privilégios podem",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def denial_reason(action: Action) -> str:
    return f"{_WHO[action.tier]} {action.label}"


def _self_service_allowed(action: Action, roles: FrozenSet[Role]) -> bool:
    if action.self_service is None:
        return False
    if action.self_service == ANY_ROLE:
        return True
    return bool(roles & action.self_service)


def decide(
    roles: Iterable[Role],
    action: Action,
    *,
    privilege: PrivilegeStatus = PrivilegeStatus.UNKNOWN,
    is_self: bool = False,
) -> Decision:
    current = frozenset(roles)

    if Role.SUPER_ADMIN in current:
        return ALLOW

    if Role.ADMINISTRATOR in current and action.tier in (Tier.ADMIN, Tier.STAFF):
        return ALLOW

    if (
        Role.EMPLOYEE in current
        and action.tier == Tier.STAFF
        and privilege == PrivilegeStatus.PRIVILEGED
    ):
        return ALLOW

    if is_self and _self_service_allowed(action, current):
        return ALLOW

    return Decision(False, denial_reason(action))


def needs_privilege_lookup(roles: Iterable[Role], action: Action) -> bool:
    """Só vale a pena consultar `employees` quando o Funcionário é o único caminho."""
    current = frozenset(roles)
    if Role.SUPER_ADMIN in current or Role.ADMINISTRATOR in current:
        return False
    return Role.EMPLOYEE in current and action.tier == Tier.STAFF
