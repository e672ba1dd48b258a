"""
Papéis de usuário do PawHub.

Os valores do enum são os tokens gravados na coluna `usuarios.roles`
(JSON list) e emitidos no claim `roles` do JWT.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable, Optional


class Role(str, Enum):
    SUPER_ADMIN = "SuperAdmin"
    ADMINISTRATOR = "Administrador"
    EMPLOYEE = "Funcionario"
    VOLUNTEER = "Voluntario"
    DONOR = "Doador"
    ADOPTER = "Adotante"


RoleSet = FrozenSet[Role]

# Ordem de precedência usada pela política de autorização (maior primeiro)
PRECEDENCE = (
    Role.SUPER_ADMIN,
    Role.ADMINISTRATOR,
    Role.EMPLOYEE,
    Role.VOLUNTEER,
    Role.DONOR,
    Role.ADOPTER,
)

# Papéis que um usuário pode escolher no auto-cadastro
SELF_SERVICE_ROLES = frozenset({Role.ADOPTER, Role.DONOR, Role.VOLUNTEER})

# Papéis que enxergam dados de terceiros (listagens, leitura por id)
STAFF_ROLES = (Role.SUPER_ADMIN, Role.ADMINISTRATOR, Role.EMPLOYEE)

_ALIASES = {
    "SUPER_ADMIN": Role.SUPER_ADMIN,
    "SUPERADMIN": Role.SUPER_ADMIN,
    "ADMINISTRADOR": Role.ADMINISTRATOR,
    "ADMINISTRATOR": Role.ADMINISTRATOR,
    "ADMIN": Role.ADMINISTRATOR,
    "FUNCIONARIO": Role.EMPLOYEE,
    "FUNCIONÁRIO": Role.EMPLOYEE,
    "EMPLOYEE": Role.EMPLOYEE,
    "VOLUNTARIO": Role.VOLUNTEER,
    "VOLUNTÁRIO": Role.VOLUNTEER,
    "VOLUNTEER": Role.VOLUNTEER,
    "DOADOR": Role.DONOR,
    "DONOR": Role.DONOR,
    "ADOTANTE": Role.ADOPTER,
    "ADOPTER": Role.ADOPTER,
}


def parse_role(value) -> Optional[Role]:
    """Aceita o token persistido ('SuperAdmin') ou o nome em caixa alta ('SUPER_ADMIN')."""
    if isinstance(value, Role):
        return value
    if not value:
        return None
    raw = str(value).strip()
    try:
        return Role(raw)
    except ValueError:
        return _ALIASES.get(raw.upper())


def parse_roles(values: Optional[Iterable]) -> RoleSet:
    """Converte tokens em um conjunto imutável; tokens desconhecidos são ignorados."""
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    roles = (parse_role(v) for v in values)
    return frozenset(r for r in roles if r is not None)


def with_role(roles: RoleSet, role: Role) -> RoleSet:
    return frozenset(roles) | {role}


def without_role(roles: RoleSet, role: Role) -> RoleSet:
    return frozenset(roles) - {role}


def has_any(roles: Iterable[Role], *wanted: Role) -> bool:
    current = set(roles)
    return any(r in current for r in wanted)


def highest_role(roles: Iterable[Role]) -> Optional[Role]:
    current = set(roles)
    for role in PRECEDENCE:
        if role in current:
            return role
    return None


def to_tokens(roles: Iterable[Role]) -> list[str]:
    """Lista estável (ordem de precedência) para persistir/serializar."""
    current = set(roles)
    return [r.value for r in PRECEDENCE if r in current]
