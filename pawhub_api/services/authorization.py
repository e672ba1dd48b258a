"""Ponte entre a política pura (domain/policy.py) e o banco."""

from __future__ import annotations

import uuid
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action, Decision, PrivilegeStatus, decide, needs_privilege_lookup
from pawhub_api.domain.roles import STAFF_ROLES, has_any
from pawhub_api.models import Employee, User
from pawhub_api.services.base import get_or_none
from pawhub_api.utils.errors import Forbidden, NotFound


def privilege_status(user_id: uuid.UUID, project_id: Optional[uuid.UUID]) -> PrivilegeStatus:
    """Consulta `employees` sem nunca levantar exceção.

    Vínculo inexistente -> NOT_PRIVILEGED; erro de banco -> UNKNOWN.
    """
    if project_id is None:
        return PrivilegeStatus.UNKNOWN
    try:
        employee = db.session.get(Employee, (user_id, project_id))
    except SQLAlchemyError as e:
        current_app.logger.warning(
            "Privilege lookup failed for user=%s project=%s: %s", user_id, project_id, e
        )
        db.session.rollback()
        return PrivilegeStatus.UNKNOWN
    if employee is None:
        return PrivilegeStatus.NOT_PRIVILEGED
    return PrivilegeStatus.PRIVILEGED if employee.privilegios else PrivilegeStatus.NOT_PRIVILEGED


def evaluate(
    actor: User,
    action: Action,
    project_id: Optional[uuid.UUID] = None,
    *,
    is_self: bool = False,
) -> Decision:
    roles = actor.role_set
    privilege = PrivilegeStatus.UNKNOWN
    if needs_privilege_lookup(roles, action):
        privilege = privilege_status(actor.id, project_id)
    return decide(roles, action, privilege=privilege, is_self=is_self)


def can_perform(
    actor: User,
    action: Action,
    project_id: Optional[uuid.UUID] = None,
    *,
    is_self: bool = False,
) -> bool:
    return evaluate(actor, action, project_id, is_self=is_self).allowed


def require(
    actor: User,
    action: Action,
    project_id: Optional[uuid.UUID] = None,
    *,
    is_self: bool = False,
) -> None:
    decision = evaluate(actor, action, project_id, is_self=is_self)
    if not decision.allowed:
        current_app.logger.info(
            "Denied %s for user=%s project=%s", action.name, actor.id, project_id
        )
        raise Forbidden(decision.reason)


def require_self_or_staff(actor: User, owner_id, what: str) -> None:
    """Leitura por id: o próprio dono ou alguém da equipe."""
    if actor.id == owner_id or has_any(actor.role_set, *STAFF_ROLES):
        return
    current_app.logger.info("Denied read of %s for user=%s", what, actor.id)
    raise Forbidden(f"Sem permissão para ver {what} de outro usuário")


def load_actor(actor_id) -> User:
    actor = get_or_none(User, actor_id)
    if actor is None:
        raise NotFound("Usuário que está realizando a ação não encontrado")
    if not actor.ativo:
        raise Forbidden("Usuário inativo")
    return actor
