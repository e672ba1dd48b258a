"""
Funcionários de projeto e o ciclo de vida do privilégio.

grant/revoke exigem SuperAdmin ou Administrador; um funcionário privilegiado
não concede privilégio a ninguém. Nenhum dos dois mexe nas roles do usuário.
"""

from __future__ import annotations

from typing import Optional

from flask import current_app

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.domain.privileges import (
    EmployeeState,
    InvalidTransition,
    PrivilegeEvent,
    privileges_flag,
    state_of,
    transition,
)
from pawhub_api.domain.roles import Role, with_role
from pawhub_api.models import Employee, Project, User
from pawhub_api.services import authorization
from pawhub_api.services.base import commit, get_or_404, get_or_none
from pawhub_api.utils.errors import Conflict, NotFound

NOT_FOUND_MSG = "Funcionário não encontrado"


def get_employee(user_id, project_id) -> Employee:
    return get_or_404(Employee, (user_id, project_id), NOT_FOUND_MSG)


def current_state(user_id, project_id) -> EmployeeState:
    employee = get_or_none(Employee, (user_id, project_id))
    if employee is None:
        return EmployeeState.NOT_EMPLOYEE
    return state_of(employee.privilegios)


def list_employees(project_id=None, user_id=None):
    qry = Employee.query
    if project_id is not None:
        qry = qry.filter(Employee.id_project == project_id)
    if user_id is not None:
        qry = qry.filter(Employee.id_user == user_id)
    return qry.all()


def create_employee(
    actor: User,
    user_id,
    project_id,
    funcao: Optional[str] = None,
    observacao: Optional[str] = None,
) -> Employee:
    authorization.require(actor, Action.MANAGE_EMPLOYEES, project_id)

    user = get_or_404(User, user_id, "Usuário não encontrado")
    get_or_404(Project, project_id, "Projeto não encontrado")
    if get_or_none(Employee, (user_id, project_id)) is not None:
        raise Conflict("Usuário já é funcionário deste projeto")

    employee = Employee(
        id_user=user_id,
        id_project=project_id,
        privilegios=False,
        funcao=funcao,
        observacao=observacao,
    )
    db.session.add(employee)
    if Role.EMPLOYEE not in user.role_set:
        user.role_set = with_role(user.role_set, Role.EMPLOYEE)
    commit()
    return employee


def _apply(employee: Employee, event: PrivilegeEvent) -> EmployeeState:
    try:
        return transition(state_of(employee.privilegios), event)
    except InvalidTransition:
        raise NotFound(NOT_FOUND_MSG) from None


def set_privilege(actor: User, user_id, project_id, event: PrivilegeEvent) -> Employee:
    """GRANT ou REVOKE. Idempotente; vínculo inexistente é NotFound."""
    authorization.require(actor, Action.GRANT_PRIVILEGES, project_id)
    employee = get_or_none(Employee, (user_id, project_id))
    if employee is None:
        # NOT_EMPLOYEE não aceita eventos
        raise NotFound(NOT_FOUND_MSG)

    new_state = _apply(employee, event)
    employee.privilegios = privileges_flag(new_state)
    commit()
    current_app.logger.info(
        "Employee %s/%s privilege %s -> %s by %s",
        user_id, project_id, event.value, new_state.value, actor.id,
    )
    return employee


def grant_privileges(actor: User, user_id, project_id) -> Employee:
    return set_privilege(actor, user_id, project_id, PrivilegeEvent.GRANT)


def revoke_privileges(actor: User, user_id, project_id) -> Employee:
    return set_privilege(actor, user_id, project_id, PrivilegeEvent.REVOKE)


def update_employee(
    actor: User,
    user_id,
    project_id,
    funcao: Optional[str] = None,
    observacao: Optional[str] = None,
    privilegios: Optional[bool] = None,
) -> Employee:
    authorization.require(actor, Action.MANAGE_EMPLOYEES, project_id)
    employee = get_employee(user_id, project_id)

    if funcao is not None:
        employee.funcao = funcao
    if observacao is not None:
        employee.observacao = observacao
    if privilegios is not None:
        authorization.require(actor, Action.GRANT_PRIVILEGES, project_id)
        event = PrivilegeEvent.GRANT if privilegios else PrivilegeEvent.REVOKE
        employee.privilegios = privileges_flag(_apply(employee, event))

    commit()
    return employee


def delete_employee(actor: User, user_id, project_id) -> None:
    authorization.require(actor, Action.MANAGE_EMPLOYEES, project_id)
    employee = get_employee(user_id, project_id)
    _apply(employee, PrivilegeEvent.DELETE)
    db.session.delete(employee)
    commit()
