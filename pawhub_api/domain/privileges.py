"""Ciclo de vida do privilégio de um funcionário dentro de um projeto."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class EmployeeState(str, Enum):
    NOT_EMPLOYEE = "not_employee"
    NO_PRIVILEGE = "no_privilege"
    PRIVILEGED = "privileged"


class PrivilegeEvent(str, Enum):
    GRANT = "grant"
    REVOKE = "revoke"
    DELETE = "delete"


class InvalidTransition(Exception):
    def __init__(self, state: EmployeeState, event: PrivilegeEvent):
        super().__init__(f"{event.value} não se aplica ao estado {state.value}")
        self.state = state
        self.event = event


_TRANSITIONS = {
    (EmployeeState.NO_PRIVILEGE, PrivilegeEvent.GRANT): EmployeeState.PRIVILEGED,
    (EmployeeState.PRIVILEGED, PrivilegeEvent.GRANT): EmployeeState.PRIVILEGED,
    (EmployeeState.PRIVILEGED, PrivilegeEvent.REVOKE): EmployeeState.NO_PRIVILEGE,
    (EmployeeState.NO_PRIVILEGE, PrivilegeEvent.REVOKE): EmployeeState.NO_PRIVILEGE,
    (EmployeeState.NO_PRIVILEGE, PrivilegeEvent.DELETE): EmployeeState.NOT_EMPLOYEE,
    (EmployeeState.PRIVILEGED, PrivilegeEvent.DELETE): EmployeeState.NOT_EMPLOYEE,
}


def state_of(privilegios: Optional[bool], exists: bool = True) -> EmployeeState:
    if not exists:
        return EmployeeState.NOT_EMPLOYEE
    return EmployeeState.PRIVILEGED if privilegios else EmployeeState.NO_PRIVILEGE


def transition(state: EmployeeState, event: PrivilegeEvent) -> EmployeeState:
    """NOT_EMPLOYEE é terminal: qualquer evento nele é InvalidTransition."""
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event) from None


def privileges_flag(state: EmployeeState) -> bool:
    return state == EmployeeState.PRIVILEGED
