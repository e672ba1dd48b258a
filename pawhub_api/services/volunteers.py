"""Vínculo voluntário x projeto. Cadastrar adiciona a role Voluntario ao usuário."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import Role, with_role
from pawhub_api.models import Project, User, Volunteer
from pawhub_api.services import authorization
from pawhub_api.services.base import clean_str, commit, get_or_404, get_or_none, parse_date
from pawhub_api.services.donors import parse_frequency
from pawhub_api.utils.errors import Conflict


@dataclass(frozen=True)
class VolunteerFields:
    servico: Optional[str] = None
    frequencia: Optional[str] = None
    lt_data: Optional[date] = None
    px_data: Optional[date] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "VolunteerFields":
        return cls(
            servico=clean_str(data.get("service")),
            frequencia=parse_frequency(data.get("frequency")),
            lt_data=parse_date(data.get("lastDate"), "lastDate"),
            px_data=parse_date(data.get("nextDate"), "nextDate"),
        )


def list_volunteers(project_id=None, user_id=None):
    qry = Volunteer.query
    if project_id is not None:
        qry = qry.filter(Volunteer.id_project == project_id)
    if user_id is not None:
        qry = qry.filter(Volunteer.id_user == user_id)
    return qry.order_by(Volunteer.id_user).all()


def get_volunteer(user_id, project_id) -> Volunteer:
    return get_or_404(Volunteer, (user_id, project_id), "Voluntário não encontrado")


def create_volunteer(actor: User, user_id, project_id, fields: VolunteerFields) -> Volunteer:
    authorization.require(actor, Action.MANAGE_VOLUNTEERS, project_id)
    user = get_or_404(User, user_id, "Usuário não encontrado")
    get_or_404(Project, project_id, "Projeto não encontrado")
    if get_or_none(Volunteer, (user_id, project_id)) is not None:
        raise Conflict("Usuário já é voluntário deste projeto")

    volunteer = Volunteer(
        id_user=user.id,
        id_project=project_id,
        servico=fields.servico,
        frequencia=fields.frequencia,
        lt_data=fields.lt_data,
        px_data=fields.px_data,
    )
    db.session.add(volunteer)
    if Role.VOLUNTEER not in user.role_set:
        user.role_set = with_role(user.role_set, Role.VOLUNTEER)
    commit()
    return volunteer


def update_volunteer(actor: User, user_id, project_id, fields: VolunteerFields) -> Volunteer:
    authorization.require(actor, Action.MANAGE_VOLUNTEERS, project_id)
    volunteer = get_volunteer(user_id, project_id)
    for name in ("servico", "frequencia", "lt_data", "px_data"):
        value = getattr(fields, name)
        if value is not None:
            setattr(volunteer, name, value)
    commit()
    return volunteer


def delete_volunteer(actor: User, user_id, project_id) -> None:
    authorization.require(actor, Action.MANAGE_VOLUNTEERS, project_id)
    volunteer = get_volunteer(user_id, project_id)
    db.session.delete(volunteer)
    commit()
