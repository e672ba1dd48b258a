from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import Role, with_role
from pawhub_api.models import Donor, Project, User
from pawhub_api.services import authorization
from pawhub_api.services.base import clean_str, commit, get_or_404, get_or_none, parse_date
from pawhub_api.utils.errors import Conflict, InvalidInput

FREQUENCIES = ("mensal", "pontual", "eventual")


def parse_frequency(value) -> Optional[str]:
    token = clean_str(value)
    if token is None:
        return None
    token = token.lower()
    if token not in FREQUENCIES:
        raise InvalidInput(f"frequency inválida (use {', '.join(FREQUENCIES)})")
    return token


@dataclass(frozen=True)
class DonorFields:
    frequencia: Optional[str] = None
    dt_lembrete: Optional[date] = None
    dt_ultima_doacao: Optional[date] = None
    dt_proxima_doacao: Optional[date] = None
    observacao: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "DonorFields":
        return cls(
            frequencia=parse_frequency(data.get("frequency")),
            dt_lembrete=parse_date(data.get("reminderDate"), "reminderDate"),
            dt_ultima_doacao=parse_date(data.get("lastDonationDate"), "lastDonationDate"),
            dt_proxima_doacao=parse_date(data.get("nextDonationDate"), "nextDonationDate"),
            observacao=clean_str(data.get("note")),
        )


def list_donors(project_id=None, user_id=None):
    qry = Donor.query
    if project_id is not None:
        qry = qry.filter(Donor.id_project == project_id)
    if user_id is not None:
        qry = qry.filter(Donor.id_user == user_id)
    return qry.all()


def get_donor(user_id, project_id) -> Donor:
    return get_or_404(Donor, (user_id, project_id), "Doador não encontrado")


def ensure_donor(user: User, project_id, fields: Optional[DonorFields] = None) -> Donor:
    """Devolve o vínculo doador existente ou adiciona um novo (sem commit).

    Faz flush para que inserts dependentes (doacoes) vejam o vínculo.
    """
    donor = get_or_none(Donor, (user.id, project_id))
    if donor is not None:
        return donor
    fields = fields or DonorFields()
    donor = Donor(
        id_user=user.id,
        id_project=project_id,
        frequencia=fields.frequencia,
        dt_lembrete=fields.dt_lembrete,
        dt_ultima_doacao=fields.dt_ultima_doacao,
        dt_proxima_doacao=fields.dt_proxima_doacao,
        observacao=fields.observacao,
    )
    db.session.add(donor)
    if Role.DONOR not in user.role_set:
        user.role_set = with_role(user.role_set, Role.DONOR)
    db.session.flush()
    return donor


def create_donor(actor: User, user_id, project_id, fields: DonorFields) -> Donor:
    authorization.require(actor, Action.MANAGE_DONORS, project_id)
    user = get_or_404(User, user_id, "Usuário não encontrado")
    get_or_404(Project, project_id, "Projeto não encontrado")
    if get_or_none(Donor, (user_id, project_id)) is not None:
        raise Conflict("Usuário já é doador deste projeto")
    donor = ensure_donor(user, project_id, fields)
    commit()
    return donor


def update_donor(actor: User, user_id, project_id, fields: DonorFields) -> Donor:
    authorization.require(actor, Action.MANAGE_DONORS, project_id)
    donor = get_donor(user_id, project_id)
    for name in ("frequencia", "dt_lembrete", "dt_ultima_doacao", "dt_proxima_doacao", "observacao"):
        value = getattr(fields, name)
        if value is not None:
            setattr(donor, name, value)
    commit()
    return donor


def delete_donor(actor: User, user_id, project_id) -> None:
    authorization.require(actor, Action.MANAGE_DONORS, project_id)
    donor = get_donor(user_id, project_id)
    db.session.delete(donor)
    commit()
