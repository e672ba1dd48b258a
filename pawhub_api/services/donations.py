"""
Doações.

O payload chega no vocabulário da API (Financeira / Pix ...) e é gravado com
os tokens do banco (FINANCEIRA / PIX ...). As regras por tipo de ajuda rodam
tanto na criação quanto na edição, sobre o estado já mesclado.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from flask import current_app

from pawhub_api.extensions import db
from pawhub_api.domain.donations import (
    DonationFields,
    MissingAmount,
    aid_type_to_db,
    apply_aid_type_rules,
    payment_method_to_db,
)
from pawhub_api.domain.policy import Action
from pawhub_api.models import Donation, Project, User
from pawhub_api.services import authorization, users
from pawhub_api.services.base import (
    clean_str,
    commit,
    get_or_404,
    parse_date,
    parse_optional_uuid,
    parse_uuid,
    to_decimal,
)
from pawhub_api.services.donors import ensure_donor
from pawhub_api.utils.errors import InvalidInput


@dataclass(frozen=True)
class DonationInput:
    project_id: Optional[Any] = None
    user_id: Optional[Any] = None
    anonymous: bool = False
    aid_type: Optional[str] = None
    payment_method: Optional[str] = None
    amount: Optional[Decimal] = None
    items: Optional[str] = None
    data: Optional[date] = None
    observacao: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DonationInput":
        anonymous = payload.get("anonymous", False)
        if not isinstance(anonymous, bool):
            raise InvalidInput("anonymous deve ser booleano")
        return cls(
            project_id=parse_optional_uuid(payload.get("projectId"), "projectId"),
            user_id=parse_optional_uuid(payload.get("userId"), "userId"),
            anonymous=anonymous,
            aid_type=clean_str(payload.get("aidType")),
            payment_method=clean_str(payload.get("paymentMethod")),
            amount=to_decimal(payload.get("amount"), "amount"),
            items=clean_str(payload.get("items")),
            data=parse_date(payload.get("date"), "date"),
            observacao=clean_str(payload.get("note")),
        )


def _validated(fields: DonationFields) -> DonationFields:
    try:
        return apply_aid_type_rules(fields)
    except MissingAmount as e:
        raise InvalidInput(str(e)) from None


def list_donations(project_id=None, user_id=None):
    qry = Donation.query
    if project_id is not None:
        qry = qry.filter(Donation.id_project == project_id)
    if user_id is not None:
        qry = qry.filter(Donation.id_user == user_id)
    return qry.order_by(Donation.data.desc()).all()


def get_donation(donation_id) -> Donation:
    return get_or_404(Donation, parse_uuid(donation_id, "id"), "Doação não encontrada")


def view_donation(actor: User, donation_id) -> Donation:
    donation = get_donation(donation_id)
    authorization.require_self_or_staff(actor, donation.id_user, "a doação")
    return donation


def create_donation(actor: User, command: DonationInput) -> Donation:
    if command.project_id is None:
        raise InvalidInput("projectId é obrigatório")
    if not command.anonymous and command.user_id is None:
        raise InvalidInput("userId é obrigatório (ou anonymous: true)")

    # anônima: quem envia é o próprio doador
    is_self = command.anonymous or command.user_id == actor.id
    authorization.require(actor, Action.CREATE_DONATION, command.project_id, is_self=is_self)

    get_or_404(Project, command.project_id, "Projeto não encontrado")
    fields = _validated(
        DonationFields(
            tp_ajuda=aid_type_to_db(command.aid_type),
            tp_pagamento=payment_method_to_db(command.payment_method),
            valor=command.amount,
            itens=command.items,
        )
    )

    if command.anonymous:
        donor_user = users.create_anonymous_donor()
    else:
        donor_user = get_or_404(User, command.user_id, "Usuário não encontrado")
    ensure_donor(donor_user, command.project_id)

    donation = Donation(
        id_user=donor_user.id,
        id_project=command.project_id,
        tp_ajuda=fields.tp_ajuda,
        tp_pagamento=fields.tp_pagamento,
        valor=fields.valor,
        itens=fields.itens,
        data=command.data or date.today(),
        observacao=command.observacao,
    )
    db.session.add(donation)
    commit()
    current_app.logger.info(
        "Donation %s created for user=%s project=%s (%s)",
        donation.id, donor_user.id, command.project_id, donation.tp_ajuda,
    )
    return donation


def update_donation(actor: User, donation_id, command: DonationInput) -> Donation:
    donation = get_donation(donation_id)
    authorization.require(actor, Action.UPDATE_DONATION, donation.id_project)

    merged = DonationFields(
        tp_ajuda=aid_type_to_db(command.aid_type) if command.aid_type is not None else donation.tp_ajuda,
        tp_pagamento=(
            payment_method_to_db(command.payment_method)
            if command.payment_method is not None
            else donation.tp_pagamento
        ),
        valor=command.amount if command.amount is not None else donation.valor,
        itens=command.items if command.items is not None else donation.itens,
    )
    fields = _validated(merged)

    donation.tp_ajuda = fields.tp_ajuda
    donation.tp_pagamento = fields.tp_pagamento
    donation.valor = fields.valor
    donation.itens = fields.itens
    if command.data is not None:
        donation.data = command.data
    if command.observacao is not None:
        donation.observacao = command.observacao
    commit()
    return donation


def delete_donation(actor: User, donation_id) -> None:
    donation = get_donation(donation_id)
    authorization.require(actor, Action.DELETE_DONATION, donation.id_project)
    db.session.delete(donation)
    commit()
