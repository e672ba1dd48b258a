# routes/donations.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.domain.donations import aid_type_from_db, payment_method_from_db
from pawhub_api.models import Donation
from pawhub_api.routes.serializers import iso
from pawhub_api.services import donations as donation_service
from pawhub_api.services.base import parse_optional_uuid
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/donations
bp = Blueprint("donations", __name__)


def _camel_donation(d: Donation) -> dict:
    return {
        "id": str(d.id),
        "userId": str(d.id_user),
        "projectId": str(d.id_project),
        "aidType": aid_type_from_db(d.tp_ajuda),
        "paymentMethod": payment_method_from_db(d.tp_pagamento),
        "amount": float(d.valor) if d.valor is not None else None,
        "items": d.itens,
        "date": iso(d.data),
        "note": d.observacao,
    }


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_donations():
    """Query: projectId, userId"""
    items = donation_service.list_donations(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        user_id=parse_optional_uuid(request.args.get("userId"), "userId"),
    )
    return ok([_camel_donation(d) for d in items])


@bp.get("/<donation_id>")
@actor_required()
def get_donation(donation_id):
    return ok(_camel_donation(donation_service.view_donation(current_actor(), donation_id)))


@bp.post("")
@actor_required()
def create_donation():
    """Body JSON: {projectId, userId | anonymous: true, aidType, paymentMethod?, amount?, items?, date?, note?}"""
    payload = request.get_json(silent=True) or {}
    command = donation_service.DonationInput.from_payload(payload)
    return created(_camel_donation(donation_service.create_donation(current_actor(), command)))


@bp.patch("/<donation_id>")
@actor_required()
def update_donation(donation_id):
    payload = request.get_json(silent=True) or {}
    command = donation_service.DonationInput.from_payload(payload)
    return ok(_camel_donation(donation_service.update_donation(current_actor(), donation_id, command)))


@bp.delete("/<donation_id>")
@actor_required()
def delete_donation(donation_id):
    donation_service.delete_donation(current_actor(), donation_id)
    return no_content()
