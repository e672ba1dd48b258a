# routes/donors.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Donor
from pawhub_api.routes.serializers import iso
from pawhub_api.services import donors as donor_service
from pawhub_api.services.base import parse_optional_uuid, parse_uuid
from pawhub_api.utils.errors import InvalidInput
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/donors
bp = Blueprint("donors", __name__)


def _camel_donor(d: Donor) -> dict:
    return {
        "userId": str(d.id_user),
        "projectId": str(d.id_project),
        "frequency": d.frequencia,
        "reminderDate": iso(d.dt_lembrete),
        "lastDonationDate": iso(d.dt_ultima_doacao),
        "nextDonationDate": iso(d.dt_proxima_doacao),
        "note": d.observacao,
    }


def _keys(user_id, project_id):
    return parse_uuid(user_id, "userId"), parse_uuid(project_id, "projectId")


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_donors():
    items = donor_service.list_donors(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        user_id=parse_optional_uuid(request.args.get("userId"), "userId"),
    )
    return ok([_camel_donor(d) for d in items])


@bp.post("")
@actor_required()
def create_donor():
    payload = request.get_json(silent=True) or {}
    if not payload.get("userId") or not payload.get("projectId"):
        raise InvalidInput("userId e projectId são obrigatórios")
    donor = donor_service.create_donor(
        current_actor(),
        *_keys(payload["userId"], payload["projectId"]),
        donor_service.DonorFields.from_payload(payload),
    )
    return created(_camel_donor(donor))


@bp.patch("/<user_id>/<project_id>")
@actor_required()
def update_donor(user_id, project_id):
    payload = request.get_json(silent=True) or {}
    donor = donor_service.update_donor(
        current_actor(),
        *_keys(user_id, project_id),
        donor_service.DonorFields.from_payload(payload),
    )
    return ok(_camel_donor(donor))


@bp.delete("/<user_id>/<project_id>")
@actor_required()
def delete_donor(user_id, project_id):
    donor_service.delete_donor(current_actor(), *_keys(user_id, project_id))
    return no_content()
