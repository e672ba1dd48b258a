# routes/volunteers.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Volunteer
from pawhub_api.routes.serializers import iso
from pawhub_api.services import volunteers as volunteer_service
from pawhub_api.services.base import parse_optional_uuid, parse_uuid
from pawhub_api.utils.errors import InvalidInput
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/volunteers
bp = Blueprint("volunteers", __name__)


def _camel_volunteer(v: Volunteer) -> dict:
    return {
        "userId": str(v.id_user),
        "projectId": str(v.id_project),
        "service": v.servico,
        "frequency": v.frequencia,
        "lastDate": iso(v.lt_data),
        "nextDate": iso(v.px_data),
    }


def _keys(user_id, project_id):
    return parse_uuid(user_id, "userId"), parse_uuid(project_id, "projectId")


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_volunteers():
    """Query: projectId, userId"""
    items = volunteer_service.list_volunteers(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        user_id=parse_optional_uuid(request.args.get("userId"), "userId"),
    )
    return ok([_camel_volunteer(v) for v in items])


@bp.get("/<user_id>/<project_id>")
@actor_required()
@require_roles(*STAFF_ROLES)
def get_volunteer(user_id, project_id):
    return ok(_camel_volunteer(volunteer_service.get_volunteer(*_keys(user_id, project_id))))


@bp.post("")
@actor_required()
def create_volunteer():
    payload = request.get_json(silent=True) or {}
    if not payload.get("userId") or not payload.get("projectId"):
        raise InvalidInput("userId e projectId são obrigatórios")
    volunteer = volunteer_service.create_volunteer(
        current_actor(),
        *_keys(payload["userId"], payload["projectId"]),
        volunteer_service.VolunteerFields.from_payload(payload),
    )
    return created(_camel_volunteer(volunteer))


@bp.patch("/<user_id>/<project_id>")
@actor_required()
def update_volunteer(user_id, project_id):
    payload = request.get_json(silent=True) or {}
    volunteer = volunteer_service.update_volunteer(
        current_actor(),
        *_keys(user_id, project_id),
        volunteer_service.VolunteerFields.from_payload(payload),
    )
    return ok(_camel_volunteer(volunteer))


@bp.delete("/<user_id>/<project_id>")
@actor_required()
def delete_volunteer(user_id, project_id):
    volunteer_service.delete_volunteer(current_actor(), *_keys(user_id, project_id))
    return no_content()
