# routes/administrators.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Administrator
from pawhub_api.services import administrators as admin_service
from pawhub_api.services.base import clean_str, parse_optional_uuid, parse_uuid
from pawhub_api.utils.errors import InvalidInput
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/administrators
bp = Blueprint("administrators", __name__)


def _camel_administrator(a: Administrator) -> dict:
    return {
        "userId": str(a.id_user),
        "projectId": str(a.id_project),
        "note": a.observacao,
    }


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_administrators():
    items = admin_service.list_administrators(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        user_id=parse_optional_uuid(request.args.get("userId"), "userId"),
    )
    return ok([_camel_administrator(a) for a in items])


@bp.post("")
@actor_required()
def create_administrator():
    payload = request.get_json(silent=True) or {}
    if not payload.get("userId") or not payload.get("projectId"):
        raise InvalidInput("userId e projectId são obrigatórios")
    link = admin_service.create_administrator(
        current_actor(),
        parse_uuid(payload["userId"], "userId"),
        parse_uuid(payload["projectId"], "projectId"),
        observacao=clean_str(payload.get("note")),
    )
    return created(_camel_administrator(link))


@bp.delete("/<user_id>/<project_id>")
@actor_required()
def delete_administrator(user_id, project_id):
    admin_service.delete_administrator(
        current_actor(), parse_uuid(user_id, "userId"), parse_uuid(project_id, "projectId")
    )
    return no_content()
