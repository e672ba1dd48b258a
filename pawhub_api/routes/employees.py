# routes/employees.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Employee
from pawhub_api.services import employees as employee_service
from pawhub_api.services.base import clean_str, parse_optional_uuid, parse_uuid
from pawhub_api.utils.errors import InvalidInput
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/employees
bp = Blueprint("employees", __name__)


def _camel_employee(e: Employee) -> dict:
    return {
        "userId": str(e.id_user),
        "projectId": str(e.id_project),
        "privileges": bool(e.privilegios),
        "role": e.funcao,
        "note": e.observacao,
    }


def _keys(user_id, project_id):
    return parse_uuid(user_id, "userId"), parse_uuid(project_id, "projectId")


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_employees():
    items = employee_service.list_employees(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        user_id=parse_optional_uuid(request.args.get("userId"), "userId"),
    )
    return ok([_camel_employee(e) for e in items])


@bp.get("/<user_id>/<project_id>")
@actor_required()
@require_roles(*STAFF_ROLES)
def get_employee(user_id, project_id):
    return ok(_camel_employee(employee_service.get_employee(*_keys(user_id, project_id))))


@bp.post("")
@actor_required()
def create_employee():
    payload = request.get_json(silent=True) or {}
    if not payload.get("userId") or not payload.get("projectId"):
        raise InvalidInput("userId e projectId são obrigatórios")
    employee = employee_service.create_employee(
        current_actor(),
        *_keys(payload["userId"], payload["projectId"]),
        funcao=clean_str(payload.get("role")),
        observacao=clean_str(payload.get("note")),
    )
    return created(_camel_employee(employee))


@bp.patch("/<user_id>/<project_id>")
@actor_required()
def update_employee(user_id, project_id):
    payload = request.get_json(silent=True) or {}
    privileges = payload.get("privileges")
    if privileges is not None and not isinstance(privileges, bool):
        raise InvalidInput("privileges deve ser booleano")
    employee = employee_service.update_employee(
        current_actor(),
        *_keys(user_id, project_id),
        funcao=clean_str(payload.get("role")),
        observacao=clean_str(payload.get("note")),
        privilegios=privileges,
    )
    return ok(_camel_employee(employee))


@bp.patch("/<user_id>/<project_id>/grant-privileges")
@actor_required()
def grant_privileges(user_id, project_id):
    employee = employee_service.grant_privileges(current_actor(), *_keys(user_id, project_id))
    return ok(_camel_employee(employee))


@bp.patch("/<user_id>/<project_id>/revoke-privileges")
@actor_required()
def revoke_privileges(user_id, project_id):
    employee = employee_service.revoke_privileges(current_actor(), *_keys(user_id, project_id))
    return ok(_camel_employee(employee))


@bp.delete("/<user_id>/<project_id>")
@actor_required()
def delete_employee(user_id, project_id):
    employee_service.delete_employee(current_actor(), *_keys(user_id, project_id))
    return no_content()
