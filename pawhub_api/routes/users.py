# routes/users.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.domain.roles import parse_role
from pawhub_api.routes.serializers import camel_user
from pawhub_api.services import users as user_service
from pawhub_api.services.base import parse_uuid
from pawhub_api.utils.errors import InvalidInput
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok, paginated

# Blueprint sem prefixo interno; app.py define /api/v1/users
bp = Blueprint("users", __name__)

MAX_PAGE_SIZE = 100


def _int_arg(name: str, default: int, minimum: int = 1, maximum: int = None) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidInput(f"{name} deve ser inteiro") from None
    if value < minimum:
        raise InvalidInput(f"{name} deve ser >= {minimum}")
    if maximum is not None:
        value = min(value, maximum)
    return value


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_users():
    """Lista usuários (doadores anônimos nunca aparecem).

    Query: q, role, page, pageSize
    """
    page = _int_arg("page", 1)
    page_size = _int_arg("pageSize", 20, maximum=MAX_PAGE_SIZE)
    role = None
    if request.args.get("role"):
        role = parse_role(request.args.get("role"))
        if role is None:
            raise InvalidInput(f"role inválida: {request.args.get('role')}")

    items, total = user_service.list_users(
        q=(request.args.get("q") or "").strip() or None,
        page=page,
        page_size=page_size,
        role=role,
    )
    return paginated([camel_user(u) for u in items], total, page, page_size)


@bp.get("/<user_id>")
@actor_required()
def get_user(user_id):
    # busca por id também devolve doadores anônimos; só o próprio usuário ou a equipe
    return ok(camel_user(user_service.view_user(current_actor(), parse_uuid(user_id, "id"))))


@bp.post("")
@actor_required()
def create_user():
    payload = request.get_json(silent=True) or {}
    command = user_service.UserCreate.from_payload(payload)
    user = user_service.create_user(command, actor=current_actor())
    return created(camel_user(user))


@bp.patch("/<user_id>")
@actor_required()
def update_user(user_id):
    payload = request.get_json(silent=True) or {}
    command = user_service.UserUpdate.from_payload(payload)
    user = user_service.update_user(current_actor(), parse_uuid(user_id, "id"), command)
    return ok(camel_user(user))


@bp.put("/<user_id>/password")
@actor_required()
def set_password(user_id):
    payload = request.get_json(silent=True) or {}
    user_service.set_password(current_actor(), parse_uuid(user_id, "id"), payload.get("password") or "")
    return no_content()


@bp.post("/<user_id>/roles")
@actor_required()
def grant_role(user_id):
    payload = request.get_json(silent=True) or {}
    if not payload.get("role"):
        raise InvalidInput("role é obrigatório")
    user = user_service.grant_role(current_actor(), parse_uuid(user_id, "id"), payload["role"])
    return ok(camel_user(user))


@bp.delete("/<user_id>/roles/<role>")
@actor_required()
def revoke_role(user_id, role):
    user = user_service.revoke_role(current_actor(), parse_uuid(user_id, "id"), role)
    return ok(camel_user(user))


@bp.post("/<user_id>/promote-admin")
@actor_required()
def promote_admin(user_id):
    user = user_service.promote_to_admin(current_actor(), parse_uuid(user_id, "id"))
    return ok(camel_user(user))


@bp.delete("/<user_id>")
@actor_required()
def delete_user(user_id):
    user_service.delete_user(current_actor(), parse_uuid(user_id, "id"))
    return no_content()
