"""Auth routes.

Login com email/senha emite um access token (flask_jwt_extended) que o
frontend envia como Authorization: Bearer <token>.
"""

from flask import Blueprint, request

from pawhub_api.routes.serializers import camel_user
from pawhub_api.services.administrators import list_administrators
from pawhub_api.services.donors import list_donors
from pawhub_api.services.employees import list_employees
from pawhub_api.services.volunteers import list_volunteers
from pawhub_api.services import users as user_service
from pawhub_api.utils.responses import created, ok
from .middleware import actor_required, current_actor
from .tokens import authenticate, issue_access_token

# Registered by app.py at /api/v1/auth
bp = Blueprint("auth", __name__)


@bp.route("/login", methods=["POST"])
def login():
    """Body JSON: {"email": str, "password": str}"""
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = authenticate(email, password)
    return ok({
        "token": issue_access_token(user),
        "tokenType": "Bearer",
        "user": camel_user(user),
    })


@bp.route("/register", methods=["POST"])
def register():
    """Autocadastro público.

    Body JSON: {"name", "email", "password", "roles"?: ["Adotante"|"Doador"|"Voluntario"], ...}
    Sem roles, o usuário entra como Adotante.
    """
    data = request.get_json(silent=True) or {}
    command = user_service.UserCreate.from_payload(data)
    user = user_service.register(command)
    return created({
        "token": issue_access_token(user),
        "tokenType": "Bearer",
        "user": camel_user(user),
    })


@bp.route("/me", methods=["GET"])
@actor_required()
def me():
    user = current_actor()
    payload = camel_user(user)
    payload["memberships"] = (
        [{"projectId": str(a.id_project), "kind": "administrator"} for a in list_administrators(user_id=user.id)]
        + [
            {"projectId": str(e.id_project), "kind": "employee", "privileges": bool(e.privilegios)}
            for e in list_employees(user_id=user.id)
        ]
        + [{"projectId": str(d.id_project), "kind": "donor"} for d in list_donors(user_id=user.id)]
        + [{"projectId": str(v.id_project), "kind": "volunteer"} for v in list_volunteers(user_id=user.id)]
    )
    return ok(payload)
