# utils/rbac.py
"""
Gate de rota pelas roles do token (claim `roles`).

Serve para barrar cedo quem nem deveria ver a listagem; a decisão fina
(tier da ação, privilégio no projeto) fica em services/authorization.py.
"""

from functools import wraps
from typing import Optional, Tuple

from flask import jsonify
from flask_jwt_extended import get_jwt

from pawhub_api.domain.roles import STAFF_ROLES, Role, RoleSet, has_any, parse_roles  # noqa: F401


def current_sub_and_roles() -> Tuple[Optional[str], RoleSet]:
    j = get_jwt()
    return j.get("sub"), parse_roles(j.get("roles"))


def require_roles(*allowed_roles: Role):
    """
    Decorator para bloquear rota se nenhuma role do JWT estiver em allowed_roles.
    Uso:
      @actor_required()
      @require_roles(Role.SUPER_ADMIN, Role.ADMINISTRATOR)
      def list_users():
          ...
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            _, roles = current_sub_and_roles()
            if not has_any(roles, *allowed_roles):
                return jsonify({"error": "Forbidden", "kind": "Forbidden"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
