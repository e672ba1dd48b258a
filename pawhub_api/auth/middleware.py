from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import g, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from pawhub_api.models import User
from pawhub_api.services.authorization import load_actor
from pawhub_api.services.base import parse_uuid


def actor_required() -> Callable:
    """Protege a rota com o bearer token emitido em /auth/login.

    - Valida o token (flask_jwt_extended)
    - Carrega o usuário do `sub` e guarda em g.current_user
    - Usuário inexistente -> 404, inativo -> 403 (erros de domínio)
    """

    def decorator(fn: Callable):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            g.current_user = load_actor(parse_uuid(get_jwt_identity(), "sub"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def current_actor() -> User:
    return g.current_user


def register_jwt_handlers(jwt):
    """Respostas 401 no mesmo formato dos demais erros da API."""

    def _unauthorized(detail: str):
        return jsonify({"error": "Unauthorized", "kind": "Unauthorized", "detail": detail}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized(reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized(reason)

    @jwt.expired_token_loader
    def expired_token(_header, _payload):
        return _unauthorized("Token expirado")
