"""Emissão de tokens e verificação de credenciais (email + senha)."""

from __future__ import annotations

from flask import current_app
from flask_jwt_extended import create_access_token

from pawhub_api.extensions import bcrypt
from pawhub_api.domain.roles import to_tokens
from pawhub_api.models import User
from pawhub_api.services.users import find_by_email
from pawhub_api.utils.errors import Forbidden, InvalidInput, Unauthorized

INVALID_CREDENTIALS = "Email ou senha incorretos"


def issue_access_token(user: User) -> str:
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "roles": to_tokens(user.role_set)},
    )


def authenticate(email: str, password: str) -> User:
    if not email or not password:
        raise InvalidInput("email e password são obrigatórios")

    user = find_by_email(email)
    if user is None:
        raise Unauthorized(INVALID_CREDENTIALS)
    if not user.senha_hash:
        raise Unauthorized("Senha não configurada para este usuário")
    if not bcrypt.check_password_hash(user.senha_hash, password):
        current_app.logger.info("Failed login for %s", user.email)
        raise Unauthorized(INVALID_CREDENTIALS)
    if not user.ativo:
        raise Forbidden("Usuário inativo")
    return user
