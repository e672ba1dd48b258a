from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Type

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pawhub_api.extensions import db
from pawhub_api.utils.errors import Conflict, InvalidInput, NotFound, UpstreamFailure


def commit():
    """Commit único por operação; converte falhas do banco em erros de domínio."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise Conflict("Violação de integridade", detail=str(e.orig)) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("Database commit failed")
        raise UpstreamFailure("Falha ao gravar no banco de dados", detail=str(e)) from e


def get_or_none(model: Type, key: Any):
    try:
        return db.session.get(model, key)
    except SQLAlchemyError as e:
        current_app.logger.exception("Lookup failed for %s", model.__name__)
        raise UpstreamFailure("Falha ao consultar o banco de dados", detail=str(e)) from e


def get_or_404(model: Type, key: Any, message: str):
    obj = get_or_none(model, key)
    if obj is None:
        raise NotFound(message)
    return obj


def parse_uuid(value: Any, field: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise InvalidInput(f"{field} inválido")


def parse_optional_uuid(value: Any, field: str) -> Optional[uuid.UUID]:
    if value in (None, ""):
        return None
    return parse_uuid(value, field)


def parse_date(value: Any, field: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidInput(f"{field} inválida (use YYYY-MM-DD)")


def to_decimal(value: Any, field: str) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInput(f"{field} inválido")


def clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
