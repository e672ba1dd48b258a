"""Serialização camelCase compartilhada entre os blueprints."""

from __future__ import annotations

from typing import Optional

from pawhub_api.domain.roles import highest_role, to_tokens
from pawhub_api.models import Address, User


def iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def camel_address(a: Optional[Address]) -> Optional[dict]:
    if a is None:
        return None
    return {
        "id": str(a.id),
        "postalCode": a.cep,
        "state": a.estado,
        "city": a.cidade,
        "district": a.bairro,
        "street": a.endereco,
        "number": a.numero,
        "complement": a.complemento,
    }


def camel_user(u: User) -> dict:
    main = highest_role(u.role_set)
    return {
        "id": str(u.id),
        "name": u.nome,
        "email": u.email,
        "cpf": u.cpf,
        "phone": u.telefone,
        "photoUrl": u.foto_url,
        "active": bool(u.ativo),
        "roles": to_tokens(u.role_set),
        "mainRole": main.value if main else None,
        "hasPassword": bool(u.senha_hash),
        "address": camel_address(u.endereco),
        "createdAt": iso(u.criado_em),
    }
