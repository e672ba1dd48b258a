from __future__ import annotations

import uuid
from typing import Optional

from pawhub_api.extensions import db
from pawhub_api.domain.addresses import AddressFields
from pawhub_api.models import Address
from pawhub_api.services.base import get_or_none


def upsert_address(current_address_id: Optional[uuid.UUID], fields: AddressFields) -> Optional[uuid.UUID]:
    """Cria ou atualiza o endereço do dono e devolve o id a ser referenciado.

    - Sem CEP, bairro, cidade ou UF: nada muda, devolve o id atual.
    - Dono já referencia um endereço: atualiza a mesma linha (id inalterado).
    - Caso contrário: cria uma linha nova.
    Nunca remove linhas de `address`. Não faz commit: o chamador grava o dono
    e o endereço na mesma transação.
    """
    if not fields.is_complete:
        return current_address_id

    columns = {k: v for k, v in fields.as_columns().items() if v is not None}

    address = get_or_none(Address, current_address_id) if current_address_id else None
    if address is not None:
        for name, value in columns.items():
            setattr(address, name, value)
        return address.id

    address = Address(id=uuid.uuid4(), **columns)
    db.session.add(address)
    db.session.flush()
    return address.id
