"""
Regras de doação: normalização dos enums (tipo de ajuda / pagamento),
campos correlacionados por tipo de ajuda e a heurística de doador anônimo.

Tokens persistidos (`doacoes.tp_ajuda`, `doacoes.tp_pagamento`) são em caixa
alta e não podem mudar: há linhas antigas gravadas com eles.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional


class AidType(str, Enum):
    FINANCIAL = "Financeira"
    ITEMS = "Itens"
    OTHER = "Outro"


class PaymentMethod(str, Enum):
    PIX = "Pix"
    CASH = "Dinheiro"
    TRANSFER = "Transferencia"
    OTHER = "Outro"


AID_TYPE_FROM_DB = {
    "FINANCEIRA": AidType.FINANCIAL.value,
    "ITENS": AidType.ITEMS.value,
    "OUTRO": AidType.OTHER.value,
}
PAYMENT_METHOD_FROM_DB = {
    "PIX": PaymentMethod.PIX.value,
    "DINHEIRO": PaymentMethod.CASH.value,
    "TRANSFERENCIA": PaymentMethod.TRANSFER.value,
    "OUTRO": PaymentMethod.OTHER.value,
}

# Inversos, indexados em minúsculas para aceitar 'pix', 'Pix', 'PIX'
AID_TYPE_TO_DB = {app.lower(): db for db, app in AID_TYPE_FROM_DB.items()}
PAYMENT_METHOD_TO_DB = {app.lower(): db for db, app in PAYMENT_METHOD_FROM_DB.items()}

FINANCIAL_DB = "FINANCEIRA"
ITEMS_DB = "ITENS"
DEFAULT_PAYMENT_DB = "PIX"


def _to_db(value: Optional[str], table: dict) -> Optional[str]:
    if value is None:
        return None
    token = str(value).strip()
    if not token:
        return None
    # Token desconhecido vira caixa alta em vez de erro
    return table.get(token.lower(), token.upper())


def _from_db(value: Optional[str], table: dict) -> Optional[str]:
    if value is None:
        return None
    return table.get(value, value)


def aid_type_to_db(value: Optional[str]) -> Optional[str]:
    return _to_db(value, AID_TYPE_TO_DB)


def aid_type_from_db(value: Optional[str]) -> Optional[str]:
    return _from_db(value, AID_TYPE_FROM_DB)


def payment_method_to_db(value: Optional[str]) -> Optional[str]:
    return _to_db(value, PAYMENT_METHOD_TO_DB)


def payment_method_from_db(value: Optional[str]) -> Optional[str]:
    return _from_db(value, PAYMENT_METHOD_FROM_DB)


@dataclass(frozen=True)
class DonationFields:
    """Campos correlacionados de uma doação já no vocabulário do banco."""

    tp_ajuda: Optional[str] = None
    tp_pagamento: Optional[str] = None
    valor: Optional[Decimal] = None
    itens: Optional[str] = None


class MissingAmount(ValueError):
    pass


def apply_aid_type_rules(fields: DonationFields, *, require_amount: bool = True) -> DonationFields:
    """Limpa o que não faz sentido para o tipo de ajuda.

    - FINANCEIRA: pagamento padrão PIX; valor obrigatório e positivo.
    - ITENS: sem valor nem pagamento.
    - qualquer outro (OUTRO, desconhecido, ausente): sem valor, pagamento nem itens.
    """
    if fields.tp_ajuda == FINANCIAL_DB:
        if require_amount and (fields.valor is None or fields.valor <= 0):
            raise MissingAmount("valor é obrigatório e deve ser positivo para doações financeiras")
        return replace(
            fields,
            tp_pagamento=fields.tp_pagamento or DEFAULT_PAYMENT_DB,
            itens=None,
        )

    if fields.tp_ajuda == ITEMS_DB:
        return replace(fields, tp_pagamento=None, valor=None)

    return replace(fields, tp_pagamento=None, valor=None, itens=None)


# --- Doador anônimo -----------------------------------------------------------

ANONYMOUS_NAME = "Doação Anônima"
ANONYMOUS_EMAIL_PREFIX = "anonimo_"
ANONYMOUS_EMAIL_SUFFIX = "@temp.com"
ANONYMOUS_CPF = "00000000000"


def is_anonymous_donor(nome: Optional[str], email: Optional[str], cpf: Optional[str]) -> bool:
    if nome == ANONYMOUS_NAME:
        return True
    if email and email.startswith(ANONYMOUS_EMAIL_PREFIX) and email.endswith(ANONYMOUS_EMAIL_SUFFIX):
        return True
    return cpf == ANONYMOUS_CPF


def anonymous_email(stamp: str) -> str:
    return f"{ANONYMOUS_EMAIL_PREFIX}{stamp}{ANONYMOUS_EMAIL_SUFFIX}"
