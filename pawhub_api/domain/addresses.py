from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

_NON_DIGITS = re.compile(r"\D")

# chave do payload (camelCase) -> coluna em `address`
_PAYLOAD_KEYS = {
    "postalCode": "cep",
    "cep": "cep",
    "state": "estado",
    "uf": "estado",
    "city": "cidade",
    "district": "bairro",
    "street": "endereco",
    "number": "numero",
    "complement": "complemento",
}


def only_digits(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _NON_DIGITS.sub("", str(value))


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class AddressFields:
    cep: Optional[str] = None
    estado: Optional[str] = None
    cidade: Optional[str] = None
    bairro: Optional[str] = None
    endereco: Optional[str] = None
    numero: Optional[str] = None
    complemento: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Optional[Dict[str, Any]]) -> "AddressFields":
        """Lê `address` aninhado ou os campos soltos no corpo da requisição."""
        if not data:
            return cls()
        source = data.get("address") if isinstance(data.get("address"), dict) else data
        values: Dict[str, Optional[str]] = {}
        for key, column in _PAYLOAD_KEYS.items():
            if key in source and values.get(column) is None:
                values[column] = _clean(source.get(key))
        if values.get("cep") is not None:
            values["cep"] = only_digits(values["cep"]) or None
        if values.get("estado") is not None:
            values["estado"] = values["estado"].upper()
        return cls(**values)

    @property
    def is_complete(self) -> bool:
        """CEP, bairro, cidade e UF são obrigatórios para gravar um endereço."""
        return all((self.cep, self.bairro, self.cidade, self.estado))

    def as_columns(self) -> Dict[str, Optional[str]]:
        return asdict(self)
