"""Builders for property records used across tests."""

import itertools
from typing import Any

from imobi.models.enums import PropertyStatus, PropertyType
from imobi.schemas.property import Property, PropertyCreate

_ids = itertools.count(1)


def make_property(**overrides: Any) -> Property:
    """Build a snapshot record with sensible defaults."""
    n = next(_ids)
    data: dict[str, Any] = {
        "id": f"p{n}",
        "codigo": f"C{n:03d}",
        "endereco": f"Rua {n}, {n * 10}",
        "bairro": "Centro",
        "tipo": PropertyType.APARTMENT,
        "valor": 1000.0,
        "descricao": "",
        "status": PropertyStatus.AVAILABLE,
        "data_atualizacao": 1_700_000_000_000 + n,
        "captador": "Maria",
    }
    data.update(overrides)
    return Property(**data)


def make_create(**overrides: Any) -> PropertyCreate:
    """Build an add payload with sensible defaults."""
    data: dict[str, Any] = {
        "codigo": "A100",
        "endereco": "Rua das Flores, 10",
        "bairro": "Centro",
        "tipo": PropertyType.HOUSE,
        "valor": 1500,
        "captador": "João",
    }
    data.update(overrides)
    return PropertyCreate(**data)
