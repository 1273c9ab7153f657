"""Search, filter and sort the property snapshot for the dashboard table."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Any

from imobi.models.enums import (
    ALL,
    COMMERCIAL_TYPES,
    RESIDENTIAL_TYPES,
    Category,
    SortDirection,
    SortField,
)
from imobi.schemas.dashboard import ViewState
from imobi.schemas.property import Property


class SortKind(str, Enum):
    """Natural ordering of a sortable column."""

    TEXT = "text"
    NUMBER = "number"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class SortColumn:
    """A sortable column: header label, accessor and its ordering."""

    label: str
    accessor: Callable[[Property], Any]
    kind: SortKind


def _enum_value(value: Enum | None) -> str | None:
    return value.value if value is not None else None


SORT_COLUMNS: dict[SortField, SortColumn] = {
    SortField.LOCADOR: SortColumn("LD", lambda p: p.locador, SortKind.TEXT),
    SortField.BAIRRO: SortColumn("Bairro", lambda p: p.bairro, SortKind.TEXT),
    SortField.TIPO: SortColumn("Tipo", lambda p: p.tipo.value, SortKind.TEXT),
    SortField.DESCRICAO: SortColumn("Descrição", lambda p: p.descricao, SortKind.TEXT),
    SortField.ENDERECO: SortColumn("Endereço", lambda p: p.endereco, SortKind.TEXT),
    SortField.VALOR: SortColumn("Valores", lambda p: p.valor, SortKind.NUMBER),
    SortField.CODIGO: SortColumn("Código", lambda p: p.codigo, SortKind.TEXT),
    SortField.OBSERVACAO: SortColumn("Obs", lambda p: p.observacao, SortKind.TEXT),
    SortField.FICHA_STATUS: SortColumn(
        "Ficha", lambda p: _enum_value(p.ficha_status), SortKind.TEXT
    ),
    SortField.STATUS: SortColumn("Status", lambda p: p.status.value, SortKind.TEXT),
    SortField.DATA_ATUALIZACAO: SortColumn(
        "Atualização", lambda p: p.data_atualizacao, SortKind.TIMESTAMP
    ),
}


def _search_fields(prop: Property) -> list[str]:
    return [
        prop.codigo,
        prop.locador or "",
        prop.endereco,
        prop.bairro,
        prop.captador or "",
        prop.descricao or "",
        prop.observacao or "",
    ]


def matches_search(prop: Property, search: str) -> bool:
    """Every whitespace-separated term must appear in at least one field."""
    terms = search.casefold().split()
    if not terms:
        return True
    fields = [value.casefold() for value in _search_fields(prop)]
    return all(any(term in value for value in fields) for term in terms)


def matches_status(prop: Property, status_filter: str) -> bool:
    return status_filter == ALL or prop.status.value == status_filter


def matches_category(prop: Property, category_filter: str) -> bool:
    if category_filter == Category.RESIDENTIAL.value:
        return prop.tipo in RESIDENTIAL_TYPES
    if category_filter == Category.COMMERCIAL.value:
        return prop.tipo in COMMERCIAL_TYPES
    return True


def matches_bairro(prop: Property, bairro_filter: str) -> bool:
    return bairro_filter.casefold() in prop.bairro.casefold()


def filter_properties(
    properties: Iterable[Property],
    search: str = "",
    status_filter: str = ALL,
    category_filter: str = ALL,
    bairro_filter: str = "",
) -> list[Property]:
    """Keep the properties that pass every filter."""
    return [
        prop
        for prop in properties
        if matches_search(prop, search)
        and matches_status(prop, status_filter)
        and matches_category(prop, category_filter)
        and matches_bairro(prop, bairro_filter)
    ]


def compare_values(a: Any, b: Any, direction: SortDirection) -> int:
    """Compare two column values; a missing value always sorts last."""
    if a == b:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    result = -1 if a < b else 1
    return result if direction == SortDirection.ASC else -result


def sort_properties(
    properties: Iterable[Property],
    field: SortField = SortField.DATA_ATUALIZACAO,
    direction: SortDirection = SortDirection.DESC,
) -> list[Property]:
    """Sort by one column. Equal values keep their incoming order."""
    accessor = SORT_COLUMNS[field].accessor
    return sorted(
        properties,
        key=cmp_to_key(lambda a, b: compare_values(accessor(a), accessor(b), direction)),
    )


def apply_view(properties: Iterable[Property], view: ViewState) -> list[Property]:
    """Filter then sort a snapshot according to the dashboard view state."""
    filtered = filter_properties(
        properties,
        search=view.search,
        status_filter=view.status_filter,
        category_filter=view.category_filter,
        bairro_filter=view.bairro_filter,
    )
    return sort_properties(filtered, view.sort_field, view.sort_direction)
