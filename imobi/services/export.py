"""Semicolon-delimited export of the visible dashboard rows."""

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from imobi.core.exceptions import EmptyExportError
from imobi.models.enums import FichaStatus
from imobi.schemas.property import Property

EXPORT_HEADERS = [
    "LD",
    "Bairro",
    "Tipo",
    "Descrição",
    "Endereço",
    "Valor",
    "IPTU",
    "Seg. Incêndio",
    "Código",
    "Observação",
    "Ficha",
    "Status",
    "Data Atualização",
]

EMPTY_EXPORT_MESSAGE = "Não há dados para exportar."


@dataclass(frozen=True)
class ExportFile:
    """A generated export, ready to be downloaded."""

    filename: str
    content: bytes
    media_type: str = "text/csv; charset=utf-8"


def format_decimal(value: float | None) -> str:
    """Render a number with a decimal comma ("1500", "1500,5")."""
    number = float(value or 0)
    if number.is_integer():
        return str(int(number))
    return repr(number).replace(".", ",")


def format_date(timestamp_ms: int, tz: ZoneInfo) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz).strftime("%d/%m/%Y")


def _row(prop: Property, tz: ZoneInfo) -> list[str]:
    ficha = prop.ficha_status or FichaStatus.NONE
    return [
        prop.locador or "",
        prop.bairro,
        prop.tipo.value,
        prop.descricao or "",
        prop.endereco,
        format_decimal(prop.valor),
        format_decimal(prop.iptu),
        format_decimal(prop.seguro_incendio),
        prop.codigo,
        prop.observacao or "",
        ficha.value,
        prop.status.value,
        format_date(prop.data_atualizacao, tz),
    ]


def build_export(
    properties: Sequence[Property],
    today: date,
    tz: ZoneInfo,
    prefix: str = "varp_imoveis",
) -> ExportFile:
    """Render ``properties`` as a UTF-8 (with BOM) semicolon-separated file.

    Raises:
        EmptyExportError: if there is nothing to export.

    """
    if not properties:
        raise EmptyExportError(EMPTY_EXPORT_MESSAGE)

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", quotechar='"', lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for prop in properties:
        writer.writerow(_row(prop, tz))

    return ExportFile(
        filename=f"{prefix}_{today.isoformat()}.csv",
        content=("\ufeff" + buffer.getvalue()).encode("utf-8"),
    )
