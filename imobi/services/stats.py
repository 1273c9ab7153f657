"""Aggregate counts and revenue over a property snapshot."""

from collections.abc import Iterable

from imobi.models.enums import COMMERCIAL_TYPES, RESIDENTIAL_TYPES, PropertyStatus
from imobi.schemas.dashboard import DashboardStats
from imobi.schemas.property import Property


def _as_number(value: object) -> float:
    """Coerce a monetary value, treating missing or non-numeric input as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


def compute_stats(properties: Iterable[Property]) -> DashboardStats:
    """Reduce a snapshot into dashboard counts and revenue figures.

    Properties that are available or in a leasing process add to the
    potential revenue; vacating and leased properties are still paying and
    add to the monthly revenue. Suspended properties add to neither.
    """
    stats = DashboardStats()

    for prop in properties:
        stats.total += 1
        valor = _as_number(prop.valor)

        if prop.tipo in RESIDENTIAL_TYPES:
            stats.residencial += 1
        if prop.tipo in COMMERCIAL_TYPES:
            stats.comercial += 1

        if prop.status == PropertyStatus.AVAILABLE:
            stats.disponivel += 1
            stats.potencial_receita += valor
        elif prop.status == PropertyStatus.IN_LEASING_PROCESS:
            stats.em_processo += 1
            stats.potencial_receita += valor
        elif prop.status == PropertyStatus.VACATING:
            stats.desocupando += 1
            stats.receita_mensal += valor
        elif prop.status == PropertyStatus.SUSPENDED:
            stats.suspenso += 1
        elif prop.status == PropertyStatus.LEASED:
            stats.locado += 1
            stats.receita_mensal += valor

    return stats
