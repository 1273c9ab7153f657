"""Tests for snapshot aggregation."""

from imobi.models.enums import PropertyStatus, PropertyType
from imobi.services.stats import compute_stats
from tests.factories import make_property


class TestComputeStats:
    """Unit tests for dashboard counts and revenue."""

    def test_empty_snapshot(self) -> None:
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.receita_mensal == 0
        assert stats.potencial_receita == 0

    def test_revenue_partition(self) -> None:
        """Available value is potential revenue, leased value is monthly revenue."""
        stats = compute_stats(
            [
                make_property(status=PropertyStatus.AVAILABLE, valor=1000),
                make_property(status=PropertyStatus.LEASED, valor=2000),
            ]
        )
        assert stats.potencial_receita == 1000
        assert stats.receita_mensal == 2000

    def test_vacating_still_pays_and_in_process_is_potential(self) -> None:
        stats = compute_stats(
            [
                make_property(status=PropertyStatus.VACATING, valor=800),
                make_property(status=PropertyStatus.IN_LEASING_PROCESS, valor=700),
                make_property(status=PropertyStatus.SUSPENDED, valor=5000),
            ]
        )
        assert stats.receita_mensal == 800
        assert stats.potencial_receita == 700
        assert stats.suspenso == 1

    def test_status_buckets_sum_to_total(self) -> None:
        properties = [make_property(status=status) for status in PropertyStatus] * 3
        stats = compute_stats(properties)
        buckets = (
            stats.disponivel
            + stats.em_processo
            + stats.desocupando
            + stats.suspenso
            + stats.locado
        )
        assert stats.total == 15
        assert buckets == stats.total

    def test_categories(self) -> None:
        stats = compute_stats(
            [
                make_property(tipo=PropertyType.HOUSE),
                make_property(tipo=PropertyType.STUDIO),
                make_property(tipo=PropertyType.GARAGE),
                make_property(tipo=PropertyType.SHOP),
                make_property(tipo=PropertyType.COMMERCIAL_ROOM),
            ]
        )
        assert stats.residencial == 2
        assert stats.comercial == 3

    def test_non_numeric_value_counts_as_zero(self) -> None:
        prop = make_property(status=PropertyStatus.LEASED, valor=100)
        broken = prop.model_copy(update={"valor": "abc"})
        stats = compute_stats([prop, broken])
        assert stats.locado == 2
        assert stats.receita_mensal == 100
