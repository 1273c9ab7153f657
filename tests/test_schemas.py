"""Tests for the property form boundary."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from imobi.models.enums import FichaStatus
from imobi.schemas.property import (
    NON_NULLABLE_FIELDS,
    PropertyForm,
    PropertyUpdate,
    local_noon_millis,
)

TZ = ZoneInfo("America/Sao_Paulo")
NOW = 1_710_000_000_000


def make_form(**overrides) -> PropertyForm:
    data = {
        "codigo": "A1",
        "endereco": "Rua B, 2",
        "bairro": "Centro",
        "valor": "1200",
        "captador": "Ana",
    }
    data.update(overrides)
    return PropertyForm(**data)


@pytest.mark.parametrize("field", ["codigo", "endereco", "bairro", "captador"])
def test_required_text_fields(field: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        make_form(**{field: "   "})
    assert exc_info.value.errors()[0]["loc"] == (field,)


def test_negative_value_rejected() -> None:
    with pytest.raises(ValidationError):
        make_form(valor="-1")


def test_empty_optional_inputs() -> None:
    form = make_form(iptu="", seguro_incendio="", vago_em="", liberado_em="")
    assert form.iptu == 0
    assert form.seguro_incendio == 0
    assert form.vago_em is None


def test_local_noon() -> None:
    millis = local_noon_millis(date(2024, 5, 20), TZ)
    moment = datetime.fromtimestamp(millis / 1000, TZ)
    assert (moment.date(), moment.hour) == (date(2024, 5, 20), 12)


def test_to_create_sets_ficha_clock_and_dates() -> None:
    create = make_form(vago_em="2024-05-20", locador="").to_create(TZ, NOW)
    assert create.ficha_data_atualizacao == NOW
    assert create.vago_em == local_noon_millis(date(2024, 5, 20), TZ)
    assert create.locador is None


def test_to_update_touches_ficha_clock_only_with_a_ficha() -> None:
    update = make_form().to_update(TZ, NOW)
    assert "ficha_data_atualizacao" not in update.model_dump(exclude_unset=True)

    update = make_form(ficha_status=FichaStatus.HAS_FILE.value).to_update(TZ, NOW)
    assert update.ficha_data_atualizacao == NOW


@pytest.mark.parametrize("field", sorted(NON_NULLABLE_FIELDS))
def test_update_rejects_null_for_fields_every_record_carries(field: str) -> None:
    with pytest.raises(ValidationError):
        PropertyUpdate.model_validate({field: None})


def test_update_allows_clearing_optional_fields() -> None:
    update = PropertyUpdate.model_validate({"locador": None, "vago_em": None})
    assert update.model_dump(exclude_unset=True) == {"locador": None, "vago_em": None}
