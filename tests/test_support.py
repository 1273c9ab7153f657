"""Tests for configuration, error mapping and presentation helpers."""

import json
import logging

import pytest

from imobi.api.exception_handlers import status_for
from imobi.core.config import Settings
from imobi.core.exceptions import (
    ConfigurationError,
    EmptyExportError,
    NotFoundError,
    OperationRefusedError,
    PartialClearError,
    PermissionDeniedError,
    StoreUnavailableError,
    WriteFailedError,
)
from imobi.core.logging import JsonFormatter
from imobi.services.database_store import DatabasePropertyStore
from imobi.services.memory_store import MemoryPropertyStore
from imobi.services.store_factory import create_store
from imobi.web.template_config import format_brl, format_date_input


class TestStoreFactory:
    def test_database_backend(self) -> None:
        store = create_store(Settings(STORE_BACKEND="database"))
        assert isinstance(store, DatabasePropertyStore)
        assert store.persistent

    def test_memory_backend(self) -> None:
        store = create_store(Settings(STORE_BACKEND="memory"))
        assert isinstance(store, MemoryPropertyStore)
        assert not store.persistent

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError):
            create_store(Settings(STORE_BACKEND="cloud"))


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (PermissionDeniedError("x"), 403),
        (NotFoundError("x"), 404),
        (OperationRefusedError("x"), 409),
        (EmptyExportError("x"), 409),
        (StoreUnavailableError("x"), 503),
        (PartialClearError("x", removed=1), 502),
        (WriteFailedError("x"), 502),
    ],
)
def test_http_status_for_errors(error: Exception, status_code: int) -> None:
    assert status_for(error) == status_code


def test_brl_formatting() -> None:
    assert format_brl(1234.5) == "R$ 1.234,50"
    assert format_brl(None) == "R$ 0,00"
    assert format_brl(1500000, decimals=0) == "R$ 1.500.000"


def test_date_input_uses_local_day() -> None:
    # 2024-05-20 12:00 in São Paulo
    assert format_date_input(1_716_217_200_000) == "2024-05-20"
    assert format_date_input(None) == ""


def test_json_formatter() -> None:
    record = logging.LogRecord("imobi.test", logging.INFO, __file__, 1, "olá %s", ("mundo",), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["message"] == "olá mundo"
    assert data["level"] == "INFO"
    assert data["logger"] == "imobi.test"
