"""Build the configured property store."""

from imobi.core.config import Settings
from imobi.core.database import SessionLocal
from imobi.core.exceptions import ConfigurationError
from imobi.services.database_store import DatabasePropertyStore
from imobi.services.memory_store import MemoryPropertyStore
from imobi.services.store import PropertyStore

# Restored by the demo backend on "restore defaults".
DEFAULT_PROPERTIES: list = []


def create_store(settings: Settings) -> PropertyStore:
    """Return the backend selected by ``STORE_BACKEND``."""
    if settings.STORE_BACKEND == "database":
        return DatabasePropertyStore(
            SessionLocal,
            clear_batch_size=settings.CLEAR_BATCH_SIZE,
            read_only=settings.STORE_READ_ONLY,
        )
    if settings.STORE_BACKEND == "memory":
        return MemoryPropertyStore(
            seed=DEFAULT_PROPERTIES,
            poll_interval=settings.POLL_INTERVAL_SECONDS,
            initial_delay=settings.INITIAL_DELIVERY_DELAY_SECONDS,
            read_only=settings.STORE_READ_ONLY,
        )
    raise ConfigurationError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")
