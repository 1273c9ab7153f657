"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using Fly Volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/imobi.db"
    return "sqlite:///./imobi.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Imobi Control"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database - defaults to Fly Volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # Property store: "database" (persistent) or "memory" (demo, polling)
    STORE_BACKEND: str = "database"
    STORE_READ_ONLY: bool = False
    POLL_INTERVAL_SECONDS: float = 1.0
    INITIAL_DELIVERY_DELAY_SECONDS: float = 0.1
    CLEAR_BATCH_SIZE: int = 500

    # Session cookie (flash messages and dashboard view state)
    SECRET_KEY: str = "your-secret-key-change-this-in-production"

    TIMEZONE: str = "America/Sao_Paulo"
    EXPORT_FILENAME_PREFIX: str = "varp_imoveis"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"


settings = Settings()
