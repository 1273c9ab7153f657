"""Shared fixtures for the test suite."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from imobi.core.database import Base
from imobi.main import create_app
from imobi.models import property as property_model  # noqa: F401
from imobi.services.database_store import DatabasePropertyStore


@pytest.fixture
def session_factory():
    """Session factory over an in-memory database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_store(session_factory) -> DatabasePropertyStore:
    return DatabasePropertyStore(session_factory, clear_batch_size=2)


@pytest.fixture
def client(db_store):
    """Test client around an app using the in-memory store."""
    app = create_app(store=db_store)
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def api_client(db_store) -> AsyncIterator[AsyncClient]:
    """Async client for the JSON API, with the app lifespan running."""
    app = create_app(store=db_store)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
