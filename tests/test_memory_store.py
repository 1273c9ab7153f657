"""Tests for the in-memory (demo) property store."""

import asyncio

import pytest

from imobi.core.exceptions import PermissionDeniedError
from imobi.models.enums import PropertyStatus
from imobi.schemas.property import PropertyUpdate
from imobi.services.memory_store import MemoryPropertyStore
from tests.factories import make_create


def make_store(**kwargs) -> MemoryPropertyStore:
    kwargs.setdefault("poll_interval", 0.01)
    kwargs.setdefault("initial_delay", 0)
    return MemoryPropertyStore(**kwargs)


class TestMemoryStore:
    """CRUD behaviour of the demo store."""

    @pytest.mark.asyncio
    async def test_add_update_delete(self) -> None:
        store = make_store()
        property_id = await store.add(make_create(valor=900))

        await store.update(property_id, PropertyUpdate(status=PropertyStatus.SUSPENDED))
        [prop] = await store.list_properties()
        assert prop.status == PropertyStatus.SUSPENDED
        assert prop.valor == 900

        await store.delete(property_id)
        assert await store.list_properties() == []

    @pytest.mark.asyncio
    async def test_unknown_ids_are_ignored(self) -> None:
        store = make_store()
        await store.update("nope", PropertyUpdate(status=PropertyStatus.LEASED))
        await store.delete("nope")
        assert await store.list_properties() == []

    @pytest.mark.asyncio
    async def test_snapshot_is_newest_first(self) -> None:
        store = make_store()
        first = await store.add(make_create(codigo="A"))
        await store.add(make_create(codigo="B"))
        await store.update(first, PropertyUpdate(descricao="editado"))
        snapshot = await store.list_properties()
        assert [p.codigo for p in snapshot] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_restore_defaults_replaces_collection(self) -> None:
        store = make_store(seed=[make_create(codigo="SEED")])
        await store.add(make_create(codigo="X"))
        await store.restore_defaults()
        assert [p.codigo for p in await store.list_properties()] == ["SEED"]

    @pytest.mark.asyncio
    async def test_clear_all(self) -> None:
        store = make_store()
        await store.add(make_create())
        await store.clear_all()
        assert await store.list_properties() == []

    @pytest.mark.asyncio
    async def test_read_only(self) -> None:
        store = make_store(read_only=True)
        with pytest.raises(PermissionDeniedError):
            await store.add(make_create())


class TestPolling:
    """Polling subscriptions."""

    @pytest.mark.asyncio
    async def test_initial_and_change_deliveries(self) -> None:
        store = make_store()
        received: list = []
        unsubscribe = store.subscribe(received.append)

        await asyncio.sleep(0.03)
        assert received == [[]]

        await store.add(make_create(codigo="NEW"))
        await asyncio.sleep(0.05)
        assert [p.codigo for p in received[-1]] == ["NEW"]

        # No change, no new delivery
        count = len(received)
        await asyncio.sleep(0.05)
        assert len(received) == count
        unsubscribe()

    @pytest.mark.asyncio
    async def test_unsubscribe_cancels_polling(self) -> None:
        store = make_store()
        received: list = []
        unsubscribe = store.subscribe(received.append)
        await asyncio.sleep(0.03)

        unsubscribe()
        unsubscribe()
        await store.add(make_create())
        await asyncio.sleep(0.05)

        assert received == [[]]
        assert store.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_unsubscribe_from_callback(self) -> None:
        store = make_store()
        received: list = []
        handle: dict = {}

        def on_snapshot(snapshot) -> None:
            received.append(snapshot)
            handle["unsubscribe"]()

        handle["unsubscribe"] = store.subscribe(on_snapshot)
        await asyncio.sleep(0.03)
        await store.add(make_create())
        await asyncio.sleep(0.05)

        assert len(received) == 1
