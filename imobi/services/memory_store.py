"""In-memory property store with polling subscriptions (demo mode)."""

import asyncio
from uuid import uuid4

from imobi.core.exceptions import PermissionDeniedError
from imobi.core.logging import get_logger
from imobi.schemas.property import Property, PropertyCreate, PropertyUpdate
from imobi.services.store import (
    PropertyStore,
    Subscription,
    next_timestamp,
    with_add_defaults,
)

logger = get_logger(__name__)


class MemoryPropertyStore(PropertyStore):
    """Keeps the collection in process memory.

    Subscribers poll for changes: the first snapshot arrives after
    ``initial_delay`` seconds, later ones whenever the collection changed
    since the last delivery, checked every ``poll_interval`` seconds.
    Updates and deletes of unknown ids are no-ops.
    """

    def __init__(
        self,
        seed: list[PropertyCreate] | None = None,
        poll_interval: float = 1.0,
        initial_delay: float = 0.1,
        read_only: bool = False,
    ) -> None:
        super().__init__()
        self._seed = list(seed or [])
        self._poll_interval = poll_interval
        self._initial_delay = initial_delay
        self._read_only = read_only
        self._items: dict[str, Property] = {}
        self._version = 0
        self._tasks: dict[int, asyncio.Task] = {}

    def _snapshot(self) -> list[Property]:
        return sorted(self._items.values(), key=lambda p: p.data_atualizacao, reverse=True)

    def _latest(self) -> int | None:
        return max((p.data_atualizacao for p in self._items.values()), default=None)

    def _check_writable(self, action: str) -> None:
        if self._read_only:
            logger.error("%s rejected: store is read-only", action)
            raise PermissionDeniedError("Store is read-only")

    def _insert(self, data: PropertyCreate) -> str:
        property_id = uuid4().hex[:9]
        self._items[property_id] = Property(
            id=property_id,
            data_atualizacao=next_timestamp(self._latest()),
            **with_add_defaults(data),
        )
        return property_id

    # Subscriptions

    def _start(self, subscription: Subscription) -> None:
        task = asyncio.get_running_loop().create_task(self._poll(subscription))
        self._tasks[id(subscription)] = task

    def _forget(self, subscription: Subscription) -> None:
        super()._forget(subscription)
        task = self._tasks.pop(id(subscription), None)
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _poll(self, subscription: Subscription) -> None:
        await asyncio.sleep(self._initial_delay)
        seen = self._version
        subscription.deliver(self._snapshot())
        while subscription.active:
            await asyncio.sleep(self._poll_interval)
            if self._version != seen:
                seen = self._version
                subscription.deliver(self._snapshot())

    # Reads and writes

    async def list_properties(self) -> list[Property]:
        return self._snapshot()

    async def add(self, data: PropertyCreate) -> str:
        self._check_writable("add")
        property_id = self._insert(data)
        self._version += 1
        logger.info("Added property %s (%s)", property_id, data.codigo)
        return property_id

    async def update(self, property_id: str, patch: PropertyUpdate) -> None:
        self._check_writable("update")
        current = self._items.get(property_id)
        if current is None:
            return
        fields = patch.model_dump(exclude_unset=True)
        fields["data_atualizacao"] = next_timestamp(self._latest())
        self._items[property_id] = current.model_copy(update=fields)
        self._version += 1
        logger.info("Updated property %s", property_id)

    async def delete(self, property_id: str) -> None:
        self._check_writable("delete")
        if self._items.pop(property_id, None) is not None:
            self._version += 1
            logger.info("Deleted property %s", property_id)

    async def clear_all(self) -> None:
        self._check_writable("clear_all")
        count = len(self._items)
        self._items.clear()
        self._version += 1
        logger.info("Cleared %d properties", count)

    async def restore_defaults(self) -> None:
        self._check_writable("restore_defaults")
        self._items.clear()
        for data in self._seed:
            self._insert(data)
        self._version += 1
        logger.info("Restored %d default properties", len(self._seed))
