"""Property store client contract shared by every backend."""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from imobi.core.exceptions import StoreError
from imobi.core.logging import get_logger
from imobi.models.enums import FichaStatus
from imobi.schemas.property import Property, PropertyCreate, PropertyUpdate

logger = get_logger(__name__)

SnapshotCallback = Callable[[list[Property]], None]
ErrorCallback = Callable[[StoreError], None]
Unsubscribe = Callable[[], None]

UNSPECIFIED_CAPTADOR = "Não informado"


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def next_timestamp(latest: int | None) -> int:
    """Return a mutation timestamp strictly greater than ``latest``."""
    now = now_millis()
    if latest is None or now > latest:
        return now
    return latest + 1


def with_add_defaults(data: PropertyCreate) -> dict[str, Any]:
    """Column values for a new record, with optional fields defaulted."""
    values = data.model_dump(mode="json")
    values["observacao"] = values.get("observacao") or ""
    values["ficha_status"] = values.get("ficha_status") or FichaStatus.NONE.value
    values["ficha_data_atualizacao"] = values.get("ficha_data_atualizacao") or None
    values["captador"] = values.get("captador") or UNSPECIFIED_CAPTADOR
    values["vago_em"] = values.get("vago_em") or None
    values["liberado_em"] = values.get("liberado_em") or None
    return values


class Subscription:
    """A registered snapshot listener.

    ``unsubscribe`` is idempotent. A failure is terminal: the listener gets
    ``on_error`` once and receives nothing afterwards.
    """

    def __init__(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
        on_cancel: Callable[["Subscription"], None] | None = None,
    ) -> None:
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._on_cancel = on_cancel
        self.active = True

    def deliver(self, snapshot: list[Property]) -> None:
        if self.active:
            self._on_snapshot(snapshot)

    def fail(self, error: StoreError) -> None:
        if not self.active:
            return
        logger.error("Subscription terminated: %s", error)
        self.unsubscribe()
        if self._on_error is not None:
            self._on_error(error)

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._on_cancel is not None:
            self._on_cancel(self)


class PropertyStore(ABC):
    """Persistence boundary for property records.

    ``subscribe`` must be called from a running event loop; deliveries are
    scheduled on it and never happen inside the caller's frame.
    """

    #: Persistent backends refuse ``restore_defaults``.
    persistent = False

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Register a listener for full snapshots, newest first."""
        subscription = Subscription(on_snapshot, on_error, on_cancel=self._forget)
        self._subscriptions.append(subscription)
        self._start(subscription)
        return subscription.unsubscribe

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def close(self) -> None:
        """Cancel every live subscription."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    @abstractmethod
    def _start(self, subscription: Subscription) -> None:
        """Begin delivering snapshots to a new subscription."""

    @abstractmethod
    async def list_properties(self) -> list[Property]:
        """Return the current snapshot, newest first."""

    @abstractmethod
    async def add(self, data: PropertyCreate) -> str:
        """Persist a new property and return its id."""

    @abstractmethod
    async def update(self, property_id: str, patch: PropertyUpdate) -> None:
        """Merge the set fields of ``patch`` into an existing property."""

    @abstractmethod
    async def delete(self, property_id: str) -> None:
        """Remove a property permanently."""

    @abstractmethod
    async def clear_all(self) -> None:
        """Remove every property."""

    @abstractmethod
    async def restore_defaults(self) -> None:
        """Replace the collection with the default seed set."""
