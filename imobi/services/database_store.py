"""SQLAlchemy-backed property store (persistent mode)."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from imobi.core.exceptions import (
    NotFoundError,
    OperationRefusedError,
    PartialClearError,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
    WriteFailedError,
)
from imobi.core.logging import get_logger
from imobi.models.property import Imovel
from imobi.schemas.property import Property, PropertyCreate, PropertyUpdate
from imobi.services.store import (
    PropertyStore,
    Subscription,
    next_timestamp,
    with_add_defaults,
)

logger = get_logger(__name__)

RESTORE_REFUSED_MESSAGE = "Esta função só está disponível no modo de demonstração."

_PERMISSION_MARKERS = ("readonly", "read-only", "permission denied", "access denied")


def map_database_error(exc: SQLAlchemyError) -> StoreError:
    """Translate a SQLAlchemy failure into the store error taxonomy."""
    message = str(exc).lower()
    if any(marker in message for marker in _PERMISSION_MARKERS):
        return PermissionDeniedError(str(exc))
    if isinstance(exc, OperationalError):
        return StoreUnavailableError(str(exc))
    return WriteFailedError(str(exc))


class DatabasePropertyStore(PropertyStore):
    """Property store over a relational table, pushing snapshots after each write."""

    persistent = True

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clear_batch_size: int = 500,
        read_only: bool = False,
    ) -> None:
        super().__init__()
        self._session_factory = session_factory
        self._clear_batch_size = clear_batch_size
        self._read_only = read_only

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except StoreError:
            db.rollback()
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            error = map_database_error(exc)
            logger.error("%s failed (%s): %s", action, type(error).__name__, exc)
            raise error from exc
        finally:
            db.close()

    def _check_writable(self, action: str) -> None:
        if self._read_only:
            logger.error("%s rejected: store is read-only", action)
            raise PermissionDeniedError("Store is read-only")

    def _fetch(self) -> list[Property]:
        with self._session("snapshot") as db:
            rows = db.scalars(
                select(Imovel).order_by(Imovel.data_atualizacao.desc())
            ).all()
            return [Property.model_validate(row) for row in rows]

    @staticmethod
    def _latest(db: Session) -> int | None:
        return db.scalar(select(func.max(Imovel.data_atualizacao)))

    # Subscriptions

    def _start(self, subscription: Subscription) -> None:
        asyncio.get_running_loop().call_soon(self._deliver, [subscription])

    def _notify(self) -> None:
        if not self._subscriptions:
            return
        asyncio.get_running_loop().call_soon(self._deliver, list(self._subscriptions))

    def _deliver(self, subscriptions: list[Subscription]) -> None:
        live = [s for s in subscriptions if s.active]
        if not live:
            return
        try:
            snapshot = self._fetch()
        except StoreError as exc:
            for subscription in live:
                subscription.fail(exc)
            return
        for subscription in live:
            subscription.deliver(list(snapshot))

    # Reads and writes

    async def list_properties(self) -> list[Property]:
        return self._fetch()

    async def add(self, data: PropertyCreate) -> str:
        self._check_writable("add")
        property_id = uuid4().hex
        with self._session("add") as db:
            record = Imovel(
                id=property_id,
                data_atualizacao=next_timestamp(self._latest(db)),
                **with_add_defaults(data),
            )
            db.add(record)
            db.commit()
        logger.info("Added property %s (%s)", property_id, data.codigo)
        self._notify()
        return property_id

    async def update(self, property_id: str, patch: PropertyUpdate) -> None:
        self._check_writable("update")
        fields = patch.model_dump(exclude_unset=True, mode="json")
        with self._session("update") as db:
            record = db.get(Imovel, property_id)
            if record is None:
                raise NotFoundError(f"Property {property_id} not found")
            for field, value in fields.items():
                setattr(record, field, value)
            record.data_atualizacao = next_timestamp(self._latest(db))
            db.commit()
        logger.info("Updated property %s: %s", property_id, ", ".join(sorted(fields)))
        self._notify()

    async def delete(self, property_id: str) -> None:
        self._check_writable("delete")
        with self._session("delete") as db:
            record = db.get(Imovel, property_id)
            if record is None:
                raise NotFoundError(f"Property {property_id} not found")
            db.delete(record)
            db.commit()
        logger.info("Deleted property %s", property_id)
        self._notify()

    async def clear_all(self) -> None:
        """Delete every record in chunks of ``clear_batch_size``.

        Each chunk commits on its own. A failure after the first chunk leaves
        the collection partially cleared and raises ``PartialClearError``;
        committed chunks are not restored.
        """
        self._check_writable("clear_all")
        with self._session("clear_all") as db:
            ids = list(db.scalars(select(Imovel.id)))

        removed = 0
        for start in range(0, len(ids), self._clear_batch_size):
            chunk = ids[start : start + self._clear_batch_size]
            try:
                with self._session("clear_all") as db:
                    db.execute(delete(Imovel).where(Imovel.id.in_(chunk)))
                    db.commit()
            except StoreError as exc:
                if not removed:
                    raise
                logger.warning(
                    "Clear interrupted: %d of %d properties removed", removed, len(ids)
                )
                self._notify()
                raise PartialClearError(
                    f"Clear interrupted after removing {removed} of {len(ids)} properties",
                    removed=removed,
                ) from exc
            removed += len(chunk)
            logger.debug("Cleared %d/%d properties", removed, len(ids))

        logger.info("Cleared %d properties", removed)
        self._notify()

    async def restore_defaults(self) -> None:
        logger.warning("Restore defaults refused: persistent backend")
        raise OperationRefusedError(RESTORE_REFUSED_MESSAGE)
