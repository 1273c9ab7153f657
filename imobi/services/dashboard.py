"""Dashboard orchestration: live snapshot, derived views and guarded actions."""

from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import date
from zoneinfo import ZoneInfo

from imobi.core.exceptions import (
    EmptyExportError,
    OperationRefusedError,
    PartialClearError,
    PermissionDeniedError,
    StoreError,
)
from imobi.core.logging import get_logger
from imobi.models.enums import FichaStatus, PropertyStatus
from imobi.schemas.dashboard import DashboardStats, ViewState
from imobi.schemas.property import Property, PropertyForm, PropertyUpdate
from imobi.services.export import ExportFile, build_export
from imobi.services.listing import apply_view
from imobi.services.stats import compute_stats
from imobi.services.store import PropertyStore, Unsubscribe, now_millis

logger = get_logger(__name__)

PERMISSION_MESSAGE = "Acesso negado. Verifique as permissões do banco de dados."
SUBSCRIPTION_PERMISSION_MESSAGE = (
    "Acesso negado pelo banco de dados. A leitura dos imóveis foi recusada; "
    "libere o acesso de leitura e escrita ao banco e recarregue a página."
)
SUBSCRIPTION_ERROR_MESSAGE = "Erro de conexão com o banco de dados: {error}"

CLEAR_ALL_PHRASE = "APAGAR TUDO"
RESTORE_PHRASE = "RESTAURAR"

CONFIRM_DELETE_PROMPT = "Tem certeza que deseja excluir este imóvel?"
CONFIRM_CLEAR_PROMPT = (
    "ATENÇÃO: Isso apagará TODOS os imóveis da lista. "
    f"Digite {CLEAR_ALL_PHRASE} para continuar."
)
CONFIRM_RESTORE_PROMPT = (
    "Isso irá restaurar os dados de exemplo e apagar as alterações atuais. "
    f"Digite {RESTORE_PHRASE} para continuar."
)


@dataclass(frozen=True)
class Notice:
    """A blocking, user-facing message."""

    message: str
    category: str = "info"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a dashboard action."""

    view: ViewState
    notices: tuple[Notice, ...] = ()
    ok: bool = True
    file: ExportFile | None = field(default=None)


class DashboardController:
    """Holds the latest snapshot and turns user actions into store calls.

    Action handlers never raise store errors; failures come back as notices.
    """

    def __init__(
        self,
        store: PropertyStore,
        tz: ZoneInfo,
        export_prefix: str = "varp_imoveis",
    ) -> None:
        self.store = store
        self.tz = tz
        self.export_prefix = export_prefix
        self.snapshot: list[Property] = []
        self.subscription_error: Notice | None = None
        self._unsubscribe: Unsubscribe | None = None

    # Subscription lifecycle

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_snapshot, self._on_error)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, snapshot: list[Property]) -> None:
        self.snapshot = snapshot

    def _on_error(self, error: StoreError) -> None:
        if isinstance(error, PermissionDeniedError):
            message = SUBSCRIPTION_PERMISSION_MESSAGE
        else:
            message = SUBSCRIPTION_ERROR_MESSAGE.format(error=error)
        self.subscription_error = Notice(message, "error")
        self._unsubscribe = None

    # Derived views

    def stats(self) -> DashboardStats:
        return compute_stats(self.snapshot)

    def visible(self, view: ViewState) -> list[Property]:
        return apply_view(self.snapshot, view)

    # Actions

    async def _run(self, operation: Awaitable[object], failure_message: str) -> tuple[Notice, ...]:
        try:
            await operation
        except PermissionDeniedError:
            logger.error("Operation rejected: permission denied")
            return (Notice(PERMISSION_MESSAGE, "error"),)
        except StoreError as exc:
            logger.error("%s (%s)", failure_message, exc)
            return (Notice(failure_message, "error"),)
        return ()

    async def change_status(
        self, view: ViewState, property_id: str, status: PropertyStatus
    ) -> ActionResult:
        view = view.close_menus()
        notices = await self._run(
            self.store.update(property_id, PropertyUpdate(status=status)),
            "Erro ao atualizar status.",
        )
        return ActionResult(view, notices, ok=not notices)

    async def change_ficha(
        self, view: ViewState, property_id: str, ficha_status: FichaStatus
    ) -> ActionResult:
        view = view.close_menus()
        patch = PropertyUpdate(ficha_status=ficha_status, ficha_data_atualizacao=now_millis())
        notices = await self._run(
            self.store.update(property_id, patch), "Erro ao atualizar ficha."
        )
        if notices:
            return ActionResult(view, notices, ok=False)
        if ficha_status == FichaStatus.IN_REVIEW:
            notices = (Notice("Ficha marcada como em análise.", "info"),)
        elif ficha_status == FichaStatus.APPROVED:
            notices = (Notice("Ficha aprovada!", "success"),)
        return ActionResult(view, notices)

    async def delete(self, view: ViewState, property_id: str, confirmed: bool) -> ActionResult:
        if not confirmed:
            return ActionResult(view, ok=False)
        view = view.close_menus()
        notices = await self._run(self.store.delete(property_id), "Erro ao excluir imóvel.")
        return ActionResult(view, notices, ok=not notices)

    async def clear_all(self, view: ViewState, confirmation: str) -> ActionResult:
        if confirmation.strip() != CLEAR_ALL_PHRASE:
            return ActionResult(
                view,
                (Notice(f"Digite {CLEAR_ALL_PHRASE} para confirmar.", "warning"),),
                ok=False,
            )
        try:
            await self.store.clear_all()
        except PartialClearError as exc:
            logger.warning("Partial clear: %d removed", exc.removed)
            message = (
                f"A limpeza foi interrompida após remover {exc.removed} imóveis. "
                "Tente novamente para remover os restantes."
            )
            return ActionResult(view, (Notice(message, "error"),), ok=False)
        except PermissionDeniedError:
            return ActionResult(view, (Notice(PERMISSION_MESSAGE, "error"),), ok=False)
        except StoreError as exc:
            logger.error("Clear failed: %s", exc)
            return ActionResult(view, (Notice("Erro ao limpar dados.", "error"),), ok=False)
        return ActionResult(view.close_menus())

    async def restore_defaults(self, view: ViewState, confirmation: str) -> ActionResult:
        if confirmation.strip() != RESTORE_PHRASE:
            return ActionResult(
                view,
                (Notice(f"Digite {RESTORE_PHRASE} para confirmar.", "warning"),),
                ok=False,
            )
        try:
            await self.store.restore_defaults()
        except OperationRefusedError as exc:
            return ActionResult(view, (Notice(str(exc), "warning"),), ok=False)
        except PermissionDeniedError:
            return ActionResult(view, (Notice(PERMISSION_MESSAGE, "error"),), ok=False)
        except StoreError as exc:
            logger.error("Restore failed: %s", exc)
            return ActionResult(
                view, (Notice("Erro ao restaurar dados.", "error"),), ok=False
            )
        return ActionResult(view.close_menus())

    async def save(
        self, view: ViewState, form: PropertyForm, property_id: str | None = None
    ) -> ActionResult:
        """Create or update a property from validated form input."""
        now = now_millis()
        if property_id is None:
            operation = self.store.add(form.to_create(self.tz, now))
        else:
            operation = self.store.update(property_id, form.to_update(self.tz, now))
        notices = await self._run(operation, "Erro ao salvar imóvel.")
        if notices:
            return ActionResult(view, notices, ok=False)
        return ActionResult(view, (Notice("Imóvel salvo com sucesso.", "success"),))

    def export(self, view: ViewState, today: date) -> ActionResult:
        """Export the filtered and sorted rows, refusing an empty view."""
        try:
            file = build_export(self.visible(view), today, self.tz, self.export_prefix)
        except EmptyExportError as exc:
            return ActionResult(view, (Notice(str(exc), "warning"),), ok=False)
        return ActionResult(view, file=file)
