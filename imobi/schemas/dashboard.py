"""Dashboard schemas: aggregate stats and the immutable view state."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from imobi.models.enums import ALL, SortDirection, SortField, ViewMode


class DashboardStats(BaseModel):
    """Counts and revenue figures derived from a snapshot. Never persisted."""

    total: int = 0
    residencial: int = 0
    comercial: int = 0
    disponivel: int = 0
    em_processo: int = 0
    desocupando: int = 0
    suspenso: int = 0
    locado: int = 0
    receita_mensal: float = 0
    potencial_receita: float = 0


class ViewState(BaseModel):
    """Filters, sort order and open menus of the dashboard.

    Instances are frozen; every transition returns a new state.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    status_filter: str = ALL
    category_filter: str = ALL
    bairro_filter: str = ""
    sort_field: SortField = SortField.DATA_ATUALIZACAO
    sort_direction: SortDirection = SortDirection.DESC
    active_menu: str | None = None
    status_menu_open: bool = False
    view_mode: ViewMode = ViewMode.LIST

    def with_search(self, search: str) -> "ViewState":
        return self.model_copy(update={"search": search})

    def with_filters(
        self,
        status_filter: str | None = None,
        category_filter: str | None = None,
        bairro_filter: str | None = None,
    ) -> "ViewState":
        """Replace whichever filters are given."""
        update: dict[str, Any] = {}
        if status_filter is not None:
            update["status_filter"] = status_filter
        if category_filter is not None:
            update["category_filter"] = category_filter
        if bairro_filter is not None:
            update["bairro_filter"] = bairro_filter
        return self.model_copy(update=update)

    def sort_by(self, field: SortField) -> "ViewState":
        """Toggle direction on the current field, start a new field descending."""
        if field == self.sort_field:
            direction = (
                SortDirection.DESC
                if self.sort_direction == SortDirection.ASC
                else SortDirection.ASC
            )
            return self.model_copy(update={"sort_direction": direction})
        return self.model_copy(update={"sort_field": field, "sort_direction": SortDirection.DESC})

    def toggle_status(self, status: str) -> "ViewState":
        """Select a status card; selecting the active one clears the filter."""
        new_status = ALL if self.status_filter == status else status
        return self.model_copy(update={"status_filter": new_status})

    def with_view_mode(self, view_mode: ViewMode) -> "ViewState":
        return self.model_copy(update={"view_mode": view_mode})

    def open_menu(self, property_id: str) -> "ViewState":
        """Open a row's action menu, or close it if it is already open."""
        menu = None if self.active_menu == property_id else property_id
        return self.model_copy(update={"active_menu": menu})

    def toggle_status_menu(self) -> "ViewState":
        return self.model_copy(update={"status_menu_open": not self.status_menu_open})

    def close_menus(self) -> "ViewState":
        """Close every contextual menu (click outside)."""
        return self.model_copy(update={"active_menu": None, "status_menu_open": False})

    def reset(self) -> "ViewState":
        """Clear search and filters, keeping sort order and tab."""
        return self.model_copy(
            update={
                "search": "",
                "status_filter": ALL,
                "category_filter": ALL,
                "bairro_filter": "",
                "active_menu": None,
                "status_menu_open": False,
            }
        )

    def to_session(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_session(cls, data: dict[str, Any] | None) -> "ViewState":
        """Rebuild from a session dict, falling back to defaults on bad data."""
        if not data:
            return cls()
        try:
            return cls.model_validate(data)
        except ValueError:
            return cls()
