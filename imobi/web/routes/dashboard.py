"""Dashboard web routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from imobi.models.enums import (
    ALL,
    Category,
    FichaStatus,
    PropertyStatus,
    SortField,
    ViewMode,
)
from imobi.schemas.dashboard import ViewState
from imobi.services.dashboard import DashboardController
from imobi.services.listing import SORT_COLUMNS
from imobi.web.dependencies import (
    add_flash_message,
    flash_notices,
    get_controller,
    get_view_state,
    save_view_state,
)
from imobi.web.template_config import templates

router = APIRouter()

# Badge colours per status
STATUS_STYLES = {
    PropertyStatus.AVAILABLE: "status-available",
    PropertyStatus.IN_LEASING_PROCESS: "status-in-process",
    PropertyStatus.VACATING: "status-vacating",
    PropertyStatus.SUSPENDED: "status-suspended",
    PropertyStatus.LEASED: "status-leased",
}

FICHA_STYLES = {
    FichaStatus.NONE: "ficha-none",
    FichaStatus.HAS_FILE: "ficha-has-file",
    FichaStatus.IN_REVIEW: "ficha-in-review",
    FichaStatus.APPROVED: "ficha-approved",
}


def _redirect_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


def _update_view(request: Request, view: ViewState) -> RedirectResponse:
    save_view_state(request, view)
    return _redirect_home()


@router.get("/", response_class=HTMLResponse, response_model=None)
async def dashboard(
    request: Request,
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> HTMLResponse:
    """Display stats and the filtered, sorted property table."""
    return templates.TemplateResponse(
        request,
        "dashboard/index.html",
        {
            "view": view,
            "stats": controller.stats(),
            "properties": controller.visible(view),
            "has_properties": bool(controller.snapshot),
            "subscription_error": controller.subscription_error,
            "columns": SORT_COLUMNS,
            "statuses": list(PropertyStatus),
            "fichas": list(FichaStatus),
            "categories": [ALL] + [c.value for c in Category],
            "status_styles": STATUS_STYLES,
            "ficha_styles": FICHA_STYLES,
            "all_filter": ALL,
        },
    )


@router.post("/dashboard/filters", response_model=None)
async def apply_filters(
    request: Request,
    search: str = Form(""),
    bairro: str = Form(""),
    category: str = Form(ALL),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Apply search text, neighbourhood and category filters."""
    view = view.with_search(search).with_filters(category_filter=category, bairro_filter=bairro)
    return _update_view(request, view)


@router.get("/dashboard/status", response_model=None)
async def toggle_status_filter(
    request: Request,
    value: PropertyStatus | None = None,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Select a status card; selecting the active card shows all statuses."""
    if value is None:
        view = view.with_filters(status_filter=ALL)
    else:
        view = view.toggle_status(value.value)
    return _update_view(request, view.close_menus())


@router.get("/dashboard/sort/{field}", response_model=None)
async def sort_by(
    request: Request,
    field: SortField,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Sort by a column, toggling direction when it is already the sort column."""
    return _update_view(request, view.sort_by(field))


@router.get("/dashboard/reset", response_model=None)
async def reset_filters(
    request: Request,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Clear search and all filters."""
    return _update_view(request, view.reset())


@router.get("/dashboard/view/{mode}", response_model=None)
async def switch_view_mode(
    request: Request,
    mode: ViewMode,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Switch between the property list and the financial overview."""
    return _update_view(request, view.with_view_mode(mode))


@router.get("/dashboard/menu/{property_id}", response_model=None)
async def toggle_action_menu(
    request: Request,
    property_id: str,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Open (or close) a row's action menu."""
    return _update_view(request, view.open_menu(property_id))


@router.get("/dashboard/status-menu", response_model=None)
async def toggle_status_menu(
    request: Request,
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    return _update_view(request, view.toggle_status_menu())


@router.post("/dashboard/menus/close", status_code=204, response_model=None)
async def close_menus(
    request: Request,
    view: ViewState = Depends(get_view_state),
) -> Response:
    """Close every open menu; posted by the page-wide click listener."""
    save_view_state(request, view.close_menus())
    return Response(status_code=204)


@router.post("/dashboard/properties/{property_id}/status", response_model=None)
async def quick_status_change(
    request: Request,
    property_id: str,
    status: PropertyStatus = Form(...),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Change a property's status from its action menu."""
    result = await controller.change_status(view, property_id, status)
    flash_notices(request, result.notices)
    return _update_view(request, result.view)


@router.post("/dashboard/properties/{property_id}/ficha", response_model=None)
async def quick_ficha_change(
    request: Request,
    property_id: str,
    ficha_status: FichaStatus = Form(...),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Change a property's application status from its action menu."""
    result = await controller.change_ficha(view, property_id, ficha_status)
    flash_notices(request, result.notices)
    return _update_view(request, result.view)


@router.get("/dashboard/export", response_model=None)
async def export_csv(
    request: Request,
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> Response:
    """Download the rows currently visible on the dashboard."""
    result = controller.export(view, datetime.now(controller.tz).date())
    if result.file is None:
        flash_notices(request, result.notices)
        return _redirect_home()
    return Response(
        content=result.file.content,
        media_type=result.file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.file.filename}"'},
    )


@router.get("/dashboard/refresh", response_model=None)
async def refresh(
    request: Request,
    controller: DashboardController = Depends(get_controller),
) -> RedirectResponse:
    """Re-subscribe after a terminal subscription error."""
    if controller.subscription_error is not None:
        controller.subscription_error = None
        controller.start()
        add_flash_message(request, "Reconectando ao banco de dados...", "info")
    return _redirect_home()
