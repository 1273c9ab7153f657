"""Properties CRUD web routes."""

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from imobi.models.enums import FichaStatus, PropertyStatus, PropertyType
from imobi.schemas.dashboard import ViewState
from imobi.schemas.property import Property, PropertyForm
from imobi.services.dashboard import (
    CLEAR_ALL_PHRASE,
    CONFIRM_CLEAR_PROMPT,
    CONFIRM_DELETE_PROMPT,
    CONFIRM_RESTORE_PROMPT,
    RESTORE_PHRASE,
    DashboardController,
)
from imobi.services.store import PropertyStore
from imobi.web.dependencies import (
    flash_notices,
    get_controller,
    get_store,
    get_view_state,
    save_view_state,
)
from imobi.web.template_config import templates

router = APIRouter()


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Map a validation error to ``{field: message}`` for inline display."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__all__"
        errors.setdefault(field, error["msg"].removeprefix("Value error, "))
    return errors


def _form_values(prop: Property) -> dict:
    values = prop.model_dump(mode="json")
    for key in ("locador", "observacao", "corretor"):
        values[key] = values[key] or ""
    values["ficha_status"] = values["ficha_status"] or FichaStatus.NONE.value
    return values


def _render_form(
    request: Request,
    values: dict,
    errors: dict[str, str] | None = None,
    property_id: str | None = None,
    ficha_updated_at: int | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "properties/form.html",
        {
            "values": values,
            "errors": errors or {},
            "property_id": property_id,
            "ficha_updated_at": ficha_updated_at,
            "types": list(PropertyType),
            "statuses": list(PropertyStatus),
            "fichas": list(FichaStatus),
        },
        status_code=status_code,
    )


async def _get_property(store: PropertyStore, property_id: str) -> Property:
    for prop in await store.list_properties():
        if prop.id == property_id:
            return prop
    raise HTTPException(status_code=404, detail="Property not found")


async def _submit(
    request: Request,
    controller: DashboardController,
    view: ViewState,
    property_id: str | None = None,
    ficha_updated_at: int | None = None,
) -> HTMLResponse | RedirectResponse:
    values = dict(await request.form())
    try:
        form = PropertyForm.model_validate(values)
    except ValidationError as exc:
        return _render_form(
            request, values, form_errors(exc), property_id, ficha_updated_at, status_code=400
        )

    result = await controller.save(view, form, property_id)
    flash_notices(request, result.notices)
    if not result.ok:
        return _render_form(request, values, None, property_id, ficha_updated_at)
    return RedirectResponse("/", status_code=303)


@router.get("/new", response_class=HTMLResponse, response_model=None)
async def create_property_page(request: Request) -> HTMLResponse:
    """Display create property form."""
    defaults = {
        "tipo": PropertyType.APARTMENT.value,
        "status": PropertyStatus.AVAILABLE.value,
        "ficha_status": FichaStatus.NONE.value,
    }
    return _render_form(request, defaults)


@router.post("/new", response_class=HTMLResponse, response_model=None)
async def create_property_submit(
    request: Request,
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> HTMLResponse | RedirectResponse:
    """Process create property form."""
    return await _submit(request, controller, view)


@router.get("/clear", response_class=HTMLResponse, response_model=None)
async def clear_all_page(request: Request) -> HTMLResponse:
    """Ask for the typed confirmation before removing every property."""
    return templates.TemplateResponse(
        request,
        "properties/confirm.html",
        {
            "title": "Limpar tudo",
            "prompt": CONFIRM_CLEAR_PROMPT,
            "action": "/properties/clear",
            "phrase": CLEAR_ALL_PHRASE,
        },
    )


@router.post("/clear", response_model=None)
async def clear_all_submit(
    request: Request,
    confirmation: str = Form(""),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Remove every property."""
    result = await controller.clear_all(view, confirmation)
    flash_notices(request, result.notices)
    save_view_state(request, result.view)
    if not result.ok and confirmation.strip() != CLEAR_ALL_PHRASE:
        return RedirectResponse("/properties/clear", status_code=303)
    return RedirectResponse("/", status_code=303)


@router.get("/restore", response_class=HTMLResponse, response_model=None)
async def restore_defaults_page(request: Request) -> HTMLResponse:
    """Ask for the typed confirmation before restoring the default set."""
    return templates.TemplateResponse(
        request,
        "properties/confirm.html",
        {
            "title": "Restaurar padrão",
            "prompt": CONFIRM_RESTORE_PROMPT,
            "action": "/properties/restore",
            "phrase": RESTORE_PHRASE,
        },
    )


@router.post("/restore", response_model=None)
async def restore_defaults_submit(
    request: Request,
    confirmation: str = Form(""),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Replace the collection with the default set."""
    result = await controller.restore_defaults(view, confirmation)
    flash_notices(request, result.notices)
    save_view_state(request, result.view)
    if not result.ok and confirmation.strip() != RESTORE_PHRASE:
        return RedirectResponse("/properties/restore", status_code=303)
    return RedirectResponse("/", status_code=303)


@router.get("/{property_id}/edit", response_class=HTMLResponse, response_model=None)
async def edit_property_page(
    request: Request,
    property_id: str,
    store: PropertyStore = Depends(get_store),
) -> HTMLResponse:
    """Display edit property form."""
    prop = await _get_property(store, property_id)
    return _render_form(
        request, _form_values(prop), property_id=property_id,
        ficha_updated_at=prop.ficha_data_atualizacao,
    )


@router.post("/{property_id}/edit", response_class=HTMLResponse, response_model=None)
async def edit_property_submit(
    request: Request,
    property_id: str,
    store: PropertyStore = Depends(get_store),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> HTMLResponse | RedirectResponse:
    """Process edit property form."""
    prop = await _get_property(store, property_id)
    return await _submit(request, controller, view, property_id, prop.ficha_data_atualizacao)


@router.get("/{property_id}/delete", response_class=HTMLResponse, response_model=None)
async def delete_property_page(
    request: Request,
    property_id: str,
    store: PropertyStore = Depends(get_store),
) -> HTMLResponse:
    """Ask for confirmation before deleting a property."""
    prop = await _get_property(store, property_id)
    return templates.TemplateResponse(
        request,
        "properties/confirm.html",
        {
            "title": f"Excluir {prop.codigo}",
            "prompt": CONFIRM_DELETE_PROMPT,
            "action": f"/properties/{property_id}/delete",
            "phrase": None,
        },
    )


@router.post("/{property_id}/delete", response_model=None)
async def delete_property(
    request: Request,
    property_id: str,
    confirm: str = Form(""),
    controller: DashboardController = Depends(get_controller),
    view: ViewState = Depends(get_view_state),
) -> RedirectResponse:
    """Delete a property once confirmed."""
    result = await controller.delete(view, property_id, confirmed=confirm == "yes")
    flash_notices(request, result.notices)
    save_view_state(request, result.view)
    return RedirectResponse("/", status_code=303)
