"""Property API routes."""

import asyncio
import json
from collections.abc import AsyncIterator
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from pydantic import BaseModel

from imobi.core.exceptions import StoreError
from imobi.models.enums import ALL, SortDirection, SortField
from imobi.schemas.dashboard import DashboardStats, ViewState
from imobi.schemas.property import Property, PropertyCreate, PropertyUpdate
from imobi.services.dashboard import CLEAR_ALL_PHRASE, RESTORE_PHRASE, DashboardController
from imobi.services.export import build_export
from imobi.services.listing import apply_view
from imobi.services.stats import compute_stats
from imobi.services.store import PropertyStore, Unsubscribe
from imobi.web.dependencies import get_controller, get_store

router = APIRouter(prefix="/properties", tags=["properties"])

# Seconds between client-disconnect checks on an idle event stream
DISCONNECT_CHECK_SECONDS = 1.0


class PropertyCreated(BaseModel):
    """Id assigned to a new property."""

    id: str


class Confirmation(BaseModel):
    """Typed confirmation phrase for bulk destructive operations."""

    confirmation: str


def _view_from_query(
    search: str = "",
    status: str = ALL,
    category: str = ALL,
    bairro: str = "",
    sort: SortField = SortField.DATA_ATUALIZACAO,
    direction: SortDirection = SortDirection.DESC,
) -> ViewState:
    return ViewState(
        search=search,
        status_filter=status,
        category_filter=category,
        bairro_filter=bairro,
        sort_field=sort,
        sort_direction=direction,
    )


@router.get("", response_model=list[Property])
async def list_properties(
    view: ViewState = Depends(_view_from_query),
    store: PropertyStore = Depends(get_store),
) -> list[Property]:
    """List properties, filtered and sorted (newest first by default)."""
    return apply_view(await store.list_properties(), view)


@router.post("", response_model=PropertyCreated, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    store: PropertyStore = Depends(get_store),
) -> PropertyCreated:
    """Add a property; the store assigns id and last-update timestamp."""
    property_id = await store.add(property_data)
    return PropertyCreated(id=property_id)


@router.get("/stats", response_model=DashboardStats)
async def property_stats(store: PropertyStore = Depends(get_store)) -> DashboardStats:
    """Counts per category and status plus revenue figures."""
    return compute_stats(await store.list_properties())


@router.get("/export")
async def export_properties(
    view: ViewState = Depends(_view_from_query),
    store: PropertyStore = Depends(get_store),
    controller: DashboardController = Depends(get_controller),
) -> Response:
    """Download the filtered view as a semicolon-separated file."""
    rows = apply_view(await store.list_properties(), view)
    export = build_export(
        rows, datetime.now(controller.tz).date(), controller.tz, controller.export_prefix
    )
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


async def snapshot_events(
    request: Request,
    queue: asyncio.Queue[list[Property] | StoreError],
    unsubscribe: Unsubscribe,
    check_interval: float = DISCONNECT_CHECK_SECONDS,
) -> AsyncIterator[str]:
    """Format queued snapshots as server-sent events.

    The client connection is checked every ``check_interval`` seconds even
    when nothing is queued, so a departed client releases its subscription
    without waiting for the next write.
    """
    try:
        while not await request.is_disconnected():
            try:
                item = await asyncio.wait_for(queue.get(), timeout=check_interval)
            except TimeoutError:
                continue
            if isinstance(item, StoreError):
                payload = {"error": type(item).__name__, "detail": str(item)}
                yield f"event: error\ndata: {json.dumps(payload)}\n\n"
                break
            data = json.dumps([p.model_dump(mode="json") for p in item])
            yield f"event: snapshot\ndata: {data}\n\n"
    finally:
        unsubscribe()


@router.get("/stream")
async def stream_properties(
    request: Request,
    store: PropertyStore = Depends(get_store),
) -> StreamingResponse:
    """Server-sent events: one full snapshot per change, until the client leaves."""
    queue: asyncio.Queue[list[Property] | StoreError] = asyncio.Queue()
    unsubscribe = store.subscribe(queue.put_nowait, queue.put_nowait)
    return StreamingResponse(
        snapshot_events(request, queue, unsubscribe), media_type="text/event-stream"
    )


@router.post("/clear", status_code=204)
async def clear_properties(
    body: Confirmation,
    store: PropertyStore = Depends(get_store),
) -> None:
    """Remove every property. Requires the exact confirmation phrase."""
    if body.confirmation.strip() != CLEAR_ALL_PHRASE:
        raise HTTPException(status_code=400, detail=f"Confirm with '{CLEAR_ALL_PHRASE}'")
    await store.clear_all()


@router.post("/restore", status_code=204)
async def restore_properties(
    body: Confirmation,
    store: PropertyStore = Depends(get_store),
) -> None:
    """Replace the collection with the default set (demo backend only)."""
    if body.confirmation.strip() != RESTORE_PHRASE:
        raise HTTPException(status_code=400, detail=f"Confirm with '{RESTORE_PHRASE}'")
    await store.restore_defaults()


@router.patch("/{property_id}", status_code=204)
async def update_property(
    property_id: str,
    property_data: PropertyUpdate,
    store: PropertyStore = Depends(get_store),
) -> None:
    """Merge the given fields into a property."""
    await store.update(property_id, property_data)


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: str,
    store: PropertyStore = Depends(get_store),
) -> None:
    """Delete a property."""
    await store.delete(property_id)
