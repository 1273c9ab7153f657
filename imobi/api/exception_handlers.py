"""Map store errors to HTTP responses for the JSON API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from imobi.core.exceptions import (
    EmptyExportError,
    NotFoundError,
    OperationRefusedError,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
)
from imobi.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[Exception], int]] = [
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (OperationRefusedError, 409),
    (EmptyExportError, 409),
    (StoreUnavailableError, 503),
    (StoreError, 502),
]


def status_for(exc: Exception) -> int:
    """HTTP status code for a store error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(EmptyExportError, store_error_handler)
