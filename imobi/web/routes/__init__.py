"""Web routes package."""

from fastapi import APIRouter

from imobi.web.routes import dashboard, properties

web_router = APIRouter()

web_router.include_router(dashboard.router, tags=["web-dashboard"])
web_router.include_router(properties.router, prefix="/properties", tags=["web-properties"])
