"""Health check route."""

from fastapi import APIRouter

from imobi.core.config import settings

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Report service liveness."""
    return {"status": "healthy", "service": "imobi", "version": settings.VERSION}
