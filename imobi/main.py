"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from imobi.api.exception_handlers import register_exception_handlers
from imobi.api.routes import health, properties
from imobi.core.config import settings
from imobi.core.database import Base, engine
from imobi.core.logging import get_logger, setup_logging

# Import models for Base.metadata.create_all
from imobi.models import property  # noqa: F401
from imobi.services.dashboard import DashboardController
from imobi.services.store import PropertyStore
from imobi.services.store_factory import create_store
from imobi.web.routes import web_router

# Static files directory
BASE_DIR = Path(__file__).resolve().parent

logger = get_logger(__name__)


def create_app(store: PropertyStore | None = None) -> FastAPI:
    """Build the application, optionally around an existing store."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan manager."""
        setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
        app_store = store
        if app_store is None:
            # Startup: Create database tables
            Base.metadata.create_all(bind=engine)
            app_store = create_store(settings)

        controller = DashboardController(
            app_store,
            ZoneInfo(settings.TIMEZONE),
            export_prefix=settings.EXPORT_FILENAME_PREFIX,
        )
        controller.start()
        app.state.store = app_store
        app.state.controller = controller
        logger.info("Started with %s", type(app_store).__name__)
        yield
        # Shutdown: stop live updates
        controller.stop()
        app_store.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Rental property dashboard",
        lifespan=lifespan,
    )

    # Session middleware for flash messages and dashboard view state
    app.add_middleware(
        SessionMiddleware,  # type: ignore[arg-type]
        secret_key=settings.SECRET_KEY,
        session_cookie="imobi_session",
        max_age=86400 * 7,  # 7 days
        same_site="lax",
        https_only=not settings.DEBUG,
    )

    # Mount static files
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    register_exception_handlers(app)

    # Include API routers
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(properties.router, prefix="/api")

    # Include web routes (Jinja2 frontend)
    app.include_router(web_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "imobi.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
