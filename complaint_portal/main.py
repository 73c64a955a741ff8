from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from complaint_portal.api.legacy import router as legacy_router
from complaint_portal.api.v1 import api_router
from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import register_exception_handlers
from complaint_portal.core.logging import get_logger, setup_logging
from complaint_portal.core.middleware import register_middlewares
from complaint_portal.db.init_db import init_db

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the complaint portal.

    - Configures title, version and debug mode from Settings.
    - Registers CORS, core middleware and exception handlers.
    - Mounts the legacy handlers under /api and the versioned API under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_V1_STR)
    app.include_router(legacy_router, prefix=settings.LEGACY_API_PREFIX)

    @app.on_event("startup")
    async def on_startup() -> None:
        # Production schemas are managed by migrations
        if not settings.is_production():
            init_db()
        logger.info(
            f"{settings.APP_NAME} started",
            extra={"environment": settings.ENVIRONMENT, "api_version": settings.API_VERSION},
        )

    return app


app = create_app()
