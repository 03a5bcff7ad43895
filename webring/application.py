# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Application factory.

Builds store -> repository -> services explicitly for each app instance and
keeps them on ``app.state``; controllers receive them through
``webring.core.dependencies``.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webring.controllers import (
    admin_controller,
    application_controller,
    participant_controller,
    ring_controller,
    system_controller,
)
from webring.core.config import Settings, settings as default_settings
from webring.core.errors import WebringError
from webring.core.logging import get_logger
from webring.middleware import MetricsMiddleware, RequestIDMiddleware
from webring.repositories.document_repository import DocumentRepository
from webring.services.auth_service import AuthService
from webring.services.webring_service import WebringService
from webring.stores import DocumentStore, build_store

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    repository: Optional[DocumentRepository] = None,
    service: Optional[WebringService] = None,
) -> FastAPI:
    """Wire a FastAPI app. Raises Misconfigured if the store cannot be built."""
    settings = settings or default_settings
    if repository is None:
        repository = DocumentRepository(
            store or build_store(settings),
            freshness_seconds=settings.CACHE_TTL_SECONDS,
        )
    service = service or WebringService(repository)
    auth_service = AuthService(
        settings.ADMIN_USERNAME,
        settings.ADMIN_PASSWORD,
        token_ttl_hours=settings.ADMIN_TOKEN_TTL_HOURS,
    )

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        logger.info(
            "Webring API starting with %s data storage", repository.store.name
        )
        yield
        close = getattr(repository.store, "close", None)
        if close is not None:
            close()
        logger.info("Webring API stopped")

    app = FastAPI(
        title="Webring Service",
        version=settings.SERVICE_VERSION,
        description="Webring directory: ring navigation, applications, admin review.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.webring_service = service
    app.state.auth_service = auth_service

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WebringError)
    async def webring_error_handler(request: Request, exc: WebringError):
        req_id = getattr(request.state, "request_id", None)
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.kind, exc.message, extra={"request_id": req_id})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind, "detail": exc.message, "request_id": req_id},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled exception", extra={"request_id": req_id})
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
        )

    app.include_router(system_controller.router)
    app.include_router(ring_controller.router)
    app.include_router(participant_controller.router)
    app.include_router(application_controller.router)
    app.include_router(admin_controller.router)
    return app
