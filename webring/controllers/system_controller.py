# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints, health, readiness, metrics.
Pure HTTP layer, no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from webring.core.config import settings
from webring.core.dependencies import get_repository
from webring.core.errors import StoreUnavailable
from webring.core.logging import get_logger
from webring.repositories.document_repository import DocumentRepository

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.get("/health")
@router.get("/api/health")
def health_check(repo: DocumentRepository = Depends(get_repository)):
    """Liveness probe."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "storage": repo.store.name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
def readiness_check(repo: DocumentRepository = Depends(get_repository)):
    """Readiness probe: the participants document can be loaded."""
    try:
        members = len(repo.get_participants())
    except StoreUnavailable as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "service": settings.SERVICE_NAME, "detail": str(exc)},
        )
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "members": members,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
