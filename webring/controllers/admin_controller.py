# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Admin endpoints, login, application review, participant management.
Everything except login requires a bearer token from /api/admin/login.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from webring.core.dependencies import (
    get_auth_service,
    get_webring_service,
    require_admin,
)
from webring.schemas.webring import LoginRequest, ParticipantUpdateRequest, RejectRequest
from webring.services.auth_service import AuthService
from webring.services.webring_service import WebringService

router = APIRouter(prefix="/api/admin", tags=["Admin"])
protected = [Depends(require_admin)]


@router.post("/login")
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(payload.username, payload.password)
    if result is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return result


# ── Applications ──

@router.get("/applications", dependencies=protected)
def list_applications(
    status: Optional[str] = Query(default=None, pattern="^(pending|approved|rejected)$"),
    service: WebringService = Depends(get_webring_service),
):
    return [a.to_document() for a in service.list_applications(status=status)]


@router.post("/applications/{application_id}/approve", dependencies=protected)
def approve_application(
    application_id: str,
    service: WebringService = Depends(get_webring_service),
):
    participant = service.approve_application(application_id)
    return {"message": "Application approved", "participant": participant.to_document()}


@router.post("/applications/{application_id}/reject", dependencies=protected)
def reject_application(
    application_id: str,
    payload: Optional[RejectRequest] = None,
    service: WebringService = Depends(get_webring_service),
):
    service.reject_application(application_id, reason=payload.reason if payload else None)
    return {"message": "Application rejected", "applicationId": application_id}


@router.delete("/applications/{application_id}", dependencies=protected)
def delete_application(
    application_id: str,
    service: WebringService = Depends(get_webring_service),
):
    service.delete_application(application_id)
    return {"message": "Application deleted"}


# ── Participants ──

@router.get("/participants", dependencies=protected)
def list_participants(service: WebringService = Depends(get_webring_service)):
    return [p.to_document() for p in service.list_participants()]


@router.put("/participants/{slug}", dependencies=protected)
def update_participant(
    slug: str,
    payload: ParticipantUpdateRequest,
    service: WebringService = Depends(get_webring_service),
):
    participant = service.update_participant(slug, payload.model_dump(exclude_none=True))
    return {"message": "Participant updated", "participant": participant.to_document()}


@router.delete("/participants/{slug}", dependencies=protected)
def delete_participant(
    slug: str,
    service: WebringService = Depends(get_webring_service),
):
    service.delete_participant(slug)
    return {"message": "Participant removed"}


# ── Cache ──

@router.post("/cache/invalidate", dependencies=protected)
def invalidate_cache(service: WebringService = Depends(get_webring_service)):
    service.invalidate_cache()
    return {"message": "Cache invalidated"}
