# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Ring navigation endpoints.
Thin HTTP layer, delegates ALL logic to WebringService.

The optional slug path segment and the Referer header identify the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from webring.core.dependencies import get_referrer, get_webring_service
from webring.services.webring_service import WebringService

router = APIRouter(prefix="/api", tags=["Ring"])


@router.get("/next")
@router.get("/next/{slug}")
def navigate_next(
    slug: Optional[str] = None,
    referrer: Optional[str] = Depends(get_referrer),
    service: WebringService = Depends(get_webring_service),
):
    """Redirect to the next site, or the first one if the caller is unknown."""
    target = service.resolve_next(slug=slug, referrer=referrer)
    return RedirectResponse(target.url, status_code=302)


@router.get("/prev")
@router.get("/prev/{slug}")
def navigate_previous(
    slug: Optional[str] = None,
    referrer: Optional[str] = Depends(get_referrer),
    service: WebringService = Depends(get_webring_service),
):
    """Redirect to the previous site, or the last one if the caller is unknown."""
    target = service.resolve_previous(slug=slug, referrer=referrer)
    return RedirectResponse(target.url, status_code=302)


@router.get("/random")
@router.get("/random/{slug}")
def navigate_random(
    slug: Optional[str] = None,
    referrer: Optional[str] = Depends(get_referrer),
    service: WebringService = Depends(get_webring_service),
):
    target = service.resolve_random(slug=slug, referrer=referrer)
    return RedirectResponse(target.url, status_code=302)


@router.get("/navigate")
@router.get("/navigate/{slug}")
def navigation_info(
    slug: Optional[str] = None,
    referrer: Optional[str] = Depends(get_referrer),
    service: WebringService = Depends(get_webring_service),
):
    """current / prev / next / random around the caller, as JSON."""
    info = service.resolve_snapshot(slug=slug, referrer=referrer)
    return {key: participant.to_document() for key, participant in info.items()}


@router.get("/stats")
def ring_stats(service: WebringService = Depends(get_webring_service)):
    stats = service.ring_stats()
    newest = stats["newestMember"]
    return {
        "totalMembers": stats["totalMembers"],
        "newestMember": newest.to_document() if newest else None,
    }
