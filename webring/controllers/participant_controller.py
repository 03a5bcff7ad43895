# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Public participant directory.
"""

from fastapi import APIRouter, Depends

from webring.core.dependencies import get_webring_service
from webring.services.webring_service import WebringService

router = APIRouter(prefix="/api/participants", tags=["Participants"])


@router.get("")
def list_participants(service: WebringService = Depends(get_webring_service)):
    """All members, in ring order."""
    return [p.to_document() for p in service.list_participants()]


@router.get("/{slug}")
def get_participant(
    slug: str,
    service: WebringService = Depends(get_webring_service),
):
    return service.get_participant(slug).to_document()
