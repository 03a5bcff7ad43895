# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Public application endpoints, submit and status check.
Thin HTTP layer, delegates ALL logic to WebringService.
"""

from fastapi import APIRouter, Depends

from webring.core.dependencies import get_webring_service
from webring.schemas.webring import ApplicationCreateRequest
from webring.services.webring_service import WebringService

router = APIRouter(prefix="/api/applications", tags=["Applications"])


@router.post("", status_code=201)
def submit_application(
    payload: ApplicationCreateRequest,
    service: WebringService = Depends(get_webring_service),
):
    """Ask to join the ring. 409 if the site is a member or already pending."""
    application = service.submit_application(
        name=payload.name,
        url=payload.url,
        description=payload.description,
        contact_email=payload.contact_email,
    )
    return {
        "message": "Application submitted successfully",
        "application": {
            "id": application.id,
            "name": application.name,
            "status": application.status.value,
        },
    }


@router.get("/{application_id}")
def get_application_status(
    application_id: str,
    service: WebringService = Depends(get_webring_service),
):
    """Public status view, without contact details."""
    application = service.get_application(application_id)
    return {
        "id": application.id,
        "name": application.name,
        "status": application.status.value,
        "submittedAt": application.submitted_at,
    }
