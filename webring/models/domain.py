# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models: pure data structures, NO FastAPI dependency.

Records persist with camelCase keys (``contactEmail``, ``approvedAt``) and
are addressed with snake_case attributes in Python.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Serialize with the persisted key names, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Participant(_Record):
    """A member of the ring. Position in the document is ring order."""
    slug: str = Field(..., min_length=1)
    name: str
    url: str
    description: str = ""
    contact_email: str = Field("", alias="contactEmail")
    approved_at: str = Field(..., alias="approvedAt")


class Application(_Record):
    """A join request awaiting, or past, admin review."""
    id: str = Field(..., min_length=1)
    name: str
    url: str
    description: str = ""
    contact_email: str = Field("", alias="contactEmail")
    slug: str
    submitted_at: str = Field(..., alias="submittedAt")
    status: ApplicationStatus = ApplicationStatus.PENDING
    reviewed_at: Optional[str] = Field(None, alias="reviewedAt")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")


class ParticipantsDocument(BaseModel):
    """Shape of ``participants.json``."""
    participants: list[Participant]


class ApplicationsDocument(BaseModel):
    """Shape of ``applications.json``."""
    applications: list[Application]
