# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request schemas: API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _check_url(v: str) -> str:
    parts = urlsplit(v)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValueError("Valid URL is required (http:// or https://)")
    return v


def _check_email(v: str) -> str:
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Valid email address is required")
    return v


class _Request(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


# ── Application Schemas ──

class ApplicationCreateRequest(_Request):
    name: str = Field(..., min_length=2, max_length=200)
    url: str = Field(..., max_length=2000)
    description: str = Field(..., min_length=10, max_length=2000)
    contact_email: str = Field(..., alias="contactEmail", max_length=320)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class RejectRequest(_Request):
    reason: Optional[str] = Field(default=None, max_length=2000)


# ── Participant Schemas ──

class ParticipantUpdateRequest(_Request):
    """Partial update model for PUT /api/admin/participants/{slug}."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    url: Optional[str] = Field(default=None, max_length=2000)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    contact_email: Optional[str] = Field(default=None, alias="contactEmail", max_length=320)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v) if v is not None else v

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v is not None else v


# ── Auth Schemas ──

class LoginRequest(_Request):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
