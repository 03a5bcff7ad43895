# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection.
Services are built once per app by ``create_app`` and kept on ``app.state``;
these functions hand them to the controllers.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from webring.repositories.document_repository import DocumentRepository
from webring.services.auth_service import AuthService
from webring.services.webring_service import WebringService

_bearer = HTTPBearer(auto_error=False)


def get_webring_service(request: Request) -> WebringService:
    return request.app.state.webring_service


def get_repository(request: Request) -> DocumentRepository:
    return request.app.state.repository


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_referrer(request: Request) -> Optional[str]:
    return request.headers.get("Referer") or request.headers.get("Referrer")


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    auth: AuthService = Depends(get_auth_service),
) -> None:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Authorization header required")
    if not auth.validate_token(credentials.credentials):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
