# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Authentication service: admin credential check and expiring bearer tokens."""
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from webring.core.errors import Misconfigured
from webring.core.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        username: str,
        password: str,
        token_ttl_hours: int = 24,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._username = username
        self._password = password
        self._ttl = timedelta(hours=token_ttl_hours)
        self._now = now
        self._tokens: Dict[str, datetime] = {}

    def login(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Return a token payload, or None when the credentials are wrong."""
        if not self._username or not self._password:
            raise Misconfigured("Admin credentials not configured")
        user_ok = hmac.compare_digest(username.encode(), self._username.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (user_ok and password_ok):
            logger.warning("Failed admin login for username=%s", username)
            return None

        self._purge_expired()
        token = secrets.token_urlsafe(32)
        expires_at = self._now() + self._ttl
        self._tokens[token] = expires_at
        logger.info("Admin login: username=%s", username)
        return {"token": token, "expires_at": expires_at.isoformat()}

    def validate_token(self, token: str) -> bool:
        expires_at = self._tokens.get(token)
        if expires_at is None:
            return False
        if expires_at <= self._now():
            self._tokens.pop(token, None)
            return False
        return True

    def _purge_expired(self) -> None:
        now = self._now()
        for token in [t for t, exp in self._tokens.items() if exp <= now]:
            del self._tokens[token]
