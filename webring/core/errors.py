# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Typed error conditions raised by stores, repository and services.
The HTTP layer maps each kind to a status code; nothing below it retries.
"""


class WebringError(Exception):
    """Base class for every condition surfaced to callers."""

    kind: str = "webring_error"
    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(WebringError):
    kind = "not_found"
    status_code = 404


class Conflict(WebringError):
    """Duplicate pending application, or a stale-revision write collision."""

    kind = "conflict"
    status_code = 409


class EmptyRing(WebringError):
    kind = "empty_ring"
    status_code = 404


class Unresolved(WebringError):
    """The caller's position in the ring could not be determined."""

    kind = "unresolved"
    status_code = 404


class InvalidTransition(WebringError):
    """Application status change from a non-pending state."""

    kind = "invalid_transition"
    status_code = 400


class StoreUnavailable(WebringError):
    """Backing store failed for a reason other than a missing document."""

    kind = "store_unavailable"
    status_code = 503


class Misconfigured(WebringError):
    kind = "misconfigured"
    status_code = 500
