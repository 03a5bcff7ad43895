# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Webring directory operations.
Applications, admissions, participant management and ring navigation on top
of the cached document repository.
"""

import random
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence
from urllib.parse import urlsplit

from webring.core.errors import Conflict, InvalidTransition, NotFound
from webring.core.logging import get_logger
from webring.metrics.prometheus import (
    APPLICATIONS_REVIEWED,
    APPLICATIONS_SUBMITTED,
    NAVIGATIONS,
    RING_MEMBERS,
)
from webring.models.domain import Application, ApplicationStatus, Participant
from webring.repositories.document_repository import DocumentRepository
from webring.services import ring

logger = get_logger(__name__)

SLUG_MAX_LENGTH = 50
EDITABLE_PARTICIPANT_FIELDS = ("name", "url", "description", "contact_email")


def generate_slug(name: str) -> str:
    """URL-safe candidate slug derived from a site name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or "site"


def unique_slug(candidate: str, participants: Sequence[Participant]) -> str:
    """Suffix ``-1``, ``-2``, ... until the slug is not taken."""
    taken = {p.slug for p in participants}
    slug = candidate
    counter = 1
    while slug in taken:
        slug = f"{candidate}-{counter}"
        counter += 1
    return slug


def normalize_site_url(url: str) -> str:
    """Key for duplicate detection: hostname and lowercase path, no trailing slash.

    Credentials and port are not part of the key.
    """
    parts = urlsplit(url.strip())
    normalized = (parts.hostname or "") + parts.path.lower().rstrip("/")
    if parts.query:
        normalized += "?" + parts.query
    return normalized


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WebringService:
    """Business logic for the webring directory."""

    def __init__(
        self,
        repository: DocumentRepository,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._rng = rng or random.Random()
        self._now = now

    @property
    def repository(self) -> DocumentRepository:
        return self._repo

    def _timestamp(self) -> str:
        return self._now().isoformat()

    # ── Participants ──

    def list_participants(self) -> list[Participant]:
        participants = self._repo.get_participants()
        RING_MEMBERS.set(len(participants))
        return participants

    def get_participant(self, slug: str) -> Participant:
        for participant in self._repo.get_participants():
            if participant.slug == slug:
                return participant
        raise NotFound(f"Participant '{slug}' not found")

    def update_participant(self, slug: str, fields: dict[str, Any]) -> Participant:
        """Apply the non-empty editable fields; the slug itself never changes."""
        changes: dict[str, Any] = {}
        for key in EDITABLE_PARTICIPANT_FIELDS:
            value = fields.get(key)
            if value:
                changes[key] = value.strip()
        if "contact_email" in changes:
            changes["contact_email"] = changes["contact_email"].lower()
        participant = self._repo.update_participant(slug, **changes)
        logger.info("Participant updated: slug=%s, fields=%s", slug, sorted(changes))
        return participant

    def delete_participant(self, slug: str) -> Participant:
        removed = self._repo.remove_participant(slug)
        RING_MEMBERS.set(len(self._repo.get_participants()))
        logger.info("Participant removed: slug=%s", slug)
        return removed

    # ── Applications ──

    def list_applications(self, status: Optional[str] = None) -> list[Application]:
        applications = self._repo.get_applications()
        if status:
            applications = [a for a in applications if a.status == status]
        return applications

    def get_application(self, application_id: str) -> Application:
        for application in self._repo.get_applications():
            if application.id == application_id:
                return application
        raise NotFound(f"Application '{application_id}' not found")

    def submit_application(
        self, name: str, url: str, description: str, contact_email: str
    ) -> Application:
        """
        Record a pending application.
        Raises Conflict if the site is already a member or already pending.
        """
        name, url, description = name.strip(), url.strip(), description.strip()
        key = normalize_site_url(url)

        if any(normalize_site_url(p.url) == key for p in self._repo.get_participants()):
            raise Conflict("This site is already a member of the webring")
        if any(
            a.status == ApplicationStatus.PENDING and normalize_site_url(a.url) == key
            for a in self._repo.get_applications()
        ):
            raise Conflict("An application for this site is already pending")

        application = Application(
            id=str(uuid.uuid4()),
            name=name,
            url=url,
            description=description,
            contact_email=contact_email.strip().lower(),
            slug=generate_slug(name),
            submitted_at=self._timestamp(),
            status=ApplicationStatus.PENDING,
        )
        self._repo.add_application(application)
        APPLICATIONS_SUBMITTED.inc()
        logger.info("Application submitted: id=%s, url=%s", application.id, url)
        return application

    def approve_application(self, application_id: str) -> Participant:
        """Admit a pending application as the newest member of the ring."""
        application = self._pending(application_id)

        participants = self._repo.get_participants()
        now = self._timestamp()
        key = normalize_site_url(application.url)
        participant = next(
            (p for p in participants if normalize_site_url(p.url) == key), None
        )
        if participant is None:
            participant = Participant(
                slug=unique_slug(application.slug, participants),
                name=application.name,
                url=application.url,
                description=application.description,
                contact_email=application.contact_email,
                approved_at=now,
            )
            self._repo.add_participant(participant)
            participants.append(participant)
        else:
            # Site already admitted; only the status is still outstanding.
            logger.warning(
                "Application %s matches existing member %s, marking approved",
                application_id, participant.slug,
            )
        self._repo.update_application(
            application_id, status=ApplicationStatus.APPROVED, reviewed_at=now
        )
        APPLICATIONS_REVIEWED.labels(outcome="approved").inc()
        RING_MEMBERS.set(len(participants))
        logger.info(
            "Application approved: id=%s, slug=%s", application_id, participant.slug
        )
        return participant

    def reject_application(
        self, application_id: str, reason: Optional[str] = None
    ) -> Application:
        self._pending(application_id)
        changes: dict[str, Any] = {
            "status": ApplicationStatus.REJECTED,
            "reviewed_at": self._timestamp(),
        }
        if reason and reason.strip():
            changes["rejection_reason"] = reason.strip()
        application = self._repo.update_application(application_id, **changes)
        APPLICATIONS_REVIEWED.labels(outcome="rejected").inc()
        logger.info("Application rejected: id=%s", application_id)
        return application

    def delete_application(self, application_id: str) -> Application:
        removed = self._repo.remove_application(application_id)
        logger.info("Application deleted: id=%s", application_id)
        return removed

    def _pending(self, application_id: str) -> Application:
        application = self.get_application(application_id)
        if application.status != ApplicationStatus.PENDING:
            raise InvalidTransition("Application is not pending")
        return application

    # ── Navigation ──

    def resolve_next(
        self, slug: Optional[str] = None, referrer: Optional[str] = None
    ) -> Participant:
        participants, position = self._locate("next", slug, referrer)
        return ring.next_participant(participants, position)

    def resolve_previous(
        self, slug: Optional[str] = None, referrer: Optional[str] = None
    ) -> Participant:
        participants, position = self._locate("prev", slug, referrer)
        return ring.previous_participant(participants, position)

    def resolve_random(
        self, slug: Optional[str] = None, referrer: Optional[str] = None
    ) -> Participant:
        participants, position = self._locate("random", slug, referrer)
        return ring.random_participant(participants, position, self._rng)

    def resolve_snapshot(
        self, slug: Optional[str] = None, referrer: Optional[str] = None
    ) -> dict[str, Participant]:
        participants, position = self._locate("navigate", slug, referrer)
        return ring.snapshot(participants, position, self._rng)

    def ring_stats(self) -> dict[str, Any]:
        participants = self._repo.get_participants()
        RING_MEMBERS.set(len(participants))
        return ring.stats(participants)

    def invalidate_cache(self) -> None:
        self._repo.invalidate()
        logger.info("Document cache invalidated")

    def _locate(
        self, direction: str, slug: Optional[str], referrer: Optional[str]
    ) -> tuple[list[Participant], Optional[int]]:
        participants = self._repo.get_participants()
        position = ring.resolve_position(participants, slug=slug, referrer=referrer)
        NAVIGATIONS.labels(
            direction=direction, resolved=str(position is not None).lower()
        ).inc()
        if position is None and participants:
            logger.debug(
                "Unresolved position for %s: slug=%s, referrer=%s",
                direction, slug, referrer,
            )
        return participants, position
