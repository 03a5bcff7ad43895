# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Participants and Applications documents behind a time-boxed cache.

Reads go through the cache while it is fresh and fall back to the store.
Writes always go through to the store and replace the cached list without
touching its freshness clock. Compound mutations are read-modify-write over
the whole document and are NOT atomic with respect to each other: two
concurrent writers race, and only a store that checks revisions (GitHub)
turns the loser into a ``Conflict``.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from webring.core.errors import Conflict, NotFound, StoreUnavailable
from webring.core.logging import get_logger
from webring.metrics.prometheus import CACHE_LOOKUPS
from webring.models.domain import (
    Application,
    ApplicationsDocument,
    Participant,
    ParticipantsDocument,
)
from webring.stores.base import DocumentStore

logger = get_logger(__name__)

PARTICIPANTS_DOCUMENT = "participants.json"
APPLICATIONS_DOCUMENT = "applications.json"
DEFAULT_FRESHNESS_SECONDS = 60.0


@dataclass
class CacheEntry:
    """Cached copy of one collection. ``fetched_at`` None means stale."""
    value: list[Any]
    revision: Optional[str] = None
    fetched_at: Optional[float] = None


def is_fresh(entry: Optional[CacheEntry], now: float, freshness_seconds: float) -> bool:
    """True when the entry was fetched less than ``freshness_seconds`` ago."""
    if entry is None or entry.fetched_at is None:
        return False
    return now - entry.fetched_at < freshness_seconds


@dataclass(frozen=True)
class _Collection:
    document: str
    key: str
    schema: type[BaseModel]


_PARTICIPANTS = _Collection(PARTICIPANTS_DOCUMENT, "participants", ParticipantsDocument)
_APPLICATIONS = _Collection(APPLICATIONS_DOCUMENT, "applications", ApplicationsDocument)


class DocumentRepository:
    """Cached access to the two collection documents of one store."""

    def __init__(
        self,
        store: DocumentStore,
        freshness_seconds: float = DEFAULT_FRESHNESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._freshness = freshness_seconds
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}

    @property
    def store(self) -> DocumentStore:
        return self._store

    def cache_entry(self, key: str) -> Optional[CacheEntry]:
        """Current cache entry for ``participants`` or ``applications``."""
        return self._cache.get(key)

    # ── Read ──

    def get_participants(self) -> list[Participant]:
        return self._load(_PARTICIPANTS)

    def get_applications(self) -> list[Application]:
        return self._load(_APPLICATIONS)

    # ── Write ──

    def save_participants(
        self, participants: list[Participant], message: str = "Update participants"
    ) -> None:
        self._save(_PARTICIPANTS, participants, message)

    def save_applications(
        self, applications: list[Application], message: str = "Update applications"
    ) -> None:
        self._save(_APPLICATIONS, applications, message)

    def invalidate(self) -> None:
        """Force the next read of every collection to hit the store."""
        for entry in list(self._cache.values()):
            entry.fetched_at = None

    # ── Compound (read-modify-write) ──

    def add_application(self, application: Application) -> Application:
        applications = self.get_applications()
        applications.append(application)
        self.save_applications(applications, f"New application: {application.name}")
        return application

    def update_application(self, application_id: str, **changes: Any) -> Application:
        applications = self.get_applications()
        index = _index_of(applications, "id", application_id)
        if index is None:
            raise NotFound(f"Application '{application_id}' not found")
        updated = applications[index].model_copy(update=changes)
        applications[index] = updated
        if "status" in changes:
            message = f"Update application {application_id} status to {updated.status.value}"
        else:
            message = f"Update application {application_id}"
        self.save_applications(applications, message)
        return updated

    def remove_application(self, application_id: str) -> Application:
        applications = self.get_applications()
        index = _index_of(applications, "id", application_id)
        if index is None:
            raise NotFound(f"Application '{application_id}' not found")
        removed = applications.pop(index)
        self.save_applications(applications, f"Remove application {application_id}")
        return removed

    def add_participant(self, participant: Participant) -> Participant:
        participants = self.get_participants()
        participants.append(participant)
        self.save_participants(participants, f"Add participant: {participant.name}")
        return participant

    def update_participant(self, slug: str, **changes: Any) -> Participant:
        participants = self.get_participants()
        index = _index_of(participants, "slug", slug)
        if index is None:
            raise NotFound(f"Participant '{slug}' not found")
        updated = participants[index].model_copy(update=changes)
        participants[index] = updated
        self.save_participants(participants, f"Update participant: {slug}")
        return updated

    def remove_participant(self, slug: str) -> Participant:
        participants = self.get_participants()
        index = _index_of(participants, "slug", slug)
        if index is None:
            raise NotFound(f"Participant '{slug}' not found")
        removed = participants.pop(index)
        self.save_participants(participants, f"Remove participant: {slug}")
        return removed

    # ── Internal ──

    def _load(self, collection: _Collection) -> list[Any]:
        entry = self._cache.get(collection.key)
        if is_fresh(entry, self._clock(), self._freshness):
            CACHE_LOOKUPS.labels(document=collection.key, result="hit").inc()
            return list(entry.value)
        CACHE_LOOKUPS.labels(document=collection.key, result="miss").inc()

        stored = self._store.read(collection.document)
        if stored.content is None:
            logger.info("%s not found in %s store, initializing", collection.document, self._store.name)
            revision = self._store.write(
                collection.document,
                {collection.key: []},
                None,
                f"Initialize {collection.document}",
            )
            self._cache[collection.key] = CacheEntry([], revision, None)
            return []

        items = self._parse(collection, stored.content)
        self._cache[collection.key] = CacheEntry(items, stored.revision, self._clock())
        logger.debug(
            "Refreshed %s: %d records, revision=%s",
            collection.key, len(items), stored.revision,
        )
        return list(items)

    def _save(self, collection: _Collection, items: list[Any], message: str) -> None:
        entry = self._cache.get(collection.key)
        revision = entry.revision if entry else None
        content = {collection.key: [item.to_document() for item in items]}
        try:
            new_revision = self._store.write(collection.document, content, revision, message)
        except Conflict:
            # Next read must fetch the current revision.
            if entry is not None:
                entry.fetched_at = None
            raise

        items = list(items)
        if entry is None:
            self._cache[collection.key] = CacheEntry(items, new_revision, None)
            return
        entry.value = items
        if new_revision is not None:
            entry.revision = new_revision

    def _parse(self, collection: _Collection, content: Any) -> list[Any]:
        try:
            document = collection.schema.model_validate(content)
        except ValidationError as exc:
            raise StoreUnavailable(
                f"Malformed {collection.document}: {exc.error_count()} validation error(s)"
            ) from exc
        return list(getattr(document, collection.key))


def _index_of(items: list[Any], attr: str, value: str) -> Optional[int]:
    for index, item in enumerate(items):
        if getattr(item, attr) == value:
            return index
    return None
