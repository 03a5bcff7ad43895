# type: ignore
"""Shared fixtures: in-memory store, controllable clock, seeded service."""

import copy
import random

import pytest

from webring.core.errors import Conflict
from webring.models.domain import Participant
from webring.repositories.document_repository import DocumentRepository
from webring.services.webring_service import WebringService
from webring.stores.base import ABSENT, StoredDocument


class MemoryStore:
    """Dict-backed store that records every call.

    ``versioned=True`` behaves like the GitHub store: writes must carry the
    current revision and return a new one.
    """

    name = "memory"

    def __init__(self, documents=None, versioned=False):
        self.documents = copy.deepcopy(documents or {})
        self.versioned = versioned
        self.revisions = {}
        self.reads = []
        self.writes = []
        if versioned:
            for name in self.documents:
                self.revisions[name] = "rev-0"

    def read(self, document):
        self.reads.append(document)
        if document not in self.documents:
            return ABSENT
        return StoredDocument(copy.deepcopy(self.documents[document]), self.revisions.get(document))

    def write(self, document, content, revision, message):
        self.writes.append((document, copy.deepcopy(content), revision, message))
        if not self.versioned:
            self.documents[document] = copy.deepcopy(content)
            return None
        current = self.revisions.get(document)
        if current is not None and revision != current:
            raise Conflict(f"{document} changed")
        new_revision = f"rev-{len(self.writes)}"
        self.revisions[document] = new_revision
        self.documents[document] = copy.deepcopy(content)
        return new_revision


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def participant_doc(slug, url=None, name=None):
    return {
        "slug": slug,
        "name": name or slug.upper(),
        "url": url or f"https://{slug}.example.org/",
        "description": f"The {slug} site",
        "contactEmail": f"{slug}@example.org",
        "approvedAt": "2026-01-01T00:00:00+00:00",
    }


def make_participant(slug, url=None):
    return Participant.model_validate(participant_doc(slug, url))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repo(store, clock):
    return DocumentRepository(store, freshness_seconds=60, clock=clock)


@pytest.fixture
def service(repo):
    return WebringService(repo, rng=random.Random(1234))
