# type: ignore
"""
Tests for WebringService: applications, admissions, participant management,
navigation through the repository.
"""

import random
from datetime import datetime, timezone

import pytest
from prometheus_client import REGISTRY

from conftest import MemoryStore, make_participant, participant_doc
from webring.core.errors import (
    Conflict,
    EmptyRing,
    InvalidTransition,
    NotFound,
    StoreUnavailable,
    Unresolved,
)
from webring.metrics.prometheus import RING_MEMBERS
from webring.models.domain import ApplicationStatus
from webring.repositories.document_repository import (
    APPLICATIONS_DOCUMENT,
    PARTICIPANTS_DOCUMENT,
    DocumentRepository,
)
from webring.services.webring_service import (
    WebringService,
    generate_slug,
    normalize_site_url,
    unique_slug,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _service(*slugs, clock=None):
    docs = {}
    if slugs:
        docs[PARTICIPANTS_DOCUMENT] = {"participants": [participant_doc(s) for s in slugs]}
    store = MemoryStore(docs)
    repo = DocumentRepository(store, clock=clock or (lambda: 0.0))
    return WebringService(repo, rng=random.Random(99), now=lambda: FIXED_NOW), store


def _submit(service, name="Foo", url="https://foo.example/", email="Owner@Foo.Example"):
    return service.submit_application(
        name=name, url=url, description="A site about foo things", contact_email=email
    )


# ============================================
# Helpers
# ============================================
class TestSlugs:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("My Cool Site", "my-cool-site"),
            ("  --Hello, World!--  ", "hello-world"),
            ("Café Ümlaut", "caf-mlaut"),
            ("!!!", "site"),
        ],
    )
    def test_generate_slug(self, name, expected):
        assert generate_slug(name) == expected

    def test_generate_slug_is_bounded(self):
        slug = generate_slug("a" * 49 + " b" * 10)
        assert len(slug) <= 50
        assert not slug.endswith("-")

    def test_unique_slug_suffixes(self):
        participants = [make_participant("foo"), make_participant("foo-1")]
        assert unique_slug("foo", participants) == "foo-2"
        assert unique_slug("bar", participants) == "bar"
        assert unique_slug("foo", [make_participant("foo")]) == "foo-1"


class TestNormalizeSiteUrl:
    def test_case_and_trailing_slash_insensitive(self):
        assert normalize_site_url("https://Foo.Example/Blog/") == normalize_site_url("https://foo.example/blog")

    def test_scheme_is_ignored(self):
        assert normalize_site_url("http://foo.example") == normalize_site_url("https://foo.example/")

    def test_distinct_paths_differ(self):
        assert normalize_site_url("https://host.example/alice") != normalize_site_url("https://host.example/bob")

    def test_credentials_and_port_are_ignored(self):
        key = normalize_site_url("https://foo.example/")
        assert normalize_site_url("https://x@foo.example/") == key
        assert normalize_site_url("https://user:pw@FOO.example:8443/") == key

    def test_submission_with_credentials_is_a_duplicate(self):
        service, _ = _service()
        _submit(service, url="https://foo.example/")
        with pytest.raises(Conflict):
            _submit(service, url="https://x@foo.example/")


# ============================================
# Applications
# ============================================
class TestSubmit:
    def test_creates_pending_application(self):
        service, store = _service()
        application = _submit(service, name="  Foo Bar  ")
        assert application.status == ApplicationStatus.PENDING
        assert application.slug == "foo-bar"
        assert application.name == "Foo Bar"
        assert application.contact_email == "owner@foo.example"
        assert application.submitted_at == FIXED_NOW.isoformat()
        saved = store.documents[APPLICATIONS_DOCUMENT]["applications"]
        assert saved[0]["id"] == application.id
        assert saved[0]["status"] == "pending"

    def test_ids_are_unique(self):
        service, _ = _service()
        first = _submit(service, url="https://one.example")
        second = _submit(service, url="https://two.example")
        assert first.id != second.id

    def test_duplicate_of_participant_conflicts(self):
        service, _ = _service()
        service.repository.add_participant(make_participant("foo", "https://foo.example/"))
        with pytest.raises(Conflict, match="already a member"):
            _submit(service, url="HTTPS://FOO.EXAMPLE")

    def test_duplicate_pending_conflicts(self):
        service, _ = _service()
        _submit(service, url="https://foo.example/")
        with pytest.raises(Conflict, match="already pending"):
            _submit(service, url="https://Foo.example")

    def test_resubmission_after_rejection_succeeds(self):
        service, _ = _service()
        first = _submit(service)
        service.reject_application(first.id)
        second = _submit(service)
        assert second.status == ApplicationStatus.PENDING
        assert second.id != first.id

    def test_conflict_performs_no_write(self):
        service, store = _service()
        _submit(service)
        writes_before = len(store.writes)
        with pytest.raises(Conflict):
            _submit(service)
        assert len(store.writes) == writes_before


class TestApprove:
    def test_approval_appends_participant_and_marks_application(self):
        service, store = _service("a", "b")
        application = _submit(service, name="Foo")
        participant = service.approve_application(application.id)

        assert participant.slug == "foo"
        assert participant.approved_at == FIXED_NOW.isoformat()
        assert participant.contact_email == "owner@foo.example"
        slugs = [p["slug"] for p in store.documents[PARTICIPANTS_DOCUMENT]["participants"]]
        assert slugs == ["a", "b", "foo"]
        approved = service.get_application(application.id)
        assert approved.status == ApplicationStatus.APPROVED
        assert approved.reviewed_at == FIXED_NOW.isoformat()

    def test_slug_collision_gets_suffix(self):
        service, _ = _service("foo")
        participant = service.approve_application(_submit(service, name="Foo").id)
        assert participant.slug == "foo-1"

    def test_second_collision_gets_next_suffix(self):
        service, _ = _service("foo", "foo-1")
        participant = service.approve_application(_submit(service, name="Foo").id)
        assert participant.slug == "foo-2"

    def test_unknown_application(self):
        service, _ = _service()
        with pytest.raises(NotFound):
            service.approve_application("missing")

    def test_retry_after_failed_status_write_does_not_duplicate_member(self):
        class FlakyStore(MemoryStore):
            fail_status_write = False

            def write(self, document, content, revision, message):
                if self.fail_status_write and document == APPLICATIONS_DOCUMENT:
                    raise StoreUnavailable("GitHub unreachable")
                return super().write(document, content, revision, message)

        store = FlakyStore({PARTICIPANTS_DOCUMENT: {"participants": [participant_doc("a")]}})
        repo = DocumentRepository(store, clock=lambda: 0.0)
        service = WebringService(repo, rng=random.Random(1), now=lambda: FIXED_NOW)
        application = _submit(service, name="Foo Site")

        store.fail_status_write = True
        with pytest.raises(StoreUnavailable):
            service.approve_application(application.id)
        assert service.get_application(application.id).status == ApplicationStatus.PENDING

        store.fail_status_write = False
        participant = service.approve_application(application.id)
        assert participant.slug == "foo-site"
        ring_urls = [p["url"] for p in store.documents[PARTICIPANTS_DOCUMENT]["participants"]]
        assert ring_urls.count("https://foo.example/") == 1
        assert service.get_application(application.id).status == ApplicationStatus.APPROVED

    def test_cannot_approve_twice(self):
        service, _ = _service()
        application = _submit(service)
        service.approve_application(application.id)
        with pytest.raises(InvalidTransition):
            service.approve_application(application.id)

    def test_cannot_approve_rejected(self):
        service, _ = _service()
        application = _submit(service)
        service.reject_application(application.id)
        with pytest.raises(InvalidTransition):
            service.approve_application(application.id)


class TestReject:
    def test_reject_records_reason(self):
        service, store = _service()
        application = _submit(service)
        rejected = service.reject_application(application.id, reason="  Not a personal site ")
        assert rejected.status == ApplicationStatus.REJECTED
        assert rejected.rejection_reason == "Not a personal site"
        saved = store.documents[APPLICATIONS_DOCUMENT]["applications"][0]
        assert saved["rejectionReason"] == "Not a personal site"
        assert saved["reviewedAt"] == FIXED_NOW.isoformat()

    def test_reject_without_reason_omits_field(self):
        service, store = _service()
        application = _submit(service)
        service.reject_application(application.id)
        saved = store.documents[APPLICATIONS_DOCUMENT]["applications"][0]
        assert "rejectionReason" not in saved

    def test_cannot_reject_twice(self):
        service, _ = _service()
        application = _submit(service)
        service.reject_application(application.id)
        with pytest.raises(InvalidTransition):
            service.reject_application(application.id)


class TestListAndDelete:
    def test_status_filter(self):
        service, _ = _service()
        a = _submit(service, url="https://a.example")
        _submit(service, url="https://b.example")
        service.reject_application(a.id)
        assert [x.id for x in service.list_applications(status="rejected")] == [a.id]
        assert len(service.list_applications(status="pending")) == 1
        assert len(service.list_applications()) == 2

    def test_delete_application_any_status(self):
        service, _ = _service()
        application = _submit(service)
        service.approve_application(application.id)
        service.delete_application(application.id)
        with pytest.raises(NotFound):
            service.get_application(application.id)

    def test_delete_unknown_application(self):
        service, _ = _service()
        with pytest.raises(NotFound):
            service.delete_application("nope")


# ============================================
# Participants
# ============================================
class TestParticipants:
    def test_get_participant(self):
        service, _ = _service("a", "b")
        assert service.get_participant("b").name == "B"
        with pytest.raises(NotFound):
            service.get_participant("zzz")

    def test_update_applies_only_given_fields(self):
        service, _ = _service("a")
        updated = service.update_participant(
            "a", {"name": " New Name ", "description": "", "contact_email": "NEW@A.ORG"}
        )
        assert updated.name == "New Name"
        assert updated.description == "The a site"
        assert updated.contact_email == "new@a.org"
        assert updated.slug == "a"

    def test_update_ignores_slug(self):
        service, _ = _service("a")
        updated = service.update_participant("a", {"slug": "hijack", "name": "A2"})
        assert updated.slug == "a"

    def test_delete_participant(self):
        service, _ = _service("a", "b", "c")
        service.delete_participant("b")
        assert [p.slug for p in service.list_participants()] == ["a", "c"]

    def test_delete_unknown_participant(self):
        service, _ = _service("a")
        with pytest.raises(NotFound):
            service.delete_participant("b")

    def test_member_gauge_tracks_remaining_members(self):
        service, _ = _service("a", "b", "c")
        RING_MEMBERS.set(0)
        service.delete_participant("b")
        assert REGISTRY.get_sample_value("webring_members") == 2


# ============================================
# Navigation through the repository
# ============================================
class TestNavigation:
    def test_scenario_three_members(self):
        service, _ = _service("a", "b", "c")
        assert service.resolve_next(slug="b").slug == "c"
        assert service.resolve_previous(slug="b").slug == "a"
        info = service.resolve_snapshot(slug="b")
        assert (info["current"].slug, info["prev"].slug, info["next"].slug) == ("b", "a", "c")
        assert info["random"].slug in ("a", "c")

    def test_scenario_empty_ring(self):
        service, _ = _service()
        for call in (
            service.resolve_next,
            service.resolve_previous,
            service.resolve_random,
            service.resolve_snapshot,
        ):
            with pytest.raises(EmptyRing):
                call()

    def test_scenario_unresolved(self):
        service, _ = _service("a", "b")
        referrer = "https://stranger.example/"
        assert service.resolve_next(referrer=referrer).slug == "a"
        assert service.resolve_previous(referrer=referrer).slug == "b"
        with pytest.raises(Unresolved):
            service.resolve_snapshot(referrer=referrer)

    def test_referrer_resolution(self):
        service, _ = _service("a", "b", "c")
        assert service.resolve_next(referrer="https://www.B.example.org/some/page").slug == "c"

    def test_random_never_returns_caller(self):
        service, _ = _service("a", "b", "c")
        picks = {service.resolve_random(slug="a").slug for _ in range(100)}
        assert picks == {"b", "c"}

    def test_stats(self):
        service, _ = _service("a", "b")
        stats = service.ring_stats()
        assert stats["totalMembers"] == 2
        assert stats["newestMember"].slug == "b"

    def test_newly_approved_member_is_newest(self):
        service, _ = _service("a")
        service.approve_application(_submit(service).id)
        assert service.ring_stats()["newestMember"].slug == "foo"
        assert service.resolve_next(slug="a").slug == "foo"

    def test_invalidate_cache_rereads(self):
        service, store = _service("a")
        service.list_participants()
        reads = len(store.reads)
        service.invalidate_cache()
        service.list_participants()
        assert len(store.reads) == reads + 1
