# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Ring resolution and navigation, pure computation, no side effects.

A position is the zero-based index of the caller's participant in ring order,
or None when it could not be resolved. ``next``/``previous``/``random`` fall
back to fixed endpoints for an unresolved position; ``snapshot`` refuses it.
"""

import random
from typing import Any, Optional, Sequence
from urllib.parse import urlsplit

from webring.core.errors import EmptyRing, Unresolved
from webring.models.domain import Participant


def normalize_domain(url: Optional[str]) -> Optional[str]:
    """Lowercase hostname without a leading ``www.``; None if there is none."""
    if not url:
        return None
    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname or None


def resolve_position(
    participants: Sequence[Participant],
    slug: Optional[str] = None,
    referrer: Optional[str] = None,
) -> Optional[int]:
    """
    Locate the caller in the ring.
    An exact slug match wins; otherwise the first participant whose URL has
    the referrer's domain. None when neither matches.
    """
    if slug:
        for index, participant in enumerate(participants):
            if participant.slug == slug:
                return index

    domain = normalize_domain(referrer)
    if domain is None:
        return None
    for index, participant in enumerate(participants):
        if normalize_domain(participant.url) == domain:
            return index
    return None


# ── Navigation ──

def _require_members(participants: Sequence[Participant]) -> int:
    if not participants:
        raise EmptyRing("No participants in webring")
    return len(participants)


def next_index(position: Optional[int], length: int) -> int:
    if position is None:
        return 0
    return (position + 1) % length


def previous_index(position: Optional[int], length: int) -> int:
    if position is None:
        return length - 1
    return (position - 1 + length) % length


def next_participant(
    participants: Sequence[Participant], position: Optional[int]
) -> Participant:
    length = _require_members(participants)
    return participants[next_index(position, length)]


def previous_participant(
    participants: Sequence[Participant], position: Optional[int]
) -> Participant:
    length = _require_members(participants)
    return participants[previous_index(position, length)]


def random_participant(
    participants: Sequence[Participant],
    position: Optional[int],
    rng: random.Random | None = None,
) -> Participant:
    """Uniform pick, excluding the caller when resolved and not alone."""
    length = _require_members(participants)
    rng = rng or random
    if position is None or length <= 1:
        candidates = list(participants)
    else:
        candidates = [p for i, p in enumerate(participants) if i != position]
    return rng.choice(candidates)


def snapshot(
    participants: Sequence[Participant],
    position: Optional[int],
    rng: random.Random | None = None,
) -> dict[str, Participant]:
    """current / prev / next / random around a resolved position."""
    length = _require_members(participants)
    if position is None:
        raise Unresolved(
            "Participant not found. Provide a valid slug or ensure the "
            "Referer header matches a participant URL"
        )
    rng = rng or random
    current = participants[position]
    others = [p for i, p in enumerate(participants) if i != position]
    return {
        "current": current,
        "prev": participants[previous_index(position, length)],
        "next": participants[next_index(position, length)],
        "random": rng.choice(others) if others else current,
    }


def stats(participants: Sequence[Participant]) -> dict[str, Any]:
    return {
        "totalMembers": len(participants),
        "newestMember": participants[-1] if participants else None,
    }
