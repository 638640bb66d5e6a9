"""
Occurrence de-duplication.

Repeated expansion (template edits) and concurrent edits can produce
several sessions for the same calendar slot.  Sessions are keyed by
``date|start_time|end_time`` (the caller scopes the input to a single
academy) and collapsed to one per key.

Merge rule: keep the session whose status is more temporally advanced
(``Upcoming`` < ``On-going`` < ``Finished``); on equal status keep the one
supplied later.  A slot that already progressed is therefore never
regressed by a fresh ``Upcoming`` occurrence.
"""

from __future__ import annotations

from typing import Iterable

from academy.schemas.session import SessionDocument, SessionStatus, parse_time_of_day

STATUS_RANK: dict[SessionStatus, int] = { SessionStatus.UPCOMING: 0,
                                          SessionStatus.ONGOING: 1,
                                          SessionStatus.FINISHED: 2, }


def _canonical_time(value: str) -> str:
    return parse_time_of_day(value).strftime("%H:%M")


def occurrence_key(session: SessionDocument) -> str:
    """Slot key of a session; "9:00" and "09:00" map to the same key."""
    return f"{session.date.isoformat()}|{_canonical_time(session.start_time)}|{_canonical_time(session.end_time)}"


def supersedes(candidate: SessionDocument, existing: SessionDocument) -> bool:
    """Whether *candidate*, supplied after *existing*, wins their shared slot."""
    return STATUS_RANK[candidate.status] >= STATUS_RANK[existing.status]


def deduplicate_occurrences(sessions: Iterable[SessionDocument]) -> list[SessionDocument]:
    """Collapse *sessions* to at most one per slot key.

    The output keeps the order in which each key was first seen.
    """
    unique: dict[str, SessionDocument] = { }
    for session in sessions:
        key = occurrence_key(session)
        existing = unique.get(key)
        if existing is None or supersedes(session, existing):
            unique[key] = session
    return list(unique.values())
