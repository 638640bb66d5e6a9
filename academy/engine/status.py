"""
Session status classification.

A scheduled session is classified against "now" by combining its calendar
date with its start and end time of day:

- ``Upcoming``:  now <  start
- ``On-going``:  start <= now <= end  (inclusive on both ends)
- ``Finished``:  now >  end

All instants are naive and read in the academy's local clock.  An aware
``now`` is converted to local time before comparing.

Time-of-day strings are a precondition: they must be well-formed "HH:MM".
The request schemas reject anything else before it reaches storage, so
the classifier itself has no error path.
"""

from __future__ import annotations

import datetime
from typing import Iterable, Optional

from academy.schemas.session import SessionDocument, SessionStatus, parse_time_of_day


def _local_naive(now: datetime.datetime) -> datetime.datetime:
    if now.tzinfo is None:
        return now
    return now.astimezone().replace(tzinfo=None)


def classify_status(now: datetime.datetime, date: datetime.date, start_time: str, end_time: str, ) -> SessionStatus:
    """Classify a session slot relative to *now*."""
    current = _local_naive(now)
    start = datetime.datetime.combine(date, parse_time_of_day(start_time))
    end = datetime.datetime.combine(date, parse_time_of_day(end_time))

    if current < start:
        return SessionStatus.UPCOMING
    if current <= end:
        return SessionStatus.ONGOING
    return SessionStatus.FINISHED


def session_status(session: SessionDocument, now: Optional[datetime.datetime] = None) -> SessionStatus:
    """Classify a stored session (defaults to the current local time)."""
    return classify_status(now or datetime.datetime.now(), session.date, session.start_time, session.end_time)


def refresh_statuses(sessions: Iterable[SessionDocument], now: Optional[datetime.datetime] = None,
                     ) -> list[SessionDocument]:
    """Return copies of *sessions* with their status recomputed.

    Templates are returned untouched: they are never scheduled, so they
    carry no temporal status of their own.
    """
    reference = now or datetime.datetime.now()
    refreshed: list[SessionDocument] = []
    for session in sessions:
        if session.is_template:
            refreshed.append(session)
            continue
        status = session_status(session, reference)
        refreshed.append(session if status == session.status else session.model_copy(update={ "status": status }))
    return refreshed
