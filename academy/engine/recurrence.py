"""
Recurring template expansion.

A template (``is_recurring=True``) describes a weekly pattern: a set of
weekday names and an inclusive end date.  Expansion walks every calendar
date from the template's date through the end date and emits one
independent occurrence for each date whose weekday is selected.

Occurrences copy every field of the template except the recurrence-only
ones, get a fresh identity, start ``Upcoming`` with empty attendance and
metrics, and point back at the template through ``parent_session_id``.
The template itself is never part of the output.
"""

from __future__ import annotations

import datetime

from academy.schemas.session import WEEKDAY_NAMES, SessionDocument, SessionStatus, new_session_id, utc_now

_ONE_DAY = datetime.timedelta(days=1)


def weekday_name(day: datetime.date) -> str:
    """Lowercase English weekday name of *day* ("monday" ... "sunday")."""
    return WEEKDAY_NAMES[day.weekday()]


def count_matching_days(start: datetime.date, end: datetime.date, selected_days: set[str] | list[str]) -> int:
    """Number of dates in ``[start, end]`` whose weekday is selected."""
    selected = {d.lower() for d in selected_days}
    total = 0
    current = start
    while current <= end:
        if weekday_name(current) in selected:
            total += 1
        current += _ONE_DAY
    return total


def expand_recurring(template: SessionDocument) -> list[SessionDocument]:
    """Expand a recurring template into its dated occurrences.

    Returns an empty list when the session is not recurring, has no
    selected days, has no end date, or ends before it starts.
    """
    if not template.is_recurring or not template.selected_days or template.recurring_end_date is None:
        return []

    selected = {d.lower() for d in template.selected_days}
    end = template.recurring_end_date
    now = utc_now()

    occurrences: list[SessionDocument] = []
    seen_dates: set[datetime.date] = set()

    current = template.date
    while current <= end:
        if weekday_name(current) in selected and current not in seen_dates:
            seen_dates.add(current)
            occurrences.append(template.model_copy(deep=True, update={ "id": new_session_id(),
                                                                       "date": current,
                                                                       "status": SessionStatus.UPCOMING,
                                                                       "attendance": { },
                                                                       "player_metrics": { },
                                                                       "parent_session_id": template.id,
                                                                       "is_recurring": False,
                                                                       "selected_days": None,
                                                                       "recurring_end_date": None,
                                                                       "total_occurrences": None,
                                                                       "is_deleted": False,
                                                                       "created_at": now,
                                                                       "updated_at": now, }))
        current += _ONE_DAY

    return occurrences
