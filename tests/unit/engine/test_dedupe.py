"""Tests for occurrence de-duplication."""

import datetime

import pytest

from academy.engine.dedupe import STATUS_RANK, deduplicate_occurrences, occurrence_key, supersedes
from academy.schemas.session import SessionDocument, SessionStatus

DAY = datetime.date(2024, 1, 1)


def _session(status: SessionStatus = SessionStatus.UPCOMING, **overrides) -> SessionDocument:
    defaults = {
        "academy_id": "academy-1",
        "name": "Drills",
        "date": DAY,
        "start_time": "10:00",
        "end_time": "11:00",
        "status": status,
    }
    defaults.update(overrides)
    return SessionDocument(**defaults)


class TestOccurrenceKey:
    def test_key_format(self):
        assert occurrence_key(_session()) == "2024-01-01|10:00|11:00"

    def test_single_digit_hour_is_canonical(self):
        assert occurrence_key(_session(start_time="9:00", end_time="9:45")) == occurrence_key(
            _session(start_time="09:00", end_time="09:45"))

    def test_different_end_time_is_different_slot(self):
        assert occurrence_key(_session()) != occurrence_key(_session(end_time="11:30"))


class TestSupersedes:
    def test_rank_order(self):
        assert STATUS_RANK[SessionStatus.UPCOMING] < STATUS_RANK[SessionStatus.ONGOING] < STATUS_RANK[
            SessionStatus.FINISHED]

    @pytest.mark.parametrize(
        "candidate, existing, expected",
        [
            (SessionStatus.UPCOMING, SessionStatus.UPCOMING, True),
            (SessionStatus.ONGOING, SessionStatus.UPCOMING, True),
            (SessionStatus.FINISHED, SessionStatus.ONGOING, True),
            (SessionStatus.UPCOMING, SessionStatus.FINISHED, False),
            (SessionStatus.UPCOMING, SessionStatus.ONGOING, False),
            (SessionStatus.ONGOING, SessionStatus.FINISHED, False),
        ],
    )
    def test_supersedes(self, candidate, existing, expected):
        assert supersedes(_session(candidate), _session(existing)) is expected


class TestDeduplicateOccurrences:
    def test_empty(self):
        assert deduplicate_occurrences([]) == []

    def test_distinct_slots_are_kept_in_order(self):
        sessions = [_session(date=DAY + datetime.timedelta(days=i)) for i in range(3)]
        assert deduplicate_occurrences(sessions) == sessions

    def test_finished_never_replaced_by_upcoming(self):
        finished = _session(SessionStatus.FINISHED)
        upcoming = _session(SessionStatus.UPCOMING)
        assert deduplicate_occurrences([finished, upcoming]) == [finished]
        assert deduplicate_occurrences([upcoming, finished]) == [finished]

    def test_later_wins_on_equal_status(self):
        first = _session(name="first")
        second = _session(name="second")
        assert deduplicate_occurrences([first, second]) == [second]

    def test_output_has_unique_keys(self):
        sessions = [
            _session(SessionStatus.UPCOMING),
            _session(SessionStatus.ONGOING),
            _session(SessionStatus.UPCOMING, start_time="12:00", end_time="13:00"),
            _session(SessionStatus.UPCOMING),
        ]
        result = deduplicate_occurrences(sessions)
        keys = [occurrence_key(s) for s in result]
        assert len(keys) == len(set(keys)) == 2
        assert result[0].status == SessionStatus.ONGOING

    def test_first_seen_position_is_kept_when_replaced(self):
        a1 = _session(name="a1")
        b = _session(name="b", start_time="12:00", end_time="13:00")
        a2 = _session(SessionStatus.FINISHED, name="a2")
        assert [s.name for s in deduplicate_occurrences([a1, b, a2])] == ["a2", "b"]

    def test_idempotent(self):
        sessions = [_session(), _session(SessionStatus.FINISHED), _session(date=DAY + datetime.timedelta(days=1))]
        once = deduplicate_occurrences(sessions)
        assert deduplicate_occurrences(once) == once
