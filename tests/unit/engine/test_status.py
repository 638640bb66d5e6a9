"""Tests for session status classification.

Pure unit tests: no database, explicit reference times.
"""

import datetime

import pytest

from academy.engine.status import classify_status, parse_time_of_day, refresh_statuses, session_status
from academy.schemas.session import SessionDocument, SessionStatus

DAY = datetime.date(2024, 1, 1)


def _session(**overrides) -> SessionDocument:
    defaults = {
        "academy_id": "academy-1",
        "name": "Morning drills",
        "date": DAY,
        "start_time": "10:00",
        "end_time": "11:00",
    }
    defaults.update(overrides)
    return SessionDocument(**defaults)


def _at(hour: int, minute: int, day: datetime.date = DAY) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time(hour, minute))


# ======================================================================
# parse_time_of_day
# ======================================================================


class TestParseTimeOfDay:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("00:00", datetime.time(0, 0)),
            ("09:30", datetime.time(9, 30)),
            ("9:30", datetime.time(9, 30)),
            ("23:59", datetime.time(23, 59)),
        ],
    )
    def test_parses_hh_mm(self, value, expected):
        assert parse_time_of_day(value) == expected


# ======================================================================
# classify_status
# ======================================================================


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (_at(9, 59), SessionStatus.UPCOMING),
            (_at(10, 0), SessionStatus.ONGOING),
            (_at(10, 30), SessionStatus.ONGOING),
            (_at(11, 0), SessionStatus.ONGOING),
            (_at(11, 1), SessionStatus.FINISHED),
        ],
    )
    def test_boundaries(self, now, expected):
        assert classify_status(now, DAY, "10:00", "11:00") == expected

    def test_previous_day_is_upcoming(self):
        now = _at(23, 0, DAY - datetime.timedelta(days=1))
        assert classify_status(now, DAY, "10:00", "11:00") == SessionStatus.UPCOMING

    def test_next_day_is_finished(self):
        now = _at(8, 0, DAY + datetime.timedelta(days=1))
        assert classify_status(now, DAY, "10:00", "11:00") == SessionStatus.FINISHED

    def test_zero_length_session(self):
        assert classify_status(_at(10, 0), DAY, "10:00", "10:00") == SessionStatus.ONGOING
        assert classify_status(_at(10, 1), DAY, "10:00", "10:00") == SessionStatus.FINISHED

    def test_aware_now_is_read_in_local_time(self):
        local = _at(10, 30)
        aware = local.astimezone()
        assert classify_status(aware, DAY, "10:00", "11:00") == SessionStatus.ONGOING


# ======================================================================
# refresh_statuses
# ======================================================================


class TestRefreshStatuses:
    def test_changed_sessions_are_copied(self):
        session = _session()
        [refreshed] = refresh_statuses([session], _at(10, 15))
        assert refreshed.status == SessionStatus.ONGOING
        assert session.status == SessionStatus.UPCOMING
        assert refreshed.id == session.id

    def test_unchanged_session_is_returned_as_is(self):
        session = _session()
        [refreshed] = refresh_statuses([session], _at(8, 0))
        assert refreshed is session

    def test_templates_are_left_alone(self):
        template = _session(is_recurring=True, selected_days=["monday"],
                            recurring_end_date=DAY + datetime.timedelta(days=14))
        [refreshed] = refresh_statuses([template], _at(12, 0))
        assert refreshed is template
        assert refreshed.status == SessionStatus.UPCOMING

    def test_order_is_preserved(self):
        sessions = [_session(start_time="08:00", end_time="09:00"), _session(start_time="12:00", end_time="13:00")]
        refreshed = refresh_statuses(sessions, _at(10, 0))
        assert [s.id for s in refreshed] == [s.id for s in sessions]
        assert [s.status for s in refreshed] == [SessionStatus.FINISHED, SessionStatus.UPCOMING]

    def test_session_status_defaults_to_current_time(self):
        past = _session(date=datetime.date(2000, 1, 1))
        assert session_status(past) == SessionStatus.FINISHED
