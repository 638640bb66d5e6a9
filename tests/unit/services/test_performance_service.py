"""Tests for PerformanceService: attendance, metrics and the performance view."""

import datetime

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from academy.db.repositories.player import PlayerRepository
from academy.schemas.player import PlayerAttributes, PlayerCreate
from academy.schemas.session import SessionCreate, SessionStatus, SessionUpdate
from academy.services.performance_service import PerformanceService
from academy.services.training_session_service import TrainingSessionService

ACADEMY = "academy-1"
MONDAY = datetime.date(2024, 1, 1)


# ======================================================================
# Helpers / fixtures
# ======================================================================


@pytest.fixture
def sessions(db) -> TrainingSessionService:
    return TrainingSessionService(db)


@pytest.fixture
def service(db) -> PerformanceService:
    return PerformanceService(db)


@pytest.fixture
def player(service):
    return service.register_player(PlayerCreate(id="p-1", academy_id=ACADEMY, name="Sam"))


def _create_session(sessions: TrainingSessionService, **overrides):
    defaults = {
        "academy_id": ACADEMY,
        "name": "Finishing",
        "date": MONDAY,
        "start_time": "17:00",
        "end_time": "18:00",
        "assigned_players": ["p-1"],
    }
    defaults.update(overrides)
    return sessions.create_session(SessionCreate(**defaults))


# ======================================================================
# Players
# ======================================================================


class TestRegisterPlayer:
    def test_register_with_attributes(self, service):
        created = service.register_player(
            PlayerCreate(academy_id=ACADEMY, name="Alex", attributes=PlayerAttributes(shooting=80, pace=80)))
        assert created.player_id
        assert created.overall_rating == 80.0
        assert created.average_performance == 0.0
        assert created.performance_history == []

    def test_duplicate_id(self, service, player):
        with pytest.raises(HTTPException) as exc:
            service.register_player(PlayerCreate(id="p-1", academy_id=ACADEMY, name="Again"))
        assert exc.value.status_code == 409

    def test_unknown_player(self, service):
        with pytest.raises(HTTPException) as exc:
            service.get_player_performance("ghost")
        assert exc.value.status_code == 404


# ======================================================================
# Attendance
# ======================================================================


class TestRecordAttendance:
    def test_marks_player(self, service, sessions):
        session = _create_session(sessions)
        service.record_attendance(session.id, "p-1", "Present", marked_by="coach-1")

        stored = sessions.get_session(session.id)
        assert stored.attendance["p-1"].status == "Present"
        assert stored.attendance["p-1"].marked_by == "coach-1"

    def test_overwrites_previous_mark(self, service, sessions):
        session = _create_session(sessions)
        service.record_attendance(session.id, "p-1", "Present")
        service.record_attendance(session.id, "p-2", "Present")
        service.record_attendance(session.id, "p-1", "Absent")

        stored = sessions.get_session(session.id)
        assert stored.attendance["p-1"].status == "Absent"
        assert stored.attendance["p-2"].status == "Present"

    def test_template_is_rejected(self, service, sessions):
        template = _create_session(sessions, is_recurring=True, selected_days=["monday"],
                                   recurring_end_date=datetime.date(2024, 1, 15))
        with pytest.raises(HTTPException) as exc:
            service.record_attendance(template.id, "p-1", "Present")
        assert exc.value.status_code == 400

    def test_missing_session(self, service):
        with pytest.raises(HTTPException) as exc:
            service.record_attendance("missing", "p-1", "Present")
        assert exc.value.status_code == 404

    def test_player_required(self, service, sessions):
        session = _create_session(sessions)
        with pytest.raises(HTTPException) as exc:
            service.record_attendance(session.id, " ", "Present")
        assert exc.value.status_code == 400


# ======================================================================
# Metrics
# ======================================================================


class TestRecordMetrics:
    def test_writes_session_and_player(self, service, sessions, player):
        session = _create_session(sessions)
        service.record_attendance(session.id, "p-1", "Present")

        service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=80, pace=80), session_rating=8,
                               recorded_by="coach-1")

        stored = sessions.get_session(session.id)
        metrics = stored.player_metrics["p-1"]
        assert metrics.attributes.shooting == 80
        assert metrics.session_rating == 8
        # (0.15 * 80 + 0.15 * 80 + 0.10 * 8) / 0.40
        assert metrics.overall == 62.0

        view = service.get_player_performance("p-1")
        assert view.overall_rating == 62.0
        assert view.average_performance == 8.0
        assert view.attributes.overall == 62.0
        [entry] = view.performance_history
        assert entry.session_id == session.id
        assert entry.session_name == "Finishing"
        assert entry.rating == 8
        assert entry.attendance is True
        assert entry.recorded_by == "coach-1"

    def test_history_only_grows(self, service, sessions, player):
        session = _create_session(sessions)
        service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=80, pace=80), session_rating=8)
        service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=60), session_rating=6)

        view = service.get_player_performance("p-1")
        assert len(view.performance_history) == 2
        assert view.performance_history[0].session_rating == 8
        assert view.attributes.shooting == 60
        assert view.attributes.pace == 80
        # (0.15 * 60 + 0.15 * 80 + 0.10 * 6) / 0.40
        assert view.overall_rating == 54.0
        assert view.average_performance == 7.0

    def test_attendance_unknown_when_not_marked(self, service, sessions, player):
        session = _create_session(sessions)
        service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=70), session_rating=7)
        assert service.get_player_performance("p-1").performance_history[0].attendance is None

    def test_player_from_other_academy(self, service, sessions):
        service.register_player(PlayerCreate(id="p-x", academy_id="academy-2", name="Other"))
        session = _create_session(sessions)
        with pytest.raises(HTTPException) as exc:
            service.record_metrics(session.id, "p-x", PlayerAttributes(shooting=70))
        assert exc.value.status_code == 400

    def test_unknown_player(self, service, sessions):
        session = _create_session(sessions)
        with pytest.raises(HTTPException) as exc:
            service.record_metrics(session.id, "ghost", PlayerAttributes(shooting=70))
        assert exc.value.status_code == 404

    def test_partial_write_is_reported(self, service, sessions, player, monkeypatch):
        session = _create_session(sessions)

        def fail(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(PlayerRepository, "append_history", fail)

        with pytest.raises(HTTPException) as exc:
            service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=70), session_rating=7)
        assert exc.value.status_code == 500
        assert "retry" in exc.value.detail

        # Session side committed, player side untouched
        assert "p-1" in sessions.get_session(session.id).player_metrics
        monkeypatch.undo()
        assert service.get_player_performance("p-1").performance_history == []

    def test_retry_after_partial_write_completes(self, service, sessions, player, monkeypatch):
        session = _create_session(sessions)

        def fail(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(PlayerRepository, "append_history", fail)
        with pytest.raises(HTTPException):
            service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=70), session_rating=7)
        monkeypatch.undo()

        service.record_metrics(session.id, "p-1", PlayerAttributes(shooting=70), session_rating=7)
        assert len(service.get_player_performance("p-1").performance_history) == 1


# ======================================================================
# Performance view
# ======================================================================


class TestGetPlayerPerformance:
    def test_recent_finished_sessions(self, service, sessions, player):
        for day in range(1, 4):
            created = _create_session(sessions, date=datetime.date(2024, 1, day))
            sessions.update_session(created.id, SessionUpdate(status=SessionStatus.FINISHED))
        _create_session(sessions, date=datetime.date(2024, 1, 5))

        view = service.get_player_performance("p-1")
        assert [s.date.day for s in view.recent_sessions] == [3, 2, 1]
        assert all(s.status == SessionStatus.FINISHED for s in view.recent_sessions)

    def test_derived_values_are_recomputed_on_read(self, service, db, player):
        stored = PlayerRepository(db).get_by_id("p-1")
        stored.attributes = {"shooting": 90}
        stored.overall_rating = 1.0
        db.add(stored)
        db.commit()

        assert service.get_player_performance("p-1").overall_rating == 90.0
