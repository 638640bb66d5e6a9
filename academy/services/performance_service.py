"""
Player performance service.

Records attendance and per-session metrics against scheduled sessions and
keeps each player's performance record (attribute snapshot, history and
derived ratings) in step.

A metrics submission touches two documents:

1. the session's ``player_metrics[player_id]`` entry, then
2. the player's record (appended history entry, merged attributes,
   recomputed ratings).

The two writes are separate commits.  When the second one fails the first
is already durable; the caller gets a 500 that says so, and resubmitting
simply overwrites the session entry and appends the history entry.
"""

from typing import Optional

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from academy.db.repositories.player import PlayerRepository
from academy.db.repositories.training_session import TrainingSessionRepository
from academy.engine.performance import DEFAULT_PERFORMANCE_CONFIG, PerformanceConfig, summarise
from academy.models.player import PlayerPerformance
from academy.models.training_session import TrainingSession
from academy.schemas.performance import PlayerPerformanceResponse
from academy.schemas.player import PerformanceHistoryEntry, PlayerAttributes, PlayerCreate
from academy.schemas.session import AttendanceEntry, AttendanceStatus, PlayerMetricsEntry, SessionDocument, utc_now
from academy.services.training_session_service import TrainingSessionService

RECENT_SESSIONS_LIMIT = 5


class PerformanceService:
    """Service for attendance, metrics and player performance."""

    def __init__(self, session: Session, config: Optional[PerformanceConfig] = None):
        self.db = session
        self.session_repo = TrainingSessionRepository(session)
        self.player_repo = PlayerRepository(session)
        self.config = config or DEFAULT_PERFORMANCE_CONFIG

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def register_player(self, data: PlayerCreate) -> PlayerPerformanceResponse:
        if data.id and self.player_repo.get_by_id(data.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Player '{data.id}' already exists", )

        attributes = data.attributes.model_dump(exclude_none=True)
        summary = summarise(attributes, [], self.config)
        player = PlayerPerformance(academy_id=data.academy_id, name=data.name, attributes=attributes,
                                   performance_history=[], overall_rating=summary.overall_rating,
                                   average_performance=summary.average_performance, )
        if data.id:
            player.id = data.id
        player = self.player_repo.create(player)
        logger.info(f"Registered player {player.id} in academy {player.academy_id}")
        return self._to_response(player, [])

    def get_player_performance(self, player_id: str) -> PlayerPerformanceResponse:
        """Current record, freshly derived ratings and the latest finished sessions."""
        player = self._get_player(player_id)
        recent = TrainingSessionService(self.db).recent_finished_for_player(player.id, player.academy_id,
                                                                            limit=RECENT_SESSIONS_LIMIT)
        return self._to_response(player, recent)

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    def record_attendance(self, session_id: str, player_id: str, attendance: AttendanceStatus,
                          marked_by: Optional[str] = None, ) -> None:
        """Set (or overwrite) one player's attendance mark on an occurrence."""
        self._require_player_id(player_id)
        entry = self._get_scheduled_session(session_id)

        now = utc_now()
        mark = AttendanceEntry(status=attendance, timestamp=now, marked_by=marked_by)
        entry.attendance = { **(entry.attendance or { }), player_id: mark.model_dump(mode="json") }
        entry.updated_at = now
        self.session_repo.update(entry)
        logger.info(f"Attendance for player {player_id} on session {session_id}: {attendance}")

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def record_metrics(self, session_id: str, player_id: str, attributes: PlayerAttributes,
                       session_rating: Optional[float] = None, recorded_by: Optional[str] = None, ) -> None:
        """Record a player's metrics for an occurrence and update the player's record."""
        self._require_player_id(player_id)
        entry = self._get_scheduled_session(session_id)
        player = self._get_player(player_id)
        if player.academy_id != entry.academy_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Player and session belong to different academies", )

        now = utc_now()
        submitted = attributes
        if session_rating is not None:
            submitted = attributes.model_copy(update={ "session_rating": session_rating })

        mark = (entry.attendance or { }).get(player_id)
        history_entry = PerformanceHistoryEntry(date=now, session_id=entry.id, session_name=entry.name,
                                                rating=session_rating, session_rating=session_rating,
                                                attendance=(mark.get("status") == "Present") if mark else None,
                                                recorded_by=recorded_by, attributes=submitted, )
        history_json = history_entry.model_dump(mode="json", exclude_none=True)

        merged = PlayerAttributes.model_validate(player.attributes or { }).merged(submitted)
        summary = summarise(merged, [*(player.performance_history or []), history_json], self.config)
        merged = merged.model_copy(update={ "overall": summary.overall_rating })

        metrics = PlayerMetricsEntry(attributes=submitted, session_rating=session_rating,
                                     overall=summary.overall_rating, recorded_by=recorded_by, updated_at=now, )

        # Step 1: session document
        try:
            entry.player_metrics = { **(entry.player_metrics or { }), player_id: metrics.model_dump(mode="json") }
            entry.updated_at = now
            self.session_repo.update(entry)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Metrics for player {player_id} on session {session_id} not saved: {exc}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail=f"Metrics were not saved on session {session_id}", ) from exc

        # Step 2: player record
        try:
            self.player_repo.append_history(player, history_json, merged.model_dump(exclude_none=True),
                                            summary.overall_rating, summary.average_performance, )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Partial write: metrics saved on session {session_id} but history of "
                         f"player {player_id} not updated: {exc}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail=(f"Metrics were saved on session {session_id} but the performance "
                                        f"history of player {player_id} was not updated; retry the submission"), ) from exc

        logger.info(f"Metrics for player {player_id} on session {session_id}: overall {summary.overall_rating}, "
                    f"average {summary.average_performance}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_player_id(player_id: Optional[str]) -> None:
        if not player_id or not player_id.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="player_id is required")

    def _get_scheduled_session(self, session_id: str) -> TrainingSession:
        entry = self.session_repo.get_by_id(session_id)
        if not entry or entry.is_deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training session not found", )
        if entry.is_recurring:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="A recurring template is not a scheduled session", )
        return entry

    def _get_player(self, player_id: str) -> PlayerPerformance:
        player = self.player_repo.get_by_id(player_id)
        if not player:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found", )
        return player

    def _to_response(self, player: PlayerPerformance, recent: list[SessionDocument]) -> PlayerPerformanceResponse:
        history = player.performance_history or []
        summary = summarise(player.attributes or { }, history, self.config)
        return PlayerPerformanceResponse(player_id=player.id, academy_id=player.academy_id, name=player.name,
                                         attributes=PlayerAttributes.model_validate(player.attributes or { }),
                                         performance_history=[PerformanceHistoryEntry.model_validate(h) for h in
                                                              history],
                                         overall_rating=summary.overall_rating,
                                         average_performance=summary.average_performance, recent_sessions=recent, )
