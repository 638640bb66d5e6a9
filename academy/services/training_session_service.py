"""
Training session service.

Creates sessions (expanding recurring templates and reconciling the
resulting occurrences with the academy's existing schedule), applies
explicit partial updates, deletes in bulk, and answers the occurrence,
status and coach queries used by the dashboards.

Slot rule: within one academy no two scheduled (non-deleted, non-template)
sessions share ``date|start_time|end_time``.  Every write that can place a
session in a slot goes through :meth:`TrainingSessionService._schedule`.
"""

import datetime
from typing import Iterable, Optional

from fastapi import HTTPException, status
from loguru import logger
from sqlmodel import Session

from academy.db.repositories.training_session import TrainingSessionRepository
from academy.engine.dedupe import deduplicate_occurrences, occurrence_key
from academy.engine.recurrence import expand_recurring
from academy.engine.status import refresh_statuses
from academy.models.training_session import TrainingSession
from academy.schemas.session import (
    CoachSessionStats,
    DeleteResult,
    OccurrenceCount,
    SessionCreate,
    SessionDocument,
    SessionStatus,
    SessionUpdate,
    StatusRefreshResult,
    parse_time_of_day,
    utc_now,
)

MAX_PAGE_SIZE = 200

# Fields whose change on a template regenerates its occurrences.
_SCHEDULE_FIELDS = ("date", "start_time", "end_time", "selected_days", "recurring_end_date")
_RECURRENCE_FIELDS = {"selected_days", "recurring_end_date"}


class TrainingSessionService:
    """Service for training session business logic."""

    def __init__(self, session: Session):
        self.repository = TrainingSessionRepository(session)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_sessions(self, academy_id: str, page: int = 1, limit: int = 50) -> list[SessionDocument]:
        academy_id = self._require_academy(academy_id)
        if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail=f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}", )
        entries = self.repository.list_by_academy(academy_id, skip=(page - 1) * limit, limit=limit)
        return [self._to_document(e) for e in entries]

    def get_session(self, session_id: str) -> SessionDocument:
        return self._to_document(self._get_active_entry(session_id))

    def list_occurrences(self, parent_id: str, academy_id: str,
                         status_filter: Optional[SessionStatus] = None, ) -> list[SessionDocument]:
        academy_id = self._require_academy(academy_id)
        entries = self.repository.list_occurrences(parent_id, academy_id,
                                                   status_filter.value if status_filter else None)
        return [self._to_document(e) for e in entries]

    def count_occurrences(self, parent_id: str, academy_id: str) -> OccurrenceCount:
        academy_id = self._require_academy(academy_id)
        return OccurrenceCount(parent_session_id=parent_id,
                               total=self.repository.count_occurrences(parent_id, academy_id))

    def list_for_coach(self, coach_id: str, academy_id: str) -> list[SessionDocument]:
        """Sessions of an academy the coach is assigned to, templates included."""
        academy_id = self._require_academy(academy_id)
        coach_id = self._require_coach(coach_id)
        return [self._to_document(e) for e in self.repository.list_for_coach(academy_id, coach_id)]

    def coach_stats(self, coach_id: str, academy_id: str) -> CoachSessionStats:
        academy_id = self._require_academy(academy_id)
        coach_id = self._require_coach(coach_id)
        mine = [e for e in self.repository.list_scheduled(academy_id) if coach_id in (e.coach_ids or [])]
        finished = sum(1 for e in mine if e.status == SessionStatus.FINISHED.value)
        return CoachSessionStats(coach_id=coach_id, total_sessions=len(mine), finished_sessions=finished)

    def recent_finished_for_player(self, player_id: str, academy_id: str, limit: int = 5) -> list[SessionDocument]:
        """Latest finished sessions the player was assigned to, newest first."""
        finished = self.repository.list_scheduled(academy_id, status=SessionStatus.FINISHED.value)
        mine = [e for e in finished if player_id in (e.assigned_players or [])]
        mine.sort(key=lambda e: (e.date, e.start_time), reverse=True)
        return [self._to_document(e) for e in mine[:limit]]

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_session(self, data: SessionCreate) -> SessionDocument:
        """Create a one-off session, or a recurring template plus its occurrences.

        For a template the stored template is returned; its
        ``total_occurrences`` tells how many occurrences were scheduled.
        """
        payload = data.model_dump()
        if not data.is_recurring:
            payload.update(selected_days=None, recurring_end_date=None)
        document = SessionDocument(**payload, status=SessionStatus.UPCOMING)

        if document.is_template:
            return self._create_template(document)
        return self._create_single(document)

    def _create_template(self, template: SessionDocument) -> SessionDocument:
        occurrences = expand_recurring(template)
        inserted, replaced = self._schedule(template.academy_id, occurrences)

        template = template.model_copy(update={ "total_occurrences": len(inserted) })
        entry = self.repository.create(self._to_model(template))
        logger.info(f"Created recurring template {entry.id} in academy {entry.academy_id}: "
                    f"{len(occurrences)} expanded, {len(inserted)} scheduled, {len(replaced)} replaced")
        return self._to_document(entry)

    def _create_single(self, document: SessionDocument) -> SessionDocument:
        existing = self.repository.list_scheduled_on(document.academy_id, document.date)
        inserted, _ = self._schedule(document.academy_id, [document], existing=existing)
        if not inserted:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail=(f"Slot {occurrence_key(document)} is already held by a session "
                                        f"that has started or finished"), )
        logger.info(f"Created session {document.id} in academy {document.academy_id}")
        return self.get_session(document.id)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_session(self, session_id: str, data: SessionUpdate) -> SessionDocument:
        entry = self._get_active_entry(session_id)
        changes = data.model_dump(exclude_none=True, exclude={"updated_by"})

        if not entry.is_recurring and _RECURRENCE_FIELDS & changes.keys():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Recurrence fields can only be changed on a recurring template", )
        if entry.is_recurring and "status" in changes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="A recurring template is never scheduled and has no status", )

        current = self._to_document(entry)
        updated = current.model_copy(update={ **changes, "updated_at": utc_now() })
        if parse_time_of_day(updated.end_time) < parse_time_of_day(updated.start_time):
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail="end_time must not be earlier than start_time", )

        if entry.is_recurring:
            return self._update_template(entry, current, updated)

        if occurrence_key(updated) != occurrence_key(current):
            clashes = [e for e in self.repository.list_scheduled_on(updated.academy_id, updated.date) if
                       e.id != entry.id and occurrence_key(self._to_document(e)) == occurrence_key(updated)]
            if clashes:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                    detail=f"Slot {occurrence_key(updated)} is already taken", )

        self._apply(entry, updated)
        entry = self.repository.update(entry)
        return self._to_document(entry)

    def _update_template(self, entry: TrainingSession, current: SessionDocument,
                         updated: SessionDocument, ) -> SessionDocument:
        if not updated.selected_days:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail="A recurring session needs at least one selected day", )

        schedule_changed = any(getattr(updated, f) != getattr(current, f) for f in _SCHEDULE_FIELDS)
        self._apply(entry, updated)
        entry = self.repository.update(entry)

        if schedule_changed:
            self._regenerate_occurrences(self._to_document(entry))
            entry.total_occurrences = self.repository.count_occurrences(entry.id, entry.academy_id)
            entry = self.repository.update(entry)
        return self._to_document(entry)

    def _regenerate_occurrences(self, template: SessionDocument) -> None:
        """Drop the template's not-yet-started occurrences and expand it again.

        Occurrences that already progressed are kept and win their slot
        over the fresh ``Upcoming`` ones.
        """
        pending = self.repository.list_occurrences(template.id, template.academy_id, SessionStatus.UPCOMING.value)
        removed = self.repository.delete_many([e.id for e in pending], template.academy_id)
        inserted, replaced = self._schedule(template.academy_id, expand_recurring(template))
        logger.info(f"Regenerated occurrences of template {template.id}: {removed} dropped, "
                    f"{len(inserted)} scheduled, {len(replaced)} replaced")

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_sessions(self, session_ids: list[str], academy_id: str, hard: bool = False) -> DeleteResult:
        academy_id = self._require_academy(academy_id)
        ids = [i for i in (session_ids or []) if i and i.strip()]
        if not ids:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="session_ids must not be empty")

        if hard:
            count = self.repository.delete_many(ids, academy_id)
        else:
            count = self.repository.soft_delete_many(ids, academy_id)
        logger.info(f"{'Deleted' if hard else 'Soft-deleted'} {count}/{len(ids)} sessions in academy {academy_id}")
        return DeleteResult(deleted_count=count)

    # ------------------------------------------------------------------
    # Status sweep
    # ------------------------------------------------------------------

    def refresh_statuses(self, academy_id: str, now: Optional[datetime.datetime] = None) -> StatusRefreshResult:
        """Reclassify every scheduled session of an academy and persist the changes."""
        academy_id = self._require_academy(academy_id)
        entries = self.repository.list_scheduled(academy_id)
        refreshed = refresh_statuses([self._to_document(e) for e in entries], now)

        stamp = utc_now()
        changed: list[TrainingSession] = []
        for entry, document in zip(entries, refreshed):
            if document.status.value != entry.status:
                entry.status = document.status.value
                entry.updated_at = stamp
                changed.append(entry)

        updated = self.repository.update_many(changed)
        if updated:
            logger.debug(f"Status sweep for academy {academy_id}: {updated}/{len(entries)} sessions changed")
        return StatusRefreshResult(academy_id=academy_id, checked=len(entries), updated=updated)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _schedule(self, academy_id: str, candidates: list[SessionDocument],
                  existing: Optional[Iterable[TrainingSession]] = None, ) -> tuple[list[SessionDocument], list[str]]:
        """Reconcile *candidates* with the academy's schedule and persist the result.

        Existing sessions are supplied before the candidates, so on equal
        status a candidate replaces the stored session of its slot, and a
        stored session that already progressed is never regressed.

        Returns:
            Tuple of (inserted candidates, ids of stored sessions removed).
        """
        if not candidates:
            return [], []
        if existing is None:
            existing = self.repository.list_scheduled(academy_id)
        stored = [self._to_document(e) for e in existing]

        merged = deduplicate_occurrences([*stored, *candidates])
        kept_ids = {d.id for d in merged}
        candidate_ids = {c.id for c in candidates}

        inserted = [d for d in merged if d.id in candidate_ids]
        replaced = [d.id for d in stored if d.id not in kept_ids]

        if replaced:
            self.repository.delete_many(replaced, academy_id)
            logger.info(f"Replaced {len(replaced)} stored sessions in academy {academy_id} by newer occurrences")
        if inserted:
            self.repository.create_many([self._to_model(d) for d in inserted])
        return inserted, replaced

    @staticmethod
    def _require_academy(academy_id: Optional[str]) -> str:
        if not academy_id or not academy_id.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="academy_id is required")
        return academy_id.strip()

    @staticmethod
    def _require_coach(coach_id: Optional[str]) -> str:
        if not coach_id or not coach_id.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="coach_id is required")
        return coach_id.strip()

    def _get_active_entry(self, session_id: str) -> TrainingSession:
        entry = self.repository.get_by_id(session_id)
        if not entry or entry.is_deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training session not found", )
        return entry

    @staticmethod
    def _apply(entry: TrainingSession, document: SessionDocument) -> None:
        """Copy the mutable fields of *document* onto the stored row."""
        entry.name = document.name
        entry.category = document.category
        entry.date = document.date
        entry.start_time = document.start_time
        entry.end_time = document.end_time
        entry.coach_ids = list(document.coach_ids)
        entry.assigned_players = list(document.assigned_players)
        entry.assigned_batch = document.assigned_batch
        entry.status = document.status.value
        if entry.is_recurring:
            entry.selected_days = list(document.selected_days or [])
            entry.recurring_end_date = document.recurring_end_date
        entry.updated_at = document.updated_at

    @staticmethod
    def _to_document(entry: TrainingSession) -> SessionDocument:
        return SessionDocument.model_validate(entry)

    @staticmethod
    def _to_model(document: SessionDocument) -> TrainingSession:
        data = document.model_dump(exclude={"attendance", "player_metrics", "status"})
        embedded = document.model_dump(mode="json", include={"attendance", "player_metrics"})
        return TrainingSession(**data, **embedded, status=document.status.value)