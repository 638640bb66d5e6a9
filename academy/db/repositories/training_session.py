"""
Training session repository.

Handles database operations for :class:`TrainingSession`.  Every storage
filter used by the services is built here behind a named method; callers
never compose queries themselves.

"Scheduled" sessions are non-deleted occurrences and one-off sessions,
i.e. everything except recurring templates.
"""

import datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlmodel import Session, col, select

from academy.models.training_session import TrainingSession
from academy.schemas.session import utc_now


class TrainingSessionRepository:
    """Repository for TrainingSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def create_many(self, entries: list[TrainingSession]) -> list[TrainingSession]:
        self.session.add_all(entries)
        self.session.commit()
        for entry in entries:
            self.session.refresh(entry)
        return entries

    def get_by_id(self, entry_id: str) -> Optional[TrainingSession]:
        return self.session.get(TrainingSession, entry_id)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_by_academy(self, academy_id: str, skip: int = 0, limit: int = 50, ) -> list[TrainingSession]:
        """Non-deleted sessions (templates included), paginated, in calendar order."""
        statement = (select(TrainingSession).where(TrainingSession.academy_id == academy_id,
                                                   TrainingSession.is_deleted == False,  # noqa: E712
                                                   ).order_by(TrainingSession.date, TrainingSession.start_time,
                                                              TrainingSession.created_at, TrainingSession.id, )
                     .offset(skip).limit(limit))
        return list(self.session.exec(statement).all())

    def list_scheduled(self, academy_id: str, status: Optional[str] = None, ) -> list[TrainingSession]:
        """All non-deleted, non-template sessions of an academy."""
        statement = select(TrainingSession).where(TrainingSession.academy_id == academy_id,
                                                  TrainingSession.is_deleted == False,  # noqa: E712
                                                  TrainingSession.is_recurring == False,  # noqa: E712
                                                  )
        if status is not None:
            statement = statement.where(TrainingSession.status == status)
        statement = statement.order_by(TrainingSession.date, TrainingSession.start_time, TrainingSession.created_at)
        return list(self.session.exec(statement).all())

    def list_for_coach(self, academy_id: str, coach_id: str) -> list[TrainingSession]:
        """Non-deleted sessions (templates included) of an academy that list *coach_id*, in calendar order."""
        statement = select(TrainingSession).where(TrainingSession.academy_id == academy_id,
                                                  TrainingSession.is_deleted == False,  # noqa: E712
                                                  ).order_by(TrainingSession.date, TrainingSession.start_time)
        # coach_ids is a JSON list, matched in Python
        return [e for e in self.session.exec(statement).all() if coach_id in (e.coach_ids or [])]

    def list_scheduled_on(self, academy_id: str, date: datetime.date, ) -> list[TrainingSession]:
        """Scheduled sessions of an academy on one calendar date."""
        statement = select(TrainingSession).where(TrainingSession.academy_id == academy_id,
                                                  TrainingSession.date == date,
                                                  TrainingSession.is_deleted == False,  # noqa: E712
                                                  TrainingSession.is_recurring == False,  # noqa: E712
                                                  )
        return list(self.session.exec(statement).all())

    def list_occurrences(self, parent_id: str, academy_id: str, status: Optional[str] = None, ) -> list[TrainingSession]:
        statement = select(TrainingSession).where(TrainingSession.parent_session_id == parent_id,
                                                  TrainingSession.academy_id == academy_id,
                                                  TrainingSession.is_deleted == False,  # noqa: E712
                                                  )
        if status is not None:
            statement = statement.where(TrainingSession.status == status)
        statement = statement.order_by(TrainingSession.date, TrainingSession.start_time)
        return list(self.session.exec(statement).all())

    def count_occurrences(self, parent_id: str, academy_id: str) -> int:
        statement = (select(func.count()).select_from(TrainingSession).where(
            TrainingSession.parent_session_id == parent_id, TrainingSession.academy_id == academy_id,
            TrainingSession.is_deleted == False,  # noqa: E712
        ))
        return self.session.exec(statement).first() or 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def update_many(self, entries: Iterable[TrainingSession]) -> int:
        entries = list(entries)
        if not entries:
            return 0
        self.session.add_all(entries)
        self.session.commit()
        return len(entries)

    def delete_many(self, entry_ids: Iterable[str], academy_id: str) -> int:
        """Remove rows by id within one academy; returns the number removed."""
        ids = list(entry_ids)
        if not ids:
            return 0
        statement = select(TrainingSession).where(col(TrainingSession.id).in_(ids),
                                                  TrainingSession.academy_id == academy_id, )
        entries = list(self.session.exec(statement).all())
        for entry in entries:
            self.session.delete(entry)
        self.session.commit()
        return len(entries)

    def soft_delete_many(self, entry_ids: Iterable[str], academy_id: str) -> int:
        """Flag rows as deleted within one academy; returns the number flagged."""
        ids = list(entry_ids)
        if not ids:
            return 0
        statement = select(TrainingSession).where(col(TrainingSession.id).in_(ids),
                                                  TrainingSession.academy_id == academy_id,
                                                  TrainingSession.is_deleted == False,  # noqa: E712
                                                  )
        entries = list(self.session.exec(statement).all())
        now = utc_now()
        for entry in entries:
            entry.is_deleted = True
            entry.updated_at = now
            self.session.add(entry)
        self.session.commit()
        return len(entries)
