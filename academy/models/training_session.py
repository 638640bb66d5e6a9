"""
Training session database model.

One table holds both recurring templates and dated occurrences.  The
embedded attendance and player-metrics maps are stored as JSON documents
keyed by player id, the same shape the API exposes.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, Index
from sqlmodel import Field, SQLModel

from academy.schemas.session import new_session_id, utc_now


class TrainingSession(SQLModel, table=True):
    """A training session template or occurrence.

    No unique constraint on (academy, date, start, end): templates share
    the slot of their first occurrence and soft-deleted rows keep theirs.
    Slot uniqueness of scheduled sessions is enforced by the service.
    """

    __tablename__ = "training_sessions"
    __table_args__ = (Index("ix_training_sessions_slot", "academy_id", "date", "start_time", "end_time"),)

    id: str = Field(default_factory=new_session_id, primary_key=True, max_length=64)
    academy_id: str = Field(nullable=False, max_length=64, index=True)
    name: str = Field(nullable=False, max_length=200)
    category: Optional[str] = Field(default=None, max_length=100)

    date: datetime.date = Field(nullable=False, index=True)
    start_time: str = Field(nullable=False, max_length=5)
    end_time: str = Field(nullable=False, max_length=5)
    status: str = Field(default="Upcoming", nullable=False, max_length=20)

    coach_ids: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    assigned_players: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    assigned_batch: Optional[str] = Field(default=None, max_length=64)
    created_by: Optional[str] = Field(default=None, max_length=64)

    # player id -> AttendanceEntry / PlayerMetricsEntry (JSON form)
    attendance: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    player_metrics: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    # Template-only
    is_recurring: bool = Field(default=False, nullable=False)
    selected_days: Optional[list] = Field(default=None, sa_column=Column(JSON, nullable=True))
    recurring_end_date: Optional[datetime.date] = Field(default=None)
    total_occurrences: Optional[int] = Field(default=None)

    # Occurrence-only (informational link, not a foreign key)
    parent_session_id: Optional[str] = Field(default=None, max_length=64, index=True)

    is_deleted: bool = Field(default=False, nullable=False)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now,
                                          sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime.datetime = Field(default_factory=utc_now,
                                          sa_column=Column(DateTime(timezone=True), nullable=False))
