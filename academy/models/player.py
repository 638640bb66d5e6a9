"""
Player performance database model.

Defines the players table holding each player's current attribute
snapshot, the append-only performance history and the derived ratings.
"""

import datetime
import uuid
from typing import Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from academy.schemas.session import utc_now


class PlayerPerformance(SQLModel, table=True):
    """
    Performance record of a single player.

    ``overall_rating`` and ``average_performance`` are a cache of values
    derived from ``attributes`` and ``performance_history``; they are
    rewritten on every metrics submission.
    """
    __tablename__ = "players"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=64)
    academy_id: str = Field(nullable=False, max_length=64, index=True)
    name: str = Field(nullable=False, max_length=200)

    attributes: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    performance_history: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    overall_rating: float = Field(default=0.0, nullable=False)
    average_performance: float = Field(default=0.0, nullable=False)
    last_metrics_at: Optional[datetime.datetime] = Field(default=None,
                                                   sa_column=Column(DateTime(timezone=True), nullable=True))

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now,
                                          sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime.datetime = Field(default_factory=utc_now,
                                          sa_column=Column(DateTime(timezone=True), nullable=False))
