"""
Player performance API schemas.

A player's ``attributes`` hold the current snapshot; ``performance_history``
is an append-only log of per-session snapshots.  ``overall_rating`` and
``average_performance`` are derived values, recomputed from those two on
every write and every read.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlayerAttributes(BaseModel):
    """Rated player attributes (all optional, 0-100 scale except session rating)."""

    shooting: Optional[float] = Field(None, ge=0.0, le=100.0)
    pace: Optional[float] = Field(None, ge=0.0, le=100.0)
    positioning: Optional[float] = Field(None, ge=0.0, le=100.0)
    passing: Optional[float] = Field(None, ge=0.0, le=100.0)
    ball_control: Optional[float] = Field(None, ge=0.0, le=100.0)
    crossing: Optional[float] = Field(None, ge=0.0, le=100.0)
    session_rating: Optional[float] = Field(None, ge=0.0, le=10.0)
    overall: Optional[float] = Field(None, ge=0.0, le=100.0)
    training_points: Optional[float] = Field(None, ge=0.0)

    def merged(self, other: "PlayerAttributes") -> "PlayerAttributes":
        """Return a copy with every field set on *other* taking precedence."""
        return self.model_copy(update=other.model_dump(exclude_none=True))


class PerformanceHistoryEntry(BaseModel):
    """One appended entry of a player's performance history."""

    date: datetime.datetime
    type: str = "training"
    session_id: Optional[str] = None
    session_name: Optional[str] = None
    rating: Optional[float] = None
    session_rating: Optional[float] = None
    attendance: Optional[bool] = None
    recorded_by: Optional[str] = None
    attributes: PlayerAttributes = Field(default_factory=PlayerAttributes)


class PlayerCreate(BaseModel):
    """Schema for registering a player's performance record."""

    id: Optional[str] = Field(None, min_length=1, description="External player id (generated when omitted)")
    academy_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    attributes: PlayerAttributes = Field(default_factory=PlayerAttributes)
