"""
Player performance view schema.

Combines the player's record, the derived ratings and the latest finished
sessions the player took part in.
"""

from pydantic import BaseModel, Field

from academy.schemas.player import PerformanceHistoryEntry, PlayerAttributes
from academy.schemas.session import SessionDocument


class PlayerPerformanceResponse(BaseModel):
    """Schema for ``getPlayerPerformance`` responses."""

    player_id: str
    academy_id: str
    name: str
    attributes: PlayerAttributes
    performance_history: list[PerformanceHistoryEntry]
    overall_rating: float = Field(..., description="Weighted, blended summary of current and latest attributes")
    average_performance: float = Field(..., description="Mean of usable ratings across the history")
    recent_sessions: list[SessionDocument] = Field(default_factory=list,
                                                   description="Most recent finished sessions the player was "
                                                               "assigned to")
