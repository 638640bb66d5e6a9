"""
Player performance repository.

Handles database operations for :class:`PlayerPerformance`.
"""

from typing import Any, Optional

from sqlmodel import Session

from academy.models.player import PlayerPerformance
from academy.schemas.session import utc_now


class PlayerRepository:
    """Repository for PlayerPerformance database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: PlayerPerformance) -> PlayerPerformance:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_id(self, player_id: str) -> Optional[PlayerPerformance]:
        return self.session.get(PlayerPerformance, player_id)

    def append_history(self, entry: PlayerPerformance, history_entry: dict[str, Any], attributes: dict[str, Any],
                       overall_rating: float, average_performance: float, ) -> PlayerPerformance:
        """Append one history entry and store the refreshed snapshot and derived values.

        History is only ever extended: the stored list is replaced by a new
        list with ``history_entry`` at the end, so JSON change tracking fires.
        """
        now = utc_now()
        entry.performance_history = [*(entry.performance_history or []), history_entry]
        entry.attributes = attributes
        entry.overall_rating = overall_rating
        entry.average_performance = average_performance
        entry.last_metrics_at = now
        entry.updated_at = now
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
