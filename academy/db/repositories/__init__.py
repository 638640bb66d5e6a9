"""Database repositories."""

from academy.db.repositories.player import PlayerRepository
from academy.db.repositories.training_session import TrainingSessionRepository

__all__ = [
    "PlayerRepository",
    "TrainingSessionRepository",
]
