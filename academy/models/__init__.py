"""SQLModel database models."""

from academy.models.player import PlayerPerformance
from academy.models.training_session import TrainingSession

__all__ = [
    "PlayerPerformance",
    "TrainingSession",
]
