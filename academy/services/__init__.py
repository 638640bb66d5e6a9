"""Business logic services."""

from academy.services.performance_service import PerformanceService
from academy.services.training_session_service import TrainingSessionService

__all__ = [
    "PerformanceService",
    "TrainingSessionService",
]
