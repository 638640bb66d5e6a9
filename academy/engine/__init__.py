"""Scheduling and performance core: status, recurrence, de-duplication and ratings."""

from academy.engine.dedupe import deduplicate_occurrences, occurrence_key
from academy.engine.performance import PerformanceConfig, average_performance, overall_rating
from academy.engine.recurrence import expand_recurring
from academy.engine.status import classify_status

__all__ = [
    "PerformanceConfig",
    "average_performance",
    "classify_status",
    "deduplicate_occurrences",
    "expand_recurring",
    "occurrence_key",
    "overall_rating",
]
