"""API schemas (Pydantic models)."""

from academy.schemas.performance import PlayerPerformanceResponse
from academy.schemas.player import PerformanceHistoryEntry, PlayerAttributes, PlayerCreate
from academy.schemas.session import (
    AttendanceEntry,
    AttendanceUpdate,
    MetricsUpdate,
    PlayerMetricsEntry,
    SessionCreate,
    SessionDeleteRequest,
    SessionDocument,
    SessionStatus,
    SessionUpdate,
)

__all__ = [
    "AttendanceEntry",
    "AttendanceUpdate",
    "MetricsUpdate",
    "PerformanceHistoryEntry",
    "PlayerAttributes",
    "PlayerCreate",
    "PlayerMetricsEntry",
    "PlayerPerformanceResponse",
    "SessionCreate",
    "SessionDeleteRequest",
    "SessionDocument",
    "SessionStatus",
    "SessionUpdate",
]
