"""
Training session API schemas.

A session is either a recurring *template* (``is_recurring=True`` with a
weekday pattern and an end date) or a concrete, dated *occurrence*.
Templates are never scheduled themselves: only the occurrences expanded
from them take part in attendance, metrics and status flows.

Update requests name exactly the mutable fields of a session so that
server-managed fields (identifiers, timestamps, embedded maps) can never
be overwritten through a partial update.
"""

import datetime
import uuid
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from academy.schemas.player import PlayerAttributes

# "HH:MM" (a single-digit hour is tolerated, "9:30").
TIME_OF_DAY_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday", ]


class SessionStatus(str, Enum):
    """Temporal status of a scheduled session."""

    UPCOMING = "Upcoming"
    ONGOING = "On-going"
    FINISHED = "Finished"


AttendanceStatus = Literal["Present", "Absent"]


def new_session_id() -> str:
    """Fresh opaque identifier for a session document."""
    return uuid.uuid4().hex


def utc_now() -> datetime.datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def parse_time_of_day(value: str) -> datetime.time:
    """Parse an "HH:MM" string into a :class:`datetime.time`."""
    hours, minutes = value.strip().split(":")
    return datetime.time(int(hours), int(minutes))


def _normalise_days(days: Optional[list[str]]) -> Optional[list[str]]:
    if days is None:
        return None
    normalised: list[str] = []
    for day in days:
        name = day.strip().lower()
        if name not in WEEKDAY_NAMES:
            raise ValueError(f"Unknown weekday '{day}'. Expected one of: {', '.join(WEEKDAY_NAMES)}")
        if name not in normalised:
            normalised.append(name)
    return normalised


# ---------------------------------------------------------------------------
# Embedded value objects
# ---------------------------------------------------------------------------

class AttendanceEntry(BaseModel):
    """Attendance mark for one player, embedded in the session's attendance map."""

    status: AttendanceStatus
    timestamp: datetime.datetime
    marked_by: Optional[str] = None


class PlayerMetricsEntry(BaseModel):
    """Per-player attribute snapshot recorded against a session."""

    attributes: PlayerAttributes = Field(default_factory=PlayerAttributes)
    session_rating: Optional[float] = None
    overall: Optional[float] = None
    recorded_by: Optional[str] = None
    updated_at: datetime.datetime


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SessionBase(BaseModel):
    """Fields shared by every session shape."""

    academy_id: str = Field(..., min_length=1, description="Owning academy identifier")
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    date: datetime.date = Field(..., description="Calendar date (first date for a template)")
    start_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN, description="Start time of day, HH:MM")
    end_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN, description="End time of day, HH:MM")
    coach_ids: list[str] = Field(default_factory=list)
    assigned_players: list[str] = Field(default_factory=list)
    assigned_batch: Optional[str] = None


class SessionCreate(SessionBase):
    """Schema for creating a single session or a recurring template."""

    created_by: Optional[str] = None
    is_recurring: bool = False
    selected_days: list[str] = Field(default_factory=list,
                                     description="Lowercase weekday names the template repeats on")
    recurring_end_date: Optional[datetime.date] = Field(None, description="Last date (inclusive) of the recurrence")

    @field_validator("selected_days")
    @classmethod
    def _check_days(cls, value: list[str]) -> list[str]:
        return _normalise_days(value) or []

    @model_validator(mode="after")
    def _check_schedule(self) -> "SessionCreate":
        if parse_time_of_day(self.end_time) < parse_time_of_day(self.start_time):
            raise ValueError("end_time must not be earlier than start_time")
        if self.is_recurring:
            if not self.selected_days:
                raise ValueError("A recurring session needs at least one selected day")
            if self.recurring_end_date is None:
                raise ValueError("A recurring session needs a recurring_end_date")
        return self


class SessionUpdate(BaseModel):
    """Schema for updating a session.

    Only the fields listed here are mutable.  Recurrence fields are only
    honoured on templates; changing them (or the date/times) of a template
    regenerates its not-yet-started occurrences.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime.date] = None
    start_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_OF_DAY_PATTERN)
    coach_ids: Optional[list[str]] = None
    assigned_players: Optional[list[str]] = None
    assigned_batch: Optional[str] = None
    status: Optional[SessionStatus] = None
    selected_days: Optional[list[str]] = None
    recurring_end_date: Optional[datetime.date] = None
    updated_by: Optional[str] = None

    @field_validator("selected_days")
    @classmethod
    def _check_days(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _normalise_days(value)


class AttendanceUpdate(BaseModel):
    """Schema for marking a player's attendance on an occurrence."""

    player_id: str = Field(..., min_length=1)
    status: AttendanceStatus
    marked_by: Optional[str] = None


class MetricsUpdate(BaseModel):
    """Schema for recording a player's metrics against an occurrence."""

    player_id: str = Field(..., min_length=1)
    attributes: PlayerAttributes
    session_rating: Optional[float] = Field(None, ge=0.0, le=10.0)
    recorded_by: Optional[str] = None


class SessionDeleteRequest(BaseModel):
    """Schema for bulk deletion within one academy."""

    session_ids: list[str] = Field(..., min_length=1)
    academy_id: str = Field(..., min_length=1)
    hard: bool = Field(False, description="Remove rows instead of flagging them as deleted")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class SessionDocument(SessionBase):
    """Full session document, as stored and as returned by the API."""

    id: str = Field(default_factory=new_session_id)
    status: SessionStatus = SessionStatus.UPCOMING
    created_by: Optional[str] = None
    attendance: dict[str, AttendanceEntry] = Field(default_factory=dict)
    player_metrics: dict[str, PlayerMetricsEntry] = Field(default_factory=dict)

    # Template-only
    is_recurring: bool = False
    selected_days: Optional[list[str]] = None
    recurring_end_date: Optional[datetime.date] = None
    total_occurrences: Optional[int] = None

    # Occurrence-only
    parent_session_id: Optional[str] = None

    is_deleted: bool = False
    created_at: datetime.datetime = Field(default_factory=utc_now)
    updated_at: datetime.datetime = Field(default_factory=utc_now)

    class Config:
        from_attributes = True

    @property
    def is_template(self) -> bool:
        return self.is_recurring


class DeleteResult(BaseModel):
    deleted_count: int


class OccurrenceCount(BaseModel):
    parent_session_id: str
    total: int


class CoachSessionStats(BaseModel):
    """Session counters for one coach within an academy."""

    coach_id: str
    total_sessions: int
    finished_sessions: int


class StatusRefreshResult(BaseModel):
    """Outcome of a status sweep over an academy's scheduled sessions."""

    academy_id: str
    checked: int = Field(..., description="Scheduled sessions examined")
    updated: int = Field(..., description="Sessions whose status changed and was persisted")
