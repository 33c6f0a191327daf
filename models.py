from __future__ import annotations
import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEEKLY_TARGET = 7


def local_naive(value: datetime.datetime) -> datetime.datetime:
    """Return ``value`` as a naive datetime on the local wall clock."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_timestamp(value) -> Optional[datetime.datetime]:
    """Best-effort conversion of ``value`` to a datetime, ``None`` if impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, (int, float)):
        try:
            return datetime.datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class WorkoutExerciseLog(BaseModel):
    """One exercise performed within a session, flattened to a single entry."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    exercise_name: str = ""
    reps: int = 0
    weight: float = 0.0
    completed: bool = False
    completed_at: Optional[datetime.datetime] = None

    @field_validator("weight", mode="before")
    @classmethod
    def _weight_or_zero(cls, value):
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_or_zero(cls, value):
        if value is None or isinstance(value, bool):
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("completed_at", mode="before")
    @classmethod
    def _lenient_completed_at(cls, value):
        return parse_timestamp(value)

    @field_validator("completed_at")
    @classmethod
    def _local_completed_at(cls, value):
        return local_naive(value) if value is not None else None

    @property
    def has_load(self) -> bool:
        return self.completed and self.weight > 0


class WorkoutSession(BaseModel):
    """A single performance of a routine."""

    model_config = ConfigDict(frozen=True)

    id: str
    routine_id: str = ""
    routine_name: str = ""
    user_id: str = ""
    started_at: datetime.datetime
    completed_at: Optional[datetime.datetime] = None
    duration: Optional[int] = None
    exercises: Tuple[WorkoutExerciseLog, ...] = ()
    notes: Optional[str] = None

    @field_validator("completed_at", mode="before")
    @classmethod
    def _lenient_completed_at(cls, value):
        # an unreadable completion time means the session never finished
        return parse_timestamp(value)

    @field_validator("started_at", "completed_at")
    @classmethod
    def _local_timestamps(cls, value):
        return local_naive(value) if value is not None else None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class MonthBounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime.datetime
    end: datetime.datetime


class WeeklyConsistency(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed: int = 0
    total: int = WEEKLY_TARGET


class ExerciseStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercise_id: str
    exercise_name: str
    current_weight: float
    change: int
    chart_data: list[float] = Field(default_factory=list)


class RoutineSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    this_week: int = 0
    this_month: int = 0
    streak: int = 0


class StreakRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int = 0
    best: int = 0


class RoutineStats(BaseModel):
    """Lifetime totals for a single routine."""

    model_config = ConfigDict(frozen=True)

    routine_id: str
    times_completed: int = 0
    last_completed: Optional[datetime.datetime] = None
    average_duration: float = 0.0
    total_time_spent: int = 0


class ExerciseHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.datetime
    reps: int
    weight: float
