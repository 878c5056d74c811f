"""Canonical plan and workout schema.

Closed sets (run types, statuses, race goals) are enums so membership is
checked against a fixed definition, never a mutable registry. Distances are
always kilometers.
"""

from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field


class RunType(StrEnum):
    EASY_RUN = "easy_run"
    INTERVALS = "intervals"
    LONG_RUN = "long_run"
    TEMPO_RUN = "tempo_run"
    STRENGTH_TRAINING = "strength_training"
    RACE = "race"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


class WorkoutStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


class RaceGoal(StrEnum):
    """Race goal token with its canonical distance and display label."""

    FIVE_K = "5k"
    TEN_K = "10k"
    HALF_MARATHON = "halfmarathon"
    MARATHON = "marathon"

    @property
    def distance_km(self) -> float:
        match self:
            case RaceGoal.FIVE_K:
                return 5.0
            case RaceGoal.TEN_K:
                return 10.0
            case RaceGoal.HALF_MARATHON:
                return 21.0
            case RaceGoal.MARATHON:
                return 42.0

    @property
    def label(self) -> str:
        match self:
            case RaceGoal.FIVE_K:
                return "5K"
            case RaceGoal.TEN_K:
                return "10K"
            case RaceGoal.HALF_MARATHON:
                return "Half Marathon"
            case RaceGoal.MARATHON:
                return "Marathon"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrainingPlan(BaseModel):
    """A dated, multi-week training schedule owned by one user.

    Attributes:
        id: Opaque plan identifier
        user_id: Owning user
        name: Display name
        end_date: Race date (date only)
        weeks: Number of weeks in the plan (>= 1)
        start_date: Monday of week 1, always derived from end_date and weeks
        created_at: Creation timestamp (UTC)
    """

    id: str
    user_id: str
    name: str
    end_date: date
    weeks: int = Field(ge=1)
    start_date: date
    created_at: datetime = Field(default_factory=_utcnow)


class Workout(BaseModel):
    """A single scheduled session within a plan.

    Attributes:
        id: Opaque workout identifier
        plan_id: Owning plan (back-reference)
        run_type: Session kind
        day: Calendar date of the session
        description: Free-text prescription
        notes: Free-text athlete notes
        status: pending, completed or skipped
        distance: Distance in kilometers (0 for strength training)
    """

    id: str
    plan_id: str
    run_type: RunType
    day: date
    description: str = ""
    notes: str = ""
    status: WorkoutStatus = WorkoutStatus.PENDING
    distance: float = Field(default=0.0, allow_inf_nan=False)


class User(BaseModel):
    id: str
    email: str
    created_at: datetime = Field(default_factory=_utcnow)
    active_plan_id: str | None = None
