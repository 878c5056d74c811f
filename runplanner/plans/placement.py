"""Batch workout placement.

Converts week/day-relative workout descriptions into dated workouts for a
plan. The whole batch is validated before anything is built, so a single
bad item rejects every item and nothing reaches the store.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from runplanner.core.errors import BatchValidationError
from runplanner.plans.calendar import date_for
from runplanner.plans.types import RunType, TrainingPlan, Workout, WorkoutStatus

DAYS_PER_WEEK = 7


class BulkWorkoutInput(BaseModel):
    """Week-relative workout proposal. Never persisted directly.

    Run type is kept as a plain string so membership is reported by the
    placement check (with its item index) instead of at parse time.
    """

    model_config = ConfigDict(populate_by_name=True)

    run_type: str = Field(alias="runType")
    week: int
    day_of_week: int = Field(alias="dayOfWeek", description="1=Monday through 7=Sunday")
    description: str = ""
    distance: float = Field(allow_inf_nan=False)


def new_workout_id() -> str:
    return uuid.uuid4().hex


def check_item(item: BulkWorkoutInput, plan_weeks: int) -> str | None:
    """Return the first violated rule for an item, or None if it is valid.

    Rules are checked in a fixed order: run type, negative distance,
    strength training distance, week range, day range.
    """
    if not RunType.is_valid(item.run_type):
        return "invalid run type"
    if item.distance < 0:
        return "distance cannot be negative"
    if item.run_type == RunType.STRENGTH_TRAINING and item.distance != 0:
        return "strength training must have a distance of 0km"
    if item.week < 1 or item.week > plan_weeks:
        return f"week must be between 1 and {plan_weeks}"
    if item.day_of_week < 1 or item.day_of_week > DAYS_PER_WEEK:
        return "dayOfWeek must be between 1 (Monday) and 7 (Sunday)"
    return None


def validate_batch(plan: TrainingPlan, items: list[BulkWorkoutInput]) -> None:
    """Validate every item in list order.

    Raises:
        BatchValidationError: On the first invalid item, carrying its index
    """
    for index, item in enumerate(items):
        reason = check_item(item, plan.weeks)
        if reason is not None:
            raise BatchValidationError(index, reason)


def build_batch(plan: TrainingPlan, items: list[BulkWorkoutInput]) -> list[Workout]:
    """Validate a batch and convert it into dated, pending workouts.

    Args:
        plan: Plan providing the week count and start date
        items: Proposed workouts in order

    Returns:
        One new Workout per item, in the same order

    Raises:
        BatchValidationError: If any item is invalid (no workouts are built)
    """
    validate_batch(plan, items)

    return [
        Workout(
            id=new_workout_id(),
            plan_id=plan.id,
            run_type=RunType(item.run_type),
            day=date_for(plan.start_date, item.week, item.day_of_week),
            description=item.description,
            notes="",
            status=WorkoutStatus.PENDING,
            distance=item.distance,
        )
        for item in items
    ]
