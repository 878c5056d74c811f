"""Workout service - single, batch and race-day workout persistence.

All workout writes go through this service so the distance, run type and
status invariants are checked before anything reaches the store.
"""

from __future__ import annotations

import math
from datetime import date, datetime

from loguru import logger
from pydantic import BaseModel

from runplanner.core.errors import InvalidInputError
from runplanner.plans.calendar import to_date
from runplanner.plans.placement import BulkWorkoutInput, build_batch, new_workout_id
from runplanner.plans.types import RaceGoal, RunType, TrainingPlan, Workout, WorkoutStatus
from runplanner.stores.base import WorkoutStore


class WorkoutUpdate(BaseModel):
    """Partial workout update. Only explicitly supplied fields are applied."""

    run_type: str | None = None
    day: date | None = None
    description: str | None = None
    notes: str | None = None
    status: str | None = None
    distance: float | None = None


def _validate_workout_fields(run_type: str, distance: float) -> None:
    if not math.isfinite(distance):
        raise InvalidInputError("distance must be a finite number")
    if distance < 0:
        raise InvalidInputError("distance cannot be negative")
    if not RunType.is_valid(run_type):
        raise InvalidInputError("invalid run type")
    if run_type == RunType.STRENGTH_TRAINING and distance != 0:
        raise InvalidInputError("strength training must have a distance of 0km")


class WorkoutService:
    def __init__(self, workouts: WorkoutStore) -> None:
        self._workouts = workouts

    def create(
        self,
        plan_id: str,
        run_type: str,
        day: date | datetime,
        description: str,
        distance: float,
    ) -> Workout:
        """Create one pending workout.

        Raises:
            InvalidInputError: If distance is negative, the run type is unknown,
                or strength training has a non-zero distance
        """
        _validate_workout_fields(run_type, distance)
        workout = Workout(
            id=new_workout_id(),
            plan_id=plan_id,
            run_type=RunType(run_type),
            day=to_date(day),
            description=description,
            notes="",
            status=WorkoutStatus.PENDING,
            distance=distance,
        )
        self._workouts.create(workout)
        logger.info(
            "Workout created",
            workout_id=workout.id,
            plan_id=plan_id,
            run_type=workout.run_type.value,
            day=workout.day.isoformat(),
        )
        return workout

    def create_batch(self, plan: TrainingPlan, items: list[BulkWorkoutInput]) -> list[Workout]:
        """Validate and place a batch of week-relative workouts, then insert them at once.

        Raises:
            BatchValidationError: On the first invalid item; nothing is stored
        """
        try:
            workouts = build_batch(plan, items)
        except InvalidInputError as e:
            logger.warning("Workout batch rejected", plan_id=plan.id, item_count=len(items), error=str(e))
            raise

        self._workouts.create_batch(workouts)
        logger.info("Workout batch created", plan_id=plan.id, count=len(workouts))
        return workouts

    def create_race_workout(self, plan: TrainingPlan, race_goal: str) -> Workout:
        """Create the race-day workout on the plan's end date.

        Raises:
            InvalidInputError: If race_goal is not a known token
        """
        if not RaceGoal.is_valid(race_goal):
            raise InvalidInputError("invalid race goal: must be one of 5k, 10k, halfmarathon, marathon")
        goal = RaceGoal(race_goal)
        return self.create(plan.id, RunType.RACE, plan.end_date, f"Race Day - {goal.label}", goal.distance_km)

    def get_by_id(self, workout_id: str) -> Workout:
        return self._workouts.get_by_id(workout_id)

    def get_by_plan_id(self, plan_id: str) -> list[Workout]:
        return self._workouts.get_by_plan_id(plan_id)

    def update(self, workout_id: str, changes: WorkoutUpdate) -> Workout:
        """Apply a partial update and store the result.

        The merged workout is validated as a whole, so a distance change is
        checked against the existing run type and vice versa.

        Raises:
            NotFoundError: If the workout does not exist
            InvalidInputError: If the merged workout violates an invariant
        """
        workout = self._workouts.get_by_id(workout_id)
        supplied = {
            field: getattr(changes, field)
            for field in changes.model_fields_set
            if getattr(changes, field) is not None
        }

        run_type = supplied.get("run_type", workout.run_type.value)
        distance = supplied.get("distance", workout.distance)
        status = supplied.get("status", workout.status.value)
        _validate_workout_fields(run_type, distance)
        if not WorkoutStatus.is_valid(status):
            raise InvalidInputError("invalid status")

        supplied["run_type"] = RunType(run_type)
        supplied["status"] = WorkoutStatus(status)
        updated = workout.model_copy(update=supplied)
        self._workouts.update(updated)
        logger.info("Workout updated", workout_id=workout_id, fields=sorted(changes.model_fields_set))
        return updated

    def delete(self, workout_id: str) -> None:
        self._workouts.delete(workout_id)
        logger.info("Workout deleted", workout_id=workout_id)
