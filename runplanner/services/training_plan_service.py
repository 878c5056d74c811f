"""Training plan service - CRUD for plans with derived start dates.

The start date is never accepted from callers: every create and update
re-derives it from the end date and week count.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

from loguru import logger

from runplanner.core.errors import InvalidInputError, NotFoundError
from runplanner.plans.aggregation import PlanDetail, build_plan_detail
from runplanner.plans.calendar import start_date_for, to_date
from runplanner.plans.types import TrainingPlan, Workout
from runplanner.stores.base import TrainingPlanStore

if TYPE_CHECKING:
    from runplanner.services.workout_service import WorkoutService


def new_plan_id() -> str:
    return uuid.uuid4().hex


def _validate_plan_fields(name: str, weeks: int) -> None:
    if not name or not name.strip():
        raise InvalidInputError("name is required")
    if weeks < 1:
        raise InvalidInputError("weeks must be at least 1")


class TrainingPlanService:
    def __init__(self, plans: TrainingPlanStore) -> None:
        self._plans = plans

    def create(self, user_id: str, name: str, end_date: date | datetime, weeks: int) -> TrainingPlan:
        """Create a plan ending in end_date's week.

        Raises:
            InvalidInputError: If name is empty or weeks < 1
        """
        _validate_plan_fields(name, weeks)
        end = to_date(end_date)
        plan = TrainingPlan(
            id=new_plan_id(),
            user_id=user_id,
            name=name,
            end_date=end,
            weeks=weeks,
            start_date=start_date_for(end, weeks),
            created_at=datetime.now(timezone.utc),
        )
        self._plans.create(plan)
        logger.info(
            "Training plan created",
            plan_id=plan.id,
            user_id=user_id,
            weeks=weeks,
            start_date=plan.start_date.isoformat(),
            end_date=end.isoformat(),
        )
        return plan

    def create_with_race_goal(
        self,
        user_id: str,
        name: str,
        end_date: date | datetime,
        weeks: int,
        race_goal: str | None,
        workouts: WorkoutService,
    ) -> TrainingPlan:
        """Create a plan and, when a race goal is given, its race-day workout.

        If the race workout cannot be created the plan is deleted again.
        """
        plan = self.create(user_id, name, end_date, weeks)
        if not race_goal:
            return plan

        try:
            workouts.create_race_workout(plan, race_goal)
        except Exception:
            self._delete_quietly(plan.id)
            raise
        return plan

    def get_by_id(self, plan_id: str) -> TrainingPlan:
        return self._plans.get_by_id(plan_id)

    def get_by_user_id(self, user_id: str) -> list[TrainingPlan]:
        return self._plans.get_by_user_id(user_id)

    def get_owned(self, plan_id: str, user_id: str) -> TrainingPlan:
        """Return a plan only if it belongs to user_id.

        Raises:
            NotFoundError: If the plan is missing or owned by someone else
        """
        plan = self._plans.get_by_id(plan_id)
        if plan.user_id != user_id:
            raise NotFoundError("plan not found")
        return plan

    def update(self, plan_id: str, name: str, end_date: date | datetime, weeks: int) -> TrainingPlan:
        """Replace name, end date and weeks; the start date is re-derived.

        Raises:
            InvalidInputError: If name is empty or weeks < 1
            NotFoundError: If the plan does not exist
        """
        _validate_plan_fields(name, weeks)
        plan = self._plans.get_by_id(plan_id)
        end = to_date(end_date)
        updated = plan.model_copy(
            update={
                "name": name,
                "end_date": end,
                "weeks": weeks,
                "start_date": start_date_for(end, weeks),
            }
        )
        self._plans.update(updated)
        logger.info("Training plan updated", plan_id=plan_id, weeks=weeks, start_date=updated.start_date.isoformat())
        return updated

    def delete(self, plan_id: str) -> None:
        self._plans.delete(plan_id)
        logger.info("Training plan deleted", plan_id=plan_id)

    def get_detail(self, plan: TrainingPlan, workouts: list[Workout]) -> PlanDetail:
        return build_plan_detail(plan, workouts)

    def _delete_quietly(self, plan_id: str) -> None:
        try:
            self.delete(plan_id)
        except Exception as e:
            logger.error("Failed to delete plan during rollback", plan_id=plan_id, error=str(e), error_type=type(e).__name__)
