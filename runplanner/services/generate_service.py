"""Training plan generation - orchestration layer.

This service turns season parameters into a persisted plan:
- Input validation
- One completion call (no retries) under a deadline
- Parsing and rounding of the returned workouts
- Plan creation, batch placement and the race-day workout
- Compensating plan deletion when anything after plan creation fails

Nothing is persisted until the completion call has returned usable output.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from runplanner.config.settings import settings
from runplanner.core.errors import (
    GenerationFailedError,
    GenerationNotConfiguredError,
    InvalidInputError,
)
from runplanner.llm.completion import TextCompletionClient
from runplanner.plans.placement import BulkWorkoutInput
from runplanner.plans.types import RaceGoal, TrainingPlan, Workout
from runplanner.services.training_plan_service import TrainingPlanService
from runplanner.services.workout_service import WorkoutService

MIN_WEEKS = 6
MIN_RUNS_PER_WEEK = 2
MAX_RUNS_PER_WEEK = 7


@dataclass(frozen=True)
class GenerateInput:
    """Season-level generation parameters.

    Attributes:
        name: Plan name
        end_date: Race date
        weeks: Plan length in weeks (>= 6)
        base_km_per_week: Current weekly volume in km (> 0)
        runs_per_week: Runs per week (2..7)
        race_goal: One of 5k, 10k, halfmarathon, marathon
    """

    name: str
    end_date: date
    weeks: int
    base_km_per_week: float
    runs_per_week: int
    race_goal: str


class GeneratedWorkouts(BaseModel):
    """Expected shape of the completion reply."""

    workouts: list[BulkWorkoutInput] = Field(default_factory=list)


def _load_prompt() -> str:
    """Load the plan generation system prompt.

    Raises:
        FileNotFoundError: If prompt file doesn't exist
    """
    prompt_path = Path(__file__).parent / "prompts" / "generate_plan.txt"
    if not prompt_path.exists():
        raise FileNotFoundError(f"Plan generation prompt not found: {prompt_path}")
    return prompt_path.read_text(encoding="utf-8")


def validate_generate_input(data: GenerateInput) -> None:
    """Check generation parameters, reporting the first violation.

    Raises:
        InvalidInputError: If any parameter is out of range
    """
    if data.weeks < MIN_WEEKS:
        raise InvalidInputError(f"invalid input: weeks must be at least {MIN_WEEKS}")
    if data.base_km_per_week <= 0:
        raise InvalidInputError("invalid input: baseKmPerWeek must be greater than 0")
    if data.runs_per_week < MIN_RUNS_PER_WEEK or data.runs_per_week > MAX_RUNS_PER_WEEK:
        raise InvalidInputError(
            f"invalid input: runsPerWeek must be between {MIN_RUNS_PER_WEEK} and {MAX_RUNS_PER_WEEK}"
        )
    if not data.name or not data.name.strip():
        raise InvalidInputError("invalid input: name is required")
    if not RaceGoal.is_valid(data.race_goal):
        raise InvalidInputError("invalid input: raceGoal must be one of: 5k, 10k, halfmarathon, marathon")


def build_system_prompt() -> str:
    return _load_prompt()


def build_user_prompt(data: GenerateInput) -> str:
    goal = RaceGoal(data.race_goal)
    return (
        f"Create a {data.weeks}-week training plan with {data.runs_per_week} runs per week. "
        f"Base weekly volume: {data.base_km_per_week:.1f} km. "
        f"Race goal: {goal.label} ({goal.distance_km:g} km). "
        "Calibrate peak long run and total volume appropriately for this race distance. "
        "Distribute the volume across the runs with appropriate progression. "
        f"Remember: deload every 4th week, taper the last 3 weeks before race day (week {data.weeks})."
    )


def round_distance(distance: float) -> float:
    """Round to the nearest whole km, halves away from zero."""
    return math.copysign(math.floor(abs(distance) + 0.5), distance)


def parse_workouts(raw: str) -> list[BulkWorkoutInput]:
    """Parse the completion reply into placement input with whole-km distances.

    Raises:
        GenerationFailedError: If the reply is not the expected JSON or has no workouts
    """
    try:
        parsed = GeneratedWorkouts.model_validate_json(raw)
    except ValidationError as e:
        raise GenerationFailedError(f"AI generation failed: failed to parse AI response: {e}") from e

    if not parsed.workouts:
        raise GenerationFailedError("AI generation failed: failed to parse AI response: no workouts in response")

    return [item.model_copy(update={"distance": round_distance(item.distance)}) for item in parsed.workouts]


class GenerateService:
    def __init__(
        self,
        completion: TextCompletionClient | None,
        plans: TrainingPlanService,
        workouts: WorkoutService,
        timeout_seconds: float | None = None,
    ) -> None:
        self._completion = completion
        self._plans = plans
        self._workouts = workouts
        self._timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.generation_timeout_seconds

    async def generate(self, user_id: str, data: GenerateInput) -> tuple[TrainingPlan, list[Workout]]:
        """Generate and persist a training plan with its workouts.

        Args:
            user_id: Owner of the new plan
            data: Generation parameters

        Returns:
            Tuple of (plan, workouts) with the race-day workout last

        Raises:
            GenerationNotConfiguredError: If no completion client is configured
            InvalidInputError: If parameters are out of range, or a generated
                workout fails placement (BatchValidationError)
            GenerationFailedError: If the completion call fails, times out or
                returns unusable output
        """
        if self._completion is None:
            raise GenerationNotConfiguredError("AI generation is not configured")

        validate_generate_input(data)

        logger.info(
            "Starting plan generation",
            user_id=user_id,
            weeks=data.weeks,
            base_km_per_week=data.base_km_per_week,
            runs_per_week=data.runs_per_week,
            race_goal=data.race_goal,
        )

        system_prompt = build_system_prompt()
        user_prompt = build_user_prompt(data)

        try:
            raw = await self._completion.complete(system_prompt, user_prompt, self._timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error("Plan generation timed out", user_id=user_id, timeout=self._timeout_seconds)
            raise GenerationFailedError(f"AI generation failed: timed out after {self._timeout_seconds:g}s") from e
        except Exception as e:
            logger.error("Plan generation call failed", user_id=user_id, error=str(e), error_type=type(e).__name__)
            raise GenerationFailedError(f"AI generation failed: {e}") from e

        items = parse_workouts(raw)
        logger.debug("Parsed generated workouts", count=len(items))

        plan = self._plans.create(user_id, data.name, data.end_date, data.weeks)

        try:
            workouts = self._workouts.create_batch(plan, items)
        except Exception as e:
            self._rollback(plan, [])
            e.add_note("failed to create workouts")
            raise

        try:
            race_workout = self._workouts.create_race_workout(plan, data.race_goal)
        except Exception as e:
            self._rollback(plan, workouts)
            e.add_note("failed to create race workout")
            raise

        workouts.append(race_workout)
        logger.info("Plan generation complete", plan_id=plan.id, user_id=user_id, workout_count=len(workouts))
        return plan, workouts

    def _rollback(self, plan: TrainingPlan, workouts: list[Workout]) -> None:
        """Best-effort removal of what this generation created.

        A failing delete is logged and does not replace the original error,
        so a plan can survive a double failure.
        """
        logger.warning("Rolling back generated plan", plan_id=plan.id, workout_count=len(workouts))
        for workout in workouts:
            try:
                self._workouts.delete(workout.id)
            except Exception as e:
                logger.error("Failed to delete workout during rollback", workout_id=workout.id, error=str(e))
        try:
            self._plans.delete(plan.id)
        except Exception as e:
            logger.error("Failed to delete plan during rollback", plan_id=plan.id, error=str(e))
