"""Tests for the in-memory stores."""

from datetime import date

import pytest

from runplanner.core.errors import ConflictError, NotFoundError
from runplanner.plans.types import RunType, TrainingPlan, Workout
from runplanner.stores.memory import MemoryTrainingPlanStore, MemoryUserStore, MemoryWorkoutStore


def test_plan_store_returns_copies(plan_store: MemoryTrainingPlanStore) -> None:
    """Test that mutating a returned plan does not change the stored one."""
    plan = TrainingPlan(
        id="p1", user_id="user1", name="Plan", end_date=date(2025, 4, 12), weeks=12, start_date=date(2025, 1, 20)
    )
    plan_store.create(plan)

    fetched = plan_store.get_by_id("p1")
    fetched.name = "Changed"

    assert plan_store.get_by_id("p1").name == "Plan"


def test_workout_store_keeps_insertion_order_within_day(workout_store: MemoryWorkoutStore) -> None:
    day = date(2025, 1, 20)
    workout_store.create_batch(
        [
            Workout(id="b", plan_id="p1", run_type=RunType.EASY_RUN, day=day, distance=5),
            Workout(id="a", plan_id="p1", run_type=RunType.STRENGTH_TRAINING, day=day, distance=0),
            Workout(id="c", plan_id="p1", run_type=RunType.LONG_RUN, day=date(2025, 1, 19), distance=12),
        ]
    )

    assert [w.id for w in workout_store.get_by_plan_id("p1")] == ["c", "b", "a"]


def test_workout_store_missing_ids(workout_store: MemoryWorkoutStore) -> None:
    with pytest.raises(NotFoundError):
        workout_store.get_by_id("missing")
    with pytest.raises(NotFoundError):
        workout_store.update(Workout(id="missing", plan_id="p1", run_type=RunType.EASY_RUN, day=date(2025, 1, 1)))


def test_plan_store_missing_ids() -> None:
    store = MemoryTrainingPlanStore()
    with pytest.raises(NotFoundError):
        store.delete("missing")


def test_user_store_unique_email() -> None:
    store = MemoryUserStore()
    user = store.create("runner@example.com")

    with pytest.raises(ConflictError):
        store.create("runner@example.com")
    assert store.get_by_email("runner@example.com").id == user.id
    with pytest.raises(NotFoundError):
        store.get_by_email("nobody@example.com")
