"""Tests for the SQLAlchemy stores against an in-memory SQLite database."""

from datetime import date, timedelta

import pytest

from runplanner.core.errors import ConflictError, NotFoundError, PersistenceError
from runplanner.plans.types import RunType, TrainingPlan, Workout, WorkoutStatus
from runplanner.stores.sql import SqlTrainingPlanStore, SqlUserStore, SqlWorkoutStore


@pytest.fixture
def plans(sql_session_factory) -> SqlTrainingPlanStore:
    return SqlTrainingPlanStore(sql_session_factory)


@pytest.fixture
def workouts(sql_session_factory) -> SqlWorkoutStore:
    return SqlWorkoutStore(sql_session_factory)


@pytest.fixture
def users(sql_session_factory) -> SqlUserStore:
    return SqlUserStore(sql_session_factory)


def _plan(plan_id: str, end_date: date, user_id: str = "user1") -> TrainingPlan:
    return TrainingPlan(
        id=plan_id, user_id=user_id, name=f"Plan {plan_id}", end_date=end_date, weeks=6, start_date=date(2025, 1, 6)
    )


def _workout(workout_id: str, day: date, plan_id: str = "p1", **overrides) -> Workout:
    values = {
        "id": workout_id,
        "plan_id": plan_id,
        "run_type": RunType.EASY_RUN,
        "day": day,
        "description": "",
        "distance": 5.0,
    }
    values.update(overrides)
    return Workout(**values)


def test_plan_roundtrip_and_listing(plans: SqlTrainingPlanStore) -> None:
    plans.create(_plan("p2", date(2025, 9, 1)))
    plans.create(_plan("p1", date(2025, 4, 12)))
    plans.create(_plan("p3", date(2025, 5, 1), user_id="user2"))

    fetched = plans.get_by_id("p1")
    assert fetched.name == "Plan p1"
    assert fetched.end_date == date(2025, 4, 12)
    assert fetched.start_date == date(2025, 1, 6)
    assert [p.id for p in plans.get_by_user_id("user1")] == ["p1", "p2"]


def test_plan_update_and_delete(plans: SqlTrainingPlanStore) -> None:
    plans.create(_plan("p1", date(2025, 4, 12)))

    plans.update(_plan("p1", date(2025, 5, 4)).model_copy(update={"name": "Renamed", "weeks": 8}))
    fetched = plans.get_by_id("p1")
    assert (fetched.name, fetched.weeks, fetched.end_date) == ("Renamed", 8, date(2025, 5, 4))

    plans.delete("p1")
    with pytest.raises(NotFoundError):
        plans.get_by_id("p1")


def test_missing_plan_raises_not_found(plans: SqlTrainingPlanStore) -> None:
    with pytest.raises(NotFoundError):
        plans.get_by_id("missing")
    with pytest.raises(NotFoundError):
        plans.update(_plan("missing", date(2025, 4, 12)))
    with pytest.raises(NotFoundError):
        plans.delete("missing")


def test_workout_batch_ordered_by_day(workouts: SqlWorkoutStore) -> None:
    workouts.create_batch(
        [
            _workout("w2", date(2025, 1, 8)),
            _workout("w1", date(2025, 1, 6), run_type=RunType.STRENGTH_TRAINING, distance=0),
            _workout("other", date(2025, 1, 7), plan_id="p2"),
        ]
    )

    stored = workouts.get_by_plan_id("p1")
    assert [w.id for w in stored] == ["w1", "w2"]
    assert stored[0].run_type == RunType.STRENGTH_TRAINING
    assert stored[0].status == WorkoutStatus.PENDING


def test_workout_batch_is_atomic(workouts: SqlWorkoutStore) -> None:
    """Test that a duplicate id inside a batch stores nothing."""
    workouts.create(_workout("w1", date(2025, 1, 6)))

    with pytest.raises(PersistenceError):
        workouts.create_batch([_workout("w2", date(2025, 1, 7)), _workout("w1", date(2025, 1, 8))])

    assert [w.id for w in workouts.get_by_plan_id("p1")] == ["w1"]


def test_workout_update_and_delete(workouts: SqlWorkoutStore) -> None:
    workouts.create(_workout("w1", date(2025, 1, 6)))

    workouts.update(_workout("w1", date(2025, 1, 7), status=WorkoutStatus.COMPLETED, notes="ok", distance=6))
    fetched = workouts.get_by_id("w1")
    assert (fetched.day, fetched.status, fetched.notes, fetched.distance) == (
        date(2025, 1, 7),
        WorkoutStatus.COMPLETED,
        "ok",
        6,
    )

    workouts.delete("w1")
    with pytest.raises(NotFoundError):
        workouts.get_by_id("w1")
    with pytest.raises(NotFoundError):
        workouts.delete("w1")


def test_user_create_conflict_and_active_plan(users: SqlUserStore) -> None:
    user = users.create("runner@example.com")

    with pytest.raises(ConflictError, match="email already registered"):
        users.create("runner@example.com")

    assert users.get_by_email("runner@example.com").id == user.id
    users.set_active_plan(user.id, "p1")
    assert users.get_by_id(user.id).active_plan_id == "p1"
    users.set_active_plan(user.id, None)
    assert users.get_by_id(user.id).active_plan_id is None

    with pytest.raises(NotFoundError):
        users.set_active_plan("missing", "p1")


def test_created_at_keeps_utc(plans: SqlTrainingPlanStore, users: SqlUserStore) -> None:
    """Test that timestamps read back from SQLite are UTC-aware and unchanged."""
    plan = _plan("p1", date(2025, 4, 12))
    plans.create(plan)

    fetched = plans.get_by_id("p1")
    assert fetched.created_at.tzinfo is not None
    assert fetched.created_at == plan.created_at

    user = users.create("runner@example.com")
    assert users.get_by_id(user.id).created_at.utcoffset() == timedelta(0)
