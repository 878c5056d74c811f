"""SQLAlchemy-backed stores.

Each call runs in its own session from the injected session factory
(get_session by default), so every create, update, delete and batch insert
is one transaction.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from runplanner.core.errors import ConflictError, NotFoundError, PersistenceError
from runplanner.db.models import TrainingPlanRow, UserRow, WorkoutRow
from runplanner.db.session import get_session
from runplanner.plans.types import RunType, TrainingPlan, User, Workout, WorkoutStatus

SessionFactory = Callable[[], AbstractContextManager[Session]]


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset; values are always written in UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _plan_from_row(row: TrainingPlanRow) -> TrainingPlan:
    return TrainingPlan(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        end_date=row.end_date,
        weeks=row.weeks,
        start_date=row.start_date,
        created_at=_as_utc(row.created_at),
    )


def _workout_from_row(row: WorkoutRow) -> Workout:
    return Workout(
        id=row.id,
        plan_id=row.plan_id,
        run_type=RunType(row.run_type),
        day=row.day,
        description=row.description,
        notes=row.notes,
        status=WorkoutStatus(row.status),
        distance=row.distance,
    )


def _workout_row(workout: Workout) -> WorkoutRow:
    return WorkoutRow(
        id=workout.id,
        plan_id=workout.plan_id,
        run_type=workout.run_type.value,
        day=workout.day,
        description=workout.description,
        notes=workout.notes,
        status=workout.status.value,
        distance=workout.distance,
    )


def _user_from_row(row: UserRow) -> User:
    return User(id=row.id, email=row.email, created_at=_as_utc(row.created_at), active_plan_id=row.active_plan_id)


class SqlTrainingPlanStore:
    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    def create(self, plan: TrainingPlan) -> None:
        try:
            with self._session_factory() as session:
                session.add(
                    TrainingPlanRow(
                        id=plan.id,
                        user_id=plan.user_id,
                        name=plan.name,
                        end_date=plan.end_date,
                        weeks=plan.weeks,
                        start_date=plan.start_date,
                        created_at=plan.created_at,
                    )
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to create plan: {e}") from e

    def get_by_id(self, plan_id: str) -> TrainingPlan:
        try:
            with self._session_factory() as session:
                row = session.get(TrainingPlanRow, plan_id)
                if row is None:
                    raise NotFoundError(f"plan {plan_id} not found")
                return _plan_from_row(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get plan: {e}") from e

    def get_by_user_id(self, user_id: str) -> list[TrainingPlan]:
        try:
            with self._session_factory() as session:
                rows = session.execute(
                    select(TrainingPlanRow).where(TrainingPlanRow.user_id == user_id).order_by(TrainingPlanRow.end_date)
                ).scalars()
                return [_plan_from_row(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list plans: {e}") from e

    def update(self, plan: TrainingPlan) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(TrainingPlanRow, plan.id)
                if row is None:
                    raise NotFoundError(f"plan {plan.id} not found")
                row.name = plan.name
                row.end_date = plan.end_date
                row.weeks = plan.weeks
                row.start_date = plan.start_date
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to update plan: {e}") from e

    def delete(self, plan_id: str) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(TrainingPlanRow, plan_id)
                if row is None:
                    raise NotFoundError(f"plan {plan_id} not found")
                session.delete(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to delete plan: {e}") from e


class SqlWorkoutStore:
    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    def create(self, workout: Workout) -> None:
        try:
            with self._session_factory() as session:
                session.add(_workout_row(workout))
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to create workout: {e}") from e

    def create_batch(self, workouts: list[Workout]) -> None:
        try:
            with self._session_factory() as session:
                session.add_all([_workout_row(workout) for workout in workouts])
        except SQLAlchemyError as e:
            logger.error("Workout batch insert rolled back", count=len(workouts), error=str(e))
            raise PersistenceError(f"failed to create workouts: {e}") from e

    def get_by_id(self, workout_id: str) -> Workout:
        try:
            with self._session_factory() as session:
                row = session.get(WorkoutRow, workout_id)
                if row is None:
                    raise NotFoundError(f"workout {workout_id} not found")
                return _workout_from_row(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get workout: {e}") from e

    def get_by_plan_id(self, plan_id: str) -> list[Workout]:
        try:
            with self._session_factory() as session:
                rows = session.execute(
                    select(WorkoutRow).where(WorkoutRow.plan_id == plan_id).order_by(WorkoutRow.day)
                ).scalars()
                return [_workout_from_row(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to list workouts: {e}") from e

    def update(self, workout: Workout) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(WorkoutRow, workout.id)
                if row is None:
                    raise NotFoundError(f"workout {workout.id} not found")
                row.run_type = workout.run_type.value
                row.day = workout.day
                row.description = workout.description
                row.notes = workout.notes
                row.status = workout.status.value
                row.distance = workout.distance
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to update workout: {e}") from e

    def delete(self, workout_id: str) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(WorkoutRow, workout_id)
                if row is None:
                    raise NotFoundError(f"workout {workout_id} not found")
                session.delete(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to delete workout: {e}") from e


class SqlUserStore:
    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    def create(self, email: str) -> User:
        try:
            with self._session_factory() as session:
                existing = session.execute(select(UserRow.id).where(UserRow.email == email)).first()
                if existing:
                    raise ConflictError("email already registered")
                row = UserRow(id=uuid.uuid4().hex, email=email)
                session.add(row)
                session.flush()
                return _user_from_row(row)
        except IntegrityError as e:
            raise ConflictError("email already registered") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to create user: {e}") from e

    def get_by_id(self, user_id: str) -> User:
        try:
            with self._session_factory() as session:
                row = session.get(UserRow, user_id)
                if row is None:
                    raise NotFoundError(f"user {user_id} not found")
                return _user_from_row(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get user: {e}") from e

    def get_by_email(self, email: str) -> User:
        try:
            with self._session_factory() as session:
                row = session.execute(select(UserRow).where(UserRow.email == email)).scalar_one_or_none()
                if row is None:
                    raise NotFoundError(f"user {email} not found")
                return _user_from_row(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to get user: {e}") from e

    def set_active_plan(self, user_id: str, plan_id: str | None) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(UserRow, user_id)
                if row is None:
                    raise NotFoundError(f"user {user_id} not found")
                row.active_plan_id = plan_id
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to update user: {e}") from e
