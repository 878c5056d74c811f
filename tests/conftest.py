"""Root conftest for all tests.

Shared fixtures: in-memory stores, services wired to them, an isolated
in-memory SQLite session factory, and scripted completion clients.
"""

from collections.abc import Generator
from contextlib import contextmanager
from datetime import date

import pytest
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from runplanner.db.models import Base
from runplanner.plans.calendar import start_date_for
from runplanner.plans.types import TrainingPlan
from runplanner.services.training_plan_service import TrainingPlanService
from runplanner.services.user_service import UserService
from runplanner.services.workout_service import WorkoutService
from runplanner.stores.memory import MemoryTrainingPlanStore, MemoryUserStore, MemoryWorkoutStore


class FakeCompletionClient:
    """Completion client returning a fixed reply or raising a fixed error."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, float]] = []

    async def complete(self, system_instruction: str, user_instruction: str, timeout: float) -> str:
        self.calls.append((system_instruction, user_instruction, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def quiet_logger() -> Generator[None, None, None]:
    """Keep test output readable; only warnings and above reach stderr."""
    logger.remove()
    logger.add(lambda message: None, level="WARNING")
    yield
    logger.remove()


@pytest.fixture
def plan_store() -> MemoryTrainingPlanStore:
    return MemoryTrainingPlanStore()


@pytest.fixture
def workout_store() -> MemoryWorkoutStore:
    return MemoryWorkoutStore()


@pytest.fixture
def user_store() -> MemoryUserStore:
    return MemoryUserStore()


@pytest.fixture
def plan_service(plan_store: MemoryTrainingPlanStore) -> TrainingPlanService:
    return TrainingPlanService(plan_store)


@pytest.fixture
def workout_service(workout_store: MemoryWorkoutStore) -> WorkoutService:
    return WorkoutService(workout_store)


@pytest.fixture
def user_service(user_store: MemoryUserStore, plan_store: MemoryTrainingPlanStore) -> UserService:
    return UserService(user_store, plan_store)


@pytest.fixture
def twelve_week_plan() -> TrainingPlan:
    """12-week plan for a Saturday race on 2025-04-12 (starts Monday 2025-01-20)."""
    end_date = date(2025, 4, 12)
    return TrainingPlan(
        id="plan-1",
        user_id="user1",
        name="Spring Half",
        end_date=end_date,
        weeks=12,
        start_date=start_date_for(end_date, 12),
    )


@pytest.fixture
def sql_session_factory():
    """Provides an isolated in-memory SQLite database per test.

    Returns a get_session-compatible context manager factory: commit on
    success, rollback and re-raise on error.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def session_scope() -> Generator[Session, None, None]:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield session_scope

    Base.metadata.drop_all(bind=engine)
    engine.dispose()
