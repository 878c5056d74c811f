"""In-memory stores.

Used by tests and by the CLI when no database is wanted. Values are copied
on the way in and out so callers never mutate stored state by accident.
"""

import threading
import uuid

from runplanner.core.errors import ConflictError, NotFoundError
from runplanner.plans.types import TrainingPlan, User, Workout


class MemoryTrainingPlanStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[str, TrainingPlan] = {}

    def create(self, plan: TrainingPlan) -> None:
        with self._lock:
            self._by_id[plan.id] = plan.model_copy(deep=True)

    def get_by_id(self, plan_id: str) -> TrainingPlan:
        with self._lock:
            plan = self._by_id.get(plan_id)
            if plan is None:
                raise NotFoundError(f"plan {plan_id} not found")
            return plan.model_copy(deep=True)

    def get_by_user_id(self, user_id: str) -> list[TrainingPlan]:
        with self._lock:
            plans = [p.model_copy(deep=True) for p in self._by_id.values() if p.user_id == user_id]
        return sorted(plans, key=lambda p: p.end_date)

    def update(self, plan: TrainingPlan) -> None:
        with self._lock:
            if plan.id not in self._by_id:
                raise NotFoundError(f"plan {plan.id} not found")
            self._by_id[plan.id] = plan.model_copy(deep=True)

    def delete(self, plan_id: str) -> None:
        with self._lock:
            if self._by_id.pop(plan_id, None) is None:
                raise NotFoundError(f"plan {plan_id} not found")


class MemoryWorkoutStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[str, Workout] = {}

    def create(self, workout: Workout) -> None:
        with self._lock:
            self._by_id[workout.id] = workout.model_copy(deep=True)

    def create_batch(self, workouts: list[Workout]) -> None:
        copies = [w.model_copy(deep=True) for w in workouts]
        with self._lock:
            for workout in copies:
                self._by_id[workout.id] = workout

    def get_by_id(self, workout_id: str) -> Workout:
        with self._lock:
            workout = self._by_id.get(workout_id)
            if workout is None:
                raise NotFoundError(f"workout {workout_id} not found")
            return workout.model_copy(deep=True)

    def get_by_plan_id(self, plan_id: str) -> list[Workout]:
        with self._lock:
            workouts = [w.model_copy(deep=True) for w in self._by_id.values() if w.plan_id == plan_id]
        # Stable sort keeps insertion order for same-day workouts
        return sorted(workouts, key=lambda w: w.day)

    def update(self, workout: Workout) -> None:
        with self._lock:
            if workout.id not in self._by_id:
                raise NotFoundError(f"workout {workout.id} not found")
            self._by_id[workout.id] = workout.model_copy(deep=True)

    def delete(self, workout_id: str) -> None:
        with self._lock:
            if self._by_id.pop(workout_id, None) is None:
                raise NotFoundError(f"workout {workout_id} not found")


class MemoryUserStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[str, User] = {}
        self._by_email: dict[str, str] = {}

    def create(self, email: str) -> User:
        with self._lock:
            if email in self._by_email:
                raise ConflictError("email already registered")
            user = User(id=uuid.uuid4().hex, email=email)
            self._by_id[user.id] = user
            self._by_email[email] = user.id
            return user.model_copy()

    def get_by_id(self, user_id: str) -> User:
        with self._lock:
            user = self._by_id.get(user_id)
            if user is None:
                raise NotFoundError(f"user {user_id} not found")
            return user.model_copy()

    def get_by_email(self, email: str) -> User:
        with self._lock:
            user_id = self._by_email.get(email)
            if user_id is None:
                raise NotFoundError(f"user {email} not found")
            return self._by_id[user_id].model_copy()

    def set_active_plan(self, user_id: str, plan_id: str | None) -> None:
        with self._lock:
            user = self._by_id.get(user_id)
            if user is None:
                raise NotFoundError(f"user {user_id} not found")
            self._by_id[user_id] = user.model_copy(update={"active_plan_id": plan_id})
