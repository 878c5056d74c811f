"""Storage ports for plans, workouts and users.

Each entity has its own small capability set. Services depend on these
protocols, never on a concrete backend. Missing ids raise NotFoundError.
"""

from typing import Protocol

from runplanner.plans.types import TrainingPlan, User, Workout


class TrainingPlanStore(Protocol):
    def create(self, plan: TrainingPlan) -> None: ...

    def get_by_id(self, plan_id: str) -> TrainingPlan: ...

    def get_by_user_id(self, user_id: str) -> list[TrainingPlan]:
        """Return the user's plans ordered by end date ascending."""
        ...

    def update(self, plan: TrainingPlan) -> None: ...

    def delete(self, plan_id: str) -> None: ...


class WorkoutStore(Protocol):
    def create(self, workout: Workout) -> None: ...

    def create_batch(self, workouts: list[Workout]) -> None:
        """Insert all workouts or none of them."""
        ...

    def get_by_id(self, workout_id: str) -> Workout: ...

    def get_by_plan_id(self, plan_id: str) -> list[Workout]:
        """Return the plan's workouts ordered by day ascending."""
        ...

    def update(self, workout: Workout) -> None: ...

    def delete(self, workout_id: str) -> None: ...


class UserStore(Protocol):
    def create(self, email: str) -> User:
        """Create a user; raises ConflictError if the email is taken."""
        ...

    def get_by_id(self, user_id: str) -> User: ...

    def get_by_email(self, email: str) -> User: ...

    def set_active_plan(self, user_id: str, plan_id: str | None) -> None: ...
