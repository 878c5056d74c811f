"""User service - registration and active plan selection."""

from __future__ import annotations

from loguru import logger

from runplanner.core.errors import ConflictError, InvalidInputError, NotFoundError
from runplanner.plans.types import User
from runplanner.stores.base import TrainingPlanStore, UserStore


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, users: UserStore, plans: TrainingPlanStore) -> None:
        self._users = users
        self._plans = plans

    def register(self, email: str) -> User:
        """Register a user by email.

        Raises:
            InvalidInputError: If the email is empty or malformed
            ConflictError: If the email is already registered
        """
        normalized = normalize_email(email)
        if not normalized or "@" not in normalized:
            raise InvalidInputError("a valid email is required")
        try:
            user = self._users.create(normalized)
        except ConflictError:
            logger.warning("Registration rejected: email taken", email=normalized)
            raise
        logger.info("User registered", user_id=user.id)
        return user

    def get(self, user_id: str) -> User:
        return self._users.get_by_id(user_id)

    def toggle_active_plan(self, user_id: str, plan_id: str) -> str | None:
        """Activate plan_id for the user, or deactivate it if it is already active.

        Returns:
            The new active plan id, or None if the plan was deactivated

        Raises:
            NotFoundError: If the user is missing, or the plan is missing or not theirs
        """
        user = self._users.get_by_id(user_id)
        plan = self._plans.get_by_id(plan_id)
        if plan.user_id != user_id:
            raise NotFoundError("plan not found")

        new_active = None if user.active_plan_id == plan_id else plan_id
        self._users.set_active_plan(user_id, new_active)
        logger.info("Active plan changed", user_id=user_id, active_plan_id=new_active)
        return new_active
