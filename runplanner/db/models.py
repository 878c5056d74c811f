from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class UserRow(Base):
    """User table.

    Stores:
    - id: User ID (hex UUID)
    - email: Unique email
    - created_at: Timestamp when user was created
    - active_plan_id: Plan currently shown as active (nullable)
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    active_plan_id: Mapped[str | None] = mapped_column(String, nullable=True)


class TrainingPlanRow(Base):
    """Training plan table.

    start_date is stored for querying but is always written from
    start_date_for(end_date, weeks); it is never edited on its own.
    """

    __tablename__ = "training_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (Index("idx_training_plans_user_end_date", "user_id", "end_date"),)


class WorkoutRow(Base):
    """Workout table.

    Distance is kilometers. Orphan cleanup on plan deletion is the
    caller's responsibility, so plan_id is a plain indexed reference.
    """

    __tablename__ = "workouts"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    plan_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    run_type: Mapped[str] = mapped_column(String, nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    distance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (Index("idx_workouts_plan_day", "plan_id", "day"),)
