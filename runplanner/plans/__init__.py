"""Plans module - calendar-safe planning foundation.

This module provides:
- Closed run type, status and race goal sets
- Plan calendar arithmetic (start date derivation, week/day grid)
- Batch workout placement with all-or-nothing validation
- Week/day plan view with planned and done distance rollups
"""

from runplanner.plans.aggregation import DayDetail, PlanDetail, WeekSummary, build_plan_detail
from runplanner.plans.calendar import date_for, format_date, parse_date, start_date_for
from runplanner.plans.placement import BulkWorkoutInput, build_batch, validate_batch
from runplanner.plans.types import RaceGoal, RunType, TrainingPlan, User, Workout, WorkoutStatus

__all__ = [
    "BulkWorkoutInput",
    "DayDetail",
    "PlanDetail",
    "RaceGoal",
    "RunType",
    "TrainingPlan",
    "User",
    "WeekSummary",
    "Workout",
    "WorkoutStatus",
    "build_batch",
    "build_plan_detail",
    "date_for",
    "format_date",
    "parse_date",
    "start_date_for",
    "validate_batch",
]
