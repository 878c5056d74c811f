"""Plan week/day view with distance rollups.

Deterministic view derived from a plan and its current workouts.
Same inputs -> same output. No side effects. No persistence.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from runplanner.plans.calendar import WEEKDAY_NAMES, to_date, week_dates
from runplanner.plans.types import TrainingPlan, Workout, WorkoutStatus

FINISHED_STATUSES = frozenset({WorkoutStatus.COMPLETED, WorkoutStatus.SKIPPED})


@dataclass(frozen=True)
class DayDetail:
    """One calendar day of a plan week."""

    date: date
    weekday: str
    workouts: tuple[Workout, ...]


@dataclass(frozen=True)
class WeekSummary:
    """One plan week with its days and distance totals.

    Attributes:
        week: 1-based week number
        days: Exactly seven days, Monday..Sunday
        planned_km: Sum of all workout distances in the week
        done_km: Sum of distances of completed workouts
        all_done: True iff the week has workouts and all are completed or skipped
    """

    week: int
    days: tuple[DayDetail, ...]
    planned_km: float
    done_km: float
    all_done: bool

    @property
    def workouts(self) -> list[Workout]:
        return [workout for day in self.days for workout in day.workouts]


@dataclass(frozen=True)
class PlanDetail:
    plan: TrainingPlan
    weeks: tuple[WeekSummary, ...]

    @property
    def planned_km(self) -> float:
        return round(sum(week.planned_km for week in self.weeks), 2)

    @property
    def done_km(self) -> float:
        return round(sum(week.done_km for week in self.weeks), 2)


def _summarize_week(week: int, days: tuple[DayDetail, ...]) -> WeekSummary:
    workouts = [workout for day in days for workout in day.workouts]
    planned_km = sum(workout.distance for workout in workouts)
    done_km = sum(workout.distance for workout in workouts if workout.status == WorkoutStatus.COMPLETED)
    all_done = len(workouts) > 0 and all(workout.status in FINISHED_STATUSES for workout in workouts)
    return WeekSummary(
        week=week,
        days=days,
        planned_km=round(planned_km, 2),
        done_km=round(done_km, 2),
        all_done=all_done,
    )


def build_plan_detail(plan: TrainingPlan, workouts: list[Workout]) -> PlanDetail:
    """Bucket workouts into the plan's weeks and days and compute totals.

    Workouts are matched to days by exact date. Workouts dated outside the
    plan's calendar do not appear in the view.

    Args:
        plan: Plan providing start date and week count
        workouts: Workouts belonging to the plan, in any order

    Returns:
        PlanDetail with one WeekSummary per plan week
    """
    by_date: dict[date, list[Workout]] = defaultdict(list)
    for workout in workouts:
        by_date[to_date(workout.day)].append(workout)

    weeks = []
    for week in range(1, plan.weeks + 1):
        days = tuple(
            DayDetail(date=day, weekday=WEEKDAY_NAMES[offset], workouts=tuple(by_date.get(day, ())))
            for offset, day in enumerate(week_dates(plan.start_date, week))
        )
        weeks.append(_summarize_week(week, days))

    return PlanDetail(plan=plan, weeks=tuple(weeks))
