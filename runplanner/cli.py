"""RunPlanner CLI.

Command-line front end over the plan, workout, user and generation services.
Uses the SQL stores configured by DATABASE_URL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from runplanner.config.settings import settings
from runplanner.core.errors import (
    ConflictError,
    GenerationFailedError,
    GenerationNotConfiguredError,
    InvalidInputError,
    NotFoundError,
    RunPlannerError,
)
from runplanner.core.logger import setup_logger
from runplanner.db.session import init_db
from runplanner.llm.completion import build_completion_client
from runplanner.plans.aggregation import WeekSummary
from runplanner.plans.calendar import format_date, parse_date
from runplanner.plans.types import TrainingPlan, Workout, WorkoutStatus
from runplanner.services.generate_service import GenerateInput, GenerateService
from runplanner.services.training_plan_service import TrainingPlanService
from runplanner.services.user_service import UserService
from runplanner.services.workout_service import WorkoutService, WorkoutUpdate
from runplanner.stores.sql import SqlTrainingPlanStore, SqlUserStore, SqlWorkoutStore

console = Console()

app = typer.Typer(
    name="runplanner",
    help="RunPlanner - training plans anchored to a race date",
    add_completion=False,
)

EXIT_CODES: dict[type[RunPlannerError], int] = {
    InvalidInputError: 2,
    NotFoundError: 3,
    ConflictError: 4,
    GenerationNotConfiguredError: 5,
    GenerationFailedError: 6,
}


@dataclass
class Services:
    plans: TrainingPlanService
    workouts: WorkoutService
    users: UserService
    generate: GenerateService


def build_services() -> Services:
    plan_store = SqlTrainingPlanStore()
    plans = TrainingPlanService(plan_store)
    workouts = WorkoutService(SqlWorkoutStore())
    return Services(
        plans=plans,
        workouts=workouts,
        users=UserService(SqlUserStore(), plan_store),
        generate=GenerateService(build_completion_client(settings), plans, workouts),
    )


def _exit_for(error: RunPlannerError) -> typer.Exit:
    code = next((c for kind, c in EXIT_CODES.items() if isinstance(error, kind)), 1)
    console.print(f"[red]Error:[/red] {error}")
    for note in getattr(error, "__notes__", []):
        console.print(f"[dim]{note}[/dim]")
    return typer.Exit(code=code)


def _print_plan(plan: TrainingPlan) -> None:
    console.print(
        f"[bold]{plan.name}[/bold] ({plan.id})\n"
        f"  {format_date(plan.start_date)} → {format_date(plan.end_date)}, {plan.weeks} weeks"
    )


def _print_workouts(workouts: list[Workout]) -> None:
    table = Table(title="Workouts")
    table.add_column("ID", style="dim")
    table.add_column("Day")
    table.add_column("Type")
    table.add_column("km", justify="right")
    table.add_column("Status")
    table.add_column("Description")
    for workout in workouts:
        table.add_row(
            workout.id,
            format_date(workout.day),
            workout.run_type.value,
            f"{workout.distance:g}",
            workout.status.value,
            workout.description,
        )
    console.print(table)


def _week_table(week: WeekSummary) -> Table:
    status = "[green]done[/green]" if week.all_done else ""
    table = Table(title=f"Week {week.week}  planned {week.planned_km:g} km  done {week.done_km:g} km  {status}")
    table.add_column("Day")
    table.add_column("Date")
    table.add_column("Workouts")
    for day in week.days:
        entries = [
            f"{w.run_type.value} {w.distance:g} km [{w.status.value}]" for w in day.workouts
        ]
        table.add_row(day.weekday, format_date(day.date), "\n".join(entries) or "-")
    return table


@app.callback()
def main(
    log_level: Annotated[str | None, typer.Option("--log-level", help="Override LOG_LEVEL")] = None,
) -> None:
    setup_logger(settings, level=log_level)


@app.command("init-db")
def init_db_command() -> None:
    """Create database tables."""
    init_db()
    console.print("[green]Database initialized[/green]")


@app.command()
def register(email: str) -> None:
    """Register a user by email."""
    try:
        user = build_services().users.register(email)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    console.print(f"[green]Registered[/green] {user.email} ({user.id})")


@app.command("create-plan")
def create_plan(
    user_id: str,
    name: str,
    end_date: str,
    weeks: int,
    race_goal: Annotated[str | None, typer.Option("--race-goal", help="5k, 10k, halfmarathon or marathon")] = None,
) -> None:
    """Create an empty plan ending on END_DATE (YYYY-MM-DD)."""
    services = build_services()
    try:
        plan = services.plans.create_with_race_goal(
            user_id, name, parse_date(end_date), weeks, race_goal, services.workouts
        )
    except RunPlannerError as e:
        raise _exit_for(e) from e
    _print_plan(plan)


@app.command()
def generate(
    user_id: str,
    name: str,
    end_date: str,
    weeks: Annotated[int, typer.Option("--weeks", help="Plan length (>= 6)")],
    base_km: Annotated[float, typer.Option("--base-km", help="Current weekly volume in km")],
    runs_per_week: Annotated[int, typer.Option("--runs-per-week", help="Runs per week (2-7)")],
    race_goal: Annotated[str, typer.Option("--race-goal", help="5k, 10k, halfmarathon or marathon")],
) -> None:
    """Generate a plan with AI-proposed workouts."""
    services = build_services()
    try:
        data = GenerateInput(
            name=name,
            end_date=parse_date(end_date),
            weeks=weeks,
            base_km_per_week=base_km,
            runs_per_week=runs_per_week,
            race_goal=race_goal,
        )
        with console.status("Generating training plan..."):
            plan, workouts = asyncio.run(services.generate.generate(user_id, data))
    except RunPlannerError as e:
        raise _exit_for(e) from e
    _print_plan(plan)
    _print_workouts(workouts)


@app.command()
def plans(user_id: str) -> None:
    """List a user's plans by race date."""
    try:
        user_plans = build_services().plans.get_by_user_id(user_id)
    except RunPlannerError as e:
        raise _exit_for(e) from e

    table = Table(title="Plans")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Start")
    table.add_column("Race")
    table.add_column("Weeks", justify="right")
    for plan in user_plans:
        table.add_row(plan.id, plan.name, format_date(plan.start_date), format_date(plan.end_date), str(plan.weeks))
    console.print(table)


@app.command()
def show(user_id: str, plan_id: str) -> None:
    """Show one of the user's plans week by week with distance totals."""
    services = build_services()
    try:
        plan = services.plans.get_owned(plan_id, user_id)
        detail = services.plans.get_detail(plan, services.workouts.get_by_plan_id(plan_id))
    except RunPlannerError as e:
        raise _exit_for(e) from e

    _print_plan(plan)
    for week in detail.weeks:
        console.print(_week_table(week))
    console.print(f"Total: planned {detail.planned_km:g} km, done {detail.done_km:g} km")


@app.command("add-workout")
def add_workout(
    plan_id: str,
    run_type: str,
    day: str,
    distance: float,
    description: Annotated[str, typer.Option("--description")] = "",
) -> None:
    """Add a single workout to a plan."""
    services = build_services()
    try:
        plan = services.plans.get_by_id(plan_id)
        workout = services.workouts.create(plan.id, run_type, parse_date(day), description, distance)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    _print_workouts([workout])


@app.command("update-workout")
def update_workout(
    workout_id: str,
    status: Annotated[str | None, typer.Option("--status", help="pending, completed or skipped")] = None,
    distance: Annotated[float | None, typer.Option("--distance")] = None,
    run_type: Annotated[str | None, typer.Option("--run-type")] = None,
    day: Annotated[str | None, typer.Option("--day", help="YYYY-MM-DD")] = None,
    description: Annotated[str | None, typer.Option("--description")] = None,
    notes: Annotated[str | None, typer.Option("--notes")] = None,
) -> None:
    """Change only the given fields of a workout."""
    changes: dict[str, object] = {
        "status": status,
        "distance": distance,
        "run_type": run_type,
        "description": description,
        "notes": notes,
    }
    try:
        if day is not None:
            changes["day"] = parse_date(day)
        update = WorkoutUpdate(**{k: v for k, v in changes.items() if v is not None})
        workout = build_services().workouts.update(workout_id, update)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    _print_workouts([workout])


@app.command("complete")
def complete_workout(workout_id: str) -> None:
    """Mark a workout as completed."""
    try:
        workout = build_services().workouts.update(workout_id, WorkoutUpdate(status=WorkoutStatus.COMPLETED))
    except RunPlannerError as e:
        raise _exit_for(e) from e
    _print_workouts([workout])


@app.command("delete-workout")
def delete_workout(workout_id: str) -> None:
    """Delete a workout."""
    try:
        build_services().workouts.delete(workout_id)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    console.print("[green]Workout deleted[/green]")


@app.command("delete-plan")
def delete_plan(user_id: str, plan_id: str) -> None:
    """Delete one of the user's plans and its workouts."""
    services = build_services()
    try:
        services.plans.get_owned(plan_id, user_id)
        for workout in services.workouts.get_by_plan_id(plan_id):
            services.workouts.delete(workout.id)
        services.plans.delete(plan_id)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    console.print("[green]Plan deleted[/green]")


@app.command()
def activate(user_id: str, plan_id: str) -> None:
    """Toggle PLAN_ID as the user's active plan."""
    try:
        active = build_services().users.toggle_active_plan(user_id, plan_id)
    except RunPlannerError as e:
        raise _exit_for(e) from e
    if active is None:
        console.print("Active plan cleared")
    else:
        console.print(f"Active plan: {active}")
    logger.debug("Active plan toggled", user_id=user_id, active_plan_id=active)


if __name__ == "__main__":
    app()
