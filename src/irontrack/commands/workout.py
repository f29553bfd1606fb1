"""Workout tracking commands."""

import click

from ..errors import IronTrackError
from ..services.workouts import WorkoutService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_settings,
    open_session,
    require_user,
    truncate,
)


@click.group()
@click.pass_context
def workout(ctx):
    """Track workout sessions and sets."""
    ensure_initialized(ctx)


@workout.command()
@click.option("--routine", "routine_id", help="Routine this session follows")
@click.option("--name", "-n", help="Session name")
@click.pass_context
@async_command
async def start(ctx, routine_id: str | None, name: str | None):
    """Start a workout session."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        require_user(ctx, session)
        try:
            started = await WorkoutService(session).start_session(routine_id, name)
        except IronTrackError as e:
            echo_error(f"Could not start workout: {e}")
            ctx.exit(1)

    echo_success(f"Workout started (ID: {started.id})")
    click.echo(f"Log sets with: irontrack workout log {started.id} <exercise-id> -w 60 -r 10")


@workout.command()
@click.argument("session_id")
@click.argument("exercise_id")
@click.option("--weight", "-w", type=float, help="Weight (kg)")
@click.option("--reps", "-r", type=int, help="Repetitions")
@click.option("--rpe", type=float, help="Rate of perceived exertion (1-10)")
@click.option("--failed", is_flag=True, help="Mark the set as not completed")
@click.pass_context
@async_command
async def log(ctx, session_id, exercise_id, weight, reps, rpe, failed: bool):
    """Log a set in an open session."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        require_user(ctx, session)
        try:
            logged = await WorkoutService(session).log_set(
                session_id,
                exercise_id,
                weight=weight,
                reps=reps,
                rpe=rpe,
                completed=not failed,
            )
        except IronTrackError as e:
            echo_error(f"Could not log set: {e}")
            ctx.exit(1)

    echo_success(
        f"Set {logged.set_number}: {logged.weight or 0:g}kg x {logged.reps or 0}"
        + ("" if logged.completed else " (not completed)")
    )


@workout.command()
@click.argument("session_id")
@click.option("--notes", help="Notes about the session")
@click.pass_context
@async_command
async def finish(ctx, session_id: str, notes: str | None):
    """Finish a workout session."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        require_user(ctx, session)
        service = WorkoutService(session)
        try:
            finished = await service.finish_session(session_id, notes)
            logs = await service.session_logs(session_id)
        except IronTrackError as e:
            echo_error(f"Could not finish workout: {e}")
            ctx.exit(1)

    volume = sum(entry.volume for entry in logs)
    echo_success(
        f"Workout finished: {finished.duration_minutes or 0:.0f} min, "
        f"{len(logs)} set(s), {volume:g}kg volume"
    )


@workout.command()
@click.pass_context
@async_command
async def history(ctx):
    """List your workout sessions."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        require_user(ctx, session)
        try:
            sessions = await WorkoutService(session).list_sessions()
        except IronTrackError as e:
            echo_error(f"Could not load workouts: {e}")
            ctx.exit(1)

    if not sessions:
        echo_info("No workouts yet. Start one with 'irontrack workout start'")
        return

    headers = ["ID", "Name", "Started", "Duration"]
    rows = []
    for entry in sessions:
        duration = f"{entry.duration_minutes:.0f} min" if entry.is_finished else "in progress"
        rows.append([
            entry.id,
            truncate(entry.name) or "-",
            entry.start_time.strftime("%Y-%m-%d %H:%M"),
            duration,
        ])

    click.echo()
    click.echo(format_table(headers, rows))
