"""Routine management commands."""

import click

from ..controllers import FilterState, ListState, RoutineListController
from ..errors import IronTrackError
from ..services.creation import RoutineCreationFlow, RoutineForm
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
def routines(ctx):
    """Manage your training routines."""
    ensure_initialized(ctx)


@routines.command(name="list")
@click.option("--search", "-s", default="", help="Name contains (case-insensitive)")
@click.pass_context
@async_command
async def list_routines(ctx, search: str):
    """List your routines, newest first."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        user_id = require_user(ctx, session)
        controller = RoutineListController(
            session.service, user_id, filters=FilterState(search_text=search)
        )
        await controller.activate()
        controller.close()

    if controller.state is ListState.ERROR:
        echo_error(f"Could not load routines: {controller.error}")
        ctx.exit(1)

    if not controller.results:
        echo_info("No routines yet. Create one with 'irontrack routines create'")
        return

    headers = ["ID", "Name", "Description", "Created"]
    rows = []
    for routine in controller.results:
        created = routine.created_at.strftime("%Y-%m-%d") if routine.created_at else "N/A"
        rows.append([routine.id, truncate(routine.name), truncate(routine.description, 40), created])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(controller.results)} routine(s)")


@routines.command()
@click.argument("name")
@click.option("--description", "-d", default="", help="Optional description")
@click.pass_context
@async_command
async def create(ctx, name: str, description: str):
    """Create a new routine."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        require_user(ctx, session)
        flow = RoutineCreationFlow(session.service, session)
        try:
            routine = await flow.submit(RoutineForm(name=name, description=description))
        except IronTrackError as e:
            echo_error(f"Could not create routine: {e}")
            ctx.exit(1)

    echo_success(f"Created routine '{routine.name}' (ID: {routine.id})")


@routines.command()
@click.argument("routine_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, routine_id: str, force: bool):
    """Delete a routine."""
    if not force:
        click.confirm(f"Delete routine {routine_id}?", abort=True)

    settings = get_settings(ctx)
    async with open_session(settings) as session:
        user_id = require_user(ctx, session)
        controller = RoutineListController(session.service, user_id)
        deleted = await controller.delete(routine_id)
        controller.close()

    if not deleted:
        echo_error(f"Could not delete routine: {controller.error}")
        ctx.exit(1)

    echo_success(f"Deleted routine {routine_id}")
