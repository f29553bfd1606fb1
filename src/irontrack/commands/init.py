"""Initialize project command."""

import click

from ..db import get_db_path, init_db, seed_exercises
from .base import async_command, echo_info, echo_success, get_settings


@click.command()
@click.pass_context
@async_command
async def init(ctx: click.Context):
    """Initialize the local IronTrack database.

    Creates the data directory and the SQLite database with the schema and
    the built-in exercise library. With the Supabase backend configured
    there is nothing to set up locally.
    """
    settings = get_settings(ctx)

    if settings.resolved_backend == "supabase":
        echo_info(f"Using Supabase at {settings.supabase_url}; no local setup needed.")
        return

    db_path = get_db_path(settings.data_dir)
    echo_info(f"Initializing IronTrack in {settings.data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    added = await seed_exercises(db_path)
    echo_success(f"Exercise library populated ({added} new exercises)")

    click.echo()
    click.echo("IronTrack is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create an account:")
    click.echo("     irontrack auth signup you@example.com")
    click.echo()
    click.echo("  2. Tell us about your training:")
    click.echo("     irontrack onboard")
    click.echo()
    click.echo("  3. Browse the exercise library:")
    click.echo('     irontrack exercises list --search supino --muscle Peito')
