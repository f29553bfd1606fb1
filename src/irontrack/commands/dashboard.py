"""Dashboard command."""

import click

from ..errors import IronTrackError
from ..services.dashboard import compute_stats
from .base import (
    async_command,
    echo_error,
    echo_info,
    ensure_initialized,
    get_settings,
    open_session,
    require_user,
)


@click.command()
@click.pass_context
@async_command
async def dashboard(ctx):
    """Show your training stats."""
    ensure_initialized(ctx)
    settings = get_settings(ctx)

    async with open_session(settings) as session:
        require_user(ctx, session)
        try:
            stats = await compute_stats(session)
        except IronTrackError as e:
            echo_error(f"Could not load stats: {e}")
            ctx.exit(1)
        snapshot = session.snapshot

    name = snapshot.profile.username if snapshot.profile and snapshot.profile.username else snapshot.email
    click.echo()
    click.echo(click.style(f"Olá, {name}!", bold=True))
    click.echo("=" * 40)
    for label, value in stats.to_rows():
        click.echo(f"  {label:<14}{value}")
    click.echo()

    if snapshot.needs_onboarding:
        echo_info("Complete your profile with 'irontrack onboard'")
