"""Account commands: sign up, log in, log out."""

import click

from ..errors import IronTrackError
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    get_settings,
    open_session,
    store_session,
)


@click.group()
@click.pass_context
def auth(ctx):
    """Manage your IronTrack account."""
    ensure_initialized(ctx)


@auth.command()
@click.argument("email")
@click.password_option("--password", "-p", confirmation_prompt=False)
@click.pass_context
@async_command
async def login(ctx, email: str, password: str):
    """Sign in with email and password."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        try:
            snapshot = await session.sign_in(email, password)
        except IronTrackError as e:
            echo_error(f"Login failed: {e}")
            ctx.exit(1)
        store_session(settings, snapshot.session)

    echo_success(f"Signed in as {snapshot.email}")
    if snapshot.needs_onboarding:
        echo_info("Finish your profile with 'irontrack onboard'")


@auth.command()
@click.argument("email")
@click.password_option("--password", "-p")
@click.pass_context
@async_command
async def signup(ctx, email: str, password: str):
    """Create an account."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        try:
            snapshot = await session.sign_up(email, password)
        except IronTrackError as e:
            echo_error(f"Sign-up failed: {e}")
            ctx.exit(1)

        if snapshot is None:
            echo_success("Account created. Check your email to confirm it, then log in.")
            return
        store_session(settings, snapshot.session)

    echo_success(f"Account created; signed in as {snapshot.email}")
    echo_info("Next: 'irontrack onboard'")


@auth.command()
@click.pass_context
@async_command
async def logout(ctx):
    """Sign out and forget the stored session."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        if session.user_id is None:
            echo_info("Not signed in.")
            return
        try:
            await session.sign_out()
        except IronTrackError as e:
            echo_warning(f"Remote sign-out failed ({e}); forgetting the local session anyway")
    store_session(settings, None)
    echo_success("Signed out")


@auth.command()
@click.pass_context
@async_command
async def whoami(ctx):
    """Show the signed-in user and profile."""
    settings = get_settings(ctx)
    async with open_session(settings) as session:
        snapshot = session.snapshot

    if not snapshot.is_authenticated:
        echo_info("Not signed in.")
        return

    click.echo(f"Email: {snapshot.email}")
    if snapshot.profile:
        click.echo(snapshot.profile.get_summary().rstrip())
    if snapshot.needs_onboarding:
        echo_info("Profile incomplete. Run 'irontrack onboard'.")
