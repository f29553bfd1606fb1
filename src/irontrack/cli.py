"""CLI entry point for IronTrack."""

import logging

import click

from . import __version__
from .commands import auth, dashboard, exercises, init, onboard, routines, serve, workout


@click.group()
@click.version_option(version=__version__, prog_name="irontrack")
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug)")
@click.pass_context
def main(ctx: click.Context, verbose: int):
    """IronTrack: workout tracking with a searchable exercise library.

    Works against a hosted Supabase project (set SUPABASE_URL and
    SUPABASE_ANON_KEY) or a local SQLite database.

    Example usage:

        # Initialize the local database
        irontrack init

        # Create an account and finish your profile
        irontrack auth signup you@example.com
        irontrack onboard

        # Browse exercises and build routines
        irontrack exercises list --muscle Peito
        irontrack routines create "Push Day"
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)


main.add_command(init)
main.add_command(auth)
main.add_command(onboard)
main.add_command(exercises)
main.add_command(routines)
main.add_command(workout)
main.add_command(dashboard)
main.add_command(serve)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
