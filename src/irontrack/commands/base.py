"""Shared CLI utilities."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import wraps

import click

from ..clients.base import Session
from ..config import Settings, create_data_service
from ..db import get_db_path
from ..db.engine import DB_FILENAME
from ..errors import ConfigurationError
from ..services.session import SessionContext

logger = logging.getLogger(__name__)


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_settings(ctx: click.Context) -> Settings:
    """Settings loaded once per invocation and kept on the root context."""
    root = ctx.find_root()
    root.ensure_object(dict)
    if "settings" not in root.obj:
        try:
            root.obj["settings"] = Settings.from_env()
        except ConfigurationError as e:
            echo_error(str(e))
            ctx.exit(1)
    return root.obj["settings"]


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the local database is initialized (no-op for the hosted backend)."""
    settings = get_settings(ctx)
    if settings.resolved_backend != "local":
        return
    if not (settings.data_dir / DB_FILENAME).exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'irontrack init' first."
        )
        ctx.exit(1)


def load_stored_session(settings: Settings) -> Session | None:
    path = settings.session_file
    if not path.exists():
        return None
    try:
        return Session.from_dict(json.loads(path.read_text()))
    except (ValueError, KeyError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", path, e)
        return None


def store_session(settings: Settings, session: Session | None) -> None:
    """Persist the session for later invocations, or remove it."""
    path = settings.session_file
    if session is None:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(session.to_dict(), indent=2))
    path.chmod(0o600)


@asynccontextmanager
async def open_session(settings: Settings) -> AsyncIterator[SessionContext]:
    """Connect the configured backend and resume the stored session, if any."""
    if settings.resolved_backend == "local":
        get_db_path(settings.data_dir)
    service = await create_data_service(settings)
    context = SessionContext(service)
    try:
        stored = load_stored_session(settings)
        if stored is not None:
            snapshot = await context.restore(stored)
            # Tokens may have been refreshed; an expired session is dropped
            store_session(settings, snapshot.session)
        yield context
    finally:
        await service.close()


def require_user(ctx: click.Context, context: SessionContext) -> str:
    """Return the signed-in user id or exit with a hint to log in."""
    if context.user_id is None:
        echo_error("Not signed in. Run 'irontrack auth login' first.")
        ctx.exit(1)
    return context.user_id


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def truncate(text: str | None, width: int = 30) -> str:
    if not text:
        return ""
    return text[:width] + "..." if len(text) > width else text


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)
