"""Runtime configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.cwd() / "data"
DEFAULT_SEARCH_DEBOUNCE_MS = 300

# Checked in order; the prefixed names let one .env serve a web build too
URL_VARS = ("SUPABASE_URL", "VITE_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
KEY_VARS = ("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY")

BACKENDS = ("auto", "supabase", "local")


def _first_env(names: tuple[str, ...], environ) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    """IronTrack settings."""

    backend: str = "auto"
    supabase_url: str | None = None
    supabase_key: str | None = None
    data_dir: Path = DEFAULT_DATA_DIR
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    email_redirect_to: str | None = None

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000

    @property
    def resolved_backend(self) -> str:
        """The backend actually used, resolving ``auto``."""
        if self.backend == "auto":
            return "supabase" if self.supabase_url and self.supabase_key else "local"
        return self.backend

    @property
    def session_file(self) -> Path:
        return self.data_dir / "session.json"

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables (and ``.env`` if present)."""
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        backend = environ.get("IRONTRACK_BACKEND", "auto").strip().lower()
        if backend not in BACKENDS:
            raise ConfigurationError(
                f"IRONTRACK_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}"
            )

        debounce = environ.get("IRONTRACK_SEARCH_DEBOUNCE_MS")
        try:
            debounce_ms = int(debounce) if debounce else DEFAULT_SEARCH_DEBOUNCE_MS
        except ValueError as exc:
            raise ConfigurationError(
                f"IRONTRACK_SEARCH_DEBOUNCE_MS must be an integer, got {debounce!r}"
            ) from exc
        if debounce_ms < 0:
            raise ConfigurationError("IRONTRACK_SEARCH_DEBOUNCE_MS must not be negative")

        data_dir = environ.get("IRONTRACK_DATA_DIR")
        settings = cls(
            backend=backend,
            supabase_url=_first_env(URL_VARS, environ),
            supabase_key=_first_env(KEY_VARS, environ),
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            search_debounce_ms=debounce_ms,
            email_redirect_to=environ.get("IRONTRACK_EMAIL_REDIRECT") or None,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.backend == "supabase" and not (self.supabase_url and self.supabase_key):
            raise ConfigurationError(
                "Supabase backend selected but SUPABASE_URL / SUPABASE_ANON_KEY are missing. "
                f"Checked: {', '.join(URL_VARS + KEY_VARS)}"
            )


async def create_data_service(settings: Settings):
    """Create the data service selected by ``settings``."""
    if settings.resolved_backend == "supabase":
        from .clients.supabase import SupabaseDataService

        logger.info("Using Supabase backend at %s", settings.supabase_url)
        return await SupabaseDataService.connect(
            settings.supabase_url,
            settings.supabase_key,
            email_redirect_to=settings.email_redirect_to,
        )

    from .db import SqliteDataService

    logger.info("Using local backend in %s", settings.data_dir)
    return await SqliteDataService.open(settings.data_dir)
