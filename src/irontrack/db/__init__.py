"""Local database layer for IronTrack."""

from .engine import get_db_path, init_db, seed_exercises
from .service import SqliteDataService

__all__ = [
    "get_db_path",
    "init_db",
    "seed_exercises",
    "SqliteDataService",
]
