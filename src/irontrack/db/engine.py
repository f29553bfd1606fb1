"""Local database setup and initialization."""

import uuid
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

DB_FILENAME = "irontrack.db"

# Columns per table; queries may only filter and order on these
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "profiles": (
        "id", "username", "avatar_url", "height", "weight", "age", "gender",
        "fitness_goal", "experience_level", "xp", "level", "created_at", "updated_at",
    ),
    "exercises": (
        "id", "name", "muscle_group", "equipment", "instructions", "video_url",
        "image_url", "created_by", "is_verified", "created_at",
    ),
    "routines": (
        "id", "user_id", "name", "description", "is_public", "created_at", "updated_at",
    ),
    "routine_exercises": (
        "id", "routine_id", "exercise_id", "order_index", "target_sets",
        "target_reps", "rest_seconds", "notes",
    ),
    "workout_sessions": (
        "id", "user_id", "routine_id", "name", "start_time", "end_time", "notes",
    ),
    "workout_logs": (
        "id", "session_id", "exercise_id", "set_number", "weight", "reps", "rpe",
        "completed", "created_at",
    ),
}

# Columns stored as INTEGER 0/1 and returned as bool
BOOLEAN_COLUMNS: dict[str, tuple[str, ...]] = {
    "exercises": ("is_verified",),
    "routines": ("is_public",),
    "workout_logs": ("completed",),
}

# Tables that carry an updated_at column bumped on every update
TOUCHED_TABLES = ("profiles", "routines")


def get_db_path(data_dir: Path) -> Path:
    """Get the database file path inside ``data_dir``."""
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_FILENAME


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


async def init_db(db_path: Path) -> None:
    """Initialize the database schema."""
    async with aiosqlite.connect(db_path) as db:
        # Accounts (stands in for the hosted auth service)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                salt TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS auth_sessions (
                access_token TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS profiles (
                id TEXT PRIMARY KEY,
                username TEXT,
                avatar_url TEXT,
                height REAL,
                weight REAL,
                age INTEGER,
                gender TEXT,
                fitness_goal TEXT,
                experience_level TEXT,
                xp INTEGER NOT NULL DEFAULT 0,
                level INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                muscle_group TEXT NOT NULL,
                equipment TEXT NOT NULL,
                instructions TEXT,
                video_url TEXT,
                image_url TEXT,
                created_by TEXT,
                is_verified INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS routines (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                is_public INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS routine_exercises (
                id TEXT PRIMARY KEY,
                routine_id TEXT NOT NULL,
                exercise_id TEXT NOT NULL,
                order_index INTEGER NOT NULL,
                target_sets INTEGER NOT NULL DEFAULT 3,
                target_reps TEXT NOT NULL DEFAULT '8-12',
                rest_seconds INTEGER NOT NULL DEFAULT 90,
                notes TEXT,
                FOREIGN KEY (routine_id) REFERENCES routines(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS workout_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                routine_id TEXT,
                name TEXT,
                start_time TEXT NOT NULL,
                end_time TEXT,
                notes TEXT,
                FOREIGN KEY (routine_id) REFERENCES routines(id) ON DELETE SET NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS workout_logs (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL,
                exercise_id TEXT NOT NULL,
                set_number INTEGER NOT NULL,
                weight REAL,
                reps INTEGER,
                rpe REAL,
                completed INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                FOREIGN KEY (session_id) REFERENCES workout_sessions(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        # Indexes for the common list queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_name
            ON exercises(name)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_routines_user
            ON routines(user_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_sessions_user
            ON workout_sessions(user_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_logs_session
            ON workout_logs(session_id)
        """)

        await db.commit()


async def seed_exercises(db_path: Path) -> int:
    """Seed the exercise library with the built-in verified exercises.

    Exercises whose name already exists are skipped. Returns the number added.
    """
    from ..models.exercises import COMMON_EXERCISES

    added = 0
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("SELECT name FROM exercises")
        existing = {row[0] for row in await cursor.fetchall()}

        for exercise in COMMON_EXERCISES:
            if exercise.name in existing:
                continue
            data = exercise.to_dict()
            await db.execute(
                """
                INSERT INTO exercises
                (id, name, muscle_group, equipment, instructions, video_url,
                 image_url, created_by, is_verified, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    new_id(),
                    data["name"],
                    data["muscle_group"],
                    data["equipment"],
                    data["instructions"],
                    data["video_url"],
                    data["image_url"],
                    None,
                    1,
                    utc_now(),
                ),
            )
            added += 1

        await db.commit()
    return added
