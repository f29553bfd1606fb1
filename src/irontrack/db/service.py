"""Local data service backed by SQLite.

Implements the same contract as the hosted backend so IronTrack works
offline: table queries and row mutations go to an aiosqlite database, blobs
to a directory tree, and accounts to a password-hash table.
"""

import asyncio
import hashlib
import hmac
import logging
import secrets
import sqlite3
from collections.abc import Callable, Sequence
from contextlib import asynccontextmanager
from enum import Enum
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from ..clients.base import Filter, FilterOp, OrderBy, Session, SessionListener
from ..errors import AuthenticationError, NetworkError, ValidationError
from .engine import (
    BOOLEAN_COLUMNS,
    TABLE_COLUMNS,
    TOUCHED_TABLES,
    get_db_path,
    init_db,
    new_id,
    utc_now,
)

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 6


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _to_db(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS
    )
    return digest.hex()


class SqliteDataService:
    """Data service over a local SQLite file and blob directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.db_path = get_db_path(data_dir)
        self.storage_dir = data_dir / "storage"
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    @classmethod
    async def open(cls, data_dir: Path) -> "SqliteDataService":
        """Create the service and make sure the schema exists."""
        service = cls(data_dir)
        await init_db(service.db_path)
        return service

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys = ON")
                await db.create_function("casefold", 1, _casefold, deterministic=True)
                yield db
        except sqlite3.Error as exc:
            logger.error("Local database error: %s", exc)
            raise NetworkError(f"Local database error: {exc}") from exc

    def _column(self, table: str, field: str) -> str:
        columns = TABLE_COLUMNS.get(table)
        if columns is None:
            raise NetworkError(f"Unknown table: {table}")
        if field not in columns:
            raise NetworkError(f"Unknown column {field!r} on {table}")
        return field

    def _row_to_dict(self, table: str, row: aiosqlite.Row) -> dict:
        data = {key: row[key] for key in row.keys()}
        for column in BOOLEAN_COLUMNS.get(table, ()):
            if column in data and data[column] is not None:
                data[column] = bool(data[column])
        return data

    async def _fetch_by_id(self, db: aiosqlite.Connection, table: str, record_id: str) -> dict | None:
        cursor = await db.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,))
        row = await cursor.fetchone()
        return self._row_to_dict(table, row) if row else None

    async def query_records(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
    ) -> list[dict]:
        """Return matching rows; ILIKE filters match case-insensitive substrings."""
        self._column(table, "id")
        clauses = []
        params: list = []
        for flt in filters:
            column = self._column(table, flt.field)
            if flt.op is FilterOp.EQ:
                if flt.value is None:
                    clauses.append(f"{column} IS NULL")
                else:
                    clauses.append(f"{column} = ?")
                    params.append(_to_db(flt.value))
            elif flt.op is FilterOp.ILIKE:
                clauses.append(f"instr(casefold({column}), casefold(?)) > 0")
                params.append(str(flt.value))
            elif flt.op is FilterOp.IN:
                values = [_to_db(v) for v in flt.value]
                if not values:
                    return []
                clauses.append(f"{column} IN ({', '.join('?' for _ in values)})")
                params.extend(values)

        sql = f"SELECT * FROM {table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order_by is not None:
            column = self._column(table, order_by.field)
            sql += f" ORDER BY {column} {'ASC' if order_by.ascending else 'DESC'}"

        async with self._connect() as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_dict(table, row) for row in rows]

    async def insert_record(self, table: str, fields: dict) -> dict:
        """Insert a row, filling id and timestamps like the hosted defaults."""
        values = {self._column(table, k): _to_db(v) for k, v in fields.items()}
        values.setdefault("id", new_id())
        columns = TABLE_COLUMNS[table]
        now = utc_now()
        for stamp in ("created_at", "updated_at"):
            if stamp in columns:
                values.setdefault(stamp, now)
        if table == "workout_sessions":
            values.setdefault("start_time", now)
        # Let column defaults apply instead of binding NULL into NOT NULL columns
        values = {k: v for k, v in values.items() if v is not None}

        names = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        async with self._connect() as db:
            await db.execute(
                f"INSERT INTO {table} ({names}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            await db.commit()
            return await self._fetch_by_id(db, table, values["id"])

    async def update_record(self, table: str, record_id: str, fields: dict) -> dict:
        """Update a row by id and return it."""
        values = {self._column(table, k): _to_db(v) for k, v in fields.items() if k != "id"}
        if table in TOUCHED_TABLES:
            values["updated_at"] = utc_now()
        if not values:
            raise ValidationError("No fields to update")

        assignments = ", ".join(f"{name} = ?" for name in values)
        async with self._connect() as db:
            cursor = await db.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*values.values(), record_id),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NetworkError(f"No {table} record with id {record_id}")
            return await self._fetch_by_id(db, table, record_id)

    async def delete_record(self, table: str, record_id: str) -> None:
        self._column(table, "id")
        async with self._connect() as db:
            cursor = await db.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            await db.commit()
            if cursor.rowcount == 0:
                raise NetworkError(f"No {table} record with id {record_id}")

    async def upload_blob(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Write the blob under the storage directory and return its file URI."""
        if not key or Path(key).name != key or not bucket or Path(bucket).name != bucket:
            raise NetworkError(f"Invalid storage path: {bucket}/{key}")
        path = self.storage_dir / bucket / key
        if path.exists():
            raise NetworkError(f"The resource already exists: {bucket}/{key}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as exc:
            logger.error("Error uploading %s/%s: %s", bucket, key, exc)
            raise NetworkError(f"Upload failed: {exc}") from exc
        return path.resolve().as_uri()

    # Auth

    async def sign_up(
        self, email: str, password: str, username: str | None = None
    ) -> Session | None:
        """Create an account and its profile, then sign in.

        The local backend has no email confirmation, so a session is always
        returned.
        """
        email = email.strip().lower()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )

        user_id = new_id()
        salt = secrets.token_hex(16)
        now = utc_now()
        async with self._connect() as db:
            cursor = await db.execute("SELECT id FROM users WHERE email = ?", (email,))
            if await cursor.fetchone():
                raise AuthenticationError("User already registered")
            await db.execute(
                "INSERT INTO users (id, email, password_hash, salt, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, email, _hash_password(password, salt), salt, now),
            )
            await db.execute(
                "INSERT INTO profiles (id, username, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (user_id, username, now, now),
            )
            await db.commit()

        return await self.sign_in(email, password)

    async def sign_in(self, email: str, password: str) -> Session:
        email = email.strip().lower()
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT id, password_hash, salt FROM users WHERE email = ?", (email,)
            )
            row = await cursor.fetchone()
            if row is None or not hmac.compare_digest(
                row["password_hash"], _hash_password(password, row["salt"])
            ):
                raise AuthenticationError("Invalid login credentials")

            token = secrets.token_urlsafe(32)
            await db.execute(
                "INSERT INTO auth_sessions (access_token, user_id, created_at) VALUES (?, ?, ?)",
                (token, row["id"], utc_now()),
            )
            await db.commit()

        self._set_session(Session(user_id=row["id"], email=email, access_token=token))
        return self._session

    async def sign_out(self) -> None:
        if self._session is None:
            return
        async with self._connect() as db:
            await db.execute(
                "DELETE FROM auth_sessions WHERE access_token = ?",
                (self._session.access_token,),
            )
            await db.commit()
        self._set_session(None)

    async def restore_session(self, session: Session) -> Session | None:
        async with self._connect() as db:
            cursor = await db.execute(
                """
                SELECT u.id, u.email FROM auth_sessions s
                JOIN users u ON u.id = s.user_id
                WHERE s.access_token = ?
                """,
                (session.access_token,),
            )
            row = await cursor.fetchone()
        if row is None:
            logger.info("Stored session is no longer valid")
            return None
        self._set_session(
            Session(user_id=row["id"], email=row["email"], access_token=session.access_token)
        )
        return self._session

    async def get_current_session(self) -> Session | None:
        return self._session

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    async def close(self) -> None:
        self._listeners.clear()
