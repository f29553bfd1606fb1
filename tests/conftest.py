"""Pytest configuration and fixtures."""

import asyncio

import pytest
import pytest_asyncio

from irontrack.clients.base import Query, Session
from irontrack.db import SqliteDataService, seed_exercises
from irontrack.errors import NetworkError
from irontrack.models.exercises import EquipmentType, Exercise, MuscleGroup
from irontrack.services.session import SessionContext


def exercise_row(name, muscle_group="Peito", equipment="Barra", record_id=None, **extra):
    """A row as the exercises table returns it."""
    row = {
        "id": record_id or f"ex-{name}",
        "name": name,
        "muscle_group": muscle_group,
        "equipment": equipment,
        "instructions": None,
        "image_url": None,
        "video_url": None,
        "is_verified": True,
        "created_by": None,
        "created_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(extra)
    return row


class FakeDataService:
    """In-memory data service that records calls.

    With ``manual = True`` every query blocks on a future in ``pending``
    so tests decide when (and in which order) responses arrive.
    """

    def __init__(self, rows: dict[str, list[dict]] | None = None):
        self.rows = rows or {}
        self.queries: list[Query] = []
        self.calls: list[tuple] = []
        self.pending: list[asyncio.Future] = []
        self.manual = False
        self.query_error: Exception | None = None
        self.insert_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.session: Session | None = None
        self._listeners = []
        self._next_id = 0

    async def query_records(self, table, filters=(), order_by=None):
        self.queries.append(Query(table, tuple(filters), order_by))
        self.calls.append(("query", table))
        if self.manual:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        if self.query_error is not None:
            raise self.query_error
        return [dict(row) for row in self.rows.get(table, []) if _matches(row, filters)]

    async def insert_record(self, table, fields):
        self.calls.append(("insert", table, dict(fields)))
        if self.insert_error is not None:
            raise self.insert_error
        self._next_id += 1
        row = {"id": f"{table}-{self._next_id}", "created_at": "2024-02-01T10:00:00+00:00"}
        row.update({k: getattr(v, "value", v) for k, v in fields.items()})
        self.rows.setdefault(table, []).append(row)
        return dict(row)

    async def update_record(self, table, record_id, fields):
        self.calls.append(("update", table, record_id, dict(fields)))
        for row in self.rows.get(table, []):
            if row["id"] == record_id:
                row.update(fields)
                return dict(row)
        raise NetworkError(f"No {table} record with id {record_id}")

    async def delete_record(self, table, record_id):
        self.calls.append(("delete", table, record_id))
        if self.delete_error is not None:
            raise self.delete_error
        self.rows[table] = [r for r in self.rows.get(table, []) if r["id"] != record_id]

    async def upload_blob(self, bucket, key, data, content_type=None):
        self.calls.append(("upload", bucket, key, content_type))
        if self.upload_error is not None:
            raise self.upload_error
        return f"https://storage.test/{bucket}/{key}"

    async def sign_in(self, email, password):
        self.session = Session(user_id="user-1", email=email, access_token="token")
        self._notify()
        return self.session

    async def sign_up(self, email, password, username=None):
        self.calls.append(("sign_up", email, username))
        return await self.sign_in(email, password)

    async def sign_out(self):
        self.session = None
        self._notify()

    async def restore_session(self, session):
        self.session = session
        return session

    async def get_current_session(self):
        return self.session

    def on_session_change(self, callback):
        self._listeners.append(callback)
        return lambda: self._listeners.remove(callback)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.session)

    async def close(self):
        self._listeners.clear()

    def resolve(self, index, rows):
        """Complete the ``index``-th pending query with ``rows``."""
        self.pending[index].set_result(rows)

    def fail(self, index, error=None):
        self.pending[index].set_exception(error or NetworkError("connection reset"))


def _matches(row, filters):
    for flt in filters:
        value = row.get(flt.field)
        target = getattr(flt.value, "value", flt.value)
        if flt.op.value == "eq" and value != target:
            return False
        if flt.op.value == "ilike" and str(target).casefold() not in str(value).casefold():
            return False
        if flt.op.value == "in" and value not in [getattr(v, "value", v) for v in flt.value]:
            return False
    return True


@pytest.fixture
def make_row():
    """Factory for exercises table rows."""
    return exercise_row


@pytest.fixture
def fake_service():
    """Fake data service with a few exercises."""
    return FakeDataService(
        {
            "exercises": [
                exercise_row("Supino Reto com Barra"),
                exercise_row("Leg Press", "Pernas", "Máquina"),
                exercise_row("Agachamento com Barra", "Pernas", "Barra"),
            ],
            "profiles": [{"id": "user-1", "username": "ana", "xp": 120, "level": 2}],
        }
    )


@pytest_asyncio.fixture
async def signed_in(fake_service):
    """Session context signed in against the fake service."""
    context = SessionContext(fake_service)
    await context.sign_in("ana@example.com", "secret123")
    return context


@pytest_asyncio.fixture
async def sqlite_service(tmp_path):
    """Seeded local data service in a temporary directory."""
    service = await SqliteDataService.open(tmp_path / "data")
    await seed_exercises(service.db_path)
    yield service
    await service.close()


@pytest.fixture
def sample_exercise():
    return Exercise(
        name="Remada Curvada com Barra",
        muscle_group=MuscleGroup.BACK,
        equipment=EquipmentType.BARBELL,
        instructions="Tronco inclinado, puxar a barra até ao abdómen.",
    )
