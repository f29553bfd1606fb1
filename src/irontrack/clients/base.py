"""Protocol for the remote data service behind IronTrack."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class FilterOp(str, Enum):
    """Predicates a query filter can apply to a field."""

    EQ = "eq"  # exact equality
    ILIKE = "ilike"  # case-insensitive substring; the value is plain text, not a pattern
    IN = "in"  # membership in a list of values


@dataclass(frozen=True)
class Filter:
    """One predicate of a conjunctive query."""

    field: str
    op: FilterOp
    value: Any

    @classmethod
    def eq(cls, field: str, value: Any) -> "Filter":
        return cls(field, FilterOp.EQ, value)

    @classmethod
    def contains(cls, field: str, text: str) -> "Filter":
        return cls(field, FilterOp.ILIKE, text)

    @classmethod
    def one_of(cls, field: str, values: Sequence[Any]) -> "Filter":
        return cls(field, FilterOp.IN, tuple(values))


@dataclass(frozen=True)
class OrderBy:
    field: str
    ascending: bool = True


@dataclass(frozen=True)
class Query:
    """A table query: all filters must hold (AND), results sorted by ``order_by``."""

    table: str
    filters: tuple[Filter, ...] = ()
    order_by: OrderBy | None = None


@dataclass(frozen=True)
class Session:
    """An authenticated session issued by the data service."""

    user_id: str
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            user_id=data["user_id"],
            email=data.get("email"),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )


SessionListener = Callable[[Session | None], None]


@runtime_checkable
class DataService(Protocol):
    """Protocol for hosted (or local) data services.

    Every method raises ``NetworkError`` when the underlying call fails.
    """

    async def query_records(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
    ) -> list[dict]:
        """Return the rows of ``table`` matching every filter, in order."""
        ...

    async def insert_record(self, table: str, fields: dict) -> dict:
        """Insert a row and return it as stored (with id and defaults)."""
        ...

    async def update_record(self, table: str, record_id: str, fields: dict) -> dict:
        """Update the row with ``record_id`` and return it as stored."""
        ...

    async def delete_record(self, table: str, record_id: str) -> None:
        ...

    async def upload_blob(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Store ``data`` under ``key`` and return a public reference to it."""
        ...

    async def sign_in(self, email: str, password: str) -> Session:
        ...

    async def sign_up(
        self, email: str, password: str, username: str | None = None
    ) -> Session | None:
        """Register an account.

        Returns None when the service requires email confirmation before
        issuing a session.
        """
        ...

    async def sign_out(self) -> None:
        ...

    async def restore_session(self, session: Session) -> Session | None:
        """Re-establish a previously issued session, or None if it expired."""
        ...

    async def get_current_session(self) -> Session | None:
        ...

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register ``callback`` for sign-in/sign-out; returns an unsubscribe function."""
        ...

    async def close(self) -> None:
        ...
