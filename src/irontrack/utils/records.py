"""Helpers for turning service rows into models."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeVar

from ..errors import DataError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by the data service."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp for storage."""
    return value.isoformat() if value else None


def parse_optional_float(value) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def parse_optional_int(value) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def to_models(rows: Iterable[dict], parser: Callable[[dict], T], table: str) -> list[T]:
    """Parse rows with ``parser``, raising DataError on the first bad row."""
    models = []
    for row in rows:
        try:
            models.append(parser(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Malformed %s record %r: %s", table, row.get("id"), exc)
            raise DataError(f"Malformed {table} record: {exc}") from exc
    return models
