"""Filtered list controller.

Owns the filter criteria and the result set of one list view. Text search
is debounced; categorical filters fetch immediately. Every fetch is tagged
with a sequence number and only the most recently issued fetch may update
the result set, so a slow stale response can never overwrite newer results.

States::

    LOADING --success--> IDLE(results)
    LOADING --failure--> ERROR(reason)    (previous results stay visible)
    IDLE | ERROR --text debounce / filter change / refresh--> LOADING
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar

from ..clients.base import DataService, Query
from ..errors import IronTrackError
from ..models.exercises import EquipmentType, MuscleGroup
from ..utils.records import to_models

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEARCH_DEBOUNCE_SECONDS = 0.3


class ListState(str, Enum):
    """Lifecycle state of a list controller."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class FilterState:
    """Transient filter criteria of a list view. ``None`` means "all"."""

    search_text: str = ""
    muscle_group: MuscleGroup | None = None
    equipment: EquipmentType | None = None

    @property
    def search_term(self) -> str:
        """Search text as applied to the query (surrounding whitespace dropped)."""
        return self.search_text.strip()

    @property
    def has_categorical(self) -> bool:
        return self.muscle_group is not None or self.equipment is not None


@dataclass(frozen=True)
class ListSnapshot(Generic[T]):
    """What the presentation layer renders at one point in time."""

    state: ListState
    results: tuple[T, ...]
    filters: FilterState
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.results


ListListener = Callable[[ListSnapshot], None]


class FilteredListController(ABC, Generic[T]):
    """Base controller: debounced search, immediate filters, last issued fetch wins.

    Must be used from inside a running asyncio event loop. Subclasses define
    how criteria become a query and how rows become models.
    """

    def __init__(
        self,
        service: DataService,
        *,
        filters: FilterState | None = None,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
    ):
        self._service = service
        self._filters = filters or FilterState()
        self._debounce_seconds = debounce_seconds
        self._state = ListState.LOADING
        self._results: tuple[T, ...] = ()
        self._error: str | None = None
        self._issued = 0
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._listeners: list[ListListener] = []
        self._closed = False

    @abstractmethod
    def build_query(self, filters: FilterState) -> Query:
        """Compose the outbound query for ``filters``."""

    @abstractmethod
    def parse_record(self, row: dict) -> T:
        """Turn one service row into a model."""

    def order_results(self, records: list[T]) -> list[T]:
        """Final ordering of a fetched result set (default: as returned)."""
        return records

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def results(self) -> tuple[T, ...]:
        return self._results

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def issued_fetches(self) -> int:
        """Number of fetches issued so far (also the latest sequence number)."""
        return self._issued

    @property
    def search_pending(self) -> bool:
        """True while a text change is waiting out the debounce period."""
        return self._debounce_handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def snapshot(self) -> ListSnapshot[T]:
        return ListSnapshot(
            state=self._state,
            results=self._results,
            filters=self._filters,
            error=self._error,
        )

    def subscribe(self, listener: ListListener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Inputs

    def activate(self) -> asyncio.Task:
        """Issue the initial fetch with the current filters."""
        self._ensure_open()
        return self._issue_fetch("activate")

    def refresh(self) -> asyncio.Task:
        """Re-fetch the whole list with the current filters."""
        self._ensure_open()
        return self._issue_fetch("refresh")

    def on_created(self, record=None) -> asyncio.Task:
        """A record was created elsewhere: refresh instead of inserting it locally.

        The refresh applies the current filters and ordering, so the new
        record only shows up if it matches them.
        """
        return self.refresh()

    def set_search_text(self, text: str) -> None:
        """Change the search text; the fetch waits for a quiet period."""
        self._ensure_open()
        if text == self._filters.search_text:
            return
        self._filters = replace(self._filters, search_text=text)
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self._debounce_seconds, self._debounce_elapsed)
        logger.debug("Search %r scheduled in %.3fs", text, self._debounce_seconds)

    def clear_filters(self) -> asyncio.Task:
        """Reset categorical filters to "all" and fetch once; search text is kept."""
        self._ensure_open()
        self._filters = replace(self._filters, muscle_group=None, equipment=None)
        return self._issue_fetch("clear")

    def close(self) -> None:
        """Discard the controller: cancel the debounce and drop in-flight responses."""
        if self._closed:
            return
        self._closed = True
        self._cancel_debounce()
        for task in list(self._in_flight):
            task.cancel()
        self._listeners.clear()

    # Internals

    def _set_categorical(self, **changes) -> asyncio.Task | None:
        """Apply a categorical filter change and fetch immediately.

        Does not touch a pending search debounce. Returns None when nothing
        changed.
        """
        self._ensure_open()
        updated = replace(self._filters, **changes)
        if updated == self._filters:
            return None
        self._filters = updated
        return self._issue_fetch("filter")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _debounce_elapsed(self) -> None:
        self._debounce_handle = None
        if not self._closed:
            self._issue_fetch("search")

    def _issue_fetch(self, reason: str) -> asyncio.Task:
        self._issued += 1
        sequence = self._issued
        query = self.build_query(self._filters)
        logger.debug("Fetch #%d (%s) on %s", sequence, reason, query.table)

        self._state = ListState.LOADING
        self._notify()

        task = asyncio.get_running_loop().create_task(self._fetch(sequence, query))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._issued

    async def _fetch(self, sequence: int, query: Query) -> bool:
        """Run one fetch; returns True if its outcome was applied."""
        try:
            rows = await self._service.query_records(query.table, query.filters, query.order_by)
            records = self.order_results(to_models(rows, self.parse_record, query.table))
        except IronTrackError as exc:
            if not self._is_current(sequence):
                logger.debug("Dropping stale failure of fetch #%d", sequence)
                return False
            logger.error("Error fetching %s: %s", query.table, exc)
            self._fail(str(exc))
            return True

        if not self._is_current(sequence):
            logger.debug("Dropping stale response of fetch #%d", sequence)
            return False

        self._results = tuple(records)
        self._error = None
        self._state = ListState.IDLE
        self._notify()
        return True

    def _fail(self, reason: str) -> None:
        """Enter ERROR, keeping the previous results visible."""
        self._error = reason
        self._state = ListState.ERROR
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)
