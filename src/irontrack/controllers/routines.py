"""Routine list: the signed-in user's routines, newest first."""

import logging

from ..clients.base import DataService, Filter, OrderBy, Query
from ..errors import AuthRequired, IronTrackError, ValidationError
from ..models.routines import ROUTINES_TABLE, Routine
from .filtered_list import FilteredListController, FilterState

logger = logging.getLogger(__name__)


class RoutineListController(FilteredListController[Routine]):
    """Lists routines owned by one user; every query is scoped by owner."""

    def __init__(self, service: DataService, user_id: str | None, **kwargs):
        if not user_id:
            raise AuthRequired("Sign in to see your routines")
        super().__init__(service, **kwargs)
        self.user_id = user_id

    def build_query(self, filters: FilterState) -> Query:
        clauses = [Filter.eq("user_id", self.user_id)]
        if filters.search_term:
            clauses.append(Filter.contains("name", filters.search_term))
        return Query(ROUTINES_TABLE, tuple(clauses), OrderBy("created_at", ascending=False))

    def parse_record(self, row: dict) -> Routine:
        return Routine.from_dict(row)

    async def delete(self, routine_id: str) -> bool:
        """Delete a routine, then refresh the list.

        Only routines owned by ``user_id`` can be deleted. A failed delete
        moves the controller to ERROR (results untouched) and returns False.
        """
        self._ensure_open()
        try:
            owned = await self._service.query_records(
                ROUTINES_TABLE,
                [Filter.eq("id", routine_id), Filter.eq("user_id", self.user_id)],
            )
            if not owned:
                raise ValidationError(f"No routine {routine_id} in your routines")
            await self._service.delete_record(ROUTINES_TABLE, routine_id)
        except IronTrackError as exc:
            logger.error("Error deleting routine %s: %s", routine_id, exc)
            self._fail(str(exc))
            return False
        if not self.closed:
            await self.refresh()
        return True
