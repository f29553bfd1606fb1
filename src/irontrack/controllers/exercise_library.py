"""Exercise library: name search plus muscle group and equipment filters."""

import asyncio

from ..clients.base import Filter, OrderBy, Query
from ..models.exercises import EXERCISES_TABLE, EquipmentType, Exercise, MuscleGroup
from ..utils.choices import coerce_choice
from ..utils.text import name_sort_key
from .filtered_list import FilteredListController, FilterState


class ExerciseLibraryController(FilteredListController[Exercise]):
    """Searchable, filterable view over the exercises table.

    Ordered by name with a pinned collation: accents and case are folded for
    the primary key, ties broken by the raw name and then id.
    """

    def build_query(self, filters: FilterState) -> Query:
        clauses = []
        if filters.search_term:
            clauses.append(Filter.contains("name", filters.search_term))
        if filters.muscle_group is not None:
            clauses.append(Filter.eq("muscle_group", filters.muscle_group.value))
        if filters.equipment is not None:
            clauses.append(Filter.eq("equipment", filters.equipment.value))
        return Query(EXERCISES_TABLE, tuple(clauses), OrderBy("name"))

    def parse_record(self, row: dict) -> Exercise:
        return Exercise.from_dict(row)

    def order_results(self, records: list[Exercise]) -> list[Exercise]:
        return sorted(records, key=lambda ex: name_sort_key(ex.name, ex.id))

    def set_muscle_group(self, value: MuscleGroup | str | None) -> asyncio.Task | None:
        """Filter by muscle group (None or "all" clears); fetches immediately."""
        return self._set_categorical(muscle_group=coerce_choice(MuscleGroup, value))

    def set_equipment(self, value: EquipmentType | str | None) -> asyncio.Task | None:
        """Filter by equipment (None or "all" clears); fetches immediately."""
        return self._set_categorical(equipment=coerce_choice(EquipmentType, value))
