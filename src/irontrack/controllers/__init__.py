"""List controllers for IronTrack views."""

from .exercise_library import ExerciseLibraryController
from .filtered_list import (
    SEARCH_DEBOUNCE_SECONDS,
    FilteredListController,
    FilterState,
    ListSnapshot,
    ListState,
)
from .routines import RoutineListController

__all__ = [
    "ExerciseLibraryController",
    "FilteredListController",
    "FilterState",
    "ListSnapshot",
    "ListState",
    "RoutineListController",
    "SEARCH_DEBOUNCE_SECONDS",
]
