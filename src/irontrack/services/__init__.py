"""Application services built on a data service and the session context."""

from .creation import (
    Attachment,
    ExerciseCreationFlow,
    ExerciseForm,
    RoutineCreationFlow,
    RoutineForm,
    generate_blob_key,
)
from .dashboard import DashboardStats, compute_stats, format_volume
from .onboarding import OnboardingForm, complete_onboarding
from .session import SessionContext, SessionSnapshot
from .workouts import WorkoutService

__all__ = [
    "Attachment",
    "DashboardStats",
    "ExerciseCreationFlow",
    "ExerciseForm",
    "OnboardingForm",
    "RoutineCreationFlow",
    "RoutineForm",
    "SessionContext",
    "SessionSnapshot",
    "WorkoutService",
    "complete_onboarding",
    "compute_stats",
    "format_volume",
    "generate_blob_key",
]
