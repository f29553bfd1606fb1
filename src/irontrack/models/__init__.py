"""Data models for IronTrack."""

from .exercises import EquipmentType, Exercise, MuscleGroup
from .routines import Routine, RoutineExercise
from .user_profile import ExperienceLevel, FitnessGoal, Gender, Profile
from .workout import WorkoutLog, WorkoutSession

__all__ = [
    "EquipmentType",
    "Exercise",
    "ExperienceLevel",
    "FitnessGoal",
    "Gender",
    "MuscleGroup",
    "Profile",
    "Routine",
    "RoutineExercise",
    "WorkoutLog",
    "WorkoutSession",
]
