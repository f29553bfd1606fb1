"""Routine data models."""

from dataclasses import dataclass
from datetime import datetime

from ..utils.records import format_timestamp, parse_timestamp

ROUTINES_TABLE = "routines"
ROUTINE_EXERCISES_TABLE = "routine_exercises"


@dataclass
class Routine:
    """A named training routine owned by one user."""

    user_id: str
    name: str
    description: str | None = None
    is_public: bool = False
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to the insert payload for the routines table."""
        return {
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "is_public": self.is_public,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Routine":
        """Create from a row of the routines table."""
        name = data["name"]
        if not name:
            raise ValueError("routine name is empty")
        return cls(
            id=data.get("id"),
            user_id=data["user_id"],
            name=name,
            description=data.get("description"),
            is_public=bool(data.get("is_public", False)),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def to_json(self) -> dict:
        data = self.to_dict()
        data["id"] = self.id
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data


@dataclass
class RoutineExercise:
    """An exercise slot within a routine."""

    routine_id: str
    exercise_id: str
    order_index: int
    target_sets: int = 3
    target_reps: str = "8-12"  # a range such as "8-12" or a fixed count
    rest_seconds: int = 90
    notes: str | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        return {
            "routine_id": self.routine_id,
            "exercise_id": self.exercise_id,
            "order_index": self.order_index,
            "target_sets": self.target_sets,
            "target_reps": self.target_reps,
            "rest_seconds": self.rest_seconds,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineExercise":
        return cls(
            id=data.get("id"),
            routine_id=data["routine_id"],
            exercise_id=data["exercise_id"],
            order_index=int(data["order_index"]),
            target_sets=int(data.get("target_sets") or 3),
            target_reps=str(data.get("target_reps") or "8-12"),
            rest_seconds=int(data.get("rest_seconds") or 90),
            notes=data.get("notes"),
        )
