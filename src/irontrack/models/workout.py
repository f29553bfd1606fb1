"""Workout session tracking models."""

from dataclasses import dataclass
from datetime import datetime

from ..utils.records import (
    format_timestamp,
    parse_optional_float,
    parse_optional_int,
    parse_timestamp,
)

WORKOUT_SESSIONS_TABLE = "workout_sessions"
WORKOUT_LOGS_TABLE = "workout_logs"


@dataclass
class WorkoutSession:
    """A single training session, optionally following a routine.

    A session is open while ``end_time`` is unset.
    """

    user_id: str
    start_time: datetime
    routine_id: str | None = None
    name: str | None = None
    end_time: datetime | None = None
    notes: str | None = None
    id: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    @property
    def duration_minutes(self) -> float | None:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() / 60

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "routine_id": self.routine_id,
            "name": self.name,
            "start_time": format_timestamp(self.start_time),
            "end_time": format_timestamp(self.end_time),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        return cls(
            id=data.get("id"),
            user_id=data["user_id"],
            routine_id=data.get("routine_id"),
            name=data.get("name"),
            start_time=parse_timestamp(data["start_time"]),
            end_time=parse_timestamp(data.get("end_time")),
            notes=data.get("notes"),
        )

    def to_json(self) -> dict:
        data = self.to_dict()
        data["id"] = self.id
        return data


@dataclass
class WorkoutLog:
    """One logged set of an exercise within a session."""

    session_id: str
    exercise_id: str
    set_number: int
    weight: float | None = None  # kg
    reps: int | None = None
    rpe: float | None = None
    completed: bool = False
    id: str | None = None
    created_at: datetime | None = None

    @property
    def volume(self) -> float:
        """Weight moved in this set (kg), zero for incomplete or bodyweight sets."""
        if not self.completed or not self.weight or not self.reps:
            return 0.0
        return self.weight * self.reps

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "exercise_id": self.exercise_id,
            "set_number": self.set_number,
            "weight": self.weight,
            "reps": self.reps,
            "rpe": self.rpe,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutLog":
        return cls(
            id=data.get("id"),
            session_id=data["session_id"],
            exercise_id=data["exercise_id"],
            set_number=int(data["set_number"]),
            weight=parse_optional_float(data.get("weight")),
            reps=parse_optional_int(data.get("reps")),
            rpe=parse_optional_float(data.get("rpe")),
            completed=bool(data.get("completed", False)),
            created_at=parse_timestamp(data.get("created_at")),
        )

    def to_json(self) -> dict:
        data = self.to_dict()
        data["id"] = self.id
        data["created_at"] = format_timestamp(self.created_at)
        return data
