"""Workout session tracking for the signed-in user."""

import logging
from datetime import datetime, timezone

from ..clients.base import Filter, OrderBy
from ..errors import ValidationError
from ..models.workout import (
    WORKOUT_LOGS_TABLE,
    WORKOUT_SESSIONS_TABLE,
    WorkoutLog,
    WorkoutSession,
)
from ..utils.records import format_timestamp, to_models
from .session import SessionContext

logger = logging.getLogger(__name__)


class WorkoutService:
    """Start, log and finish workout sessions."""

    def __init__(self, session: SessionContext):
        self.session = session

    @property
    def service(self):
        return self.session.service

    async def start_session(
        self, routine_id: str | None = None, name: str | None = None
    ) -> WorkoutSession:
        user_id = self.session.require_user()
        workout = WorkoutSession(
            user_id=user_id,
            start_time=datetime.now(timezone.utc),
            routine_id=routine_id,
            name=(name or "").strip() or None,
        )
        row = await self.service.insert_record(WORKOUT_SESSIONS_TABLE, workout.to_dict())
        started = WorkoutSession.from_dict(row)
        logger.info("Started workout %s", started.id)
        return started

    async def get_session(self, session_id: str) -> WorkoutSession:
        """Fetch one of the user's sessions; ValidationError if it is not theirs."""
        user_id = self.session.require_user()
        rows = await self.service.query_records(
            WORKOUT_SESSIONS_TABLE,
            [Filter.eq("id", session_id), Filter.eq("user_id", user_id)],
        )
        sessions = to_models(rows, WorkoutSession.from_dict, WORKOUT_SESSIONS_TABLE)
        if not sessions:
            raise ValidationError(f"Workout session not found: {session_id}")
        return sessions[0]

    async def log_set(
        self,
        session_id: str,
        exercise_id: str,
        weight: float | None = None,
        reps: int | None = None,
        rpe: float | None = None,
        completed: bool = True,
        set_number: int | None = None,
    ) -> WorkoutLog:
        """Record a set; the set number defaults to the next one for the exercise."""
        workout = await self.get_session(session_id)
        if workout.is_finished:
            raise ValidationError("Cannot log sets on a finished workout")
        if not exercise_id:
            raise ValidationError("Exercise is required")
        if weight is not None and weight < 0:
            raise ValidationError("Weight cannot be negative")
        if reps is not None and reps < 0:
            raise ValidationError("Reps cannot be negative")
        if rpe is not None and not 1 <= rpe <= 10:
            raise ValidationError("RPE must be between 1 and 10")

        if set_number is None:
            logs = await self.session_logs(session_id)
            set_number = 1 + sum(1 for log in logs if log.exercise_id == exercise_id)

        log = WorkoutLog(
            session_id=session_id,
            exercise_id=exercise_id,
            set_number=set_number,
            weight=weight,
            reps=reps,
            rpe=rpe,
            completed=completed,
        )
        row = await self.service.insert_record(WORKOUT_LOGS_TABLE, log.to_dict())
        return WorkoutLog.from_dict(row)

    async def finish_session(self, session_id: str, notes: str | None = None) -> WorkoutSession:
        workout = await self.get_session(session_id)
        if workout.is_finished:
            raise ValidationError("Workout is already finished")
        fields = {"end_time": format_timestamp(datetime.now(timezone.utc))}
        if notes and notes.strip():
            fields["notes"] = notes.strip()
        row = await self.service.update_record(WORKOUT_SESSIONS_TABLE, session_id, fields)
        finished = WorkoutSession.from_dict(row)
        logger.info("Finished workout %s after %.0f min", session_id, finished.duration_minutes or 0)
        return finished

    async def list_sessions(self) -> list[WorkoutSession]:
        """The user's sessions, newest first."""
        user_id = self.session.require_user()
        rows = await self.service.query_records(
            WORKOUT_SESSIONS_TABLE,
            [Filter.eq("user_id", user_id)],
            OrderBy("start_time", ascending=False),
        )
        return to_models(rows, WorkoutSession.from_dict, WORKOUT_SESSIONS_TABLE)

    async def session_logs(self, session_id: str) -> list[WorkoutLog]:
        rows = await self.service.query_records(
            WORKOUT_LOGS_TABLE,
            [Filter.eq("session_id", session_id)],
            OrderBy("created_at"),
        )
        return to_models(rows, WorkoutLog.from_dict, WORKOUT_LOGS_TABLE)
