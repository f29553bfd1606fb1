"""Dashboard statistics computed from the user's workouts."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from ..clients.base import Filter
from ..models.workout import WORKOUT_LOGS_TABLE, WorkoutLog, WorkoutSession
from ..utils.records import to_models
from .session import SessionContext
from .workouts import WorkoutService


def format_volume(kg: float) -> str:
    """Compact volume label: 850, 12.5k, 1.2M."""
    for threshold, suffix in ((1_000_000, "M"), (1_000, "k")):
        if kg >= threshold:
            text = f"{kg / threshold:.1f}".rstrip("0").rstrip(".")
            return f"{text}{suffix}"
    return f"{kg:.0f}"


def current_streak(days: set[date], today: date) -> int:
    """Consecutive training days ending today (or yesterday, if not yet trained today)."""
    day = today if today in days else today - timedelta(days=1)
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


@dataclass(frozen=True)
class DashboardStats:
    workouts: int
    volume_kg: float
    streak_days: int
    level: int
    xp: int

    @property
    def volume_label(self) -> str:
        return format_volume(self.volume_kg)

    def to_json(self) -> dict:
        return {
            "workouts": self.workouts,
            "volume_kg": self.volume_kg,
            "volume_label": self.volume_label,
            "streak_days": self.streak_days,
            "level": self.level,
            "xp": self.xp,
        }

    def to_rows(self) -> list[tuple[str, str]]:
        """Label/value pairs for display."""
        return [
            ("Treinos", str(self.workouts)),
            ("Volume (kg)", self.volume_label),
            ("Sequência", f"{self.streak_days} dias"),
            ("Nível", f"{self.level} ({self.xp} XP)"),
        ]


async def compute_stats(session: SessionContext, today: date | None = None) -> DashboardStats:
    """Aggregate finished workouts, completed volume and the day streak."""
    sessions = await WorkoutService(session).list_sessions()
    finished: list[WorkoutSession] = [s for s in sessions if s.is_finished]

    volume = 0.0
    if finished:
        rows = await session.service.query_records(
            WORKOUT_LOGS_TABLE, [Filter.one_of("session_id", [s.id for s in finished])]
        )
        volume = sum(log.volume for log in to_models(rows, WorkoutLog.from_dict, WORKOUT_LOGS_TABLE))

    days = {s.start_time.astimezone(timezone.utc).date() for s in finished}
    today = today or datetime.now(timezone.utc).date()
    profile = session.profile
    return DashboardStats(
        workouts=len(finished),
        volume_kg=volume,
        streak_days=current_streak(days, today),
        level=profile.level if profile else 1,
        xp=profile.xp if profile else 0,
    )
