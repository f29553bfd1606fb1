"""Tests for workout tracking and dashboard stats."""

from datetime import date

import pytest
import pytest_asyncio

from irontrack.clients.base import Filter
from irontrack.errors import AuthRequired, ValidationError
from irontrack.services.dashboard import compute_stats, current_streak, format_volume
from irontrack.services.session import SessionContext
from irontrack.services.workouts import WorkoutService


@pytest_asyncio.fixture
async def athlete(sqlite_service):
    """Signed-in session against the local backend."""
    context = SessionContext(sqlite_service)
    await context.sign_up("ana@example.com", "secret123")
    return context


@pytest_asyncio.fixture
async def leg_press_id(sqlite_service):
    rows = await sqlite_service.query_records("exercises", [Filter.eq("name", "Leg Press")])
    return rows[0]["id"]


class TestWorkoutService:
    """Tests for WorkoutService."""

    @pytest.mark.asyncio
    async def test_requires_user(self, sqlite_service):
        with pytest.raises(AuthRequired):
            await WorkoutService(SessionContext(sqlite_service)).start_session()

    @pytest.mark.asyncio
    async def test_full_session(self, athlete, leg_press_id):
        """Test start, log and finish a workout."""
        workouts = WorkoutService(athlete)
        started = await workouts.start_session(name="Pernas A")
        assert not started.is_finished

        first = await workouts.log_set(started.id, leg_press_id, weight=100, reps=10)
        second = await workouts.log_set(started.id, leg_press_id, weight=110, reps=8)
        assert (first.set_number, second.set_number) == (1, 2)

        finished = await workouts.finish_session(started.id, notes="Bom treino")
        assert finished.is_finished
        assert finished.notes == "Bom treino"

        logs = await workouts.session_logs(started.id)
        assert sum(log.volume for log in logs) == 1880

        with pytest.raises(ValidationError):
            await workouts.log_set(started.id, leg_press_id, weight=100, reps=10)
        with pytest.raises(ValidationError):
            await workouts.finish_session(started.id)

    @pytest.mark.asyncio
    async def test_log_set_validation(self, athlete, leg_press_id):
        workouts = WorkoutService(athlete)
        started = await workouts.start_session()

        with pytest.raises(ValidationError):
            await workouts.log_set(started.id, leg_press_id, weight=-5, reps=10)
        with pytest.raises(ValidationError):
            await workouts.log_set(started.id, leg_press_id, weight=50, reps=10, rpe=11)
        with pytest.raises(ValidationError):
            await workouts.log_set("missing", leg_press_id, weight=50, reps=10)

    @pytest.mark.asyncio
    async def test_sessions_are_scoped_to_user(self, athlete, sqlite_service):
        """Test another user's sessions are invisible."""
        workouts = WorkoutService(athlete)
        mine = await workouts.start_session(name="Mine")

        other = SessionContext(sqlite_service)
        await other.sign_up("bob@example.com", "secret123")

        assert await WorkoutService(other).list_sessions() == []
        with pytest.raises(ValidationError):
            await WorkoutService(other).finish_session(mine.id)


class TestDashboard:
    """Tests for dashboard stats."""

    @pytest.mark.parametrize(
        "kg,label",
        [(0, "0"), (850, "850"), (1000, "1k"), (12500, "12.5k"), (1_250_000, "1.2M")],
    )
    def test_format_volume(self, kg, label):
        """Test compact volume labels."""
        assert format_volume(kg) == label

    def test_streak(self):
        """Test streaks end today or yesterday."""
        today = date(2024, 5, 10)
        days = {date(2024, 5, 8), date(2024, 5, 9), date(2024, 5, 10)}

        assert current_streak(days, today) == 3
        assert current_streak(days - {today}, today) == 2
        assert current_streak({date(2024, 5, 1)}, today) == 0
        assert current_streak(set(), today) == 0

    @pytest.mark.asyncio
    async def test_compute_stats(self, athlete, leg_press_id):
        """Test only finished sessions count towards the stats."""
        workouts = WorkoutService(athlete)
        done = await workouts.start_session()
        await workouts.log_set(done.id, leg_press_id, weight=100, reps=10)
        await workouts.log_set(done.id, leg_press_id, weight=100, reps=10, completed=False)
        finished = await workouts.finish_session(done.id)
        open_session = await workouts.start_session()
        await workouts.log_set(open_session.id, leg_press_id, weight=200, reps=10)

        stats = await compute_stats(athlete, today=finished.start_time.date())

        assert stats.workouts == 1
        assert stats.volume_kg == 1000
        assert stats.volume_label == "1k"
        assert stats.streak_days == 1
        assert stats.level == 1
        assert stats.xp == 0
        assert stats.to_json()["volume_label"] == "1k"

    @pytest.mark.asyncio
    async def test_compute_stats_empty(self, athlete):
        stats = await compute_stats(athlete)

        assert stats.workouts == 0
        assert stats.volume_kg == 0
        assert stats.streak_days == 0
