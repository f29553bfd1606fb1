"""Integration tests against a hosted Supabase project.

These tests need SUPABASE_URL and SUPABASE_ANON_KEY for a project with the
IronTrack schema. They only read public data.
"""

import pytest

from irontrack.clients.base import Filter
from irontrack.clients.supabase import SupabaseDataService
from irontrack.controllers import ExerciseLibraryController, FilterState, ListState
from irontrack.errors import AuthenticationError
from irontrack.models.exercises import MuscleGroup


@pytest.mark.asyncio
async def test_exercise_library_loads(supabase_settings):
    """Test the library controller reaches IDLE against the live table."""
    service = await SupabaseDataService.connect(
        supabase_settings.supabase_url, supabase_settings.supabase_key
    )
    controller = ExerciseLibraryController(service, filters=FilterState(muscle_group=MuscleGroup.LEGS))

    await controller.activate()

    assert controller.state is ListState.IDLE
    assert all(ex.muscle_group is MuscleGroup.LEGS for ex in controller.results)
    controller.close()
    await service.close()


@pytest.mark.asyncio
async def test_search_is_case_insensitive(supabase_settings):
    service = await SupabaseDataService.connect(
        supabase_settings.supabase_url, supabase_settings.supabase_key
    )

    lower = await service.query_records("exercises", [Filter.contains("name", "press")])
    upper = await service.query_records("exercises", [Filter.contains("name", "PRESS")])

    assert {row["id"] for row in lower} == {row["id"] for row in upper}
    await service.close()


@pytest.mark.asyncio
async def test_bad_credentials_rejected(supabase_settings):
    service = await SupabaseDataService.connect(
        supabase_settings.supabase_url, supabase_settings.supabase_key
    )

    with pytest.raises(AuthenticationError):
        await service.sign_in("nobody@irontrack.invalid", "not-the-password")
    await service.close()
