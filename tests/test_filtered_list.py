"""Tests for the filtered list controllers."""

import asyncio

import pytest

from irontrack.clients.base import FilterOp
from irontrack.controllers import (
    SEARCH_DEBOUNCE_SECONDS,
    ExerciseLibraryController,
    FilterState,
    ListState,
    RoutineListController,
)
from irontrack.errors import AuthRequired, NetworkError, ValidationError
from irontrack.models.exercises import EquipmentType, MuscleGroup

DEBOUNCE = 0.05


def clauses(query):
    return {(f.field, f.op, f.value) for f in query.filters}


async def settle(seconds=DEBOUNCE * 3):
    await asyncio.sleep(seconds)


class TestExerciseLibraryController:
    """Tests for ExerciseLibraryController."""

    def test_default_debounce_is_300ms(self):
        """Test the search debounce default."""
        assert SEARCH_DEBOUNCE_SECONDS == 0.3

    @pytest.mark.asyncio
    async def test_activate_fetches_with_initial_filters(self, fake_service):
        """Test activation issues one fetch and lands in IDLE sorted by name."""
        controller = ExerciseLibraryController(fake_service)
        assert controller.state is ListState.LOADING

        await controller.activate()

        assert controller.state is ListState.IDLE
        assert len(fake_service.queries) == 1
        assert fake_service.queries[0].filters == ()
        assert fake_service.queries[0].order_by.field == "name"
        assert [ex.name for ex in controller.results] == [
            "Agachamento com Barra",
            "Leg Press",
            "Supino Reto com Barra",
        ]
        controller.close()

    @pytest.mark.asyncio
    async def test_rapid_typing_issues_one_fetch(self, fake_service):
        """Test keystrokes within the quiet period collapse into one fetch."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=DEBOUNCE)
        await controller.activate()

        for text in ("l", "le", "leg"):
            controller.set_search_text(text)
        assert controller.search_pending
        assert len(fake_service.queries) == 1

        await settle()

        assert not controller.search_pending
        assert len(fake_service.queries) == 2
        assert clauses(fake_service.queries[1]) == {("name", FilterOp.ILIKE, "leg")}
        assert [ex.name for ex in controller.results] == ["Leg Press"]
        controller.close()

    @pytest.mark.asyncio
    async def test_each_change_resets_the_timer(self, fake_service):
        """Test a change during the quiet period restarts it."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=0.3)
        await controller.activate()

        controller.set_search_text("a")
        await asyncio.sleep(0.2)
        controller.set_search_text("ag")
        await asyncio.sleep(0.2)
        assert len(fake_service.queries) == 1

        await settle(0.3)
        assert len(fake_service.queries) == 2
        assert clauses(fake_service.queries[1]) == {("name", FilterOp.ILIKE, "ag")}
        controller.close()

    @pytest.mark.asyncio
    async def test_unchanged_text_does_not_schedule(self, fake_service):
        """Test setting the same text again is a no-op."""
        controller = ExerciseLibraryController(
            fake_service, filters=FilterState(search_text="leg"), debounce_seconds=DEBOUNCE
        )
        await controller.activate()

        controller.set_search_text("leg")

        assert not controller.search_pending
        await settle()
        assert len(fake_service.queries) == 1
        controller.close()

    @pytest.mark.asyncio
    async def test_blank_text_adds_no_clause(self, fake_service):
        """Test whitespace-only search text is treated as no search."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=DEBOUNCE)
        await controller.activate()

        controller.set_search_text("   ")
        await settle()

        assert fake_service.queries[-1].filters == ()
        assert len(controller.results) == 3
        controller.close()

    @pytest.mark.asyncio
    async def test_categorical_filter_fetches_immediately(self, fake_service):
        """Test a muscle group change fetches at once without waiting on the timer."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=10)
        await controller.activate()

        task = controller.set_muscle_group(MuscleGroup.LEGS)
        assert task is not None
        assert controller.state is ListState.LOADING
        await task

        assert len(fake_service.queries) == 2
        assert clauses(fake_service.queries[1]) == {
            ("muscle_group", FilterOp.EQ, "Pernas"),
        }
        assert {ex.name for ex in controller.results} == {"Leg Press", "Agachamento com Barra"}
        controller.close()

    @pytest.mark.asyncio
    async def test_categorical_change_leaves_pending_search_alone(self, fake_service):
        """Test a filter change neither cancels nor restarts the search timer."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=DEBOUNCE)
        await controller.activate()

        controller.set_search_text("barra")
        await controller.set_equipment("Barra")
        assert controller.search_pending

        await settle()
        assert not controller.search_pending
        assert len(fake_service.queries) == 3
        controller.close()

    @pytest.mark.asyncio
    async def test_same_filter_value_does_not_fetch(self, fake_service):
        """Test re-selecting the current filter value is a no-op."""
        controller = ExerciseLibraryController(
            fake_service, filters=FilterState(muscle_group=MuscleGroup.LEGS)
        )
        await controller.activate()

        assert controller.set_muscle_group("Pernas") is None
        assert len(fake_service.queries) == 1
        controller.close()

    @pytest.mark.asyncio
    async def test_filters_are_combined(self, fake_service):
        """Test text and both categorical filters are ANDed."""
        controller = ExerciseLibraryController(
            fake_service,
            filters=FilterState(
                search_text="Press",
                muscle_group=MuscleGroup.LEGS,
                equipment=EquipmentType.MACHINE,
            ),
        )
        await controller.activate()

        assert clauses(fake_service.queries[0]) == {
            ("name", FilterOp.ILIKE, "Press"),
            ("muscle_group", FilterOp.EQ, "Pernas"),
            ("equipment", FilterOp.EQ, "Máquina"),
        }
        assert [ex.name for ex in controller.results] == ["Leg Press"]
        controller.close()

    @pytest.mark.asyncio
    async def test_all_sentinel_clears_filter(self, fake_service):
        """Test "all" removes a categorical clause."""
        controller = ExerciseLibraryController(
            fake_service, filters=FilterState(muscle_group=MuscleGroup.LEGS)
        )
        await controller.activate()

        await controller.set_muscle_group("all")

        assert fake_service.queries[-1].filters == ()
        controller.close()

    @pytest.mark.asyncio
    async def test_invalid_filter_value_raises(self, fake_service):
        """Test unknown filter values are rejected without a fetch."""
        controller = ExerciseLibraryController(fake_service)
        await controller.activate()

        with pytest.raises(ValidationError):
            controller.set_equipment("Trampolim")
        assert len(fake_service.queries) == 1
        controller.close()

    @pytest.mark.asyncio
    async def test_last_issued_fetch_wins(self, fake_service, make_row):
        """Test a slow stale response never overwrites newer results."""
        controller = ExerciseLibraryController(fake_service)
        fake_service.manual = True

        first = controller.activate()
        second = controller.set_muscle_group(MuscleGroup.LEGS)
        await asyncio.sleep(0)

        fake_service.resolve(1, [make_row("Leg Press", "Pernas", "Máquina")])
        assert await second is True
        fake_service.resolve(0, [make_row("Supino Reto com Barra")])
        assert await first is False

        assert controller.state is ListState.IDLE
        assert [ex.name for ex in controller.results] == ["Leg Press"]
        controller.close()

    @pytest.mark.asyncio
    async def test_stale_failure_is_ignored(self, fake_service):
        """Test a failure of a superseded fetch does not enter ERROR."""
        controller = ExerciseLibraryController(fake_service)
        fake_service.manual = True

        first = controller.activate()
        second = controller.refresh()
        await asyncio.sleep(0)

        fake_service.fail(0)
        assert await first is False
        assert controller.state is ListState.LOADING

        fake_service.resolve(1, [])
        await second
        assert controller.state is ListState.IDLE
        controller.close()

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_results(self, fake_service):
        """Test ERROR keeps stale results visible and the next fetch recovers."""
        controller = ExerciseLibraryController(fake_service)
        await controller.activate()
        fake_service.query_error = NetworkError("offline")

        await controller.refresh()

        assert controller.state is ListState.ERROR
        assert "offline" in controller.error
        assert len(controller.results) == 3

        fake_service.query_error = None
        await controller.refresh()
        assert controller.state is ListState.IDLE
        assert controller.error is None
        controller.close()

    @pytest.mark.asyncio
    async def test_malformed_row_is_an_error(self, fake_service, make_row):
        """Test an unparseable row fails the fetch instead of crashing."""
        fake_service.rows["exercises"].append(make_row("Bad", muscle_group="Pescoço"))
        controller = ExerciseLibraryController(fake_service)

        await controller.activate()

        assert controller.state is ListState.ERROR
        controller.close()

    @pytest.mark.asyncio
    async def test_empty_result_is_idle(self, fake_service):
        """Test no matches is an empty IDLE list, not an error."""
        controller = ExerciseLibraryController(fake_service, filters=FilterState(search_text="zzz"))

        await controller.activate()

        assert controller.state is ListState.IDLE
        assert controller.snapshot.is_empty
        assert controller.error is None
        controller.close()

    @pytest.mark.asyncio
    async def test_on_created_refreshes_with_current_filters(self, fake_service, make_row):
        """Test a creation triggers a full refresh that applies the filters."""
        controller = ExerciseLibraryController(
            fake_service, filters=FilterState(muscle_group=MuscleGroup.LEGS)
        )
        await controller.activate()
        fake_service.rows["exercises"].append(make_row("Hip Thrust", "Pernas", "Barra"))
        fake_service.rows["exercises"].append(make_row("Crucifixo", "Peito", "Halteres"))

        await controller.on_created()

        assert len(fake_service.queries) == 2
        assert clauses(fake_service.queries[1]) == {("muscle_group", FilterOp.EQ, "Pernas")}
        names = [ex.name for ex in controller.results]
        assert "Hip Thrust" in names
        assert "Crucifixo" not in names
        controller.close()

    @pytest.mark.asyncio
    async def test_clear_filters_fetches_once_and_keeps_text(self, fake_service):
        """Test clearing both filters issues exactly one fetch."""
        controller = ExerciseLibraryController(
            fake_service,
            filters=FilterState(
                search_text="barra",
                muscle_group=MuscleGroup.LEGS,
                equipment=EquipmentType.BARBELL,
            ),
        )
        await controller.activate()

        await controller.clear_filters()

        assert len(fake_service.queries) == 2
        assert controller.filters == FilterState(search_text="barra")
        assert clauses(fake_service.queries[1]) == {("name", FilterOp.ILIKE, "barra")}
        controller.close()

    @pytest.mark.asyncio
    async def test_sort_is_accent_and_case_insensitive(self, fake_service, make_row):
        """Test the client-side ordering folds accents and case, ties by name then id."""
        fake_service.rows["exercises"] = [
            make_row("élévation", record_id="3"),
            make_row("Abdominal", record_id="2"),
            make_row("Elevação", record_id="1"),
            make_row("abdominal", record_id="4"),
            make_row("Abdominal", record_id="0"),
        ]
        controller = ExerciseLibraryController(fake_service)
        await controller.activate()
        first = [(ex.name, ex.id) for ex in controller.results]

        fake_service.rows["exercises"].reverse()
        await controller.refresh()

        assert [(ex.name, ex.id) for ex in controller.results] == first
        assert first[:3] == [("Abdominal", "0"), ("Abdominal", "2"), ("abdominal", "4")]
        controller.close()

    @pytest.mark.asyncio
    async def test_close_cancels_debounce_and_in_flight(self, fake_service):
        """Test closing drops the pending timer and any late response."""
        controller = ExerciseLibraryController(fake_service, debounce_seconds=DEBOUNCE)
        fake_service.manual = True
        task = controller.activate()
        controller.set_search_text("leg")
        await asyncio.sleep(0)

        controller.close()
        await settle()

        assert controller.closed
        assert not controller.search_pending
        assert len(fake_service.queries) == 1
        assert task.cancelled() or task.done()
        assert controller.results == ()
        with pytest.raises(RuntimeError):
            controller.refresh()

    @pytest.mark.asyncio
    async def test_listeners_see_loading_then_idle(self, fake_service):
        """Test subscribers receive a snapshot per transition."""
        controller = ExerciseLibraryController(fake_service)
        seen = []
        unsubscribe = controller.subscribe(lambda snap: seen.append(snap.state))

        await controller.activate()
        unsubscribe()
        await controller.refresh()

        assert seen == [ListState.LOADING, ListState.IDLE]
        controller.close()


class TestRoutineListController:
    """Tests for RoutineListController."""

    @pytest.fixture
    def routine_rows(self):
        return [
            {"id": "r1", "user_id": "user-1", "name": "Push", "created_at": "2024-01-01T00:00:00+00:00"},
            {"id": "r2", "user_id": "user-1", "name": "Pull", "created_at": "2024-01-03T00:00:00+00:00"},
            {"id": "r3", "user_id": "user-2", "name": "Legs", "created_at": "2024-01-02T00:00:00+00:00"},
        ]

    def test_requires_user(self, fake_service):
        """Test the controller refuses to run without a user."""
        with pytest.raises(AuthRequired):
            RoutineListController(fake_service, None)

    @pytest.mark.asyncio
    async def test_query_is_scoped_and_newest_first(self, fake_service, routine_rows):
        """Test the owner clause and created_at descending order."""
        fake_service.rows["routines"] = routine_rows
        controller = RoutineListController(fake_service, "user-1")

        await controller.activate()

        query = fake_service.queries[0]
        assert clauses(query) == {("user_id", FilterOp.EQ, "user-1")}
        assert query.order_by.field == "created_at"
        assert not query.order_by.ascending
        assert {r.id for r in controller.results} == {"r1", "r2"}
        controller.close()

    @pytest.mark.asyncio
    async def test_delete_refreshes(self, fake_service, routine_rows):
        """Test a delete goes through the service and reloads the list."""
        fake_service.rows["routines"] = routine_rows
        controller = RoutineListController(fake_service, "user-1")
        await controller.activate()

        assert await controller.delete("r1") is True

        assert ("delete", "routines", "r1") in fake_service.calls
        assert [r.id for r in controller.results] == ["r2"]
        controller.close()

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_results(self, fake_service, routine_rows):
        """Test a failed delete enters ERROR without clearing the list."""
        fake_service.rows["routines"] = routine_rows
        fake_service.delete_error = NetworkError("permission denied")
        controller = RoutineListController(fake_service, "user-1")
        await controller.activate()

        assert await controller.delete("r1") is False

        assert controller.state is ListState.ERROR
        assert len(controller.results) == 2
        controller.close()

    @pytest.mark.asyncio
    async def test_delete_requires_ownership(self, fake_service, routine_rows):
        """Test another user's routine is never sent to delete."""
        fake_service.rows["routines"] = routine_rows
        controller = RoutineListController(fake_service, "user-1")
        await controller.activate()

        assert await controller.delete("r3") is False

        assert controller.state is ListState.ERROR
        assert "r3" in controller.error
        assert not [call for call in fake_service.calls if call[0] == "delete"]
        ownership = fake_service.queries[-1]
        assert clauses(ownership) == {
            ("id", FilterOp.EQ, "r3"),
            ("user_id", FilterOp.EQ, "user-1"),
        }
        controller.close()

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, fake_service, routine_rows):
        fake_service.rows["routines"] = routine_rows
        controller = RoutineListController(fake_service, "user-1")
        await controller.activate()

        assert await controller.delete("no-such-id") is False
        assert len(controller.results) == 2
        controller.close()
