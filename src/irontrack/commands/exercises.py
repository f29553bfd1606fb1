"""Exercise library commands."""

from pathlib import Path

import click

from ..controllers import ExerciseLibraryController, FilterState, ListState
from ..errors import IronTrackError
from ..models.exercises import EquipmentType, MuscleGroup
from ..services.creation import Attachment, ExerciseCreationFlow, ExerciseForm
from ..utils.choices import choice_values, coerce_choice
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_settings,
    open_session,
    require_user,
    truncate,
)


@click.group()
@click.pass_context
def exercises(ctx):
    """Browse and add exercises."""
    ensure_initialized(ctx)


@exercises.command(name="list")
@click.option("--search", "-s", default="", help="Name contains (case-insensitive)")
@click.option("--muscle", "-m", help=f"Muscle group: {', '.join(choice_values(MuscleGroup))}")
@click.option("--equipment", "-e", help=f"Equipment: {', '.join(choice_values(EquipmentType))}")
@click.pass_context
@async_command
async def list_exercises(ctx, search: str, muscle: str | None, equipment: str | None):
    """List exercises, optionally filtered.

    Examples:

        irontrack exercises list --search supino

        irontrack exercises list --muscle Pernas --equipment Máquina
    """
    try:
        filters = FilterState(
            search_text=search,
            muscle_group=coerce_choice(MuscleGroup, muscle),
            equipment=coerce_choice(EquipmentType, equipment),
        )
    except IronTrackError as e:
        echo_error(str(e))
        ctx.exit(1)

    settings = get_settings(ctx)
    async with open_session(settings) as session:
        controller = ExerciseLibraryController(
            session.service,
            filters=filters,
            debounce_seconds=settings.search_debounce_seconds,
        )
        await controller.activate()
        controller.close()

    if controller.state is ListState.ERROR:
        echo_error(f"Could not load exercises: {controller.error}")
        ctx.exit(1)

    results = controller.results
    if not results:
        echo_info("Nenhum exercício encontrado.")
        return

    headers = ["Name", "Muscle", "Equipment", "Verified", "ID"]
    rows = [
        [
            truncate(ex.name, 35),
            ex.muscle_group.value,
            ex.equipment.value,
            "yes" if ex.is_verified else "",
            ex.id or "",
        ]
        for ex in results
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(results)} exercise(s)")


@exercises.command()
@click.argument("name")
@click.option("--muscle", "-m", required=True, help="Muscle group")
@click.option("--equipment", "-e", required=True, help="Equipment")
@click.option("--instructions", "-i", default="", help="How to perform the exercise")
@click.option("--video-url", default="", help="Link to a demonstration video")
@click.option(
    "--image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image to upload with the exercise",
)
@click.pass_context
@async_command
async def create(ctx, name, muscle, equipment, instructions, video_url, image: Path | None):
    """Add a custom exercise to the library."""
    settings = get_settings(ctx)
    form = ExerciseForm(
        name=name,
        muscle_group=muscle,
        equipment=equipment,
        instructions=instructions,
        video_url=video_url,
    )
    attachment = Attachment(image.name, image.read_bytes()) if image else None

    async with open_session(settings) as session:
        require_user(ctx, session)
        flow = ExerciseCreationFlow(session.service, session)
        try:
            exercise = await flow.submit(form, attachment)
        except IronTrackError as e:
            echo_error(f"Could not create exercise: {e}")
            ctx.exit(1)

    echo_success(f"Created exercise '{exercise.name}' (ID: {exercise.id})")
    if exercise.image_url:
        click.echo(f"Image: {exercise.image_url}")
