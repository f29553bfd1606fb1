"""Exercise library routes."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ...controllers import ExerciseLibraryController, FilterState, ListState
from ...models.exercises import EquipmentType, MuscleGroup
from ...services.creation import Attachment, ExerciseCreationFlow, ExerciseForm
from ...services.session import SessionContext
from ...utils.choices import coerce_choice
from ..deps import get_session

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("")
async def list_exercises(
    search: str = "",
    muscle_group: str | None = None,
    equipment: str | None = None,
    session: SessionContext = Depends(get_session),
):
    """Search the library; "all" (or nothing) disables a filter."""
    filters = FilterState(
        search_text=search,
        muscle_group=coerce_choice(MuscleGroup, muscle_group),
        equipment=coerce_choice(EquipmentType, equipment),
    )
    controller = ExerciseLibraryController(session.service, filters=filters)
    await controller.activate()
    controller.close()

    if controller.state is ListState.ERROR:
        return JSONResponse(status_code=502, content={"error": controller.error})
    return {
        "count": len(controller.results),
        "results": [exercise.to_json() for exercise in controller.results],
    }


@router.post("", status_code=201)
async def create_exercise(
    name: str = Form(""),
    muscle_group: str = Form(""),
    equipment: str = Form(""),
    instructions: str = Form(""),
    video_url: str = Form(""),
    image: UploadFile | None = File(None),
    session: SessionContext = Depends(get_session),
):
    """Create a custom exercise with an optional image."""
    form = ExerciseForm(
        name=name,
        muscle_group=muscle_group,
        equipment=equipment,
        instructions=instructions,
        video_url=video_url,
    )
    attachment = None
    if image is not None and image.filename:
        attachment = Attachment(image.filename, await image.read(), image.content_type)

    exercise = await ExerciseCreationFlow(session.service, session).submit(form, attachment)
    return exercise.to_json()
