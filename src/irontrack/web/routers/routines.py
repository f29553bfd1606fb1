"""Routine routes."""

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse

from ...controllers import FilterState, ListState, RoutineListController
from ...services.creation import RoutineCreationFlow, RoutineForm
from ...services.session import SessionContext
from ..deps import get_session

router = APIRouter(prefix="/routines", tags=["routines"])


@router.get("")
async def list_routines(search: str = "", session: SessionContext = Depends(get_session)):
    """The signed-in user's routines, newest first."""
    controller = RoutineListController(
        session.service, session.require_user(), filters=FilterState(search_text=search)
    )
    await controller.activate()
    controller.close()

    if controller.state is ListState.ERROR:
        return JSONResponse(status_code=502, content={"error": controller.error})
    return {
        "count": len(controller.results),
        "results": [routine.to_json() for routine in controller.results],
    }


@router.post("", status_code=201)
async def create_routine(
    name: str = Form(""),
    description: str = Form(""),
    session: SessionContext = Depends(get_session),
):
    routine = await RoutineCreationFlow(session.service, session).submit(
        RoutineForm(name=name, description=description)
    )
    return routine.to_json()


@router.delete("/{routine_id}")
async def delete_routine(routine_id: str, session: SessionContext = Depends(get_session)):
    """Delete a routine and return the refreshed list."""
    controller = RoutineListController(session.service, session.require_user())
    deleted = await controller.delete(routine_id)
    controller.close()

    if not deleted:
        return JSONResponse(status_code=502, content={"error": controller.error})
    return {
        "deleted": routine_id,
        "results": [routine.to_json() for routine in controller.results],
    }
