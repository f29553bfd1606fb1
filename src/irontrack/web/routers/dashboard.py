"""Dashboard routes."""

from fastapi import APIRouter, Depends

from ...services.dashboard import compute_stats
from ...services.session import SessionContext
from ..deps import get_session

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard(session: SessionContext = Depends(get_session)):
    """Workout count, volume, streak and level for the signed-in user."""
    session.require_user()
    stats = await compute_stats(session)
    return stats.to_json()
