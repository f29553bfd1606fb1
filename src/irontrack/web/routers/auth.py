"""Account routes."""

from fastapi import APIRouter, Depends, Form

from ...services.session import SessionContext, SessionSnapshot
from ..deps import get_session

router = APIRouter(prefix="/auth", tags=["auth"])


def snapshot_json(snapshot: SessionSnapshot) -> dict:
    return {
        "authenticated": snapshot.is_authenticated,
        "user_id": snapshot.user_id,
        "email": snapshot.email,
        "needs_onboarding": snapshot.needs_onboarding,
        "profile": snapshot.profile.to_json() if snapshot.profile else None,
    }


@router.get("/session")
async def current_session(session: SessionContext = Depends(get_session)):
    """Who is signed in."""
    return snapshot_json(session.snapshot)


@router.post("/login")
async def login(
    email: str = Form(...),
    password: str = Form(...),
    session: SessionContext = Depends(get_session),
):
    snapshot = await session.sign_in(email, password)
    return snapshot_json(snapshot)


@router.post("/signup")
async def signup(
    email: str = Form(...),
    password: str = Form(...),
    session: SessionContext = Depends(get_session),
):
    """Create an account; signs in unless email confirmation is pending."""
    snapshot = await session.sign_up(email, password)
    if snapshot is None:
        return {"authenticated": False, "confirmation_required": True}
    return snapshot_json(snapshot)


@router.post("/logout")
async def logout(session: SessionContext = Depends(get_session)):
    await session.sign_out()
    return snapshot_json(session.snapshot)
