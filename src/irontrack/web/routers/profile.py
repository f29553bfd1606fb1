"""User profile routes."""

from fastapi import APIRouter, Depends, Form

from ...services.onboarding import OnboardingForm, complete_onboarding
from ...services.session import SessionContext
from ..deps import get_session

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(session: SessionContext = Depends(get_session)):
    session.require_user()
    snapshot = await session.refresh()
    return {
        "profile": snapshot.profile.to_json() if snapshot.profile else None,
        "needs_onboarding": snapshot.needs_onboarding,
    }


@router.post("/onboarding")
async def save_onboarding(
    age: str = Form(""),
    weight: str = Form(""),
    height: str = Form(""),
    gender: str = Form(""),
    experience_level: str = Form(""),
    fitness_goal: str = Form(""),
    session: SessionContext = Depends(get_session),
):
    """Save the onboarding answers; blank or zero numbers are stored as null."""
    form = OnboardingForm(
        age=age,
        weight=weight,
        height=height,
        gender=gender,
        experience_level=experience_level,
        fitness_goal=fitness_goal,
    )
    profile = await complete_onboarding(session, form)
    return {"profile": profile.to_json(), "needs_onboarding": profile.needs_onboarding}
