"""First-run onboarding: body metrics, experience and goal."""

import logging
from dataclasses import dataclass

from ..errors import DataError, ValidationError
from ..models.user_profile import (
    PROFILES_TABLE,
    ExperienceLevel,
    FitnessGoal,
    Gender,
    Profile,
)
from ..utils.choices import coerce_choice
from .session import SessionContext

logger = logging.getLogger(__name__)


def parse_metric(value, cast=float):
    """Parse numeric form input; blank, unparseable or zero becomes None."""
    if value is None:
        return None
    text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = cast(float(text))
    except (ValueError, OverflowError):
        return None
    return number or None


@dataclass
class OnboardingForm:
    """Raw answers from the two onboarding steps."""

    # Step 1: about you
    age: str | int | None = None
    weight: str | float | None = None
    height: str | float | None = None
    gender: Gender | str | None = None
    # Step 2: training
    experience_level: ExperienceLevel | str | None = None
    fitness_goal: FitnessGoal | str | None = None

    def to_update(self) -> dict:
        """Build the profiles update payload."""
        goal = coerce_choice(FitnessGoal, self.fitness_goal)
        if goal is None:
            raise ValidationError("A fitness goal is required to finish onboarding")
        level = coerce_choice(ExperienceLevel, self.experience_level)
        gender = coerce_choice(Gender, self.gender)
        return {
            "age": parse_metric(self.age, int),
            "weight": parse_metric(self.weight),
            "height": parse_metric(self.height),
            "gender": gender.value if gender else None,
            "experience_level": level.value if level else None,
            "fitness_goal": goal.value,
        }


async def complete_onboarding(session: SessionContext, form: OnboardingForm) -> Profile:
    """Save the onboarding answers to the profile and refresh the session."""
    update = form.to_update()
    user_id = session.require_user()
    await session.service.update_record(PROFILES_TABLE, user_id, update)
    snapshot = await session.refresh()
    logger.info("Onboarding complete for %s", user_id)
    if snapshot.profile is None:
        raise DataError(f"No profile row for user {user_id}")
    return snapshot.profile
