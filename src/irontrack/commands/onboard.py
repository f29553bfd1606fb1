"""Onboarding command."""

import click

from ..clients.manual import OnboardingQuestionnaire, QuestionnaireCancelled
from ..errors import IronTrackError
from ..services.onboarding import OnboardingForm, complete_onboarding
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    get_settings,
    open_session,
    require_user,
)


@click.command()
@click.option("--age", help="Age in years")
@click.option("--weight", help="Body weight (kg)")
@click.option("--height", help="Height (cm)")
@click.option("--gender", type=click.Choice(["male", "female", "other"]))
@click.option("--experience", type=click.Choice(["beginner", "intermediate", "advanced"]))
@click.option(
    "--goal", type=click.Choice(["hypertrophy", "strength", "weight_loss", "endurance"])
)
@click.pass_context
@async_command
async def onboard(ctx, age, weight, height, gender, experience, goal):
    """Complete your training profile.

    Without --goal an interactive questionnaire asks for everything.

    Examples:

        # Interactive
        irontrack onboard

        # Scripted
        irontrack onboard --age 30 --weight 80 --height 180 --goal strength
    """
    ensure_initialized(ctx)
    settings = get_settings(ctx)

    async with open_session(settings) as session:
        require_user(ctx, session)

        if goal:
            form = OnboardingForm(
                age=age,
                weight=weight,
                height=height,
                gender=gender,
                experience_level=experience,
                fitness_goal=goal,
            )
        else:
            try:
                form = await OnboardingQuestionnaire().collect_form()
            except QuestionnaireCancelled:
                echo_info("Onboarding cancelled")
                return

        try:
            profile = await complete_onboarding(session, form)
        except IronTrackError as e:
            echo_error(f"Could not save your profile: {e}")
            ctx.exit(1)

    echo_success("Profile saved!")
    click.echo()
    click.echo(profile.get_summary())
