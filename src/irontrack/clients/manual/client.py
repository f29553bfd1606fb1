"""Interactive onboarding questionnaire."""

import questionary
from questionary import Style

from ...models.user_profile import ExperienceLevel, FitnessGoal, Gender
from ...services.onboarding import OnboardingForm

custom_style = Style(
    [
        ("qmark", "fg:#f97316 bold"),
        ("question", "bold"),
        ("answer", "fg:#f97316 bold"),
        ("pointer", "fg:#f97316 bold"),
        ("highlighted", "fg:#f97316 bold"),
        ("selected", "fg:#fb923c"),
        ("separator", "fg:#fb923c"),
        ("instruction", ""),
        ("text", ""),
    ]
)


def _number(text: str) -> bool | str:
    text = text.strip().replace(",", ".")
    if not text:
        return True
    try:
        float(text)
    except ValueError:
        return "Please enter a number (or leave blank)"
    return True


class QuestionnaireCancelled(Exception):
    """Raised when the user aborts the questionnaire (Ctrl+C)."""


class OnboardingQuestionnaire:
    """Two-step questionnaire that fills an OnboardingForm."""

    async def _ask(self, question):
        answer = await question.ask_async()
        if answer is None:
            raise QuestionnaireCancelled()
        return answer

    async def collect_form(self) -> OnboardingForm:
        print("\n=== Passo 1 de 2: Sobre ti ===\n")

        age = await self._ask(questionary.text("Idade", validate=_number, style=custom_style))
        weight = await self._ask(
            questionary.text("Peso (kg)", validate=_number, style=custom_style)
        )
        height = await self._ask(
            questionary.text("Altura (cm)", validate=_number, style=custom_style)
        )
        gender = await self._ask(
            questionary.select(
                "Género",
                choices=[
                    questionary.Choice("Masculino", Gender.MALE),
                    questionary.Choice("Feminino", Gender.FEMALE),
                    questionary.Choice("Outro", Gender.OTHER),
                ],
                style=custom_style,
            )
        )

        print("\n=== Passo 2 de 2: Treino ===\n")

        experience = await self._ask(
            questionary.select(
                "Nível de experiência",
                choices=[
                    questionary.Choice("Iniciante (menos de 6 meses)", ExperienceLevel.BEGINNER),
                    questionary.Choice("Intermédio (6 meses a 2 anos)", ExperienceLevel.INTERMEDIATE),
                    questionary.Choice("Avançado (mais de 2 anos)", ExperienceLevel.ADVANCED),
                ],
                style=custom_style,
            )
        )
        goal = await self._ask(
            questionary.select(
                "Objetivo principal",
                choices=[
                    questionary.Choice("Hipertrofia (ganhar músculo)", FitnessGoal.HYPERTROPHY),
                    questionary.Choice("Força", FitnessGoal.STRENGTH),
                    questionary.Choice("Perder peso", FitnessGoal.WEIGHT_LOSS),
                    questionary.Choice("Resistência", FitnessGoal.ENDURANCE),
                ],
                style=custom_style,
            )
        )

        return OnboardingForm(
            age=age,
            weight=weight,
            height=height,
            gender=gender,
            experience_level=experience,
            fitness_goal=goal,
        )
