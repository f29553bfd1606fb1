"""Interactive (terminal) input."""

from .client import OnboardingQuestionnaire, QuestionnaireCancelled

__all__ = ["OnboardingQuestionnaire", "QuestionnaireCancelled"]
