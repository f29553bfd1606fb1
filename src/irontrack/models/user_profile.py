"""User profile data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..utils.records import (
    format_timestamp,
    parse_optional_float,
    parse_optional_int,
    parse_timestamp,
)

PROFILES_TABLE = "profiles"


class ExperienceLevel(str, Enum):
    """Training experience level."""

    BEGINNER = "beginner"  # < 6 months
    INTERMEDIATE = "intermediate"  # 6 months - 2 years
    ADVANCED = "advanced"  # 2+ years of serious training


class FitnessGoal(str, Enum):
    """Primary fitness goals."""

    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    WEIGHT_LOSS = "weight_loss"
    ENDURANCE = "endurance"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass
class Profile:
    """Denormalized profile record for the signed-in user."""

    id: str
    username: str | None = None
    avatar_url: str | None = None
    height: float | None = None  # cm
    weight: float | None = None  # kg
    age: int | None = None
    gender: Gender | None = None
    fitness_goal: FitnessGoal | None = None
    experience_level: ExperienceLevel | None = None
    xp: int = 0
    level: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def needs_onboarding(self) -> bool:
        """A profile without a fitness goal has not been through onboarding."""
        return self.fitness_goal is None

    def to_dict(self) -> dict:
        """Convert to the update payload for the profiles table."""
        return {
            "username": self.username,
            "avatar_url": self.avatar_url,
            "height": self.height,
            "weight": self.weight,
            "age": self.age,
            "gender": self.gender.value if self.gender else None,
            "fitness_goal": self.fitness_goal.value if self.fitness_goal else None,
            "experience_level": self.experience_level.value if self.experience_level else None,
            "xp": self.xp,
            "level": self.level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Create from a row of the profiles table."""
        return cls(
            id=data["id"],
            username=data.get("username"),
            avatar_url=data.get("avatar_url"),
            height=parse_optional_float(data.get("height")),
            weight=parse_optional_float(data.get("weight")),
            age=parse_optional_int(data.get("age")),
            gender=Gender(data["gender"]) if data.get("gender") else None,
            fitness_goal=FitnessGoal(data["fitness_goal"]) if data.get("fitness_goal") else None,
            experience_level=(
                ExperienceLevel(data["experience_level"]) if data.get("experience_level") else None
            ),
            xp=int(data.get("xp") or 0),
            level=int(data.get("level") or 1),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def to_json(self) -> dict:
        data = self.to_dict()
        data["id"] = self.id
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data

    def get_summary(self) -> str:
        """Short multi-line summary for the CLI."""
        summary = f"User: {self.username or self.id}\n"
        summary += f"Level {self.level} ({self.xp} XP)\n"
        if self.experience_level:
            summary += f"Experience: {self.experience_level.value}\n"
        if self.fitness_goal:
            summary += f"Goal: {self.fitness_goal.value}\n"
        if self.weight:
            summary += f"Weight: {self.weight}kg\n"
        if self.height:
            summary += f"Height: {self.height}cm\n"
        if self.age:
            summary += f"Age: {self.age}\n"
        return summary
