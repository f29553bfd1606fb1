"""Exercise definitions and metadata."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..utils.records import format_timestamp, parse_timestamp

EXERCISES_TABLE = "exercises"
EXERCISE_MEDIA_BUCKET = "exercise-media"


class MuscleGroup(str, Enum):
    """Muscle groups an exercise can be filed under."""

    CHEST = "Peito"
    BACK = "Costas"
    LEGS = "Pernas"
    SHOULDERS = "Ombros"
    BICEPS = "Bíceps"
    TRICEPS = "Tríceps"
    ABS = "Abdómen"
    CARDIO = "Cardio"


class EquipmentType(str, Enum):
    """Equipment types for exercises."""

    BARBELL = "Barra"
    DUMBBELL = "Halteres"
    MACHINE = "Máquina"
    CABLE = "Cabo"
    BODYWEIGHT = "Peso Corporal"
    KETTLEBELL = "Kettlebell"
    BANDS = "Elásticos"
    OTHER = "Outro"


@dataclass
class Exercise:
    """An exercise in the shared library."""

    name: str
    muscle_group: MuscleGroup
    equipment: EquipmentType
    instructions: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    is_verified: bool = False
    created_by: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to the insert payload for the exercises table."""
        return {
            "name": self.name,
            "muscle_group": self.muscle_group.value,
            "equipment": self.equipment.value,
            "instructions": self.instructions,
            "image_url": self.image_url,
            "video_url": self.video_url,
            "is_verified": self.is_verified,
            "created_by": self.created_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from a row of the exercises table."""
        name = data["name"]
        if not name:
            raise ValueError("exercise name is empty")
        return cls(
            id=data.get("id"),
            name=name,
            muscle_group=MuscleGroup(data["muscle_group"]),
            equipment=EquipmentType(data["equipment"]),
            instructions=data.get("instructions"),
            image_url=data.get("image_url"),
            video_url=data.get("video_url"),
            is_verified=bool(data.get("is_verified", False)),
            created_by=data.get("created_by"),
            created_at=parse_timestamp(data.get("created_at")),
        )

    def to_json(self) -> dict:
        """Serialize for API responses."""
        data = self.to_dict()
        data["id"] = self.id
        data["created_at"] = format_timestamp(self.created_at)
        return data


# Verified exercises shipped with the local backend
COMMON_EXERCISES: list[Exercise] = [
    # Peito
    Exercise("Supino Reto com Barra", MuscleGroup.CHEST, EquipmentType.BARBELL, is_verified=True,
             instructions="Deitado no banco, descer a barra até ao peito e empurrar até à extensão dos braços."),
    Exercise("Supino Inclinado com Halteres", MuscleGroup.CHEST, EquipmentType.DUMBBELL, is_verified=True),
    Exercise("Crossover na Polia", MuscleGroup.CHEST, EquipmentType.CABLE, is_verified=True),
    Exercise("Flexões", MuscleGroup.CHEST, EquipmentType.BODYWEIGHT, is_verified=True),
    Exercise("Chest Press", MuscleGroup.CHEST, EquipmentType.MACHINE, is_verified=True),
    # Costas
    Exercise("Remada Curvada com Barra", MuscleGroup.BACK, EquipmentType.BARBELL, is_verified=True),
    Exercise("Puxada Frontal", MuscleGroup.BACK, EquipmentType.CABLE, is_verified=True),
    Exercise("Elevações", MuscleGroup.BACK, EquipmentType.BODYWEIGHT, is_verified=True),
    Exercise("Remada Unilateral com Halter", MuscleGroup.BACK, EquipmentType.DUMBBELL, is_verified=True),
    Exercise("Peso Morto", MuscleGroup.BACK, EquipmentType.BARBELL, is_verified=True),
    # Pernas
    Exercise("Agachamento com Barra", MuscleGroup.LEGS, EquipmentType.BARBELL, is_verified=True),
    Exercise("Leg Press", MuscleGroup.LEGS, EquipmentType.MACHINE, is_verified=True),
    Exercise("Extensão de Pernas", MuscleGroup.LEGS, EquipmentType.MACHINE, is_verified=True),
    Exercise("Peso Morto Romeno", MuscleGroup.LEGS, EquipmentType.BARBELL, is_verified=True),
    Exercise("Goblet Squat", MuscleGroup.LEGS, EquipmentType.KETTLEBELL, is_verified=True),
    # Ombros
    Exercise("Press Militar", MuscleGroup.SHOULDERS, EquipmentType.BARBELL, is_verified=True),
    Exercise("Elevação Lateral", MuscleGroup.SHOULDERS, EquipmentType.DUMBBELL, is_verified=True),
    Exercise("Face Pull", MuscleGroup.SHOULDERS, EquipmentType.CABLE, is_verified=True),
    # Braços
    Exercise("Curl com Barra", MuscleGroup.BICEPS, EquipmentType.BARBELL, is_verified=True),
    Exercise("Curl Martelo", MuscleGroup.BICEPS, EquipmentType.DUMBBELL, is_verified=True),
    Exercise("Tricep Pushdown", MuscleGroup.TRICEPS, EquipmentType.CABLE, is_verified=True),
    Exercise("Fundos", MuscleGroup.TRICEPS, EquipmentType.BODYWEIGHT, is_verified=True),
    # Core e cardio
    Exercise("Prancha", MuscleGroup.ABS, EquipmentType.BODYWEIGHT, is_verified=True),
    Exercise("Abdominal na Polia", MuscleGroup.ABS, EquipmentType.CABLE, is_verified=True),
    Exercise("Kettlebell Swing", MuscleGroup.CARDIO, EquipmentType.KETTLEBELL, is_verified=True),
    Exercise("Remo Ergómetro", MuscleGroup.CARDIO, EquipmentType.MACHINE, is_verified=True),
]
