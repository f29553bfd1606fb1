"""Creation flows for exercises and routines.

Each flow validates its form, optionally uploads one attachment to blob
storage, inserts the record and then tells its listeners (normally the
list controller's ``on_created``) so they can refresh.
"""

import logging
import mimetypes
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePath

from ..clients.base import DataService
from ..errors import ValidationError
from ..models.exercises import (
    EXERCISE_MEDIA_BUCKET,
    EXERCISES_TABLE,
    EquipmentType,
    Exercise,
    MuscleGroup,
)
from ..models.routines import ROUTINES_TABLE, Routine
from ..utils.choices import coerce_choice
from .session import SessionContext

logger = logging.getLogger(__name__)

CreatedListener = Callable[[object], object]


def generate_blob_key(filename: str, now: float | None = None) -> str:
    """Build a collision-resistant storage key ``<epoch-ms>-<random>.<ext>``."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = PurePath(filename).suffix.lower().lstrip(".")
    key = f"{millis}-{secrets.token_hex(6)}"
    return f"{key}.{suffix}" if suffix else key


@dataclass(frozen=True)
class Attachment:
    """A binary file picked by the user."""

    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def resolved_content_type(self) -> str | None:
        return self.content_type or mimetypes.guess_type(self.filename)[0]


@dataclass
class ExerciseForm:
    name: str = ""
    muscle_group: MuscleGroup | str | None = None
    equipment: EquipmentType | str | None = None
    instructions: str = ""
    video_url: str = ""


@dataclass
class RoutineForm:
    name: str = ""
    description: str = ""


class _CreationFlow:
    def __init__(self, service: DataService, session: SessionContext):
        self.service = service
        self.session = session
        self._listeners: list[CreatedListener] = []

    def add_listener(self, listener: CreatedListener) -> Callable[[], None]:
        """Register a callback run with the created model after each success."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def _upload(self, attachment: Attachment | None) -> str | None:
        if attachment is None or not attachment.data:
            return None
        key = generate_blob_key(attachment.filename)
        url = await self.service.upload_blob(
            EXERCISE_MEDIA_BUCKET, key, attachment.data, attachment.resolved_content_type
        )
        logger.info("Uploaded %s as %s", attachment.filename, key)
        return url

    def _signal(self, record) -> None:
        for listener in list(self._listeners):
            listener(record)


class ExerciseCreationFlow(_CreationFlow):
    """Create a user-defined exercise (unverified, owned by the creator)."""

    def validate(self, form: ExerciseForm) -> tuple[str, MuscleGroup, EquipmentType]:
        name = form.name.strip()
        if not name:
            raise ValidationError("Exercise name is required")
        muscle_group = coerce_choice(MuscleGroup, form.muscle_group)
        if muscle_group is None:
            raise ValidationError("Muscle group is required")
        equipment = coerce_choice(EquipmentType, form.equipment)
        if equipment is None:
            raise ValidationError("Equipment is required")
        return name, muscle_group, equipment

    async def submit(self, form: ExerciseForm, attachment: Attachment | None = None) -> Exercise:
        name, muscle_group, equipment = self.validate(form)
        user_id = self.session.require_user()

        image_url = await self._upload(attachment)
        exercise = Exercise(
            name=name,
            muscle_group=muscle_group,
            equipment=equipment,
            instructions=form.instructions.strip() or None,
            image_url=image_url,
            video_url=form.video_url.strip() or None,
            is_verified=False,
            created_by=user_id,
        )
        row = await self.service.insert_record(EXERCISES_TABLE, exercise.to_dict())
        created = Exercise.from_dict(row)
        logger.info("Created exercise %s (%s)", created.name, created.id)
        self._signal(created)
        return created


class RoutineCreationFlow(_CreationFlow):
    """Create a private routine for the signed-in user."""

    def validate(self, form: RoutineForm) -> str:
        name = form.name.strip()
        if not name:
            raise ValidationError("Routine name is required")
        return name

    async def submit(self, form: RoutineForm) -> Routine:
        name = self.validate(form)
        user_id = self.session.require_user()
        routine = Routine(
            user_id=user_id,
            name=name,
            description=form.description.strip() or None,
            is_public=False,
        )
        row = await self.service.insert_record(ROUTINES_TABLE, routine.to_dict())
        created = Routine.from_dict(row)
        logger.info("Created routine %s (%s)", created.name, created.id)
        self._signal(created)
        return created
