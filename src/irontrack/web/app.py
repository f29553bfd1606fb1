"""FastAPI application for the IronTrack JSON API.

The server holds one session context: it is meant to run next to a single
user (a local companion or a kiosk), the same way the CLI does.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, create_data_service
from ..db import seed_exercises
from ..errors import (
    AuthenticationError,
    AuthRequired,
    DataError,
    IronTrackError,
    NetworkError,
    ValidationError,
)
from ..models.exercises import EquipmentType, MuscleGroup
from ..models.user_profile import ExperienceLevel, FitnessGoal, Gender
from ..services.session import SessionContext
from ..utils.choices import choice_values
from .routers import auth, dashboard, exercises, profile, routines

logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[IronTrackError], int]] = [
    (ValidationError, 422),
    (AuthRequired, 401),
    (AuthenticationError, 401),
    (NetworkError, 502),
    (DataError, 502),
]


def status_for(exc: IronTrackError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the data service on startup and close it on shutdown."""
    settings: Settings = app.state.settings
    service = await create_data_service(settings)
    if settings.resolved_backend == "local":
        added = await seed_exercises(service.db_path)
        if added:
            logger.info("Seeded %d exercises", added)

    session = SessionContext(service)
    session.start()
    app.state.session = session
    yield
    session.stop()
    await service.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="IronTrack",
        description="Workout tracking with a searchable exercise library",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or Settings.from_env()

    @app.exception_handler(IronTrackError)
    async def handle_error(request: Request, exc: IronTrackError):
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content={"error": str(exc)})

    app.include_router(auth.router)
    app.include_router(exercises.router)
    app.include_router(routines.router)
    app.include_router(profile.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "backend": app.state.settings.resolved_backend,
        }

    @app.get("/meta")
    async def meta():
        """Choices for the filter and form dropdowns."""
        return {
            "muscle_groups": choice_values(MuscleGroup),
            "equipment": choice_values(EquipmentType),
            "experience_levels": choice_values(ExperienceLevel),
            "fitness_goals": choice_values(FitnessGoal),
            "genders": choice_values(Gender),
        }

    return app
