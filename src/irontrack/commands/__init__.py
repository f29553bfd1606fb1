"""CLI commands for IronTrack."""

from .auth import auth
from .dashboard import dashboard
from .exercises import exercises
from .init import init
from .onboard import onboard
from .routines import routines
from .serve import serve
from .workout import workout

__all__ = [
    "auth",
    "dashboard",
    "exercises",
    "init",
    "onboard",
    "routines",
    "serve",
    "workout",
]
