"""Request dependencies shared by the routers."""

from fastapi import Request

from ..services.session import SessionContext


def get_session(request: Request) -> SessionContext:
    """Get the session context from app state."""
    return request.app.state.session
