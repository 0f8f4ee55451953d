"""FastAPI dependencies for request handling."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from ..services.session import ForecastSession


def get_session(request: Request) -> ForecastSession:
    """Return the process-wide forecast session created by the lifespan.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=503,
            detail={"error": "Service temporarily unavailable - session not started"},
        )
    return session


SessionDep = Annotated[ForecastSession, Depends(get_session)]
