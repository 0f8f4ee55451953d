"""Health check endpoints for container probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model.

    Example:
        >>> response = HealthResponse(status="ok")
        >>> response.status
        'ok'
    """

    status: str
    detail: str | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Liveness probe",
    description="Check if the application process is running",
)
async def health_check() -> HealthResponse:
    """Liveness probe.

    Always returns 200 OK to indicate the process is running.
    Does not check upstream APIs or session state.
    """
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Readiness probe",
    description="Check if the forecast session is ready to accept search input",
    responses={
        503: {
            "description": "Session not started or geocoding not configured",
            "content": {
                "application/json": {
                    "example": {"status": "unavailable", "detail": "OpenWeather API key is not configured"}
                }
            },
        },
    },
)
async def readiness_check(request: Request):
    """Readiness probe.

    Ready once the lifespan has created the session and an OpenWeather API key
    is configured. Upstream APIs are not probed.
    """
    if getattr(request.app.state, "session", None) is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "Session not started"},
        )
    if not settings.OPENWEATHER_API_KEY:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "OpenWeather API key is not configured"},
        )
    return HealthResponse(status="ok")
