"""API routes exposing the forecast session state."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from loguru import logger
from pydantic import BaseModel, Field

from ..models.weather import SessionSnapshot
from .dependencies import SessionDep

router = APIRouter()


class SearchTextUpdate(BaseModel):
    """Keystroke-level update of the search field."""

    text: str = Field(..., description="Full current text of the search field", max_length=200)


class SelectionRequest(BaseModel):
    """Selection of one of the current search results."""

    id: UUID = Field(..., description="Identifier of a location in searchResults")


@router.get(
    "/v1/state",
    response_model=SessionSnapshot,
    summary="Get session state",
    description="Current search text, search results, selected location, forecast and error",
)
async def get_state(session: SessionDep) -> SessionSnapshot:
    """Return a snapshot of the observable session state.

    ``weatherData`` is empty while a forecast is loading or after a failed
    fetch; ``errorMessage`` tells the two apart.
    """
    return session.snapshot()


@router.put(
    "/v1/search-text",
    response_model=SessionSnapshot,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Update search text",
    description="Forward a search field change; a search runs once typing settles",
)
async def update_search_text(update: SearchTextUpdate, session: SessionDep) -> SessionSnapshot:
    """Feed the search field into the debounced search controller.

    The response is returned immediately; results show up in ``/v1/state``
    after the debounce period and the geocoding request complete.
    """
    session.search_text = update.text
    return session.snapshot()


@router.post(
    "/v1/selection",
    response_model=SessionSnapshot,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Select a location",
    description="Select one of the current search results and start loading its forecast",
    responses={
        404: {
            "description": "Location is not among the current search results",
            "content": {
                "application/json": {
                    "example": {"detail": {"error": "Unknown location id"}}
                }
            },
        },
    },
)
async def select_location(selection: SelectionRequest, session: SessionDep) -> SessionSnapshot:
    """Select a location; the forecast loads in the background."""
    try:
        location = session.select(selection.id)
    except KeyError:
        raise HTTPException(
            status_code=404,
            detail={"error": "Unknown location id"},
        ) from None

    logger.info("Location selected", location=location.display_name)
    return session.snapshot()
