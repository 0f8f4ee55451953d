"""MET Norway locationforecast client."""

import math

from loguru import logger
from pydantic import ValidationError

from ..core.config import settings
from ..models.weather import ForecastResponse
from .errors import DecodeError, InvalidRequestError
from .upstream import UpstreamClient, describe_validation_error

FORECAST_PATH = "/weatherapi/locationforecast/2.0/compact"


class ForecastClient(UpstreamClient):
    """Client fetching the compact forecast timeseries for a coordinate.

    MET Norway rejects anonymous traffic, so every request carries the
    configured ``User-Agent``.

    Example:
        >>> async def example():
        ...     async with ForecastClient() as client:
        ...         payload = await client.fetch(59.91, 10.75)
        ...         return payload.properties.meta.updated_at
    """

    upstream_name = "forecast"

    def __init__(self):
        """Initialize the forecast client with configuration from settings."""
        super().__init__(
            settings.FORECAST_BASE_URL,
            headers={"User-Agent": settings.FORECAST_USER_AGENT},
        )

    async def fetch(self, latitude: float, longitude: float) -> ForecastResponse:
        """Fetch the raw forecast payload for a coordinate.

        Args:
            latitude: Latitude in decimal degrees (-90 to 90)
            longitude: Longitude in decimal degrees (-180 to 180)

        Returns:
            The decoded forecast payload

        Raises:
            InvalidRequestError: If the coordinates are not finite or out of range
            TransportError: If the request fails
            DecodeError: If the body does not match the forecast schema
        """
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise InvalidRequestError("Coordinates must be finite numbers")
        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            raise InvalidRequestError(f"Coordinates out of range: ({latitude}, {longitude})")

        params = {"lat": latitude, "lon": longitude}
        data = await self._get_json(FORECAST_PATH, params)

        try:
            payload = ForecastResponse.model_validate(data)
        except ValidationError as e:
            logger.warning("Forecast response failed validation", errors=e.error_count())
            raise DecodeError(describe_validation_error(e)) from e

        logger.info(
            "Forecast fetched",
            entries=len(payload.properties.timeseries),
            updated_at=payload.properties.meta.updated_at,
        )
        return payload
