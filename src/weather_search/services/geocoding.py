"""OpenWeather direct geocoding client."""

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..core.config import settings
from ..models.weather import Location
from .errors import DecodeError, InvalidRequestError
from .upstream import UpstreamClient, describe_validation_error

GEOCODING_PATH = "/geo/1.0/direct"

_locations_adapter = TypeAdapter(list[Location])


class GeocodingClient(UpstreamClient):
    """Client resolving free-text queries to candidate locations.

    Example:
        >>> async def example():
        ...     async with GeocodingClient() as client:
        ...         results = await client.search("Oslo")
        ...         return [location.display_name for location in results]
    """

    upstream_name = "geocoding"

    def __init__(self):
        """Initialize the geocoding client with configuration from settings."""
        super().__init__(settings.GEOCODING_BASE_URL)
        self._api_key = settings.OPENWEATHER_API_KEY
        self._limit = settings.SEARCH_RESULT_LIMIT

    async def search(self, query: str) -> list[Location]:
        """Search for locations matching ``query``.

        The query is sent as-is; it is not trimmed. An empty JSON array is a
        valid "no matches" answer.

        Args:
            query: Non-empty search text

        Returns:
            Up to ``SEARCH_RESULT_LIMIT`` locations in upstream order

        Raises:
            InvalidRequestError: If the query is empty or not encodable,
                or no API key is configured
            TransportError: If the request fails
            DecodeError: If the body is not a list of locations
        """
        if not query:
            raise InvalidRequestError("Search query must not be empty")
        try:
            query.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidRequestError("Search query contains characters that cannot be encoded") from e
        if not self._api_key:
            raise InvalidRequestError("OpenWeather API key is not configured")

        params = {"q": query, "limit": self._limit, "appid": self._api_key}
        data = await self._get_json(GEOCODING_PATH, params)

        try:
            locations = _locations_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning("Geocoding response failed validation", errors=e.error_count())
            raise DecodeError(describe_validation_error(e)) from e

        logger.info("Location search completed", results=len(locations))
        return locations[: self._limit]
