"""Shared plumbing for the upstream HTTP clients."""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from ..core.config import settings
from .errors import DecodeError, InvalidRequestError, TransportError


class UpstreamClient:
    """Base for single-shot JSON clients built on ``httpx.AsyncClient``.

    Subclasses call :meth:`_get_json` and then validate the returned data.
    Every request is attempted exactly once. httpx failures are translated into
    :class:`TransportError` and a malformed URL into :class:`InvalidRequestError`.
    An error status or an unparseable body is a :class:`DecodeError`: the
    request completed, but the body is not the expected document.

    Must be used as an async context manager.
    """

    #: Human-readable name used in logs
    upstream_name = "upstream"

    def __init__(self, base_url: str, headers: dict[str, str] | None = None):
        self._client: httpx.AsyncClient | None = None
        self._base_url = base_url
        self._timeout = settings.UPSTREAM_TIMEOUT
        self._headers = headers or {}

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            headers=self._headers,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()

    def _build_url(self, path: str) -> httpx.URL:
        try:
            return httpx.URL(f"{self._base_url}{path}")
        except httpx.InvalidURL as e:
            raise InvalidRequestError(f"Malformed {self.upstream_name} URL: {e}") from e

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            path: Path appended to the base URL
            params: Query parameters

        Returns:
            The parsed JSON document

        Raises:
            InvalidRequestError: If the URL cannot be built
            TransportError: On network failure or timeout
            DecodeError: On a non-2xx status or a body that is not valid JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        url = self._build_url(path)

        try:
            logger.debug(f"Requesting {self.upstream_name}", url=str(url))
            response = await self._client.get(url, params=params)

        except httpx.TimeoutException as e:
            logger.warning(f"{self.upstream_name} request timed out")
            raise TransportError("The request timed out", cause=e) from e

        except httpx.ConnectError as e:
            logger.warning(f"Failed to connect to {self.upstream_name}", error=str(e))
            raise TransportError(f"Could not connect to the server: {e}", cause=e) from e

        except httpx.HTTPError as e:
            logger.error("HTTP error occurred", upstream=self.upstream_name, error=str(e))
            raise TransportError(f"Network error: {e}", cause=e) from e

        if not response.is_success:
            logger.warning(
                f"{self.upstream_name} returned an error status",
                status_code=response.status_code,
            )
            raise DecodeError(f"Server returned HTTP {response.status_code}")

        logger.debug(f"Raw {self.upstream_name} response", body=response.text)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{self.upstream_name} returned a non-JSON body")
            raise DecodeError("Response is not valid JSON") from e


def describe_validation_error(error: ValidationError) -> str:
    """Condense a pydantic error into one line suitable for an error banner.

    Example:
        >>> from pydantic import BaseModel
        >>> class Point(BaseModel):
        ...     x: float
        >>> try:
        ...     Point.model_validate({})
        ... except ValidationError as e:
        ...     describe_validation_error(e)
        "Field required at 'x'"
    """
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"]
    if error.error_count() > 1:
        message = f"{message} (and {error.error_count() - 1} more)"
    if location:
        return f"{message} at '{location}'"
    return message
