"""Error taxonomy shared by the geocoding and forecast clients."""


class WeatherSearchError(Exception):
    """Base exception for upstream client errors."""

    pass


class InvalidRequestError(WeatherSearchError):
    """Raised when a request cannot be built (bad parameters, URL, or missing key).

    Nothing is sent upstream when this is raised.
    """

    pass


class TransportError(WeatherSearchError):
    """Raised when the request was sent but no usable response came back.

    Covers connection failures and timeouts.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(WeatherSearchError):
    """Raised when a response body does not match the expected schema."""

    pass
