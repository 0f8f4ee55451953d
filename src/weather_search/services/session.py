"""Forecast session: the search-and-forecast view model."""

import asyncio
import threading
from collections.abc import Callable
from datetime import date
from uuid import UUID

from loguru import logger

from ..core.observable import Observable
from ..models.weather import ForecastDay, Location, SessionSnapshot
from .errors import DecodeError, InvalidRequestError, WeatherSearchError
from .forecast import ForecastClient
from .geocoding import GeocodingClient
from .normalizer import ForecastNormalizer
from .search import SearchController


class ForecastSession:
    """Owns the observable search and forecast state for one user.

    This service coordinates:
    - Debounced search input through a :class:`SearchController`
    - Location search through :class:`GeocodingClient`
    - Forecast fetch and normalization for the selected location
    - Mapping every client failure to the single ``error_message`` field

    All state changes go through :meth:`_apply`, which runs on the session's
    event loop. Each operation class tags its requests with an increasing id;
    a completion that is no longer the latest is discarded instead of
    overwriting newer state.

    Example:
        >>> async def example():
        ...     session = ForecastSession()
        ...     session.weather_data.subscribe(print)
        ...     session.search_text = "Oslo"
    """

    def __init__(
        self,
        geocoding_client_factory: Callable[[], GeocodingClient] = GeocodingClient,
        forecast_client_factory: Callable[[], ForecastClient] = ForecastClient,
        normalizer: ForecastNormalizer | None = None,
        debounce_seconds: float | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the session.

        Args:
            geocoding_client_factory: Builds a geocoding client per search
            forecast_client_factory: Builds a forecast client per fetch
            normalizer: Forecast normalizer (defaults to configured settings)
            debounce_seconds: Search quiet period (defaults to SEARCH_DEBOUNCE_MS)
            today: Provides the reference date for day labels
        """
        self._geocoding_client_factory = geocoding_client_factory
        self._forecast_client_factory = forecast_client_factory
        self._normalizer = normalizer or ForecastNormalizer()
        self._today = today
        self._controller = SearchController(self.search_locations, delay=debounce_seconds)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: int | None = None
        self._search_generation = 0
        self._fetch_generation = 0
        self._fetch_tasks: set[asyncio.Task] = set()

        self._search_text: Observable[str] = Observable("", "searchText")
        self.search_results: Observable[list[Location]] = Observable([], "searchResults")
        self.selected_location: Observable[Location | None] = Observable(None, "selectedLocation")
        self.weather_data: Observable[list[ForecastDay]] = Observable([], "weatherData")
        self.error_message: Observable[str | None] = Observable(None, "errorMessage")

    @property
    def search_text(self) -> Observable[str]:
        """Raw search field text; assigning a string feeds the debounced search."""
        return self._search_text

    @search_text.setter
    def search_text(self, text: str) -> None:
        self._bind_loop()
        self._search_text.value = text
        self._controller.submit(text)

    @property
    def controller(self) -> SearchController:
        return self._controller

    def snapshot(self) -> SessionSnapshot:
        """Copy the current state for serialization."""
        return SessionSnapshot(
            searchText=self._search_text.value,
            searchResults=list(self.search_results.value),
            selectedLocation=self.selected_location.value,
            weatherData=list(self.weather_data.value),
            errorMessage=self.error_message.value,
        )

    def _bind_loop(self) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
            self._loop_thread = threading.get_ident()

    def _apply(self, update: Callable[[], None]) -> None:
        """Run a state mutation on the session's event loop.

        Called on the loop thread the update runs immediately; from any other
        thread it is posted with ``call_soon_threadsafe``.
        """
        if self._loop is None or threading.get_ident() == self._loop_thread:
            update()
        else:
            self._loop.call_soon_threadsafe(update)

    def _set_error(self, message: str | None) -> None:
        self.error_message.value = message

    async def search_locations(self, query: str) -> None:
        """Search for ``query`` and publish the results.

        On success the results replace ``search_results`` and the error is
        cleared. If the request could not be built, results are left as they
        were; any later failure clears them. Errors never propagate.
        """
        self._bind_loop()
        self._search_generation += 1
        generation = self._search_generation

        try:
            async with self._geocoding_client_factory() as client:
                results = await client.search(query)

        except InvalidRequestError as e:
            logger.warning("Location search request rejected", error=str(e))
            message = f"Invalid search URL: {e}"
            self._apply_search_failure(generation, message, clear_results=False)
            return

        except DecodeError as e:
            message = f"Failed to decode search results: {e}"
            self._apply_search_failure(generation, message, clear_results=True)
            return

        except WeatherSearchError as e:
            message = f"Search error: {e}"
            self._apply_search_failure(generation, message, clear_results=True)
            return

        def publish() -> None:
            if generation != self._search_generation:
                logger.debug("Discarding stale search results", generation=generation)
                return
            self.search_results.value = results
            self._set_error(None)

        self._apply(publish)

    def _apply_search_failure(self, generation: int, message: str, clear_results: bool) -> None:
        def publish() -> None:
            if generation != self._search_generation:
                logger.debug("Discarding stale search failure", generation=generation)
                return
            if clear_results:
                self.search_results.value = []
            self._set_error(message)

        self._apply(publish)

    async def fetch_weather(self, location: Location) -> None:
        """Select ``location`` and load its forecast.

        The previous forecast is cleared first so that observers can show a
        loading state. On failure the forecast stays empty and the error is
        set; nothing is retried.
        """
        generation = self._begin_fetch(location)
        await self._load_forecast(location, generation)

    def _begin_fetch(self, location: Location) -> int:
        self._bind_loop()
        self._fetch_generation += 1

        def select() -> None:
            self.selected_location.value = location
            self.weather_data.value = []

        self._apply(select)
        return self._fetch_generation

    async def _load_forecast(self, location: Location, generation: int) -> None:
        logger.info(
            "Fetching weather",
            location=location.name,
            lat=location.latitude,
            lon=location.longitude,
        )

        try:
            async with self._forecast_client_factory() as client:
                payload = await client.fetch(location.latitude, location.longitude)

        except InvalidRequestError as e:
            self._apply_fetch_failure(generation, f"Invalid weather URL: {e}")
            return

        except DecodeError as e:
            self._apply_fetch_failure(generation, f"Failed to decode weather data: {e}")
            return

        except WeatherSearchError as e:
            self._apply_fetch_failure(generation, f"Weather error: {e}")
            return

        days = self._normalizer.normalize(payload, self._today())

        def publish() -> None:
            if generation != self._fetch_generation:
                logger.debug("Discarding stale forecast", generation=generation)
                return
            self.weather_data.value = days
            self._set_error(None)

        self._apply(publish)

    def _apply_fetch_failure(self, generation: int, message: str) -> None:
        logger.warning("Weather fetch failed", error=message)

        def publish() -> None:
            if generation != self._fetch_generation:
                logger.debug("Discarding stale fetch failure", generation=generation)
                return
            self._set_error(message)

        self._apply(publish)

    def select(self, location_id: UUID) -> Location:
        """Start loading the forecast for a location in the current results.

        The selection is published before returning; the fetch runs as a
        background task on the running loop.

        Args:
            location_id: ``id`` of one of the current search results

        Returns:
            The selected location

        Raises:
            KeyError: If no current result has that id
        """
        location = next(
            (result for result in self.search_results.value if result.id == location_id),
            None,
        )
        if location is None:
            raise KeyError(location_id)

        generation = self._begin_fetch(location)
        task = asyncio.get_running_loop().create_task(self._load_forecast(location, generation))
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_done)
        return location

    def _fetch_done(self, task: asyncio.Task) -> None:
        self._fetch_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Weather fetch task failed")

    async def aclose(self) -> None:
        """Stop pending searches and wait for in-flight work to finish."""
        await self._controller.aclose()
        if self._fetch_tasks:
            await asyncio.gather(*self._fetch_tasks, return_exceptions=True)
