"""Debounced search-query controller."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from ..core.config import settings

SearchCallback = Callable[[str], Awaitable[None]]


class SearchController:
    """Debounces keystroke updates and forwards settled queries downstream.

    Each call to :meth:`submit` restarts a quiet-period timer. When the timer
    fires, the value is dropped if it equals the previously debounced value,
    then dropped if it is the empty string (no trimming, so whitespace-only
    text still goes through). Anything left is passed to ``on_query`` in a new
    task.

    A timer replaced before it fires never runs. A search that has already
    started is left alone; stale results are the session's concern.

    Must be driven from a running event loop.

    Example:
        >>> async def example(session):
        ...     controller = SearchController(session.search_locations)
        ...     controller.submit("O")
        ...     controller.submit("Oslo")  # only "Oslo" is searched
    """

    def __init__(self, on_query: SearchCallback, delay: float | None = None):
        """Initialize the controller.

        Args:
            on_query: Coroutine function called with each settled query
            delay: Quiet period in seconds (defaults to SEARCH_DEBOUNCE_MS)
        """
        self._on_query = on_query
        self._delay = delay if delay is not None else settings.SEARCH_DEBOUNCE_MS / 1000.0
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

        self.text = ""
        self.last_debounced: str | None = None
        self.last_forwarded: str | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a quiet-period timer is waiting to fire."""
        return self._timer is not None

    def submit(self, text: str) -> None:
        """Record a new query value and restart the quiet-period timer."""
        self.text = text
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay, self._fire, text)

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def aclose(self) -> None:
        """Drop the pending timer and wait for searches already started."""
        self.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self, text: str) -> None:
        self._timer = None

        if text == self.last_debounced:
            logger.debug("Search query unchanged, skipping")
            return
        self.last_debounced = text

        if text == "":
            logger.debug("Search query empty, skipping")
            return

        self.last_forwarded = text
        task = asyncio.get_running_loop().create_task(self._on_query(text))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Search task failed")
