"""Observable values backing the presentation boundary."""

from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class Observable(Generic[T]):
    """A value that notifies subscribers whenever it is replaced.

    Subscribing delivers the current value immediately and then every
    subsequent change, mirroring a published property in a UI view model.

    Example:
        >>> seen = []
        >>> text = Observable("")
        >>> unsubscribe = text.subscribe(seen.append)
        >>> text.value = "Oslo"
        >>> seen
        ['', 'Oslo']
        >>> unsubscribe()
        >>> text.value = "Bergen"
        >>> seen
        ['', 'Oslo']
    """

    def __init__(self, initial: T, name: str = "value"):
        self._value = initial
        self._name = name
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._value = new_value
        for callback in list(self._subscribers):
            self._deliver(callback, new_value)

    def _deliver(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            # A broken subscriber must not stop the others from rendering
            logger.exception("Observable subscriber failed", observable=self._name)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a callback and deliver the current value to it.

        Args:
            callback: Called with the current value now and with every new value

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)
        self._deliver(callback, self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"Observable({self._name}={self._value!r})"
