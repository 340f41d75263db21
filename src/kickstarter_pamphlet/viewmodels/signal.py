"""Output signals that views observe."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(Generic[T]):
    """A push-only stream of values.

    Observers are called synchronously, in subscription order, for every
    ``send``. Nothing is replayed to late observers.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._observers: list[Callable[[T], Any]] = []

    def observe(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        """Subscribe ``callback``; returns a function that unsubscribes it."""
        self._observers.append(callback)

        def dispose() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return dispose

    def send(self, value: T = None) -> None:
        logger.debug(f"{self.name or 'signal'} <- {value!r:.120}")
        for callback in list(self._observers):
            callback(value)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, observers={len(self._observers)})"
