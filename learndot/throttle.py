"""Delay strategies applied after each backend request.

The backend enforces an undocumented rate limit, so production clients pause
after every request that got a response. Tests use ``NoDelay``.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable

DEFAULT_DELAY = 1.0


class DelayStrategy(ABC):
    """Called once after every request that received a response."""

    @abstractmethod
    def after_request(self) -> None: ...


class NoDelay(DelayStrategy):
    def after_request(self) -> None:
        return None


class FixedDelay(DelayStrategy):
    """Sleep for a fixed number of seconds after each request."""

    def __init__(
        self,
        seconds: float = DEFAULT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if seconds < 0:
            raise ValueError("Delay must not be negative")
        self.seconds = seconds
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds})"

    def after_request(self) -> None:
        if self.seconds:
            self._sleep(self.seconds)

