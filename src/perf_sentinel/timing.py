"""Named wall-clock timers for measuring pipeline phases."""

from __future__ import annotations

import time
from typing import Callable, Optional

from .exceptions import InvalidInputError


class PerformanceTimer:
    """Start/end pairs keyed by name.

    >>> timer = PerformanceTimer()
    >>> timer.start("analysis")
    >>> elapsed = timer.end("analysis")
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.perf_counter
        self._started: dict[str, float] = {}
        self._durations: dict[str, float] = {}

    def start(self, name: str) -> None:
        self._started[name] = self._clock()
        self._durations.pop(name, None)

    def end(self, name: str) -> float:
        """Stop ``name`` and return its duration in seconds.

        Raises:
            InvalidInputError: If ``name`` was never started.
        """
        started = self._started.pop(name, None)
        if started is None:
            raise InvalidInputError(f"timer '{name}' was not started")
        elapsed = self._clock() - started
        self._durations[name] = elapsed
        return elapsed

    def duration(self, name: str) -> Optional[float]:
        """Duration of a finished timer, or None if it has not ended."""
        return self._durations.get(name)

    def reset(self) -> None:
        self._started.clear()
        self._durations.clear()
