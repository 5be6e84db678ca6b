"""Countdown clock driving exercise progression."""

from __future__ import annotations


class SessionTimer:
    """Frozen unless running; ``tick`` is expected once per real second."""

    def __init__(self, seconds: int = 0) -> None:
        self._remaining = 0
        self._running = False
        self.reset(seconds)

    @property
    def remaining_sec(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def pause(self) -> None:
        self._running = False

    def reset(self, seconds: int) -> None:
        if seconds < 0:
            raise ValueError("Timer seconds must be >= 0")
        self._remaining = int(seconds)

    def tick(self) -> bool:
        """Advance one second. Returns True when the countdown just hit zero."""
        if not self._running or self._remaining <= 0:
            return False
        self._remaining -= 1
        return self._remaining == 0
