"""Synchronized-update mode with a timeout."""

from __future__ import annotations

import time
from typing import Callable, Optional

__all__ = ["SyncUpdate"]


class SyncUpdate:
    """Tracks whether screen updates are held back by the application."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        self._started = 0.0
        self.active = False

    def begin(self) -> None:
        self._started = self._clock()
        self.active = True

    def end(self) -> None:
        self.active = False

    def in_sync(self, timeout_ms: float) -> bool:
        """Whether updates are still held; ends the mode once the timeout passes."""
        if self.active and (self._clock() - self._started) * 1000.0 >= timeout_ms:
            self.active = False
        return self.active