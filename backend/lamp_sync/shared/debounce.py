"""
In-process debounce for lamp status updates.

State lives for the lifetime of the process (a warm Lambda container) and is
not shared between concurrent containers.
"""

import threading
import time
from typing import Callable, Optional


class DebounceState:
    """
    Last accepted status and the time it was accepted.

    The accept/reject decision and the two writes happen under one lock so
    concurrent callers never interleave between the check and the update.
    The lock is never held while doing I/O.
    """

    def __init__(
        self,
        window_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize debounce state.

        Args:
            window_seconds: Minimum spacing between two identical accepted statuses
            clock: Monotonic time source in seconds
        """
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_status: Optional[bool] = None
        self._last_update: Optional[float] = None

    @property
    def last_status(self) -> Optional[bool]:
        return self._last_status

    @property
    def last_update(self) -> Optional[float]:
        return self._last_update

    def try_accept(self, status: bool) -> bool:
        """
        Accept a status unless it repeats the last accepted one within the window.

        Args:
            status: Newly observed status

        Returns:
            True if accepted (state updated), False if suppressed
        """
        with self._lock:
            now = self._clock()
            if (
                self._last_status is not None
                and self._last_status == status
                and self._last_update is not None
                and (now - self._last_update) < self.window_seconds
            ):
                return False

            self._last_status = status
            self._last_update = now
            return True

    def seconds_since_last_update(self) -> Optional[float]:
        """Elapsed seconds since the last accepted update, or None if never."""
        with self._lock:
            if self._last_update is None:
                return None
            return self._clock() - self._last_update
