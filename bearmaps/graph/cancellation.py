"""Cooperative cancellation for long-running searches."""

from __future__ import annotations

import threading
import time
from typing import Optional

from ..domain.errors import SearchCancelledError


class CancellationToken:
    """Signals a search to stop, either explicitly or past a deadline.

    The token is checked by the search loop; cancel() may be called from
    any thread.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        # deadline is a time.monotonic() value
        self._deadline = deadline
        self._event = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self, expanded: int = 0) -> None:
        if self.cancelled:
            raise SearchCancelledError(
                "Search cancelled before reaching the destination",
                expanded=expanded,
            )
