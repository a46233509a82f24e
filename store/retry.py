"""Retry policy with linear backoff for deleting a locked cache file."""

from __future__ import annotations

import gc
import time
from collections.abc import Callable


class DeletionRetryPolicy:
    """Fixed number of attempts; waits 1s, 2s, 3s ... after each failed attempt."""

    max_attempts: int
    settle_seconds: float
    sleep_fn: Callable[[float], None]
    release_fn: Callable[[], object]

    def __init__(
        self,
        max_attempts: int = 3,
        settle_seconds: float = 0.5,
        sleep_fn: Callable[[float], None] | None = None,
        release_fn: Callable[[], object] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.settle_seconds = settle_seconds
        self.sleep_fn = sleep_fn or time.sleep
        self.release_fn = release_fn or gc.collect

    def backoff_seconds(self, attempt_index: int) -> int:
        return attempt_index + 1

    def settle(self) -> None:
        """Give native file handles a chance to be released."""
        self.release_fn()
        if self.settle_seconds > 0:
            self.sleep_fn(self.settle_seconds)

    def wait_after_failure(self, attempt_index: int) -> None:
        self.release_fn()
        self.sleep_fn(self.backoff_seconds(attempt_index))
