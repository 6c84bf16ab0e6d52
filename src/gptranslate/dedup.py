"""Time-windowed suppression of duplicate in-flight translation requests.

This is a UI debounce safeguard, not an idempotency guarantee: two different
texts that share their length and first 50 characters map to the same
fingerprint.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from gptranslate.errors import DuplicateRequest

LOGGER = logging.getLogger(__name__)

Fingerprint = tuple[int, str]

PREFIX_LENGTH = 50
DUPLICATE_WINDOW_SECONDS = 0.5
RETENTION_SECONDS = 5.0


def fingerprint(text: str) -> Fingerprint:
    return len(text), text[:PREFIX_LENGTH]


class DedupGate:
    """Owns the in-flight request table shared by every translation call."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        window: float = DUPLICATE_WINDOW_SECONDS,
        retention: float = RETENTION_SECONDS,
    ) -> None:
        self._clock = clock
        self._window = window
        self._retention = retention
        self._lock = threading.Lock()
        self._in_flight: dict[Fingerprint, float] = {}

    def register(self, text: str) -> tuple[Fingerprint, float]:
        """Claim the fingerprint for ``text`` or raise ``DuplicateRequest``."""
        key = fingerprint(text)
        with self._lock:
            now = self._clock()
            self._in_flight = {
                other: started for other, started in self._in_flight.items() if now - started < self._retention
            }
            started = self._in_flight.get(key)
            if started is not None and now - started < self._window:
                LOGGER.info("Duplicate translation request detected within %.0f ms, skipping API call", self._window * 1000)
                raise DuplicateRequest()
            self._in_flight[key] = now
        return key, now

    def release(self, key: Fingerprint, started: float) -> None:
        """Drop the fingerprint, unless a later call has claimed it since."""
        with self._lock:
            if self._in_flight.get(key) == started:
                del self._in_flight[key]

    @contextmanager
    def hold(self, text: str) -> Iterator[None]:
        key, started = self.register(text)
        try:
            yield
        finally:
            self.release(key, started)

    def __len__(self) -> int:
        with self._lock:
            return len(self._in_flight)
