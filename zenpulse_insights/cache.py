"""
Time-based response caches.

Entries expire lazily: a stale entry is dropped when it is next read, and
there is no background sweep. Caches take their clock as a dependency so
expiry can be driven deterministically in tests.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]

FINGERPRINT_TEXT_CHARS = 50


def fingerprint(mood_level: int, text: str | None, tone: str) -> str:
    """Cache key for a pep-talk request: mood, first 50 characters, tone."""
    return f"{mood_level}-{(text or '')[:FINGERPRINT_TEXT_CHARS]}-{tone}"


@dataclass
class CacheEntry(Generic[T]):
    """A cached value stamped with its creation time."""

    value: T
    created_at: float

    def is_live(self, now: float, ttl: float) -> bool:
        return now - self.created_at < ttl


class ResponseCache(Generic[T]):
    """Keyed cache with a fixed time-to-live per entry."""

    def __init__(self, ttl: float, clock: Clock = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        """Return the live value for ``key``, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_live(self._clock(), self.ttl):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class SingleSlotCache(Generic[T]):
    """Unkeyed cache holding at most one value."""

    def __init__(self, ttl: float, clock: Clock = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entry: CacheEntry[T] | None = None

    def get(self) -> T | None:
        if self._entry is None:
            return None
        if not self._entry.is_live(self._clock(), self.ttl):
            self._entry = None
            return None
        return self._entry.value

    def set(self, value: T) -> None:
        self._entry = CacheEntry(value=value, created_at=self._clock())

    def clear(self) -> None:
        self._entry = None
