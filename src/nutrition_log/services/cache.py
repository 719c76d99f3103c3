"""Expiring key-value cache for external lookups."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryCache(Cache):
    """Dict-backed cache. Oldest entries are dropped past ``max_entries``."""

    max_entries: int = 256
    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, tuple[object, datetime]] = field(
        default_factory=dict, init=False
    )

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (value, self.clock() + timedelta(seconds=ttl_seconds))
        while len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]
