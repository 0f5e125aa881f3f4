"""In-memory key/value store for testing."""

import time
from typing import Optional

from warden.domain.repository.key_value import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore with lazy expiry."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float]] = {}

    def _live(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        """Return the value at ``key`` or None."""
        return self._live(key)

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` at ``key`` for ``ttl_seconds``."""
        self._entries[key] = (value, time.monotonic() + ttl_seconds)

    async def exists(self, key: str) -> bool:
        """Check whether ``key`` is present and not expired."""
        return self._live(key) is not None

    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._entries.pop(key, None)
