"""Key/value store interface (revocation entries and short-lived secrets)."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Shared key/value engine with per-key TTL.

    Writes are idempotent: setting an existing key again replaces its value
    and TTL.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored at ``key`` or None."""
        pass

    @abstractmethod
    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` at ``key`` expiring after ``ttl_seconds``."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether ``key`` is present and not expired."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass
