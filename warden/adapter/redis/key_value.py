"""Redis implementation of the key/value store."""

from typing import Optional

import redis.asyncio as aioredis

from warden.domain.repository.key_value import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """Key/value store backed by Redis ``SET EX``."""

    def __init__(self, client: aioredis.Redis) -> None:
        """Initialize store.

        Args:
            client: Redis client
        """
        self.client = client

    async def get(self, key: str) -> Optional[str]:
        """Return the value at ``key`` or None."""
        return await self.client.get(key)

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` at ``key`` for ``ttl_seconds``."""
        await self.client.set(key, value, ex=ttl_seconds)

    async def exists(self, key: str) -> bool:
        """Check whether ``key`` is present."""
        return bool(await self.client.exists(key))

    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        await self.client.delete(key)
