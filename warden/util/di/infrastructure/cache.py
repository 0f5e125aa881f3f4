"""Key/value store infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from warden.adapter.redis.client import create_redis_client
from warden.adapter.redis.key_value import RedisKeyValueStore
from warden.config import RedisSettings
from warden.domain.repository import KeyValueStore
from warden.util.di.base import ProviderBase
from warden.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Key/value store component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production key/value store using Redis."""

    __is_mock__ = False

    scope = Scope.APP

    @provide
    async def get_key_value_store(self, redis_settings: RedisSettings) -> AsyncIterator[KeyValueStore]:
        """Provide Redis-backed store, closing the client with the container."""
        instrument_redis()
        client = create_redis_client(redis_settings)
        yield RedisKeyValueStore(client)
        await client.aclose()
