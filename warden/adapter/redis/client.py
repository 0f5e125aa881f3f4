"""Redis client factory."""

import redis.asyncio as aioredis

from warden.config import RedisSettings


def create_redis_client(redis_settings: RedisSettings) -> aioredis.Redis:
    """Create an async Redis client with explicit timeouts.

    Args:
        redis_settings: Redis settings

    Returns:
        Redis client decoding responses to ``str``
    """
    return aioredis.from_url(
        redis_settings.url,
        decode_responses=True,
        socket_timeout=redis_settings.socket_timeout,
        socket_connect_timeout=redis_settings.socket_timeout,
    )
