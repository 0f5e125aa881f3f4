"""Message channel infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from warden.adapter.redis.client import create_redis_client
from warden.adapter.redis.stream import RedisStreamChannel
from warden.config import BrokerSettings, RedisSettings
from warden.domain.service import MessageChannel
from warden.util.di.base import ProviderBase


class BrokerProvider(ProviderBase):
    """Message channel component base."""

    __mock_component__ = "broker"


class ProdBrokerProvider(BrokerProvider):
    """Production message channel on Redis Streams."""

    __is_mock__ = False

    scope = Scope.APP

    @provide
    async def get_message_channel(
        self, redis_settings: RedisSettings, broker_settings: BrokerSettings
    ) -> AsyncIterator[MessageChannel]:
        """Provide stream channel with its own client (reads block)."""
        channel = RedisStreamChannel(create_redis_client(redis_settings), broker_settings)
        yield channel
        await channel.close()
