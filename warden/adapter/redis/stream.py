"""Redis Streams message channel.

Messages are stream entries read through a consumer group. A nack re-adds
the entry with an incremented delivery count and acks the original; once
the count reaches ``max_deliveries`` the entry goes to ``<stream>:dead``.
Entries read but never settled are reclaimed from the pending list after
``claim_idle_ms``.
"""

import json
from typing import Any

import logfire
import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

from warden.adapter.error import MessageChannelError
from warden.config import BrokerSettings
from warden.domain.service.messaging import MessageChannel, ReceivedMessage


class RedisStreamMessage(ReceivedMessage):
    """Stream entry delivered to this consumer."""

    def __init__(
        self,
        channel: "RedisStreamChannel",
        message_id: str,
        pattern: str,
        payload: dict[str, Any],
        delivery_count: int,
    ) -> None:
        super().__init__(pattern, payload, delivery_count)
        self.channel = channel
        self.message_id = message_id

    async def ack(self) -> None:
        await self.channel.acknowledge(self.message_id)
        self.settled = True

    async def nack(self) -> None:
        await self.channel.redeliver(self)
        self.settled = True


class RedisStreamChannel(MessageChannel):
    """Message channel on a Redis stream and consumer group."""

    def __init__(self, client: aioredis.Redis, broker_settings: BrokerSettings) -> None:
        """Initialize channel.

        Args:
            client: Redis client (``decode_responses=True``)
            broker_settings: Stream, group and delivery settings
        """
        super().__init__()
        self.client = client
        self.settings = broker_settings
        self.dead_letter_stream = f"{broker_settings.stream}:dead"
        self._group_ready = False

    async def ensure_group(self) -> None:
        """Create the consumer group (and stream) if missing."""
        if self._group_ready:
            return
        try:
            await self.client.xgroup_create(
                self.settings.stream, self.settings.group, id="0", mkstream=True
            )
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise MessageChannelError(f"Failed to create consumer group: {e}") from e
        self._group_ready = True

    async def _add(self, stream: str, pattern: str, payload: dict[str, Any], count: int) -> None:
        try:
            await self.client.xadd(
                stream,
                {
                    "pattern": pattern,
                    "payload": json.dumps(payload),
                    "delivery_count": str(count),
                },
            )
        except RedisError as e:
            raise MessageChannelError(f"Failed to publish to {stream}: {e}") from e

    async def publish(self, pattern: str, payload: dict[str, Any]) -> None:
        with logfire.span("redis_stream.publish", pattern=pattern):
            await self._add(self.settings.stream, pattern, payload, 1)

    async def acknowledge(self, message_id: str) -> None:
        """Ack an entry for this consumer group."""
        try:
            await self.client.xack(self.settings.stream, self.settings.group, message_id)
        except RedisError as e:
            raise MessageChannelError(f"Failed to ack {message_id}: {e}") from e

    async def redeliver(self, message: RedisStreamMessage) -> None:
        """Requeue a nacked entry, or dead-letter it past the delivery limit."""
        if message.delivery_count >= self.settings.max_deliveries:
            logfire.error(
                "Message dead-lettered",
                pattern=message.pattern,
                delivery_count=message.delivery_count,
            )
            await self._add(
                self.dead_letter_stream, message.pattern, message.payload, message.delivery_count
            )
        else:
            await self._add(
                self.settings.stream, message.pattern, message.payload, message.delivery_count + 1
            )
        await self.acknowledge(message.message_id)

    async def _pending_deliveries(self, message_id: str) -> int:
        try:
            pending = await self.client.xpending_range(
                self.settings.stream,
                self.settings.group,
                min=message_id,
                max=message_id,
                count=1,
            )
        except RedisError as e:
            raise MessageChannelError(f"Failed to inspect {message_id}: {e}") from e
        return pending[0]["times_delivered"] if pending else 1

    async def reclaim(self) -> int:
        """Redeliver entries that were read but never settled.

        An entry stays in the group's pending list when the worker died
        mid-handler or a nack failed. Entries idle for ``claim_idle_ms`` are
        claimed by this consumer; each earlier read counts as a delivery, so
        a message that keeps crashing the worker is eventually dead-lettered.

        Returns:
            Number of entries delivered to handlers
        """
        await self.ensure_group()
        try:
            result = await self.client.xautoclaim(
                self.settings.stream,
                self.settings.group,
                self.settings.consumer,
                min_idle_time=self.settings.claim_idle_ms,
                start_id="0-0",
                count=self.settings.prefetch,
            )
        except RedisError as e:
            raise MessageChannelError(f"Failed to reclaim from {self.settings.stream}: {e}") from e

        delivered = 0
        for message_id, fields in result[1]:
            if message_id is None or not fields:
                continue
            reads = await self._pending_deliveries(message_id)
            message = RedisStreamMessage(
                self,
                message_id,
                fields["pattern"],
                json.loads(fields["payload"]),
                int(fields.get("delivery_count", 1)) + reads - 1,
            )
            if message.delivery_count > self.settings.max_deliveries:
                await self.redeliver(message)
                continue

            logfire.warn(
                "Reclaimed unsettled message",
                pattern=message.pattern,
                delivery_count=message.delivery_count,
            )
            await self.deliver(message)
            delivered += 1
        return delivered

    async def poll(self) -> int:
        """Deliver reclaimed entries, then the next batch of new ones."""
        delivered = await self.reclaim()
        try:
            response = await self.client.xreadgroup(
                self.settings.group,
                self.settings.consumer,
                {self.settings.stream: ">"},
                count=self.settings.prefetch,
                # Reclaimed work or block_ms == 0: return without waiting
                block=None if delivered or not self.settings.block_ms else self.settings.block_ms,
            )
        except RedisError as e:
            raise MessageChannelError(f"Failed to read from {self.settings.stream}: {e}") from e

        for _stream, entries in response or []:
            for message_id, fields in entries:
                message = RedisStreamMessage(
                    self,
                    message_id,
                    fields["pattern"],
                    json.loads(fields["payload"]),
                    int(fields.get("delivery_count", 1)),
                )
                await self.deliver(message)
                delivered += 1
        return delivered

    async def close(self) -> None:
        await self.client.aclose()
