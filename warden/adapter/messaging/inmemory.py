"""In-memory message channel for tests and single-process runs."""

import asyncio
from typing import Any

import logfire

from warden.domain.service.messaging import MessageChannel, ReceivedMessage


class InMemoryMessage(ReceivedMessage):
    """Queued delivery settled against its channel."""

    def __init__(
        self,
        channel: "InMemoryMessageChannel",
        pattern: str,
        payload: dict[str, Any],
        delivery_count: int,
    ) -> None:
        super().__init__(pattern, payload, delivery_count)
        self.channel = channel

    async def ack(self) -> None:
        self.settled = True
        self.channel.acked.append(self)

    async def nack(self) -> None:
        self.settled = True
        self.channel.nacked.append(self)
        await self.channel.redeliver(self)


class InMemoryMessageChannel(MessageChannel):
    """``asyncio.Queue`` backed channel with the same redelivery bound as Redis."""

    def __init__(self, max_deliveries: int = 5) -> None:
        super().__init__()
        self.max_deliveries = max_deliveries
        self.queue: asyncio.Queue[tuple[str, dict[str, Any], int]] = asyncio.Queue()
        self.published: list[tuple[str, dict[str, Any]]] = []
        self.acked: list[InMemoryMessage] = []
        self.nacked: list[InMemoryMessage] = []
        self.dead_letters: list[InMemoryMessage] = []

    async def publish(self, pattern: str, payload: dict[str, Any]) -> None:
        self.published.append((pattern, payload))
        await self.queue.put((pattern, payload, 1))

    async def redeliver(self, message: InMemoryMessage) -> None:
        """Requeue a nacked message, or dead-letter it past the delivery limit."""
        if message.delivery_count >= self.max_deliveries:
            logfire.error(
                "Message dead-lettered",
                pattern=message.pattern,
                delivery_count=message.delivery_count,
            )
            self.dead_letters.append(message)
            return
        await self.queue.put((message.pattern, message.payload, message.delivery_count + 1))

    async def poll(self) -> int:
        """Deliver the messages queued before this call."""
        delivered = 0
        for _ in range(self.queue.qsize()):
            pattern, payload, delivery_count = self.queue.get_nowait()
            await self.deliver(InMemoryMessage(self, pattern, payload, delivery_count))
            delivered += 1
        return delivered
