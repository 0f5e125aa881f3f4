"""Message channel port.

Outbound events leave the process through a ``MessageChannel``. Consumers
subscribe a handler per pattern and settle each delivery with ``ack`` or
``nack``; a nacked message is redelivered until the channel's delivery
limit, after which it is dead-lettered.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

import logfire


class ReceivedMessage(ABC):
    """One delivery of a message."""

    def __init__(self, pattern: str, payload: dict[str, Any], delivery_count: int = 1) -> None:
        self.pattern = pattern
        self.payload = payload
        self.delivery_count = delivery_count
        self.settled = False

    @abstractmethod
    async def ack(self) -> None:
        """Confirm the message was handled."""
        pass

    @abstractmethod
    async def nack(self) -> None:
        """Reject the message so it is redelivered."""
        pass


MessageHandler = Callable[[ReceivedMessage], Awaitable[None]]


class MessageChannel(ABC):
    """Durable pattern-addressed queue.

    Implementations provide ``publish`` and ``poll``; routing to handlers is
    shared.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, MessageHandler] = {}

    @abstractmethod
    async def publish(self, pattern: str, payload: dict[str, Any]) -> None:
        """Enqueue a message under ``pattern``.

        Raises:
            MessageChannelError: If the message could not be enqueued
        """
        pass

    @abstractmethod
    async def poll(self) -> int:
        """Deliver the next batch of messages to subscribed handlers.

        Returns:
            Number of messages delivered
        """
        pass

    async def close(self) -> None:
        """Release channel resources."""
        pass

    def subscribe(self, pattern: str, handler: MessageHandler) -> None:
        """Route messages published under ``pattern`` to ``handler``."""
        self._handlers[pattern] = handler

    async def deliver(self, message: ReceivedMessage) -> None:
        """Hand a message to its handler.

        Messages nobody subscribed to are acked and dropped. A handler that
        returns without settling the message gets it acked.
        """
        handler = self._handlers.get(message.pattern)
        if handler is None:
            logfire.warn("No handler for message pattern", pattern=message.pattern)
            await message.ack()
            return

        await handler(message)
        if not message.settled:
            await message.ack()
