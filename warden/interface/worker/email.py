"""Email worker run loop.

Polls the message channel for the email consumer and periodically relays
events whose dispatch was lost between commit and publish.
"""

import asyncio

import logfire

from warden.adapter.error import MessageChannelError
from warden.application.consumer.email import EmailConsumer
from warden.config import BrokerSettings
from warden.domain.error import DomainError
from warden.domain.service import EventService, MessageChannel

IDLE_SECONDS = 0.5


class EmailWorker:
    """Consumes outbound email messages until stopped."""

    def __init__(
        self,
        channel: MessageChannel,
        consumer: EmailConsumer,
        event_service: EventService,
        broker_settings: BrokerSettings,
    ) -> None:
        self.channel = channel
        self.consumer = consumer
        self.event_service = event_service
        self.broker_settings = broker_settings
        self.stopping = asyncio.Event()
        self.consumer.register(channel)

    async def run_once(self) -> int:
        """Relay pending events, then deliver one batch of messages.

        Returns:
            Number of messages delivered
        """
        await self.event_service.dispatch_pending()
        return await self.channel.poll()

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self.stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    async def run(self) -> None:
        """Loop until ``stop`` is called."""
        loop = asyncio.get_running_loop()
        last_relay = float("-inf")
        logfire.info("Email worker started", consumer=self.broker_settings.consumer)

        while not self.stopping.is_set():
            if loop.time() - last_relay >= self.broker_settings.relay_interval_seconds:
                last_relay = loop.time()
                try:
                    await self.event_service.dispatch_pending()
                except (DomainError, MessageChannelError) as e:
                    # Retried on the next relay interval; polling goes on
                    logfire.error("Pending event relay failed", error=str(e))

            try:
                delivered = await self.channel.poll()
            except MessageChannelError as e:
                logfire.error("Message channel poll failed", error=str(e))
                await self._sleep(self.broker_settings.block_ms / 1000)
                continue

            if delivered == 0:
                await self._sleep(IDLE_SECONDS)

        logfire.info("Email worker stopped")

    def stop(self) -> None:
        """Ask the run loop to exit after the current batch."""
        self.stopping.set()
