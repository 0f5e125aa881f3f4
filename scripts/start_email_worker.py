#!/usr/bin/env python3
"""Start the outbound email worker with Logfire error tracking for startup errors."""

import asyncio
import signal
import sys

import logfire

from warden.application.consumer.email import EmailConsumer
from warden.config import BrokerSettings, Settings
from warden.domain.service import EventService, MessageChannel
from warden.interface.worker.email import EmailWorker
from warden.util.di.container import create_container
from warden.util.logging import setup_logging
from warden.util.observability import configure_logfire


async def run() -> None:
    """Resolve the worker's dependencies and loop until SIGINT/SIGTERM."""
    container = create_container()
    try:
        worker = EmailWorker(
            channel=await container.get(MessageChannel),
            consumer=await container.get(EmailConsumer),
            event_service=await container.get(EventService),
            broker_settings=await container.get(BrokerSettings),
        )

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, worker.stop)

        await worker.run()
    finally:
        await container.close()


def main() -> int:
    """Start the worker and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings, service_name="warden-email-worker")
    setup_logging(settings)

    try:
        logfire.info("Starting email worker")
        asyncio.run(run())
        return 0

    except Exception as e:
        logfire.error(
            "Email worker failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
