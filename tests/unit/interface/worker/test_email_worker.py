"""Unit tests for EmailWorker."""

import asyncio

import pytest
from dishka import AsyncContainer

from warden.adapter.email.mock import MockEmailTransport
from warden.application.consumer.email import EmailConsumer
from warden.application.usecase.auth import LocalSignUpUseCase
from warden.application.usecase.auth.local_sign_up import LocalSignUpRequest
from warden.config import BrokerSettings
from warden.domain.error import InternalError
from warden.domain.service import EmailTransport, EventBus, EventService, MessageChannel
from warden.domain.value import EventName
from warden.interface.worker.email import EmailWorker
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _worker(container: AsyncContainer) -> EmailWorker:
    return EmailWorker(
        channel=await container.get(MessageChannel),
        consumer=await container.get(EmailConsumer),
        event_service=await container.get(EventService),
        broker_settings=await container.get(BrokerSettings),
    )


class TestEmailWorker:
    """Tests for EmailWorker."""

    @pytest.mark.asyncio
    async def test_run_once_delivers_queued_messages(self, unit_env: AsyncContainer):
        worker = await _worker(unit_env)
        transport = await unit_env.get(EmailTransport)
        sign_up = await unit_env.get(LocalSignUpUseCase)
        await sign_up.execute(LocalSignUpRequest(email="a@x.com", password="Aa123456"))

        delivered = await worker.run_once()

        assert delivered == 1
        assert isinstance(transport, MockEmailTransport)
        assert [m.to for m in transport.sent] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_run_once_relays_events_lost_before_publish(self, unit_env: AsyncContainer):
        # Arrange: the first publish fails, leaving the event undispatched
        worker = await _worker(unit_env)
        transport = await unit_env.get(EmailTransport)
        bus = await unit_env.get(EventBus)
        failures = []

        async def flaky_listener(event):
            if not failures:
                failures.append(event)
                raise RuntimeError("channel unavailable")

        bus._listeners[EventName.AUTH_LOCAL_CREATED].insert(0, flaky_listener)
        sign_up = await unit_env.get(LocalSignUpUseCase)
        await sign_up.execute(LocalSignUpRequest(email="a@x.com", password="Aa123456"))

        # Act
        delivered = await worker.run_once()

        # Assert
        assert len(failures) == 1
        assert delivered == 1
        assert [m.to for m in transport.sent] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_run_stops_when_asked(self, unit_env: AsyncContainer):
        worker = await _worker(unit_env)

        task = asyncio.create_task(worker.run())
        await asyncio.sleep(0)
        worker.stop()

        await asyncio.wait_for(task, timeout=5)
        assert task.done()

    @pytest.mark.asyncio
    async def test_run_survives_relay_failure(self, unit_env: AsyncContainer, monkeypatch):
        # Arrange: the event store is down for the relay, the channel is not
        worker = await _worker(unit_env)
        transport = await unit_env.get(EmailTransport)
        sign_up = await unit_env.get(LocalSignUpUseCase)
        await sign_up.execute(LocalSignUpRequest(email="a@x.com", password="Aa123456"))
        relay_calls = []

        async def failing_relay(limit: int = 100) -> int:
            relay_calls.append(limit)
            raise InternalError("Transaction failed")

        monkeypatch.setattr(worker.event_service, "dispatch_pending", failing_relay)

        # Act
        task = asyncio.create_task(worker.run())
        for _ in range(50):
            if transport.sent:
                break
            await asyncio.sleep(0.05)
        worker.stop()
        await asyncio.wait_for(task, timeout=5)

        # Assert
        assert relay_calls
        assert task.exception() is None
        assert [m.to for m in transport.sent] == ["a@x.com"]
