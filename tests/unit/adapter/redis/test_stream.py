"""Unit tests for RedisStreamChannel."""

import json

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer

from warden.adapter.redis.stream import RedisStreamChannel
from warden.config import BrokerSettings

STREAM = "warden:events"
GROUP = "email"


@pytest_asyncio.fixture
async def client():
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


def _channel(client, consumer: str = "worker-1", **overrides) -> RedisStreamChannel:
    settings = BrokerSettings(
        **{
            "stream": STREAM,
            "group": GROUP,
            "consumer": consumer,
            "block_ms": 0,
            "claim_idle_ms": 0,
            **overrides,
        }
    )
    return RedisStreamChannel(client, settings)


async def _pending(client) -> int:
    return (await client.xpending(STREAM, GROUP))["pending"]


class TestRedisStreamChannel:
    """Tests for publish, settlement and redelivery."""

    @pytest.mark.asyncio
    async def test_publish_appends_entry(self, client):
        channel = _channel(client)

        await channel.publish("auth.local.created", {"model_id": "abc"})

        [(_, fields)] = await client.xrange(STREAM)
        assert fields["pattern"] == "auth.local.created"
        assert json.loads(fields["payload"]) == {"model_id": "abc"}
        assert fields["delivery_count"] == "1"

    @pytest.mark.asyncio
    async def test_handled_message_is_acked(self, client):
        channel = _channel(client)
        seen = []

        async def handler(message):
            seen.append((message.payload, message.delivery_count))

        channel.subscribe("topic", handler)
        await channel.publish("topic", {"n": 1})

        assert await channel.poll() == 1
        assert seen == [({"n": 1}, 1)]
        assert await _pending(client) == 0

    @pytest.mark.asyncio
    async def test_existing_group_is_reused(self, client):
        await _channel(client).ensure_group()

        await _channel(client, consumer="worker-2").ensure_group()

        groups = await client.xinfo_groups(STREAM)
        assert [g["name"] for g in groups] == [GROUP]

    @pytest.mark.asyncio
    async def test_nack_requeues_with_incremented_count(self, client):
        channel = _channel(client, max_deliveries=3)
        counts = []

        async def handler(message):
            counts.append(message.delivery_count)
            await message.nack()

        channel.subscribe("topic", handler)
        await channel.publish("topic", {})

        await channel.poll()
        await channel.poll()

        assert counts == [1, 2]
        assert await _pending(client) == 0
        assert await client.xlen(f"{STREAM}:dead") == 0

    @pytest.mark.asyncio
    async def test_dead_letters_after_delivery_limit(self, client):
        channel = _channel(client, max_deliveries=2)

        async def handler(message):
            await message.nack()

        channel.subscribe("topic", handler)
        await channel.publish("topic", {"n": 1})

        assert await channel.poll() == 1
        assert await channel.poll() == 1
        assert await channel.poll() == 0

        [(_, fields)] = await client.xrange(f"{STREAM}:dead")
        assert json.loads(fields["payload"]) == {"n": 1}
        assert fields["delivery_count"] == "2"
        assert await _pending(client) == 0


class TestReclaim:
    """Tests for entries read but never settled."""

    @pytest.mark.asyncio
    async def test_unsettled_entry_is_redelivered_to_next_consumer(self, client):
        # Arrange: the first worker dies inside the handler
        crashed = _channel(client, consumer="worker-1")

        async def crashing_handler(message):
            raise RuntimeError("worker killed")

        crashed.subscribe("topic", crashing_handler)
        await crashed.publish("topic", {"n": 1})
        with pytest.raises(RuntimeError):
            await crashed.poll()
        assert await _pending(client) == 1

        # Act
        survivor = _channel(client, consumer="worker-2")
        seen = []

        async def handler(message):
            seen.append((message.payload, message.delivery_count))

        survivor.subscribe("topic", handler)
        delivered = await survivor.poll()

        # Assert
        assert delivered == 1
        assert seen == [({"n": 1}, 2)]
        assert await _pending(client) == 0

    @pytest.mark.asyncio
    async def test_entries_younger_than_idle_time_are_left_alone(self, client):
        crashed = _channel(client)

        async def crashing_handler(message):
            raise RuntimeError("worker killed")

        crashed.subscribe("topic", crashing_handler)
        await crashed.publish("topic", {})
        with pytest.raises(RuntimeError):
            await crashed.poll()

        patient = _channel(client, consumer="worker-2", claim_idle_ms=60_000)
        patient.subscribe("topic", crashing_handler)

        assert await patient.poll() == 0
        assert await _pending(client) == 1

    @pytest.mark.asyncio
    async def test_entry_that_keeps_crashing_is_dead_lettered(self, client):
        channel = _channel(client, max_deliveries=2)
        calls = []

        async def crashing_handler(message):
            calls.append(message.delivery_count)
            raise RuntimeError("worker killed")

        channel.subscribe("topic", crashing_handler)
        await channel.publish("topic", {"n": 1})

        with pytest.raises(RuntimeError):
            await channel.poll()
        with pytest.raises(RuntimeError):
            await channel.poll()
        assert await channel.poll() == 0

        assert calls == [1, 2]
        assert await client.xlen(f"{STREAM}:dead") == 1
        assert await _pending(client) == 0
