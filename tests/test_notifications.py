import asyncio
import json
from unittest.mock import AsyncMock, Mock

import pytest
import redis

from addressbook.domain.models import CONTACT_ADDED, NotificationEvent
from addressbook.infrastructure.messaging.redis_queue import (
    NotificationConsumer,
    NotificationPublisher,
)


class TestPublisher:
    def test_publish_pushes_json_event(self):
        client = Mock()
        publisher = NotificationPublisher("AddressBook_Notifications", client)

        publisher.publish(CONTACT_ADDED, {"id": 1, "full_name": "Rekha"})

        queue, message = client.lpush.call_args.args
        assert queue == "AddressBook_Notifications"
        body = json.loads(message)
        assert body["event"] == CONTACT_ADDED
        assert body["payload"] == {"id": 1, "full_name": "Rekha"}
        assert body["occurred_at"]

    def test_publish_swallows_broker_errors(self):
        client = Mock()
        client.lpush.side_effect = redis.ConnectionError("refused")
        publisher = NotificationPublisher("q", client)

        publisher.publish(CONTACT_ADDED, {"id": 1})

        client.lpush.assert_called_once()


def _brpop_feed(items):
    """Return queued items once, then idle like an empty BRPOP."""
    pending = list(items)

    async def _brpop(keys, timeout=0):
        if pending:
            item = pending.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        await asyncio.sleep(0.01)
        return None

    return _brpop


async def _wait_for(predicate, timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


class TestConsumer:
    @pytest.mark.asyncio
    async def test_consumes_and_records_events(self):
        event = NotificationEvent(event=CONTACT_ADDED, payload={"id": 3})
        client = Mock()
        client.brpop = AsyncMock(side_effect=_brpop_feed([("q", event.to_json())]))
        client.aclose = AsyncMock()
        handled = []

        async def handler(evt):
            handled.append(evt)

        consumer = NotificationConsumer("q", client, handler=handler)
        await consumer.start()
        assert consumer.is_running

        await _wait_for(lambda: len(consumer.received) == 1)
        await consumer.stop()

        assert consumer.received[0].event == CONTACT_ADDED
        assert consumer.received[0].payload == {"id": 3}
        assert handled == [consumer.received[0]]
        assert not consumer.is_running
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_drops_undecodable_messages(self):
        good = NotificationEvent(event="user_registered", payload={"email": "a@example.com"})
        client = Mock()
        client.brpop = AsyncMock(side_effect=_brpop_feed([("q", "not json"), ("q", good.to_json())]))
        client.aclose = AsyncMock()

        consumer = NotificationConsumer("q", client)
        await consumer.start()
        await _wait_for(lambda: len(consumer.received) == 1)
        await consumer.stop()

        assert [e.event for e in consumer.received] == ["user_registered"]

    @pytest.mark.asyncio
    async def test_survives_broker_outage(self):
        event = NotificationEvent(event=CONTACT_ADDED, payload={"id": 9})
        client = Mock()
        client.brpop = AsyncMock(
            side_effect=_brpop_feed([redis.ConnectionError("down"), ("q", event.to_json())])
        )
        client.aclose = AsyncMock()

        consumer = NotificationConsumer("q", client, retry_delay=0.01)
        await consumer.start()
        await _wait_for(lambda: len(consumer.received) == 1)
        await consumer.stop()

        assert consumer.received[0].payload == {"id": 9}

    @pytest.mark.asyncio
    async def test_stop_without_start_closes_client(self):
        client = Mock()
        client.aclose = AsyncMock()
        consumer = NotificationConsumer("q", client)

        await consumer.stop()
        await consumer.stop()

        client.aclose.assert_awaited_once()
        assert not consumer.is_running

    @pytest.mark.asyncio
    async def test_cannot_restart_after_stop(self):
        client = Mock()
        client.aclose = AsyncMock()
        consumer = NotificationConsumer("q", client)
        await consumer.stop()

        with pytest.raises(RuntimeError):
            await consumer.start()

    @pytest.mark.asyncio
    async def test_history_is_bounded(self):
        consumer = NotificationConsumer("q", Mock(), history_size=2)

        for index in range(3):
            await consumer._handle(NotificationEvent(event="e", payload={"n": index}).to_json())

        assert [e.payload["n"] for e in consumer.received] == [1, 2]
