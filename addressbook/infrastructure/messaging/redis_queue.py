"""Redis list backed notification queue."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, Optional

import redis
import redis.asyncio as redis_async

from ...domain.models import NotificationEvent
from ...domain.ports.notifications import Notifier

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[NotificationEvent], Awaitable[None]]


class NotificationPublisher(Notifier):
    """Publishes JSON events onto a named Redis list without retries."""

    def __init__(self, queue_name: str, client: redis.Redis) -> None:
        self._queue_name = queue_name
        self._client = client

    @classmethod
    def from_url(cls, url: str, queue_name: str) -> "NotificationPublisher":
        client = redis.Redis.from_url(
            url, decode_responses=True, socket_timeout=2.0, socket_connect_timeout=2.0
        )
        return cls(queue_name, client)

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        message = NotificationEvent(event=event, payload=payload).to_json()
        try:
            self._client.lpush(self._queue_name, message)
        except redis.RedisError as exc:
            logger.warning("Failed to publish %s to %s: %s", event, self._queue_name, exc)
            return
        logger.info("Published %s to %s", event, self._queue_name)

    def close(self) -> None:
        self._client.close()


class NotificationConsumer:
    """Background worker that drains the notification queue and logs each event."""

    def __init__(
        self,
        queue_name: str,
        client: redis_async.Redis,
        *,
        poll_timeout: int = 1,
        retry_delay: float = 5.0,
        handler: Optional[NotificationHandler] = None,
        history_size: int = 100,
    ) -> None:
        self._queue_name = queue_name
        self._client = client
        self._poll_timeout = poll_timeout
        self._retry_delay = retry_delay
        self._handler = handler
        self._task: Optional[asyncio.Task[None]] = None
        self._shutdown = asyncio.Event()
        self._closed = False
        self.received: Deque[NotificationEvent] = deque(maxlen=history_size)

    @classmethod
    def from_url(cls, url: str, queue_name: str, **kwargs: Any) -> "NotificationConsumer":
        client = redis_async.from_url(url, decode_responses=True)
        return cls(queue_name, client, **kwargs)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._closed:
            raise RuntimeError("Notification consumer has been stopped and cannot be restarted.")
        if self._task is not None:
            return
        logger.info("Starting notification consumer for %s.", self._queue_name)
        self._shutdown.clear()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name="notification-consumer")

    async def stop(self) -> None:
        """Stop the worker if it is running and release the client exactly once."""
        if self._task is not None:
            logger.info("Stopping notification consumer.")
            self._shutdown.set()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        if not self._closed:
            self._closed = True
            await self._client.aclose()

    async def _run(self) -> None:
        while not self._shutdown.is_set():
            try:
                item = await self._client.brpop([self._queue_name], timeout=self._poll_timeout)
            except redis.RedisError as exc:
                logger.warning("Notification queue unavailable: %s", exc)
                await self._sleep(self._retry_delay)
                continue
            if item is None:
                continue
            _, raw = item
            await self._handle(raw)

    async def _handle(self, raw: str) -> None:
        try:
            event = NotificationEvent.from_json(raw)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropping undecodable notification %r: %s", raw, exc)
            return
        logger.info("Received notification %s: %s", event.event, event.payload)
        self.received.append(event)
        if self._handler:
            try:
                await self._handler(event)
            except Exception:
                logger.exception("Notification handler raised for %s.", event.event)

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._shutdown.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
