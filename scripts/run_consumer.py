import asyncio
import logging
import signal

from dotenv import load_dotenv

from addressbook.core.config import Settings
from addressbook.core.logging import configure_logging
from addressbook.infrastructure.messaging.redis_queue import NotificationConsumer

logger = logging.getLogger("addressbook.consumer")


async def main() -> None:
    load_dotenv()
    configure_logging()
    settings = Settings()

    consumer = NotificationConsumer.from_url(settings.redis_url, settings.notification_queue)
    stop_requested = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_requested.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await consumer.start()
    logger.info("Listening on %s. Press Ctrl+C to exit.", settings.notification_queue)
    try:
        await stop_requested.wait()
    finally:
        await consumer.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
