"""
Fire-and-forget notifications over Redis lists.

Each queue is a Redis list named after the event (``user_registered``,
``contact_added``).  ``NotificationPublisher.publish`` pushes the JSON
encoded event; ``NotificationListener`` runs one daemon thread per
queue that pops messages and hands them to a handler.  There is no
acknowledgement, retry or dead-letter handling: a failed publish is
logged and forgotten, and a message that cannot be decoded is dropped.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, Optional

import redis
from redis.exceptions import RedisError


logger = logging.getLogger(__name__)

USER_REGISTERED = "user_registered"
CONTACT_ADDED = "contact_added"

Handler = Callable[[str, Dict[str, Any]], None]


def log_notification(queue_name: str, event: Dict[str, Any]) -> None:
    logger.info("Received %s notification: %s", queue_name, event)


class NotificationPublisher:
    def __init__(self, client: "redis.Redis") -> None:
        self.client = client

    def publish(self, queue_name: str, event: Dict[str, Any]) -> bool:
        """Push ``event`` onto ``queue_name``.  Never raises on backend errors."""
        try:
            self.client.lpush(queue_name, json.dumps(event, default=str))
        except RedisError as exc:
            logger.warning("Could not publish %s notification: %s", queue_name, exc)
            return False
        logger.debug("Published %s notification", queue_name)
        return True


class NotificationListener:
    """Background consumer for a single queue."""

    def __init__(
        self,
        client: "redis.Redis",
        queue_name: str,
        handler: Optional[Handler] = None,
        poll_timeout: int = 1,
    ) -> None:
        self.client = client
        self.queue_name = queue_name
        self.handler = handler or log_notification
        self.poll_timeout = poll_timeout
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def consume_once(self, timeout: Optional[int] = None) -> bool:
        """Pop and handle at most one message.

        Returns ``True`` if a message was taken off the queue, even if it
        turned out to be malformed.
        """
        item = self.client.brpop([self.queue_name], timeout=timeout if timeout is not None else self.poll_timeout)
        if item is None:
            return False
        _, raw = item
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            event = json.loads(raw)
        except ValueError:
            logger.warning("Dropping malformed %s message: %r", self.queue_name, raw)
            return True
        self.handler(self.queue_name, event)
        return True

    def _run(self) -> None:
        logger.info("Listening for %s notifications", self.queue_name)
        while not self._stop.is_set():
            try:
                self.consume_once()
            except RedisError as exc:
                logger.warning("Listener for %s lost its backend: %s", self.queue_name, exc)
                self._stop.wait(self.poll_timeout)
            except Exception:
                logger.exception("Handler for %s failed", self.queue_name)

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"listener-{self.queue_name}", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout if timeout is not None else self.poll_timeout + 1)
            self._thread = None
