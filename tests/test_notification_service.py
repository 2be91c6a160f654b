import json
import threading

from redis.exceptions import ConnectionError as RedisConnectionError

from address_book_api.app.services.notification_service import (
    CONTACT_ADDED,
    USER_REGISTERED,
    NotificationListener,
    NotificationPublisher,
)


class UnavailableRedis:
    def lpush(self, name, value):
        raise RedisConnectionError("connection refused")


def test_publish_pushes_json(redis_client):
    assert NotificationPublisher(redis_client).publish(USER_REGISTERED, {"id": 1, "email": "a@b.com"})
    assert json.loads(redis_client.rpop(USER_REGISTERED)) == {"id": 1, "email": "a@b.com"}


def test_publish_failure_is_not_raised():
    assert NotificationPublisher(UnavailableRedis()).publish(USER_REGISTERED, {"id": 1}) is False


def test_consume_once_hands_event_to_handler_in_order(redis_client):
    received = []
    publisher = NotificationPublisher(redis_client)
    publisher.publish(CONTACT_ADDED, {"id": 1})
    publisher.publish(CONTACT_ADDED, {"id": 2})

    listener = NotificationListener(redis_client, CONTACT_ADDED, handler=lambda q, e: received.append((q, e)))
    assert listener.consume_once()
    assert listener.consume_once()
    assert received == [(CONTACT_ADDED, {"id": 1}), (CONTACT_ADDED, {"id": 2})]


def test_malformed_message_is_dropped(redis_client):
    received = []
    redis_client.lpush(CONTACT_ADDED, "{broken")
    listener = NotificationListener(redis_client, CONTACT_ADDED, handler=lambda q, e: received.append(e))
    assert listener.consume_once()
    assert received == []
    assert redis_client.llen(CONTACT_ADDED) == 0


def test_background_listener_receives_published_events(redis_client):
    done = threading.Event()
    received = []

    def handler(queue_name, event):
        received.append(event)
        done.set()

    listener = NotificationListener(redis_client, USER_REGISTERED, handler=handler, poll_timeout=1)
    listener.start()
    try:
        NotificationPublisher(redis_client).publish(USER_REGISTERED, {"id": 7})
        assert done.wait(5)
    finally:
        listener.stop()
    assert received == [{"id": 7}]
