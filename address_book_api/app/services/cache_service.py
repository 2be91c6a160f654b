"""
Cache-aside helper on top of Redis.

Values are stored as JSON strings with an absolute time-to-live.  The
cache is advisory: when Redis is slow or unreachable, reads behave as
misses and writes are skipped, and a warning is logged.  Callers never
see a backend error and always fall back to the authoritative store.

Writes to contacts do not evict cached entries; a changed contact may
be served stale until its entry expires.
"""

import json
import logging
from datetime import timedelta
from typing import Any, Optional, Union

import redis
from redis.exceptions import RedisError

from ..core.config import Settings


logger = logging.getLogger(__name__)

CONTACT_LIST_KEY = "AddressBookContacts"


def contact_key(contact_id: int) -> str:
    return f"Contact_{contact_id}"


class RedisCacheService:
    def __init__(self, client: "redis.Redis", default_ttl: timedelta = timedelta(minutes=10)) -> None:
        self.client = client
        self.default_ttl = default_ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for ``key`` or ``None`` on a miss."""
        try:
            raw = self.client.get(key)
        except RedisError as exc:
            logger.warning("Cache read for %s failed, falling back to store: %s", key, exc)
            return None
        if raw is None:
            logger.debug("Cache miss for %s", key)
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: Optional[Union[timedelta, int]] = None) -> bool:
        """Store ``value`` as JSON under ``key``.  Returns ``False`` if skipped."""
        ttl = ttl if ttl is not None else self.default_ttl
        seconds = int(ttl.total_seconds()) if isinstance(ttl, timedelta) else int(ttl)
        try:
            self.client.set(key, json.dumps(value), ex=seconds)
        except RedisError as exc:
            logger.warning("Cache write for %s failed: %s", key, exc)
            return False
        return True


def build_redis_client(settings: Settings, blocking: bool = False) -> "redis.Redis":
    """Create a Redis client whose calls are bounded by the cache timeout.

    ``blocking`` clients (used by notification listeners) have no read
    timeout because BRPOP waits longer than a cache call may.
    """
    return redis.Redis.from_url(
        settings.redis_url,
        socket_timeout=None if blocking else settings.cache_timeout_seconds,
        socket_connect_timeout=settings.cache_timeout_seconds,
        decode_responses=True,
    )
