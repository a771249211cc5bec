"""Persisted key-value store backed by Redis.

Values are whole JSON documents: every read and write replaces the full
value under a key. Nothing here does partial-field updates.
"""

import json
import logging
import os
from typing import Any

import redis

logger = logging.getLogger(__name__)

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
KEY_PREFIX = os.getenv("INTENTS_KEY_PREFIX", "intents:")

PAUSED_ROUTINE_KEY = "pausedRoutine"
NICKNAMES_KEY = "registeredNicknames"
PAGE_NAMES_KEY = "registeredPageNames"


def get_redis() -> redis.Redis:
    """Get Redis connection."""
    return redis.from_url(REDIS_URL, decode_responses=True)


class Store:
    """JSON values under prefixed Redis keys."""

    def __init__(self, client: redis.Redis | None = None, prefix: str = KEY_PREFIX):
        self._client = client
        self.prefix = prefix

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = get_redis()
        return self._client

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Any | None:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.client.set(self._key(key), json.dumps(value))
        logger.debug(f"Stored {self._key(key)}")

    def remove(self, key: str) -> None:
        self.client.delete(self._key(key))
        logger.debug(f"Removed {self._key(key)}")
