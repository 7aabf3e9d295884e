"""
Redis-backed store for rating prompt state.
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional

import redis

from shared.logging import get_logger
from shared.errors import StoreError
from .base import Store


class RedisStore(Store):
    """Redis persistence for the rating prompt keys.

    Each value is stored as a small JSON document tagged with its type so
    that timestamps come back as ``datetime`` objects.
    """

    def __init__(self, redis_url: str, key_prefix: str = "", client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.logger = get_logger("rating_prompt.store.redis")
        self.redis = client or redis.Redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30
        )

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.redis.get(self._key(key))
        except redis.RedisError as e:
            raise StoreError(str(e), {"key": key, "operation": "get"}) from e

        if raw is None:
            return None

        try:
            return self._decode(raw)
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning("Discarding undecodable value", key=key, error=str(e))
            return None

    def set(self, key: str, value: Optional[Any]) -> None:
        try:
            if value is None:
                self.redis.delete(self._key(key))
            else:
                self.redis.set(self._key(key), self._encode(value))
        except redis.RedisError as e:
            raise StoreError(str(e), {"key": key, "operation": "set"}) from e

        self.logger.debug("Stored value", key=key)

    def health_check(self) -> bool:
        """Check Redis health."""
        try:
            return bool(self.redis.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:
        """Release the Redis connection pool.

        Whoever created the store owns it; a store built by ``create_store``
        is closed through ``RatingPromptPolicy.close``.
        """
        self.redis.close()
        self.logger.info("Redis store closed")

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    @staticmethod
    def _encode(value: Any) -> str:
        if isinstance(value, datetime):
            data: Dict[str, Any] = {"type": "datetime", "value": value.isoformat()}
        elif isinstance(value, bool):
            data = {"type": "bool", "value": value}
        elif isinstance(value, int):
            data = {"type": "int", "value": value}
        elif isinstance(value, str):
            data = {"type": "str", "value": value}
        else:
            raise TypeError(f"Unsupported value type: {type(value).__name__}")
        return json.dumps(data)

    @staticmethod
    def _decode(raw: str) -> Any:
        data = json.loads(raw)
        kind = data["type"]
        value = data["value"]
        if kind == "datetime":
            return datetime.fromisoformat(value)
        if kind in ("bool", "int", "str"):
            return value
        raise ValueError(f"Unknown value type: {kind}")
