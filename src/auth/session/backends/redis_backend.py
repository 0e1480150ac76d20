import json
import logging
import time
from typing import Any, NoReturn, Optional
from urllib.parse import quote

import redis.asyncio as aioredis
from redis import RedisError, ConnectionError as RedisConnectionError, TimeoutError as RedisTimeoutError

from ..errors import BackendUnavailable
from ..models import CachedItem
from .base import CacheBackend

logger = logging.getLogger('sessions.backends.redis')


class RedisBackend(CacheBackend):
    def __init__(self, redis_client: aioredis.Redis, partition: str = "sessions-app"):
        """Initialize the Redis backend with an async Redis client."""
        self.redis_client = redis_client
        self.partition = partition
        self._ready = False

    def _handle_redis_error(self, operation: str, cache_key: str, error: Exception) -> NoReturn:
        """Centralized error handling for Redis operations."""
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            logger.error(f"Redis connection failed during {operation} for {cache_key}: {error}")
            raise BackendUnavailable(f"Cache connection error during {operation}", operation) from error
        elif isinstance(error, RedisError):
            logger.error(f"Redis error during {operation} for {cache_key}: {error}")
            raise BackendUnavailable(f"Cache error during {operation}", operation) from error
        else:
            logger.error(f"Unexpected error during {operation} for {cache_key}: {error}")
            raise BackendUnavailable(f"Unexpected error during {operation}", operation) from error

    def generate_key(self, segment: str, key: str) -> str:
        return f"{self.partition}:{quote(segment, safe='')}:{quote(key, safe='')}"

    async def start(self) -> None:
        try:
            await self.redis_client.ping()
        except Exception as e:
            self._handle_redis_error("startup", self.partition, e)
        self._ready = True
        logger.info(f"Redis cache backend ready (partition '{self.partition}')")

    async def stop(self) -> None:
        self._ready = False
        try:
            await self.redis_client.aclose()
        except RedisError as e:
            logger.warning(f"Error while closing Redis client: {e}")

    def is_ready(self) -> bool:
        return self._ready

    async def get(self, segment: str, key: str) -> Optional[CachedItem]:
        self.validate_key(segment, key)
        cache_key = self.generate_key(segment, key)
        try:
            raw = await self.redis_client.get(cache_key)
        except Exception as e:
            self._handle_redis_error("get", cache_key, e)

        if raw is None:
            return None

        try:
            envelope = json.loads(raw)
            item = envelope["item"]
            stored = int(envelope["stored"])
            ttl = int(envelope["ttl"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Corrupted cache entry found for {cache_key}: {e}")
            await self.drop(segment, key)
            return None

        remaining = stored + ttl - int(time.time() * 1000)
        if remaining <= 0:
            return None

        return CachedItem(item=item, stored=stored, ttl=remaining)

    async def set(self, segment: str, key: str, value: Any, ttl_ms: int) -> None:
        self.validate_key(segment, key)
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be a positive number of milliseconds")

        cache_key = self.generate_key(segment, key)
        envelope = {
            "item": value,
            "stored": int(time.time() * 1000),
            "ttl": ttl_ms,
        }
        try:
            await self.redis_client.set(cache_key, json.dumps(envelope), px=ttl_ms)
            logger.debug(f"Cache entry {cache_key} written with ttl {ttl_ms}ms")
        except Exception as e:
            self._handle_redis_error("set", cache_key, e)

    async def drop(self, segment: str, key: str) -> None:
        self.validate_key(segment, key)
        cache_key = self.generate_key(segment, key)
        try:
            deleted_count = await self.redis_client.delete(cache_key)
        except Exception as e:
            self._handle_redis_error("drop", cache_key, e)

        if deleted_count == 0:
            logger.debug(f"Cache entry {cache_key} was already absent")
        else:
            logger.debug(f"Cache entry {cache_key} dropped")
