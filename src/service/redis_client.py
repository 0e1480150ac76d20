import redis.asyncio as aioredis
import os
import logging
from typing import Optional

logger = logging.getLogger('sessions.service.redis_client')

redis_clients = {}


def get_redis_client(redis_url: Optional[str] = None) -> aioredis.Redis:
    """Return the shared client (and its connection pool) for `redis_url`, creating it on first use."""
    if not redis_url:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")

    if redis_url not in redis_clients:
        logger.info(f"Creating new Redis client for {_mask_url(redis_url)}")
        redis_clients[redis_url] = aioredis.from_url(redis_url, decode_responses=True)

    return redis_clients[redis_url]


def _mask_url(redis_url: str) -> str:
    # Hide the password part of redis://:password@host
    if "@" not in redis_url:
        return redis_url
    scheme, _, rest = redis_url.partition("://")
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
