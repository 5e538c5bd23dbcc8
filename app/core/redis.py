"""
Redis connection backing the session revocation list
"""

import redis.asyncio as redis
from typing import Optional
import logging

from app.config import settings

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


async def init_redis(strict: bool = False):
    """
    Connect to Redis.

    An unreachable server is logged and tolerated unless `strict`: the
    revocation check fails open, and sign out reports the failure itself.
    """
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        decode_responses=True
    )
    try:
        await redis_client.ping()
        logger.info("Redis connection established")
    except redis.RedisError as e:
        logger.warning(f"Redis unavailable at startup, sessions cannot be revoked: {e}")
        if strict:
            raise


async def close_redis():
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


async def get_redis() -> redis.Redis:
    if not redis_client:
        await init_redis(strict=True)
    return redis_client
