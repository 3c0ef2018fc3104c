# =============================================================================
# lib/redis_client.py - Redis Connector
# =============================================================================
# Opens the Redis connection that backs the session store. Nothing else in
# the server talks to Redis.
#
# Failure policy is decided by the caller: connect_cache() always raises
# CacheConnectionError on failure, and the bootstrap either logs it and keeps
# going without sessions (CACHE_REQUIRED=false) or aborts startup.
# =============================================================================

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.config import Settings
from app.exceptions import CacheConnectionError
from lib.utils import redact_url

logger = logging.getLogger(__name__)


async def connect_cache(settings: Settings) -> aioredis.Redis:
    """
    Connect to Redis and confirm the server answers.

    Args:
        settings: Resolved configuration (uses REDISCLOUD_URL)

    Returns:
        redis.asyncio.Redis: Connected client

    Raises:
        CacheConnectionError: If the URL is invalid or the ping fails
    """
    url = settings.REDISCLOUD_URL
    safe_url = redact_url(url)
    client = None

    try:
        client = aioredis.from_url(url)
        await client.ping()
    except (RedisError, ValueError) as e:
        # from_url raises ValueError for unsupported schemes
        logger.error(f"Could not connect to session cache at {safe_url}: {e}")
        if client is not None:
            await client.aclose()
        raise CacheConnectionError(safe_url, str(e)) from e

    logger.info(f"Connected to Redis at {safe_url}")
    return client
