# =============================================================================
# lib/session_store.py - Redis Session Store
# =============================================================================
# Persists session data in Redis, one JSON record per session:
#
#   sess:<session id>  ->  {"visits": 3, ...}   (expires after ttl seconds)
#
# The store knows nothing about cookies or HTTP; that is the session
# middleware's job (app/middleware/session.py).
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

from redis.exceptions import RedisError

from app.exceptions import SessionStoreError

logger = logging.getLogger(__name__)

KEY_PREFIX = "sess:"


class RedisSessionStore:
    """
    Session storage backed by a redis.asyncio client.

    Every write refreshes the record's TTL, so a session stays alive for
    `ttl` seconds after the last request that touched it.

    Example:
        store = RedisSessionStore(redis_client, ttl=86400)
        await store.set("abc", {"visits": 1})
        data = await store.get("abc")  # {"visits": 1}
    """

    def __init__(self, client: Any, ttl: int = 86400, prefix: str = KEY_PREFIX):
        self.client = client
        self.ttl = ttl
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """
        Load a session record.

        Returns:
            The stored data, or None if the session doesn't exist (or expired)

        Raises:
            SessionStoreError: If Redis fails or the record is corrupt
        """
        try:
            raw = await self.client.get(self._key(session_id))
        except RedisError as e:
            raise SessionStoreError(session_id, str(e)) from e

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise SessionStoreError(session_id, f"corrupt session record: {e}") from e

        return data if isinstance(data, dict) else None

    async def set(self, session_id: str, data: dict[str, Any]) -> None:
        """Write a session record and reset its expiry."""
        try:
            await self.client.set(
                self._key(session_id),
                json.dumps(data, default=str),
                ex=self.ttl,
            )
        except RedisError as e:
            raise SessionStoreError(session_id, str(e)) from e

    async def destroy(self, session_id: str) -> None:
        """Delete a session record. Deleting a missing session is not an error."""
        try:
            await self.client.delete(self._key(session_id))
        except RedisError as e:
            raise SessionStoreError(session_id, str(e)) from e
