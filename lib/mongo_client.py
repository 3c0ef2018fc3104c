# =============================================================================
# lib/mongo_client.py - MongoDB Connector
# =============================================================================
# Opens the document-database connection used by the route table.
#
# The connection is verified with a ping before startup continues. If the
# server cannot be reached the failure is logged and DatabaseConnectionError
# is raised; the caller treats that as fatal (no retry, no degraded mode).
#
# Usage:
#   from lib.mongo_client import connect_database
#   handle = await connect_database(settings)
#   await handle.db["users"].find_one({"name": "Ada"})
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from app.config import Settings
from app.exceptions import DatabaseConnectionError
from lib.utils import redact_url

logger = logging.getLogger(__name__)

# Used when the connection string does not name a database
DEFAULT_DATABASE_NAME = "ConfigExample"


@dataclass(frozen=True)
class DatabaseHandle:
    """Connected client plus the database named by MONGODB_URI."""

    client: AsyncMongoClient
    db: AsyncDatabase

    async def ping(self) -> bool:
        """Round-trip to the server. Used by the readiness check."""
        await self.client.admin.command("ping")
        return True

    async def close(self) -> None:
        await self.client.close()


async def connect_database(settings: Settings) -> DatabaseHandle:
    """
    Connect to MongoDB and confirm the server answers.

    Args:
        settings: Resolved configuration (uses MONGODB_URI and
            DB_CONNECT_TIMEOUT_MS)

    Returns:
        DatabaseHandle: Client and default database

    Raises:
        DatabaseConnectionError: If the URI is invalid or no server answered
            the ping within the timeout
    """
    uri = settings.MONGODB_URI
    safe_uri = redact_url(uri)
    client: AsyncMongoClient | None = None

    try:
        client = AsyncMongoClient(
            uri,
            serverSelectionTimeoutMS=settings.DB_CONNECT_TIMEOUT_MS,
        )
        await client.admin.command("ping")
        db = client.get_default_database(default=DEFAULT_DATABASE_NAME)
    except PyMongoError as e:
        logger.error(f"Could not connect to database at {safe_uri}: {e}")
        if client is not None:
            await client.close()
        raise DatabaseConnectionError(safe_uri, str(e)) from e

    logger.info(f"Connected to MongoDB at {safe_uri} (database: {db.name})")
    return DatabaseHandle(client=client, db=db)
