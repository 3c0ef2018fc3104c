# =============================================================================
# lib/ - Connectors and Storage
# =============================================================================
# This package contains the pieces that talk to external services:
# - mongo_client.py: MongoDB connector (fatal on failure)
# - redis_client.py: Redis connector for the session cache
# - session_store.py: Session records stored in Redis
# - utils.py: Shared utilities (URL redaction for logs)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.mongo_client import DatabaseHandle, connect_database
from lib.redis_client import connect_cache
from lib.session_store import RedisSessionStore
from lib.utils import redact_url

__all__ = [
    "DatabaseHandle",
    "connect_database",
    "connect_cache",
    "RedisSessionStore",
    "redact_url",
]
