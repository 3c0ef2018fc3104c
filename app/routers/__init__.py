# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by feature:
# - pages.py: Server-rendered HTML pages
# - health.py: Health check endpoints
#
# They are mounted by the route table in app/router.py.
# =============================================================================

from . import health
from . import pages

__all__ = [
    "health",
    "pages",
]
