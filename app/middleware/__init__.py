# =============================================================================
# app/middleware/ - ASGI Middleware
# =============================================================================
# Pure ASGI middleware making up the request pipeline:
# - static.py: serves files under /assets, falls through when not found
# - body.py: parses URL-encoded form bodies into request.state.body
# - session.py: Redis-backed sessions keyed by the "sessionid" cookie
# - favicon.py: answers /favicon.ico from the static asset folder
# - cookies.py: parses the Cookie header into request.state.cookies
#
# Compression uses Starlette's GZipMiddleware directly. The order the
# pieces are attached in is defined in app/bootstrap.py.
# =============================================================================

from .body import UrlEncodedBodyMiddleware, parse_urlencoded
from .cookies import CookieParserMiddleware
from .favicon import FaviconMiddleware
from .session import Session, SessionMiddleware
from .static import StaticAssetsMiddleware

__all__ = [
    "CookieParserMiddleware",
    "FaviconMiddleware",
    "Session",
    "SessionMiddleware",
    "StaticAssetsMiddleware",
    "UrlEncodedBodyMiddleware",
    "parse_urlencoded",
]
