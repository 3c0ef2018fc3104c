# =============================================================================
# app/middleware/favicon.py - Favicon Serving
# =============================================================================
# Answers /favicon.ico from a single file, cached in memory after the first
# hit. Browsers ask for the icon on nearly every page load, so it is served
# before sessions and routing get involved.
# =============================================================================

import hashlib
from pathlib import Path

from starlette.datastructures import Headers
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

FAVICON_URL = "/favicon.ico"
ONE_YEAR_SECONDS = 60 * 60 * 24 * 365


class FaviconMiddleware:
    """
    Serve the favicon at /favicon.ico.

    GET/HEAD return the icon with a one-year Cache-Control and an ETag
    (304 when the browser already has it), OPTIONS returns the allowed
    methods, anything else is a 405.
    """

    def __init__(self, app: ASGIApp, path: str, max_age: int = ONE_YEAR_SECONDS):
        self.app = app
        self.path = Path(path)
        self.max_age = max_age
        self._icon: bytes | None = None
        self._etag: str | None = None

    def _load(self) -> tuple[bytes, str]:
        if self._icon is None:
            self._icon = self.path.read_bytes()
            self._etag = '"' + hashlib.md5(self._icon, usedforsecurity=False).hexdigest() + '"'
        return self._icon, self._etag

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] != FAVICON_URL:
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        if method not in ("GET", "HEAD"):
            status = 200 if method == "OPTIONS" else 405
            response = Response(status_code=status, headers={"Allow": "GET, HEAD, OPTIONS"})
            await response(scope, receive, send)
            return

        icon, etag = self._load()
        headers = {
            "Cache-Control": f"public, max-age={self.max_age}",
            "ETag": etag,
        }

        if Headers(scope=scope).get("if-none-match") == etag:
            response = Response(status_code=304, headers=headers)
        else:
            response = Response(icon, media_type="image/x-icon", headers=headers)
        await response(scope, receive, send)
