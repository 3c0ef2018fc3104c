# =============================================================================
# app/middleware/cookies.py - Cookie Parsing
# =============================================================================
# Parses the Cookie header once and exposes it as request.state.cookies.
# =============================================================================

from starlette.datastructures import Headers
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Receive, Scope, Send


class CookieParserMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            header = Headers(scope=scope).get("cookie", "")
            scope.setdefault("state", {})["cookies"] = cookie_parser(header)
        await self.app(scope, receive, send)
