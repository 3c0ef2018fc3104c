# =============================================================================
# app/middleware/session.py - Redis-Backed Sessions
# =============================================================================
# Server-side sessions: the browser only holds a signed session id in the
# "sessionid" cookie, the data lives in Redis (lib/session_store.py).
#
# Behaviour per request:
# 1. Read the cookie, verify its signature, load the record from the store.
#    A missing/forged cookie or an expired record starts a fresh session.
# 2. Expose it as request.state.session (a dict subclass).
# 3. When the response starts, write the record back and set the cookie for
#    new sessions.
#
# resave=True writes the record on every response even if nothing changed.
# save_uninitialized=True stores brand-new sessions (and sets their cookie)
# even if the handler never touched them.
#
# The store is looked up on app.state at request time because the Redis
# connection is only opened during startup. If it never came up the request
# runs with request.state.session = None.
#
# If Redis fails mid-request the client gets a 500 SESSION_STORE_ERROR JSON
# response instead of the handler's own response.
# =============================================================================

from __future__ import annotations

import logging
import secrets
from http.cookies import SimpleCookie
from typing import Any

from itsdangerous import BadSignature, Signer
from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import cookie_parser
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions import SessionStoreError

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "sessionid"


class Session(dict):
    """
    Session data for one browser.

    Behaves like a dict. Tracks whether it was changed during the request
    so the middleware can skip writes when resave is off.

    Attributes:
        id: Session id (the unsigned cookie value)
        is_new: True if this request created the session
        modified: True once any key was set or removed
        destroyed: True after destroy(); the record is deleted on response
    """

    def __init__(self, session_id: str, data: dict[str, Any] | None = None, is_new: bool = False):
        super().__init__(data or {})
        self.id = session_id
        self.is_new = is_new
        self.modified = False
        self.destroyed = False

    def __setitem__(self, key: str, value: Any) -> None:
        self.modified = True
        super().__setitem__(key, value)

    def __delitem__(self, key: str) -> None:
        self.modified = True
        super().__delitem__(key)

    def update(self, *args: Any, **kwargs: Any) -> None:
        self.modified = True
        super().update(*args, **kwargs)

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self.modified = True
        return super().setdefault(key, default)

    def pop(self, key: str, *args: Any) -> Any:
        if key in self:
            self.modified = True
        return super().pop(key, *args)

    def clear(self) -> None:
        self.modified = True
        super().clear()

    def destroy(self) -> None:
        """Drop the session; the browser gets a fresh one next time."""
        self.destroyed = True
        super().clear()


class SessionMiddleware:
    """
    Signed-cookie + Redis session middleware.

    Args:
        app: Downstream ASGI app
        secret: Key used to sign the session id in the cookie
        cookie_name: Name of the session cookie
        resave: Write the record back on every response
        save_uninitialized: Persist new sessions even when unmodified
        http_only: Set HttpOnly on the cookie
        path: Cookie path
        store_attr: Name of the app.state attribute holding the store
    """

    def __init__(
        self,
        app: ASGIApp,
        secret: str,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        resave: bool = True,
        save_uninitialized: bool = True,
        http_only: bool = True,
        path: str = "/",
        store_attr: str = "session_store",
    ):
        self.app = app
        self.signer = Signer(secret, salt=cookie_name)
        self.cookie_name = cookie_name
        self.resave = resave
        self.save_uninitialized = save_uninitialized
        self.http_only = http_only
        self.path = path
        self.store_attr = store_attr
        self._warned_unavailable = False

    # -------------------------------------------------------------------------
    # Cookie helpers
    # -------------------------------------------------------------------------

    def _unsign(self, value: str) -> str | None:
        try:
            return self.signer.unsign(value).decode("utf-8")
        except BadSignature:
            return None

    def _cookie_header(self, value: str, max_age: int | None = None) -> str:
        cookie: SimpleCookie = SimpleCookie()
        cookie[self.cookie_name] = value
        morsel = cookie[self.cookie_name]
        morsel["path"] = self.path
        if self.http_only:
            morsel["httponly"] = True
        if max_age is not None:
            morsel["max-age"] = max_age
        return cookie.output(header="").strip()

    # -------------------------------------------------------------------------
    # Load / commit
    # -------------------------------------------------------------------------

    def _get_store(self, scope: Scope) -> Any:
        app = scope.get("app")
        return getattr(app.state, self.store_attr, None) if app is not None else None

    async def _load(self, store: Any, scope: Scope) -> Session:
        cookies = cookie_parser(Headers(scope=scope).get("cookie", ""))
        raw = cookies.get(self.cookie_name)

        if raw:
            session_id = self._unsign(raw)
            if session_id is None:
                logger.debug("Ignoring session cookie with a bad signature")
            else:
                data = await store.get(session_id)
                if data is not None:
                    return Session(session_id, data)

        return Session(secrets.token_urlsafe(24), is_new=True)

    async def _commit(self, store: Any, session: Session, headers: MutableHeaders) -> None:
        if session.destroyed:
            await store.destroy(session.id)
            if not session.is_new:
                headers.append("set-cookie", self._cookie_header("", max_age=0))
            return

        if session.is_new:
            if not (self.save_uninitialized or session.modified):
                return
            await store.set(session.id, dict(session))
            signed = self.signer.sign(session.id).decode("utf-8")
            headers.append("set-cookie", self._cookie_header(signed))
            return

        if self.resave or session.modified:
            await store.set(session.id, dict(session))

    async def _store_failure(
        self, exc: SessionStoreError, scope: Scope, receive: Receive, send: Send
    ) -> None:
        logger.error(f"{exc.code}: {exc.message}")
        response = JSONResponse(exc.to_dict(), status_code=exc.status_code)
        await response(scope, receive, send)

    # -------------------------------------------------------------------------
    # ASGI entry point
    # -------------------------------------------------------------------------

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        store = self._get_store(scope)

        if store is None:
            if not self._warned_unavailable:
                logger.warning("Session store unavailable, serving requests without sessions")
                self._warned_unavailable = True
            state["session"] = None
            await self.app(scope, receive, send)
            return

        try:
            session = await self._load(store, scope)
        except SessionStoreError as exc:
            await self._store_failure(exc, scope, receive, send)
            return
        state["session"] = session

        failed = False

        async def send_wrapper(message: Message) -> None:
            nonlocal failed
            if failed:
                # error response already sent; drop the app's body
                return
            if message["type"] == "http.response.start":
                try:
                    await self._commit(store, session, MutableHeaders(scope=message))
                except SessionStoreError as exc:
                    failed = True
                    await self._store_failure(exc, scope, receive, send)
                    return
            await send(message)

        await self.app(scope, receive, send_wrapper)
