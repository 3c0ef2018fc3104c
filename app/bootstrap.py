# =============================================================================
# app/bootstrap.py - Startup Sequence
# =============================================================================
# The two halves of starting the server:
#
# 1. open_connections(): connect MongoDB and Redis concurrently and apply the
#    failure policy (database failure is fatal; cache failure is logged and
#    tolerated unless CACHE_REQUIRED is set).
#
# 2. attach_pipeline(): attach the request pipeline in a fixed order. Order
#    matters: static assets are answered before compression and sessions
#    ever see the request, and the route table is mounted last.
#
#      static -> compression -> body_parser -> session -> templates
#             -> favicon -> cookie_parser -> routes
#
# Middleware is appended to app.user_middleware so the first one attached is
# the outermost (Starlette's add_middleware() would prepend instead).
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware import Middleware
from starlette.templating import Jinja2Templates

from app.config import Settings
from app.exceptions import CacheConnectionError
from app.middleware import (
    CookieParserMiddleware,
    FaviconMiddleware,
    SessionMiddleware,
    StaticAssetsMiddleware,
    UrlEncodedBodyMiddleware,
)
from lib.mongo_client import DatabaseHandle

logger = logging.getLogger(__name__)

ASSETS_URL_PREFIX = "/assets"
SESSION_COOKIE_NAME = "sessionid"

# Compression threshold, matches Express's compression() default of 1kb
GZIP_MINIMUM_SIZE = 1024

DatabaseConnector = Callable[[Settings], Awaitable[DatabaseHandle]]
CacheConnector = Callable[[Settings], Awaitable[Any]]
RouteTable = Callable[[FastAPI], None]


# =============================================================================
# Connections
# =============================================================================

@dataclass
class Connections:
    """Handles opened at startup. cache is None when Redis was unreachable."""

    database: DatabaseHandle
    cache: Any | None

    async def close(self) -> None:
        try:
            await self.database.close()
        finally:
            if self.cache is not None:
                await self.cache.aclose()


async def open_connections(
    settings: Settings,
    database_connector: DatabaseConnector,
    cache_connector: CacheConnector,
) -> Connections:
    """
    Connect to MongoDB and Redis concurrently.

    Both attempts run at the same time and are joined before returning, so
    the caller never starts serving with an unconfirmed database.

    Args:
        settings: Resolved configuration
        database_connector: Coroutine function returning a DatabaseHandle
        cache_connector: Coroutine function returning a Redis client

    Returns:
        Connections: The opened handles (cache may be None)

    Raises:
        DatabaseConnectionError: MongoDB is unreachable (always fatal)
        CacheConnectionError: Redis is unreachable and CACHE_REQUIRED is set
    """
    database, cache = await asyncio.gather(
        database_connector(settings),
        cache_connector(settings),
        return_exceptions=True,
    )

    if isinstance(database, BaseException):
        if not isinstance(cache, BaseException):
            await cache.aclose()
        raise database

    if isinstance(cache, CacheConnectionError) and not settings.CACHE_REQUIRED:
        logger.error(f"Continuing without sessions: {cache.message}")
        cache = None
    elif isinstance(cache, BaseException):
        await database.close()
        raise cache

    return Connections(database=database, cache=cache)


# =============================================================================
# Request Pipeline
# =============================================================================

def _use(app: FastAPI, step: str, middleware_class: type, **options: Any) -> None:
    app.user_middleware.append(Middleware(middleware_class, **options))
    app.state.bootstrap_steps.append(step)
    logger.debug(f"Attached {step} ({middleware_class.__name__})")


def attach_pipeline(app: FastAPI, settings: Settings, route_table: RouteTable) -> None:
    """
    Attach middleware, templates and routes to `app` in pipeline order.

    The steps taken are recorded in app.state.bootstrap_steps.

    Raises:
        FileNotFoundError: If the favicon is missing from the static folder
    """
    app.state.bootstrap_steps = []
    static_root = str(Path(settings.STATIC_ASSETS_PATH).resolve())

    _use(app, "static", StaticAssetsMiddleware, directory=static_root, prefix=ASSETS_URL_PREFIX)

    _use(app, "compression", GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)

    _use(app, "body_parser", UrlEncodedBodyMiddleware)

    _use(
        app,
        "session",
        SessionMiddleware,
        secret=settings.SECRET,
        cookie_name=SESSION_COOKIE_NAME,
        resave=True,
        save_uninitialized=True,
        http_only=True,
    )

    # Jinja2 has no default layout; templates opt into a base with {% extends %}
    app.state.templates = Jinja2Templates(directory=settings.VIEWS_PATH)
    app.state.bootstrap_steps.append("templates")

    # Fail at startup rather than on the first /favicon.ico request
    favicon = Path(settings.favicon_path).resolve()
    if not favicon.is_file():
        raise FileNotFoundError(f"Favicon not found: {favicon} (check STATIC_ASSETS_PATH)")
    _use(app, "favicon", FaviconMiddleware, path=str(favicon))

    _use(app, "cookie_parser", CookieParserMiddleware)

    route_table(app)
    app.state.bootstrap_steps.append("routes")
