# =============================================================================
# app/main.py - FastAPI Application Factory
# =============================================================================
# Builds the FastAPI application from resolved settings:
# - attaches the request pipeline (see app/bootstrap.py)
# - opens MongoDB and Redis in the lifespan, before any request is served
# - registers error handlers
#
# Usage:
#   uvicorn app.main:create_app --factory
#   # or, with the "Listening on port" message and exit codes:
#   python scripts/start_server.py
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app import __version__
from app.bootstrap import (
    CacheConnector,
    DatabaseConnector,
    RouteTable,
    attach_pipeline,
    open_connections,
)
from app.config import Settings, get_settings
from app.exceptions import ConfigServerError, config_server_exception_handler
from app.router import mount_routes
from lib.mongo_client import connect_database
from lib.redis_client import connect_cache
from lib.session_store import RedisSessionStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    route_table: RouteTable = mount_routes,
    database_connector: DatabaseConnector = connect_database,
    cache_connector: CacheConnector = connect_cache,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration to use (defaults to get_settings())
        route_table: Callable that attaches the routes
        database_connector: Opens the MongoDB connection
        cache_connector: Opens the Redis connection

    Returns:
        FastAPI: App with its pipeline attached; connections are opened
        when the lifespan starts

    Raises:
        FileNotFoundError: If the favicon is missing
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open connections on startup, close them on shutdown.

        Raising here aborts startup, so the server never binds its socket
        when the database is unreachable.
        """
        logger.info(f"Starting server in {settings.ENVIRONMENT} mode")

        connections = await open_connections(settings, database_connector, cache_connector)
        app.state.connections = connections
        if connections.cache is not None:
            app.state.session_store = RedisSessionStore(
                connections.cache, ttl=settings.SESSION_TTL_SECONDS
            )

        yield

        logger.info("Shutting down server")
        app.state.session_store = None
        await connections.close()

    app = FastAPI(
        title="Config Example Server",
        description="Web server configured entirely from the environment.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = None

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    @app.exception_handler(ConfigServerError)
    async def handle_config_server_exception(request: Request, exc: ConfigServerError):
        """Handle custom server exceptions."""
        logger.error(f"{exc.code}: {exc.message}")
        return await config_server_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    attach_pipeline(app, settings, route_table)
    return app
