# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the handles opened at startup.
# Everything lives on app.state (set by the lifespan in main.py), so route
# handlers never import connections or settings as module globals.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request
from pymongo.asynchronous.database import AsyncDatabase
from starlette.templating import Jinja2Templates

from app.bootstrap import Connections
from app.config import Settings
from app.middleware import Session


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with."""
    return request.app.state.settings


def get_database(request: Request) -> AsyncDatabase:
    """
    Get the MongoDB database.

    The lifespan only lets requests in once the database answered, so this
    is always connected.
    """
    return request.app.state.connections.database.db


def get_connections(request: Request) -> Connections:
    """Database handle and Redis client (cache is None if Redis never came up)."""
    return request.app.state.connections


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def get_session(request: Request) -> Session | None:
    """Current session, or None when the session store is unavailable."""
    return getattr(request.state, "session", None)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[AsyncDatabase, Depends(get_database)]
ConnectionsDep = Annotated[Connections, Depends(get_connections)]
TemplatesDep = Annotated[Jinja2Templates, Depends(get_templates)]
SessionDep = Annotated[Session | None, Depends(get_session)]
