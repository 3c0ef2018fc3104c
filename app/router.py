# =============================================================================
# app/router.py - Route Table
# =============================================================================
# The route table is any callable that takes the app and attaches handlers.
# create_app() mounts mount_routes() unless it is given a different one.
# =============================================================================

from fastapi import FastAPI

from app.routers import health, pages


def mount_routes(app: FastAPI) -> None:
    """Attach the bundled pages and health endpoints."""
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(health.router, tags=["Health"])
