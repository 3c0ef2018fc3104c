# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the web server:
# - config.py: Environment variable loading and settings
# - bootstrap.py: Connection setup and the request pipeline order
# - main.py: App factory, lifespan, error handlers
# - server.py: uvicorn entry point
# - middleware/: Static files, body parsing, sessions, favicon, cookies
# - routers/: Route definitions, mounted by router.py
#
# Database and cache connectors live in the lib/ package.
# =============================================================================

__version__ = "1.0.0"
