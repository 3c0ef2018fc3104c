# =============================================================================
# app/server.py - HTTP Server Entry Point
# =============================================================================
# Resolves settings, configures logging, builds the app and serves it with
# uvicorn on the configured port.
#
# Startup order: settings -> MongoDB + Redis (lifespan) -> bind socket ->
# "Listening on port <PORT>". If the database is unreachable or the port
# can't be bound, the process exits non-zero.
#
# Usage:
#   config-server
#   python scripts/start_server.py
# =============================================================================

import enum
import logging
import sys

import uvicorn
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.main import create_app

logger = logging.getLogger(__name__)

# uvicorn's own code for "lifespan startup failed"
STARTUP_FAILURE = 3
CONFIG_FAILURE = 1


class ListenState(str, enum.Enum):
    """The server only ever moves from NOT_LISTENING to LISTENING."""

    NOT_LISTENING = "not_listening"
    LISTENING = "listening"


class ListeningServer(uvicorn.Server):
    """
    uvicorn.Server that reports when it starts accepting connections.

    uvicorn runs the app's lifespan before binding, so by the time
    startup() returns with `started` set, the database is connected and the
    socket is bound. A bind failure makes uvicorn exit(1) inside startup().
    """

    def __init__(self, config: uvicorn.Config):
        super().__init__(config)
        self.listen_state = ListenState.NOT_LISTENING

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self.listen_state = ListenState.LISTENING
            logger.info(f"Listening on port {self.config.port}")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_server(settings: Settings, **app_kwargs) -> ListeningServer:
    """
    Create the app and wrap it in a ListeningServer bound to HOST:PORT.

    Extra keyword arguments are passed to create_app().
    """
    app = create_app(settings, **app_kwargs)
    config = uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        log_level="debug" if settings.DEBUG else "info",
    )
    return ListeningServer(config)


def run() -> None:
    """Start the server. Blocks until shutdown."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        for error in e.errors():
            variable = ".".join(str(part) for part in error["loc"])
            logger.error(f"Invalid configuration for {variable}: {error['msg']}")
        sys.exit(CONFIG_FAILURE)

    configure_logging(settings)
    server = build_server(settings)
    server.run()

    # Recent uvicorn exits from inside startup() on a failed lifespan or bind;
    # this covers releases that return from run() instead
    if not server.started:
        logger.error("Server failed to start")
        sys.exit(STARTUP_FAILURE)
