#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - HTTP Server Entry Point
# =============================================================================
# Starts the web server on the configured port.
#
# Usage:
#   # Development defaults (port 3000, local MongoDB and Redis)
#   python scripts/start_server.py
#
#   # Production-style configuration
#   ENVIRONMENT=production PORT=8080 MONGODB_URI=mongodb://db/app \
#     REDISCLOUD_URL=redis://cache:6379 SECRET=change-me \
#     python scripts/start_server.py
#
# Prerequisites:
#   - MongoDB must be running (startup aborts without it)
#   - Redis should be running (without it the server runs without sessions)
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.server import run


def main():
    """Start the web server."""
    run()


if __name__ == "__main__":
    main()
