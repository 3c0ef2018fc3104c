# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Error types raised during bootstrap and request handling, plus the handler
# that turns them into structured JSON responses.
# Errors say HOW to fix the problem, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ConfigServerError(Exception):
    """
    Base exception for the server.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONFIG_SERVER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Connection Exceptions
# =============================================================================

class DatabaseConnectionError(ConfigServerError):
    """Raised when MongoDB cannot be reached at startup. Always fatal."""

    def __init__(self, uri: str, error: str):
        super().__init__(
            message=f"Could not connect to database: {error}",
            code="DATABASE_UNAVAILABLE",
            status_code=503,
            suggestion="Check MONGODB_URI and that the MongoDB server is running",
            details={"uri": uri, "error": error}
        )


class CacheConnectionError(ConfigServerError):
    """Raised when Redis cannot be reached at startup."""

    def __init__(self, url: str, error: str):
        super().__init__(
            message=f"Could not connect to session cache: {error}",
            code="CACHE_UNAVAILABLE",
            status_code=503,
            suggestion="Check REDISCLOUD_URL and that the Redis server is running",
            details={"url": url, "error": error}
        )


# =============================================================================
# Session Exceptions
# =============================================================================

class SessionStoreError(ConfigServerError):
    """Raised when a session record cannot be read or written."""

    def __init__(self, session_id: str, error: str):
        super().__init__(
            message=f"Session store failure: {error}",
            code="SESSION_STORE_ERROR",
            status_code=500,
            suggestion="Retry the request; if it keeps failing check the Redis server",
            details={"session_id": session_id, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def config_server_exception_handler(
    request: Request,
    exc: ConfigServerError
) -> JSONResponse:
    """
    Convert ConfigServerError to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
