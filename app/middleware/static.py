# =============================================================================
# app/middleware/static.py - Static Asset Serving
# =============================================================================
# Serves files from the configured static folder under a URL prefix
# (/assets/css/style.css -> <STATIC_ASSETS_PATH>/css/style.css).
#
# Unlike a Starlette Mount, a miss is not answered here: the request falls
# through to the rest of the pipeline, so an unknown asset ends up with the
# app's normal 404.
# =============================================================================

from starlette.exceptions import HTTPException
from starlette.responses import PlainTextResponse
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send


class StaticAssetsMiddleware:
    """Serve files under `prefix` from `directory`, pass everything else on."""

    def __init__(self, app: ASGIApp, directory: str, prefix: str = "/assets"):
        self.app = app
        self.prefix = "/" + prefix.strip("/")
        # check_dir=False: a missing folder just means every asset misses
        self.files = StaticFiles(directory=directory, check_dir=False)

    def _matches(self, path: str) -> bool:
        return path.startswith(self.prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] != "http"
            or scope["method"] not in ("GET", "HEAD")
            or not self._matches(scope["path"])
        ):
            await self.app(scope, receive, send)
            return

        # Same trick Mount uses: StaticFiles resolves the path relative
        # to root_path
        child_scope = dict(scope)
        child_scope["root_path"] = scope.get("root_path", "") + self.prefix

        try:
            response = await self.files.get_response(
                self.files.get_path(child_scope), child_scope
            )
        except HTTPException as exc:
            if exc.status_code == 404:
                await self.app(scope, receive, send)
                return
            response = PlainTextResponse(str(exc.detail), status_code=exc.status_code)

        await response(child_scope, receive, send)
