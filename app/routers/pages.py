# =============================================================================
# app/routers/pages.py - HTML Pages
# =============================================================================
# Server-rendered pages. Templates come from VIEWS_PATH; static files they
# reference are served from /assets.
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.dependencies import SessionDep, SettingsDep, TemplatesDep

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    templates: TemplatesDep,
    session: SessionDep,
    settings: SettingsDep,
):
    """Landing page; counts visits per session when sessions are available."""
    visits = None
    if session is not None:
        visits = session.get("visits", 0) + 1
        session["visits"] = visits

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "environment": settings.ENVIRONMENT,
            "visits": visits,
        },
    )
