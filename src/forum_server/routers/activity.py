from typing import Any

from fastapi import APIRouter, Depends, Request
from htpy.starlette import HtpyResponse
from sqlalchemy.ext.asyncio import AsyncSession

from forum_server.dependencies import get_readonly_db_session, get_settings
from forum_server.schemas.forums import RecentActivityItem, RecentActivityResponse
from forum_server.services.activity import recent_activity
from forum_server.settings import Settings
from forum_server.views.pages.new_posts import render_new_posts

router = APIRouter(tags=["activity"])


@router.get("/new-posts", response_model=None)
async def new_posts(
    request: Request,
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_readonly_db_session),
) -> Any:
    rows = await recent_activity(session, limit=settings.recent_activity_limit)
    posts = [RecentActivityItem.from_row(row) for row in rows]

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(render_new_posts(posts=posts))

    return RecentActivityResponse(posts=posts)
