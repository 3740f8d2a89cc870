from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from htpy.starlette import HtpyResponse
from sqlalchemy.ext.asyncio import AsyncSession

from forum_server.dependencies import get_readonly_db_session, get_settings
from forum_server.schemas.forums import SearchResponse, SearchResultItem
from forum_server.services.search import run_search
from forum_server.settings import Settings
from forum_server.views.pages.search import render_search

router = APIRouter(tags=["search"])


@router.get("/search", response_model=None)
async def search(
    request: Request,
    q: str = Query("", description="Search query"),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_readonly_db_session),
) -> Any:
    result = await run_search(session, q, limit=settings.search_limit)
    results = [SearchResultItem.from_match(match) for match in result.matches]

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(render_search(query=result.query, results=results))

    return SearchResponse(query=result.query, results=results)
