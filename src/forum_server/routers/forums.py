from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from htpy.starlette import HtpyResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from forum_server.dependencies import get_db_session, get_readonly_db_session, get_settings
from forum_server.errors import InvalidInputError
from forum_server.schemas.forums import (
    CreateForumRequest,
    CreateThreadRequest,
    ForumItem,
    ForumListResponse,
    ForumPageResponse,
    PageInfo,
    ThreadItem,
    ThreadListItem,
)
from forum_server.services import store
from forum_server.services.pagination import paginate, parse_page
from forum_server.services.sanitize import clean_optional_text, clean_text, clean_thread_body
from forum_server.settings import Settings
from forum_server.views.pages.forum import render_forum
from forum_server.views.pages.home import render_home
from forum_server.views.pages.new_thread import render_new_thread

router = APIRouter(tags=["forums"])


@router.get("/", response_model=None)
async def list_forums(
    request: Request,
    session: AsyncSession = Depends(get_readonly_db_session),
) -> Any:
    forums = [ForumItem.from_entity(forum) for forum in await store.list_forums(session)]

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(render_home(forums=forums))

    return ForumListResponse(forums=forums)


@router.post("/forums", response_model=None)
async def create_forum(
    request: Request,
    body: CreateForumRequest = Depends(CreateForumRequest.as_form),
    session: AsyncSession = Depends(get_db_session),
) -> Any:
    forum = await store.create_forum(
        session,
        name=clean_text(body.name),
        slug=clean_optional_text(body.slug),
        description=clean_optional_text(body.description),
    )

    if "text/html" in request.headers.get("accept", ""):
        return RedirectResponse(url=f"/f/{forum.id}", status_code=303)

    return ForumItem.from_entity(forum)


@router.get("/f/{forum_id}", response_model=None)
async def view_forum(
    request: Request,
    forum_id: int,
    page: str | None = Query(None),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_readonly_db_session),
) -> Any:
    forum = await store.require_forum(session, forum_id)
    total = await store.count_threads(session, forum_id)
    window = paginate(total, settings.page_size, parse_page(page))

    # Past-the-end forum pages bounce to the last page; thread pages do not.
    if window.is_past_end:
        return RedirectResponse(url=f"/f/{forum_id}?page={window.total_pages}", status_code=303)

    rows = await store.list_threads(session, forum_id, limit=window.page_size, offset=window.offset)
    threads = [ThreadListItem.from_counted(row) for row in rows]
    forum_item = ForumItem.from_entity(forum)
    pagination = PageInfo.from_window(window)

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(render_forum(forum=forum_item, threads=threads, total=total, pagination=pagination))

    return ForumPageResponse(forum=forum_item, threads=threads, total=total, pagination=pagination)


@router.get("/f/{forum_id}/new", response_model=None)
async def new_thread_page(
    forum_id: int,
    session: AsyncSession = Depends(get_readonly_db_session),
) -> HtpyResponse:
    forum = await store.require_forum(session, forum_id)
    return HtpyResponse(render_new_thread(forum=ForumItem.from_entity(forum)))


@router.post("/f/{forum_id}/threads", response_model=None)
async def create_thread(
    request: Request,
    forum_id: int,
    body: CreateThreadRequest = Depends(CreateThreadRequest.as_form),
    session: AsyncSession = Depends(get_db_session),
) -> Any:
    title = clean_text(body.title)
    if not title:
        raise InvalidInputError("Title must not be empty")

    thread = await store.create_thread(
        session,
        forum_id=forum_id,
        title=title,
        author=clean_optional_text(body.author),
        content=clean_thread_body(body.content),
    )

    if "text/html" in request.headers.get("accept", ""):
        return RedirectResponse(url=f"/thread/{thread.id}", status_code=303)

    return ThreadItem.from_entity(thread)
