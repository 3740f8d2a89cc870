from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from htpy.starlette import HtpyResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from forum_server.dependencies import get_db_session, get_readonly_db_session, get_settings
from forum_server.models import Reply
from forum_server.schemas.forums import CreateReplyRequest, PageInfo, ReplyItem, ThreadItem, ThreadPageResponse
from forum_server.services import store
from forum_server.services.pagination import paginate, parse_page
from forum_server.services.sanitize import clean_optional_text, clean_reply_body
from forum_server.settings import Settings
from forum_server.views.pages.reply_redirect import render_reply_redirect
from forum_server.views.pages.thread import render_thread

router = APIRouter(tags=["threads"])


@router.get("/thread/{thread_id}", response_model=None)
async def view_thread(
    request: Request,
    thread_id: int,
    page: str | None = Query(None),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_readonly_db_session),
) -> Any:
    thread = await store.require_thread(session, thread_id)
    total = await store.count_replies(session, thread_id)
    # No redirect here when the page is past the end: an empty page renders.
    window = paginate(total, settings.page_size, parse_page(page))

    replies: list[Reply] = []
    if not window.is_past_end:
        replies = await store.list_replies(session, thread_id, limit=window.page_size, offset=window.offset)
    thread_item = ThreadItem.from_entity(thread)
    reply_items = [ReplyItem.from_entity(reply) for reply in replies]
    pagination = PageInfo.from_window(window)

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(
            render_thread(
                forum_id=thread.forum_id,
                thread=thread_item,
                replies=reply_items,
                pagination=pagination,
            )
        )

    return ThreadPageResponse(
        forum_id=thread.forum_id,
        thread=thread_item,
        replies=reply_items,
        total=total,
        pagination=pagination,
    )


@router.post("/thread/{thread_id}/replies", response_model=None)
async def create_reply(
    request: Request,
    thread_id: int,
    body: CreateReplyRequest = Depends(CreateReplyRequest.as_form),
    session: AsyncSession = Depends(get_db_session),
) -> Any:
    reply = await store.create_reply(
        session,
        thread_id=thread_id,
        author=clean_optional_text(body.author),
        content=clean_reply_body(body.content),
    )

    if "text/html" in request.headers.get("accept", ""):
        return HtpyResponse(render_reply_redirect(thread_id=thread_id))

    return ReplyItem.from_entity(reply)


@router.post("/thread/{thread_id}/delete", response_model=None)
async def delete_thread(
    request: Request,
    thread_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> Any:
    thread = await store.require_thread(session, thread_id)
    forum_id = thread.forum_id
    await store.delete_thread(session, thread_id)

    if "text/html" in request.headers.get("accept", ""):
        return RedirectResponse(url=f"/f/{forum_id}", status_code=303)

    return {"deleted": True, "thread_id": thread_id, "forum_id": forum_id}


@router.post("/thread/{thread_id}/replies/{reply_id}/delete", response_model=None)
async def delete_reply(
    request: Request,
    thread_id: int,
    reply_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> Any:
    deleted = await store.delete_reply(session, thread_id=thread_id, reply_id=reply_id)

    if "text/html" in request.headers.get("accept", ""):
        return RedirectResponse(url=f"/thread/{thread_id}", status_code=303)

    return {"deleted": deleted, "thread_id": thread_id, "reply_id": reply_id}
