from datetime import datetime
from typing import Annotated, cast

from fastapi import Form
from pydantic import BaseModel, StringConstraints

from forum_server.models import Forum, Reply, Thread
from forum_server.services.activity import ActivityRow
from forum_server.services.pagination import PageWindow
from forum_server.services.search import ThreadMatch
from forum_server.services.store import ThreadSummary, ThreadWithCount

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CreateForumRequest(BaseModel):
    name: RequiredText
    slug: str | None = None
    description: str | None = None

    @classmethod
    def as_form(
        cls,
        name: str = Form(...),
        slug: str | None = Form(None),
        description: str | None = Form(None),
    ) -> "CreateForumRequest":
        return cls(name=name, slug=slug or None, description=description or None)


class CreateThreadRequest(BaseModel):
    title: RequiredText
    author: str | None = None
    content: RequiredText

    @classmethod
    def as_form(
        cls,
        title: str = Form(...),
        content: str = Form(...),
        author: str | None = Form(None),
    ) -> "CreateThreadRequest":
        return cls(title=title, author=author, content=content)


class CreateReplyRequest(BaseModel):
    author: str | None = None
    content: RequiredText

    @classmethod
    def as_form(
        cls,
        content: str = Form(...),
        author: str | None = Form(None),
    ) -> "CreateReplyRequest":
        return cls(author=author, content=content)


class ForumItem(BaseModel):
    id: int
    name: str
    slug: str | None
    description: str | None

    @classmethod
    def from_entity(cls, forum: Forum) -> "ForumItem":
        return cls(id=cast(int, forum.id), name=forum.name, slug=forum.slug, description=forum.description)


class ThreadItem(BaseModel):
    id: int
    forum_id: int
    title: str
    author: str | None
    content: str | None
    created_at: datetime

    @classmethod
    def from_entity(cls, thread: Thread) -> "ThreadItem":
        return cls(
            id=cast(int, thread.id),
            forum_id=thread.forum_id,
            title=thread.title,
            author=thread.author,
            content=thread.content,
            created_at=thread.created_at,
        )

    @classmethod
    def from_summary(cls, summary: ThreadSummary) -> "ThreadItem":
        return cls(
            id=summary.id,
            forum_id=summary.forum_id,
            title=summary.title,
            author=summary.author,
            content=summary.content,
            created_at=summary.created_at,
        )


class ThreadListItem(ThreadItem):
    reply_count: int

    @classmethod
    def from_counted(cls, item: ThreadWithCount) -> "ThreadListItem":
        base = ThreadItem.from_entity(item.thread)
        return cls(**base.model_dump(), reply_count=item.reply_count)


class ReplyItem(BaseModel):
    id: int
    thread_id: int
    author: str | None
    content: str
    created_at: datetime

    @classmethod
    def from_entity(cls, reply: Reply) -> "ReplyItem":
        return cls(
            id=cast(int, reply.id),
            thread_id=reply.thread_id,
            author=reply.author,
            content=reply.content,
            created_at=reply.created_at,
        )


class PageInfo(BaseModel):
    page: int
    total_pages: int
    page_size: int

    @classmethod
    def from_window(cls, window: PageWindow) -> "PageInfo":
        return cls(page=window.page, total_pages=window.total_pages, page_size=window.page_size)


class ForumListResponse(BaseModel):
    forums: list[ForumItem]


class ForumPageResponse(BaseModel):
    forum: ForumItem
    threads: list[ThreadListItem]
    total: int
    pagination: PageInfo


class ThreadPageResponse(BaseModel):
    forum_id: int
    thread: ThreadItem
    replies: list[ReplyItem]
    total: int
    pagination: PageInfo


class SearchResultItem(BaseModel):
    thread: ThreadItem
    matches_in_thread: bool
    reply_matches: list[ReplyItem]

    @classmethod
    def from_match(cls, match: ThreadMatch) -> "SearchResultItem":
        return cls(
            thread=ThreadItem.from_summary(match.thread),
            matches_in_thread=match.matches_in_thread,
            reply_matches=[ReplyItem.from_entity(reply) for reply in match.reply_matches],
        )


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultItem]


class RecentActivityItem(BaseModel):
    id: int
    title: str
    author: str | None
    created_at: datetime
    forum_id: int
    forum_name: str
    reply_count: int
    last_reply_at: datetime | None
    latest_activity: datetime

    @classmethod
    def from_row(cls, row: ActivityRow) -> "RecentActivityItem":
        return cls.model_validate(row, from_attributes=True)


class RecentActivityResponse(BaseModel):
    posts: list[RecentActivityItem]
