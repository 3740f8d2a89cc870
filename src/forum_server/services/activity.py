from dataclasses import dataclass
from datetime import datetime
from typing import Any, cast

from sqlalchemy import func, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Select
from sqlmodel import col

from forum_server.models import Forum, Reply, Thread

RECENT_ACTIVITY_LIMIT = 40


def _col(expr: Any, /) -> ColumnElement[Any]:
    return cast(ColumnElement[Any], col(expr))


@dataclass(frozen=True, slots=True)
class ActivityRow:
    id: int
    title: str
    author: str | None
    created_at: datetime
    forum_id: int
    forum_name: str
    reply_count: int
    last_reply_at: datetime | None
    latest_activity: datetime


def build_recent_activity_statement(*, limit: int) -> Select[Any]:
    last_reply_at = func.max(_col(Reply.created_at))
    latest_activity = func.coalesce(last_reply_at, _col(Thread.created_at))

    return (
        sa_select(
            _col(Thread.id).label("id"),
            _col(Thread.title).label("title"),
            _col(Thread.author).label("author"),
            _col(Thread.created_at).label("created_at"),
            _col(Forum.id).label("forum_id"),
            _col(Forum.name).label("forum_name"),
            func.count(_col(Reply.id)).label("reply_count"),
            last_reply_at.label("last_reply_at"),
            latest_activity.label("latest_activity"),
        )
        .select_from(Thread)
        .join(Forum, _col(Forum.id) == _col(Thread.forum_id))
        .outerjoin(Reply, _col(Reply.thread_id) == _col(Thread.id))
        .group_by(_col(Thread.id), _col(Forum.id))
        .order_by(latest_activity.desc(), _col(Thread.id).desc())
        .limit(limit)
    )


async def recent_activity(session: AsyncSession, *, limit: int = RECENT_ACTIVITY_LIMIT) -> list[ActivityRow]:
    """Most recently active threads across all forums.

    A thread's activity is its newest reply, or its own creation time when it
    has no replies yet.
    """
    result = await session.execute(build_recent_activity_statement(limit=limit))
    return [
        ActivityRow(
            id=row.id,
            title=row.title,
            author=row.author,
            created_at=row.created_at,
            forum_id=row.forum_id,
            forum_name=row.forum_name,
            reply_count=int(row.reply_count),
            last_reply_at=row.last_reply_at,
            latest_activity=row.latest_activity,
        )
        for row in result.all()
    ]
