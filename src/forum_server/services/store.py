import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import cast

from sqlalchemy import delete, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from forum_server.errors import InvalidInputError, NotFoundError, PersistenceError
from forum_server.models import Forum, Reply, Thread, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ThreadSummary:
    id: int
    forum_id: int
    title: str
    author: str | None
    created_at: datetime
    content: str | None = None

    @classmethod
    def from_thread(cls, thread: Thread) -> "ThreadSummary":
        return cls(
            id=cast(int, thread.id),
            forum_id=thread.forum_id,
            title=thread.title,
            author=thread.author,
            created_at=thread.created_at,
            content=thread.content,
        )


@dataclass(frozen=True, slots=True)
class ThreadWithCount:
    thread: Thread
    reply_count: int


# Users


async def create_user(session: AsyncSession, *, email: str, username: str) -> User:
    user = User(email=email, username=username)
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as e:
        raise InvalidInputError("Email or username already in use") from e
    logger.info(f"Created user {user.username} ({user.id})")
    return user


async def get_user(session: AsyncSession, user_id: str) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(col(User.username) == username).limit(1))
    return result.scalar_one_or_none()


# Forums


async def list_forums(session: AsyncSession) -> list[Forum]:
    result = await session.execute(select(Forum).order_by(col(Forum.id).asc()))
    return list(result.scalars().all())


async def get_forum(session: AsyncSession, forum_id: int) -> Forum | None:
    return await session.get(Forum, forum_id)


async def require_forum(session: AsyncSession, forum_id: int) -> Forum:
    forum = await get_forum(session, forum_id)
    if forum is None:
        raise NotFoundError("Forum", forum_id)
    return forum


async def create_forum(
    session: AsyncSession,
    *,
    name: str,
    slug: str | None = None,
    description: str | None = None,
) -> Forum:
    forum = Forum(name=name, slug=slug, description=description)
    session.add(forum)
    try:
        await session.flush()
    except IntegrityError as e:
        raise InvalidInputError(f"Slug {slug!r} already in use") from e
    logger.info(f"Created forum {forum.id} ({forum.name})")
    return forum


async def delete_forum(session: AsyncSession, forum_id: int) -> int:
    """Delete a forum with its threads and their replies in one transaction."""
    thread_ids = select(col(Thread.id)).where(col(Thread.forum_id) == forum_id)
    try:
        await session.execute(delete(Reply).where(col(Reply.thread_id).in_(thread_ids)))
        await session.execute(delete(Thread).where(col(Thread.forum_id) == forum_id))
        result = await session.execute(delete(Forum).where(col(Forum.id) == forum_id))
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Failed to delete forum {forum_id}") from e

    deleted = result.rowcount or 0
    if deleted:
        logger.info(f"Deleted forum {forum_id}")
    return deleted


# Threads


async def count_threads(session: AsyncSession, forum_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(Thread).where(col(Thread.forum_id) == forum_id)
    )
    return result.scalar_one()


async def list_threads(session: AsyncSession, forum_id: int, *, limit: int, offset: int) -> list[ThreadWithCount]:
    """Threads of a forum, newest first, with their reply counts."""
    reply_counts = (
        select(
            col(Reply.thread_id).label("thread_id"),
            func.count(col(Reply.id)).label("reply_count"),
        )
        .group_by(col(Reply.thread_id))
        .subquery()
    )
    result = await session.execute(
        select(Thread, func.coalesce(reply_counts.c.reply_count, 0))
        .outerjoin(reply_counts, reply_counts.c.thread_id == col(Thread.id))
        .where(col(Thread.forum_id) == forum_id)
        .order_by(col(Thread.created_at).desc(), col(Thread.id).desc())
        .limit(limit)
        .offset(offset)
    )
    return [ThreadWithCount(thread=thread, reply_count=int(count)) for thread, count in result.all()]


async def get_thread(session: AsyncSession, thread_id: int) -> Thread | None:
    return await session.get(Thread, thread_id)


async def require_thread(session: AsyncSession, thread_id: int) -> Thread:
    thread = await get_thread(session, thread_id)
    if thread is None:
        raise NotFoundError("Thread", thread_id)
    return thread


async def create_thread(
    session: AsyncSession,
    *,
    forum_id: int,
    title: str,
    content: str,
    author: str | None = None,
) -> Thread:
    await require_forum(session, forum_id)

    thread = Thread(forum_id=forum_id, title=title, author=author, content=content)
    session.add(thread)
    await session.flush()
    logger.info(f"Created thread {thread.id} in forum {forum_id}")
    return thread


async def delete_thread(session: AsyncSession, thread_id: int) -> None:
    """Delete a thread and its replies; both deletes commit or neither does.

    The schema also cascades replies on thread deletion, so the explicit
    reply delete may find nothing left to remove.
    """
    try:
        await session.execute(delete(Reply).where(col(Reply.thread_id) == thread_id))
        await session.execute(delete(Thread).where(col(Thread.id) == thread_id))
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Failed to delete thread {thread_id}") from e

    logger.info(f"Deleted thread {thread_id}")


async def get_thread_summaries(session: AsyncSession, thread_ids: Sequence[int]) -> list[ThreadSummary]:
    if not thread_ids:
        return []

    result = await session.execute(
        select(
            col(Thread.id),
            col(Thread.forum_id),
            col(Thread.title),
            col(Thread.author),
            col(Thread.created_at),
        ).where(col(Thread.id).in_(thread_ids))
    )
    return [
        ThreadSummary(id=row.id, forum_id=row.forum_id, title=row.title, author=row.author, created_at=row.created_at)
        for row in result.all()
    ]


async def search_threads(session: AsyncSession, query: str, *, limit: int) -> list[Thread]:
    result = await session.execute(
        select(Thread)
        .where(
            or_(
                col(Thread.title).icontains(query, autoescape=True),
                col(Thread.content).icontains(query, autoescape=True),
                col(Thread.author).icontains(query, autoescape=True),
            )
        )
        .order_by(col(Thread.created_at).desc(), col(Thread.id).desc())
        .limit(limit)
    )
    return list(result.scalars().all())


# Replies


async def count_replies(session: AsyncSession, thread_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(Reply).where(col(Reply.thread_id) == thread_id)
    )
    return result.scalar_one()


async def list_replies(session: AsyncSession, thread_id: int, *, limit: int, offset: int) -> list[Reply]:
    """Replies of a thread, oldest first."""
    result = await session.execute(
        select(Reply)
        .where(col(Reply.thread_id) == thread_id)
        .order_by(col(Reply.created_at).asc(), col(Reply.id).asc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def get_reply(session: AsyncSession, reply_id: int) -> Reply | None:
    return await session.get(Reply, reply_id)


async def create_reply(
    session: AsyncSession,
    *,
    thread_id: int,
    content: str,
    author: str | None = None,
) -> Reply:
    await require_thread(session, thread_id)

    reply = Reply(thread_id=thread_id, author=author, content=content)
    session.add(reply)
    await session.flush()
    logger.info(f"Created reply {reply.id} in thread {thread_id}")
    return reply


async def delete_reply(session: AsyncSession, *, thread_id: int, reply_id: int) -> int:
    """Delete a reply if it exists and belongs to ``thread_id``.

    Returns the number of rows removed; a missing reply is not an error.
    """
    result = await session.execute(
        delete(Reply).where(col(Reply.id) == reply_id, col(Reply.thread_id) == thread_id)
    )
    deleted = result.rowcount or 0
    if deleted:
        logger.info(f"Deleted reply {reply_id} from thread {thread_id}")
    return deleted


async def search_replies(session: AsyncSession, query: str, *, limit: int) -> list[Reply]:
    result = await session.execute(
        select(Reply)
        .where(
            or_(
                col(Reply.content).icontains(query, autoescape=True),
                col(Reply.author).icontains(query, autoescape=True),
            )
        )
        .order_by(col(Reply.created_at).desc(), col(Reply.id).desc())
        .limit(limit)
    )
    return list(result.scalars().all())
