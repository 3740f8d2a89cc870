import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from forum_server.errors import InvalidInputError, NotFoundError, PersistenceError
from forum_server.models import Reply, Thread, User
from forum_server.services import store
from forum_server.services.activity import recent_activity
from forum_server.services.search import group_replies_by_thread


async def _seed(session: AsyncSession) -> tuple[int, int]:
    forum = await store.create_forum(session, name="General")
    thread = await store.create_thread(session, forum_id=forum.id, title="Hello", content="<pre>x</pre>")
    await store.create_reply(session, thread_id=thread.id, content="<pre>one</pre>")
    await store.create_reply(session, thread_id=thread.id, content="<pre>two</pre>")
    await session.commit()
    return forum.id, thread.id


@pytest.mark.asyncio
async def test_delete_thread_removes_thread_and_replies(session: AsyncSession) -> None:
    _forum_id, thread_id = await _seed(session)

    await store.delete_thread(session, thread_id)

    assert await store.get_thread(session, thread_id) is None
    assert await store.count_replies(session, thread_id) == 0


@pytest.mark.asyncio
async def test_delete_thread_rolls_back_when_commit_fails(
    session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    _forum_id, thread_id = await _seed(session)

    async def failing_commit(self: AsyncSession) -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)

    with pytest.raises(PersistenceError):
        await store.delete_thread(session, thread_id)

    monkeypatch.undo()
    assert await store.get_thread(session, thread_id) is not None
    assert await store.count_replies(session, thread_id) == 2


@pytest.mark.asyncio
async def test_delete_forum_cascades_to_threads_and_replies(session: AsyncSession) -> None:
    forum_id, thread_id = await _seed(session)

    assert await store.delete_forum(session, forum_id) == 1

    assert await store.get_forum(session, forum_id) is None
    assert await store.get_thread(session, thread_id) is None
    assert await store.search_replies(session, "one", limit=20) == []


@pytest.mark.asyncio
async def test_delete_unknown_forum_deletes_nothing(session: AsyncSession) -> None:
    assert await store.delete_forum(session, 404) == 0


@pytest.mark.asyncio
async def test_create_thread_requires_existing_forum(session: AsyncSession) -> None:
    with pytest.raises(NotFoundError):
        await store.create_thread(session, forum_id=404, title="Orphan", content="x")


@pytest.mark.asyncio
async def test_create_user_rejects_duplicate_username(session: AsyncSession) -> None:
    user = await store.create_user(session, email="a@example.com", username="alice")
    await session.commit()
    assert (await store.get_user_by_username(session, "alice")).id == user.id

    with pytest.raises(InvalidInputError):
        await store.create_user(session, email="b@example.com", username="alice")


@pytest.mark.asyncio
async def test_get_thread_summaries_skips_missing_ids(session: AsyncSession) -> None:
    _forum_id, thread_id = await _seed(session)

    summaries = await store.get_thread_summaries(session, [thread_id, 9999])
    assert [s.id for s in summaries] == [thread_id]
    assert summaries[0].title == "Hello"
    assert await store.get_thread_summaries(session, []) == []


@pytest.mark.asyncio
async def test_group_replies_by_thread_orders_each_group_oldest_first(session: AsyncSession) -> None:
    _forum_id, thread_id = await _seed(session)

    newest_first = await store.search_replies(session, "<pre>", limit=20)
    groups = group_replies_by_thread(newest_first)

    assert list(groups) == [thread_id]
    assert [r.content for r in groups[thread_id]] == ["<pre>one</pre>", "<pre>two</pre>"]


@pytest.mark.asyncio
async def test_recent_activity_respects_limit(session: AsyncSession) -> None:
    forum = await store.create_forum(session, name="Busy")
    for n in range(5):
        await store.create_thread(session, forum_id=forum.id, title=f"T{n}", content="x")
    await session.commit()

    rows = await recent_activity(session, limit=3)
    assert [row.title for row in rows] == ["T4", "T3", "T2"]


def test_timestamp_columns_store_naive_datetimes() -> None:
    for column in (Thread.__table__.c.created_at, Reply.__table__.c.created_at, User.__table__.c.created_at):
        assert type(column.type) is DateTime
        assert column.type.timezone is False


@pytest.mark.asyncio
async def test_created_rows_read_back_naive_utc_timestamps(session: AsyncSession) -> None:
    _forum_id, thread_id = await _seed(session)
    user = await store.create_user(session, email="t@example.com", username="tess")
    await session.commit()
    session.expunge_all()

    thread = await store.get_thread(session, thread_id)
    replies = await store.list_replies(session, thread_id, limit=10, offset=0)
    stored_user = await store.get_user(session, user.id)

    assert thread.created_at.tzinfo is None
    assert all(reply.created_at.tzinfo is None for reply in replies)
    assert stored_user.created_at.tzinfo is None
    assert stored_user.updated_at.tzinfo is None
