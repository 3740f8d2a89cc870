import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from forum_server.models import Reply
from forum_server.services import store
from forum_server.services.store import ThreadSummary

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20


@dataclass(frozen=True, slots=True)
class ThreadMatch:
    thread: ThreadSummary
    matches_in_thread: bool
    reply_matches: list[Reply] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResult:
    query: str
    matches: list[ThreadMatch] = field(default_factory=list)


def group_replies_by_thread(replies: list[Reply]) -> dict[int, list[Reply]]:
    """Group replies per thread, keeping the order threads are first seen.

    Each group is returned oldest reply first.
    """
    groups: dict[int, list[Reply]] = {}
    for reply in replies:
        groups.setdefault(reply.thread_id, []).append(reply)
    for thread_id, group in groups.items():
        groups[thread_id] = sorted(group, key=lambda r: (r.created_at, r.id or 0))
    return groups


async def run_search(session: AsyncSession, q: str | None, *, limit: int = SEARCH_LIMIT) -> SearchResult:
    """Search thread and reply text, merged into one list grouped by thread.

    Threads that matched directly come first, newest first. Threads that only
    surfaced through one of their replies follow, in the order their replies
    were found.
    """
    query = (q or "").strip()
    if not query:
        return SearchResult(query="")

    threads = await store.search_threads(session, query, limit=limit)
    replies = await store.search_replies(session, query, limit=limit)
    groups = group_replies_by_thread(replies)

    matches = [
        ThreadMatch(
            thread=ThreadSummary.from_thread(thread),
            matches_in_thread=True,
            reply_matches=groups.get(thread.id, []) if thread.id is not None else [],
        )
        for thread in threads
    ]

    direct_ids = {thread.id for thread in threads}
    missing_ids = [thread_id for thread_id in groups if thread_id not in direct_ids]
    if missing_ids:
        summaries = {summary.id: summary for summary in await store.get_thread_summaries(session, missing_ids)}
        for thread_id in missing_ids:
            summary = summaries.get(thread_id)
            if summary is None:
                continue
            matches.append(ThreadMatch(thread=summary, matches_in_thread=False, reply_matches=groups[thread_id]))

    logger.debug(f"Search {query!r}: {len(threads)} threads, {len(replies)} replies, {len(missing_ids)} reply-only")
    return SearchResult(query=query, matches=matches)
