import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from forum_server.models import Forum, Reply, Thread, User

logger = logging.getLogger(__name__)


def install_sqlite_pragmas(engine: AsyncEngine, *, file_backed: bool = True) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn: Any, _connection_record: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if file_backed:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()


def create_session_maker(database_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        file_backed = url.database not in (None, "", ":memory:")
        # In-memory databases get a static pool that takes no sizing options.
        pool_args: dict[str, Any] = (
            {"pool_size": 10, "max_overflow": 20, "pool_timeout": 30, "pool_recycle": 3600} if file_backed else {}
        )
        engine = create_async_engine(
            url,
            echo=False,
            connect_args={
                "check_same_thread": False,
                "timeout": 20,
            },
            **pool_args,
        )
        install_sqlite_pragmas(engine, file_backed=file_backed)
    else:
        engine = create_async_engine(url, echo=False, pool_pre_ping=True)

    return engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_session(
    session_maker: async_sessionmaker[AsyncSession],
    read_only: bool = False,
) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        try:
            yield session
            if not read_only:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


__all__ = [
    "create_session_maker",
    "get_session",
    "install_sqlite_pragmas",
    "Forum",
    "Reply",
    "Thread",
    "User",
]
