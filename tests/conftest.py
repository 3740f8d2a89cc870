import uuid
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from alembic import command
from alembic.config import Config
from forum_server import database
from forum_server.dependencies import get_db_session, get_readonly_db_session


def _migrated_memory_engine() -> tuple[Engine, AsyncEngine, async_sessionmaker[AsyncSession]]:
    db_name = f"forum_test_{uuid.uuid4().hex}"
    shared_memory_uri = f"file:{db_name}?mode=memory&cache=shared&uri=true"
    sync_engine = create_engine(f"sqlite+pysqlite:///{shared_memory_uri}", poolclass=StaticPool)

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.attributes["configure_logger"] = False
    with sync_engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, "head")

    engine = create_async_engine(f"sqlite+aiosqlite:///{shared_memory_uri}", echo=False, poolclass=StaticPool)
    database.install_sqlite_pragmas(engine, file_backed=False)
    return sync_engine, engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from starlette.routing import _DefaultLifespan

    from forum_server.app import create_app

    # Holding the sync engine keeps the shared in-memory database alive.
    keepalive_engine, _engine, session_maker = _migrated_memory_engine()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with database.get_session(session_maker) as session:
            yield session

    async def override_readonly_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with database.get_session(session_maker, read_only=True) as session:
            yield session

    app = create_app()

    app.router.lifespan_context = _DefaultLifespan(app.router)

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_readonly_db_session] = override_readonly_db_session

    with TestClient(app) as test_client:
        yield test_client

    keepalive_engine.dispose()


@pytest_asyncio.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    keepalive_engine, engine, session_maker = _migrated_memory_engine()
    async with session_maker() as db_session:
        yield db_session
    await engine.dispose()
    keepalive_engine.dispose()


@pytest.fixture
def forum(client: TestClient) -> dict:
    response = client.post("/forums", data={"name": "General", "description": "Anything goes"})
    assert response.status_code == 200
    return response.json()
