import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from alembic import command
from alembic.config import Config
from forum_server.database import create_session_maker, get_session
from forum_server.errors import InvalidInputError, NotFoundError, PersistenceError
from forum_server.router import router
from forum_server.settings import Settings

logger = logging.getLogger("forum_server")


def run_migrations(settings: Settings) -> None:
    alembic_cfg = Config(settings.alembic_config)
    alembic_cfg.set_main_option("sqlalchemy.url", settings.sync_database_url.replace("%", "%%"))
    alembic_cfg.attributes["configure_logger"] = False
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    settings = Settings()
    app.state.settings = settings

    try:
        if settings.run_migrations:
            run_migrations(settings)
        app.state.engine, app.state.db_session_maker = create_session_maker(settings.database_url)
        app.state.get_db_session = lambda read_only=False: get_session(app.state.db_session_maker, read_only)
    except Exception as e:
        logger.warning(f"Failed to create database session: {e}")
        raise

    logger.info(f"Database ready at {settings.database_url}")

    yield

    await app.state.engine.dispose()
    logger.info("Application shutdown completed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Forum",
        description="Server-rendered discussion forum",
        lifespan=lifespan,
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, e: HTTPException) -> JSONResponse:
        logger.error(f"HTTP {e.status_code}: {e.detail} - {request.method} {request.url}")
        return JSONResponse(
            status_code=e.status_code,
            content={"detail": e.detail},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, e: NotFoundError) -> JSONResponse:
        logger.info(f"{e} on {request.method} {request.url}")
        return JSONResponse(
            status_code=404,
            content={"detail": str(e)},
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, e: ValidationError) -> JSONResponse:
        logger.error(f"Validation error on {request.method} {request.url}: {e}")
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": e.errors(include_url=False, include_context=False)},
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, e: InvalidInputError) -> JSONResponse:
        logger.error(f"Invalid input on {request.method} {request.url}: {e}")
        return JSONResponse(
            status_code=400,
            content={"detail": str(e)},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, e: PersistenceError) -> JSONResponse:
        logger.error(f"{e} on {request.method} {request.url}: {e.__cause__}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Server error"},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, e: SQLAlchemyError) -> JSONResponse:
        logger.error(f"Database error on {request.method} {request.url}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={"detail": "Server error"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, e: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception on {request.method} {request.url}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={"detail": "Server error"},
        )

    app.include_router(router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
