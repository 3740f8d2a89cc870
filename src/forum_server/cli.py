"""Forum server command line: serve, migrate, and seed forums and users."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from forum_server.app import run_migrations
from forum_server.database import create_session_maker, get_session
from forum_server.errors import ForumError
from forum_server.main import main as serve_main
from forum_server.services import store
from forum_server.services.sanitize import clean_optional_text, clean_text
from forum_server.settings import Settings

T = TypeVar("T")

console = Console()

app = typer.Typer(
    help="Forum server",
    no_args_is_help=True,
)
forums_app = typer.Typer(help="Manage forums")
users_app = typer.Typer(help="Manage users")
app.add_typer(forums_app, name="forums")
app.add_typer(users_app, name="users")


def _with_session(settings: Settings, action: Callable[[AsyncSession], Awaitable[T]]) -> T:
    async def runner() -> T:
        engine, session_maker = create_session_maker(settings.database_url)
        try:
            async with get_session(session_maker) as session:
                return await action(session)
        finally:
            await engine.dispose()

    return asyncio.run(runner())


@app.callback()
def configure_logging() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)


@app.command()
def serve() -> None:
    """Run the web server."""
    serve_main()


@app.command()
def migrate() -> None:
    """Upgrade the database schema to the latest revision."""
    settings = Settings()
    run_migrations(settings)
    console.print(f"[green]Database at {settings.database_url} is up to date[/green]")


@forums_app.command("list")
def list_forums() -> None:
    """List forums."""
    forums = _with_session(Settings(), store.list_forums)

    table = Table(title="Forums")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Slug", style="yellow")
    table.add_column("Description")
    for forum in forums:
        table.add_row(str(forum.id), forum.name, forum.slug or "", forum.description or "")

    console.print(table)


@forums_app.command("create")
def create_forum(
    name: str = typer.Argument(..., help="Forum name"),
    slug: Optional[str] = typer.Option(None, "--slug", "-s", help="Unique URL slug"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Short description"),
) -> None:
    """Create a forum."""
    try:
        forum = _with_session(
            Settings(),
            lambda session: store.create_forum(
                session,
                name=clean_text(name),
                slug=clean_optional_text(slug),
                description=clean_optional_text(description),
            ),
        )
    except ForumError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Forum {forum.name} created with ID {forum.id}[/green]")


@users_app.command("create")
def create_user(
    email: str = typer.Argument(..., help="Email address"),
    username: str = typer.Argument(..., help="Username"),
) -> None:
    """Create a user."""
    try:
        user = _with_session(
            Settings(),
            lambda session: store.create_user(session, email=email, username=username),
        )
    except ForumError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]User {user.username} created with ID {user.id}[/green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
