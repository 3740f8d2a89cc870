from pathlib import Path

import pytest
from typer.testing import CliRunner

from forum_server.cli import app

runner = CliRunner()


@pytest.fixture
def database_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    db_path = tmp_path / "forum.db"
    monkeypatch.setenv("FORUM_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    result = runner.invoke(app, ["migrate"])
    assert result.exit_code == 0, result.output
    return db_path


def test_migrate_creates_database_file(database_env: Path) -> None:
    assert database_env.exists()


def test_forums_create_and_list(database_env: Path) -> None:
    created = runner.invoke(app, ["forums", "create", "General", "--slug", "general", "-d", "Anything goes"])
    assert created.exit_code == 0, created.output
    assert "Forum General created" in created.output

    listed = runner.invoke(app, ["forums", "list"])
    assert listed.exit_code == 0, listed.output
    assert "General" in listed.output
    assert "general" in listed.output


def test_forums_create_duplicate_slug_fails(database_env: Path) -> None:
    assert runner.invoke(app, ["forums", "create", "One", "--slug", "dup"]).exit_code == 0

    result = runner.invoke(app, ["forums", "create", "Two", "--slug", "dup"])
    assert result.exit_code == 1
    assert "already in use" in result.output


def test_users_create(database_env: Path) -> None:
    result = runner.invoke(app, ["users", "create", "alice@example.com", "alice"])
    assert result.exit_code == 0, result.output
    assert "User alice created" in result.output
