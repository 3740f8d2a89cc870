import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Configuration settings for the forum server."""

    model_config = SettingsConfigDict(
        env_prefix="FORUM_",
        case_sensitive=False,
        env_file=os.getenv("SETTINGS_ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=4444, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Database settings
    database_url: str = Field(default="sqlite+aiosqlite:///forum.db", description="Async database URL")
    alembic_config: str = Field(default="alembic.ini", description="Alembic config file")
    run_migrations: bool = Field(default=True, description="Upgrade the schema to head on startup")

    # Listing settings
    page_size: int = Field(default=10, ge=1, description="Threads or replies per page")
    search_limit: int = Field(default=20, ge=1, description="Rows fetched per search query")
    recent_activity_limit: int = Field(default=40, ge=1, description="Rows in the new posts feed")

    @property
    def sync_database_url(self) -> str:
        """Database URL with the default blocking driver, used by alembic."""
        url = make_url(self.database_url)
        return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)

    @property
    def log_format(self) -> str:
        return "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
