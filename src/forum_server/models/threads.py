from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from forum_server.utils import utc_now


class Thread(SQLModel, table=True):
    __tablename__ = "threads"

    id: int | None = Field(default=None, primary_key=True)
    forum_id: int = Field(foreign_key="forums.id", ondelete="CASCADE", index=True)
    title: str
    author: str | None = Field(default=None)
    content: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
