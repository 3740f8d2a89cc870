from sqlmodel import Field, SQLModel


class Forum(SQLModel, table=True):
    __tablename__ = "forums"

    id: int | None = Field(default=None, primary_key=True)
    name: str
    slug: str | None = Field(default=None, unique=True)
    description: str | None = Field(default=None)
