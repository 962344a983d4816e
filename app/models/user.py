# app/models/user.py

from sqlmodel import SQLModel, Field
from typing import Annotated
from uuid import uuid4
import datetime as dt

class User(SQLModel, table=True):
    __tablename__ = "user"

    id: Annotated[str, Field(default_factory=lambda: str(uuid4()), primary_key=True)]
    username: Annotated[str, Field(unique=True, index=True)]
    email: Annotated[str, Field(unique=True, index=True)]
    full_name: Annotated[str, Field(index=True)]
    hashed_password: str
    avatar: str
    cover_image: str = ""
    refresh_token: str | None = None
    created_at: Annotated[dt.datetime, Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))]
    updated_at: Annotated[dt.datetime, Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))]
