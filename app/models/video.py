# app/models/video.py

from sqlmodel import SQLModel, Field
from typing import Annotated
from uuid import uuid4
import datetime as dt

class Video(SQLModel, table=True):
    __tablename__ = "video"

    id: Annotated[str, Field(default_factory=lambda: str(uuid4()), primary_key=True)]
    owner_id: Annotated[str, Field(foreign_key="user.id", index=True)]
    title: str
    description: str = ""
    video_file: str
    thumbnail: str
    duration: float = 0.0
    views: int = 0
    is_published: bool = True
    created_at: Annotated[dt.datetime, Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))]


class WatchHistory(SQLModel, table=True):
    """
    User의 시청 기록 (video id 순서 리스트)
    position 오름차순 = 시청한 순서
    """
    __tablename__ = "watch_history"

    id: Annotated[str, Field(default_factory=lambda: str(uuid4()), primary_key=True)]
    user_id: Annotated[str, Field(foreign_key="user.id", index=True)]
    video_id: Annotated[str, Field(foreign_key="video.id")]
    position: int
