# app/schemas/video.py

import datetime as dt

from app.schemas.user import CamelModel

class OwnerSummary(CamelModel):
    """
    Video에 포함되는 소유자 요약 정보
    """
    full_name: str
    username: str
    avatar: str

class WatchedVideo(CamelModel):
    id: str
    title: str
    description: str = ""
    video_file: str
    thumbnail: str
    duration: float = 0.0
    views: int = 0
    is_published: bool = True
    created_at: dt.datetime | None = None
    owner: OwnerSummary
