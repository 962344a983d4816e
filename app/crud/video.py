# app/crud/video.py

from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from app.models.video import Video, WatchHistory
from uuid import uuid4

async def create_video(
        session: AsyncSession,
        owner_id: str,
        title: str,
        video_file: str,
        thumbnail: str,
        description: str = "",
        duration: float = 0.0
) -> Video:
    video = Video(
        id=str(uuid4()),
        owner_id=owner_id,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
        duration=duration,
    )
    session.add(video)
    await session.commit()
    await session.refresh(video)
    return video

async def get_videos_by_ids(
        session: AsyncSession,
        video_ids: list[str]
) -> dict[str, Video]:
    """
    Video ID 리스트로 한번에 조회 (id -> Video)
    """
    if not video_ids:
        return {}
    statement = select(Video).where(Video.id.in_(video_ids))
    result = await session.exec(statement)
    return {v.id: v for v in result.all()}

async def add_to_watch_history(
        session: AsyncSession,
        user_id: str,
        video_id: str
) -> WatchHistory:
    """
    시청 기록 맨 뒤에 추가
    """
    statement = select(func.max(WatchHistory.position)).where(WatchHistory.user_id == user_id)
    result = await session.exec(statement)
    last_position = result.one_or_none()

    entry = WatchHistory(
        user_id=user_id,
        video_id=video_id,
        position=(last_position if last_position is not None else -1) + 1,
    )
    session.add(entry)
    await session.commit()
    await session.refresh(entry)
    return entry

async def list_watch_history_ids(
        session: AsyncSession,
        user_id: str
) -> list[str]:
    """
    Returns Video IDs in watched order
    """
    statement = (
        select(WatchHistory.video_id)
        .where(WatchHistory.user_id == user_id)
        .order_by(WatchHistory.position.asc())
    )
    result = await session.exec(statement)
    return list(result.all())
