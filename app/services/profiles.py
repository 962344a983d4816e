# app/services/profiles.py

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import NotFound, ValidationError
from app.crud import subscription as crud_sub
from app.crud import user as crud_user
from app.crud import video as crud_video
from app.schemas.user import ChannelProfile
from app.schemas.video import OwnerSummary, WatchedVideo


async def get_channel_profile(
        session: AsyncSession,
        username: str | None,
        viewer_id: str | None
) -> ChannelProfile:
    """
    Channel 공개 프로필
    - 구독자 수 / 구독 중인 채널 수
    - 요청한 사용자(viewer)가 구독 중인지 여부
    """
    if not username or not username.strip():
        raise ValidationError("Username is missing")

    channel = await crud_user.get_user_by_username(session, username.strip().lower())
    if channel is None:
        raise NotFound("Channel does not exist")

    subscribers_count = await crud_sub.count_subscribers(session, channel.id)
    subscribed_to_count = await crud_sub.count_subscriptions(session, channel.id)
    is_subscribed = False
    if viewer_id:
        is_subscribed = await crud_sub.is_subscribed(session, subscriber_id=viewer_id, channel_id=channel.id)

    return ChannelProfile(
        full_name=channel.full_name,
        username=channel.username,
        subscribers_count=subscribers_count,
        channels_subscribed_to_count=subscribed_to_count,
        is_subscribed=is_subscribed,
        avatar=channel.avatar,
        cover_image=channel.cover_image,
        email=channel.email,
    )


async def get_watch_history(
        session: AsyncSession,
        user_id: str
) -> list[WatchedVideo]:
    """
    시청 기록을 Video 정보 + 소유자 요약과 함께 반환 (저장된 순서 그대로)
    """
    user = await crud_user.get_user(session, user_id)
    if user is None:
        raise NotFound("User does not exist")

    video_ids = await crud_video.list_watch_history_ids(session, user_id)
    videos = await crud_video.get_videos_by_ids(session, video_ids)
    owners = await crud_user.get_users_by_ids(session, list({v.owner_id for v in videos.values()}))

    history = []
    for video_id in video_ids:
        video = videos.get(video_id)
        # 삭제된 video는 건너뜀
        if video is None:
            continue
        owner = owners.get(video.owner_id)
        if owner is None:
            continue
        history.append(WatchedVideo(
            id=video.id,
            title=video.title,
            description=video.description,
            video_file=video.video_file,
            thumbnail=video.thumbnail,
            duration=video.duration,
            views=video.views,
            is_published=video.is_published,
            created_at=video.created_at,
            owner=OwnerSummary(
                full_name=owner.full_name,
                username=owner.username,
                avatar=owner.avatar,
            ),
        ))
    return history
