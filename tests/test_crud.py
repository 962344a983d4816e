"""
crud 모듈 테스트 (User / Video / Subscription)
"""

from app.crud import subscription as crud_sub
from app.crud import user as crud_user
from app.crud import video as crud_video


async def _create(session, username, email=None):
    return await crud_user.create_user(
        session,
        username=username,
        email=email or f"{username.lower()}@example.com",
        full_name=username,
        hashed_password="hashed",
        avatar=f"https://cdn.example.com/{username}.png",
    )


async def test_create_user_lowercases_username(session):
    user = await _create(session, "BobTheBuilder")

    assert user.username == "bobthebuilder"
    assert user.cover_image == ""
    assert user.refresh_token is None


async def test_get_user_by_username_or_email(session):
    user = await _create(session, "carol")

    assert (await crud_user.get_user_by_username_or_email(session, username="carol")).id == user.id
    assert (await crud_user.get_user_by_username_or_email(session, email="carol@example.com")).id == user.id
    assert (await crud_user.get_user_by_username_or_email(session, username="nobody", email="carol@example.com")).id == user.id
    assert await crud_user.get_user_by_username_or_email(session) is None


async def test_set_refresh_token_overwrites_and_clears(session):
    user = await _create(session, "dave")

    await crud_user.set_refresh_token(session, user.id, "first")
    await crud_user.set_refresh_token(session, user.id, "second")
    assert (await crud_user.get_user(session, user.id)).refresh_token == "second"

    await crud_user.set_refresh_token(session, user.id, None)
    assert (await crud_user.get_user(session, user.id)).refresh_token is None


async def test_set_refresh_token_for_missing_user(session):
    assert await crud_user.set_refresh_token(session, "missing", "token") is None


async def test_subscription_counts(session):
    channel = await _create(session, "erin")
    fans = [await _create(session, f"fan{i}") for i in range(2)]
    for fan in fans:
        await crud_sub.create_subscription(session, subscriber_id=fan.id, channel_id=channel.id)
    await crud_sub.create_subscription(session, subscriber_id=channel.id, channel_id=fans[0].id)

    assert await crud_sub.count_subscribers(session, channel.id) == 2
    assert await crud_sub.count_subscriptions(session, channel.id) == 1
    assert await crud_sub.is_subscribed(session, subscriber_id=fans[1].id, channel_id=channel.id)
    assert not await crud_sub.is_subscribed(session, subscriber_id=channel.id, channel_id=fans[1].id)


async def test_watch_history_keeps_append_order(session):
    viewer = await _create(session, "frank")
    owner = await _create(session, "grace")
    videos = [
        await crud_video.create_video(session, owner.id, f"Video {i}", f"/v/{i}.mp4", f"/t/{i}.png")
        for i in range(3)
    ]

    for video in (videos[2], videos[0], videos[1], videos[0]):
        await crud_video.add_to_watch_history(session, viewer.id, video.id)

    ids = await crud_video.list_watch_history_ids(session, viewer.id)
    assert ids == [videos[2].id, videos[0].id, videos[1].id, videos[0].id]
    assert await crud_video.list_watch_history_ids(session, owner.id) == []
