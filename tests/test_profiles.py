"""
Channel 프로필 / 시청 기록 조회 테스트
"""

import pytest

from app.core.exceptions import NotFound, ValidationError
from app.crud import subscription as crud_sub
from app.crud import video as crud_video
from app.services import profiles


@pytest.fixture
async def channel_with_network(session, make_user, alice):
    """
    alice: 구독자 3명 (bob, carol, dave), 구독 중인 채널 2개 (bob, erin)
    """
    bob = await make_user("bob")
    carol = await make_user("carol")
    dave = await make_user("dave")
    erin = await make_user("erin")
    for fan in (bob, carol, dave):
        await crud_sub.create_subscription(session, subscriber_id=fan.id, channel_id=alice.id)
    for channel in (bob, erin):
        await crud_sub.create_subscription(session, subscriber_id=alice.id, channel_id=channel.id)
    return {"bob": bob, "carol": carol, "dave": dave, "erin": erin}


async def test_channel_profile_counts(session, alice, channel_with_network):
    profile = await profiles.get_channel_profile(session, "alice", viewer_id=channel_with_network["carol"].id)

    assert profile.subscribers_count == 3
    assert profile.channels_subscribed_to_count == 2
    assert profile.is_subscribed is True
    assert profile.full_name == "Alice Kim"
    assert profile.email == "alice@example.com"


async def test_channel_profile_not_subscribed(session, alice, channel_with_network):
    profile = await profiles.get_channel_profile(session, "alice", viewer_id=channel_with_network["erin"].id)

    assert profile.subscribers_count == 3
    assert profile.is_subscribed is False


async def test_channel_profile_viewing_own_channel(session, alice, channel_with_network):
    profile = await profiles.get_channel_profile(session, "Alice", viewer_id=alice.id)
    assert profile.is_subscribed is False


async def test_channel_profile_projection(session, alice):
    profile = await profiles.get_channel_profile(session, "alice", viewer_id=None)
    data = profile.model_dump(by_alias=True)

    assert set(data) == {
        "fullName", "username", "subscribersCount", "channelsSubscribedToCount",
        "isSubscribed", "avatar", "coverImage", "email",
    }
    assert data["subscribersCount"] == 0


async def test_channel_profile_blank_username(session):
    with pytest.raises(ValidationError):
        await profiles.get_channel_profile(session, "  ", viewer_id=None)


async def test_channel_profile_unknown(session):
    with pytest.raises(NotFound):
        await profiles.get_channel_profile(session, "ghost", viewer_id=None)


async def test_watch_history_order_and_owner(session, make_user, alice):
    bob = await make_user("bob", full_name="Bob Park")
    first = await crud_video.create_video(session, bob.id, "First", "/v/1.mp4", "/t/1.png")
    second = await crud_video.create_video(session, alice.id, "Second", "/v/2.mp4", "/t/2.png")
    third = await crud_video.create_video(session, bob.id, "Third", "/v/3.mp4", "/t/3.png")
    for video in (third, first, second):
        await crud_video.add_to_watch_history(session, alice.id, video.id)

    history = await profiles.get_watch_history(session, alice.id)

    assert [v.id for v in history] == [third.id, first.id, second.id]
    assert history[0].owner.model_dump(by_alias=True) == {
        "fullName": "Bob Park",
        "username": "bob",
        "avatar": bob.avatar,
    }
    assert history[2].owner.username == "alice"


async def test_watch_history_empty(session, alice):
    assert await profiles.get_watch_history(session, alice.id) == []


async def test_watch_history_unknown_user(session):
    with pytest.raises(NotFound):
        await profiles.get_watch_history(session, "missing")
