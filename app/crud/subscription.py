# app/crud/subscription.py

from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from app.models.subscription import Subscription
from uuid import uuid4

async def create_subscription(
        session: AsyncSession,
        subscriber_id: str,
        channel_id: str
) -> Subscription:
    subscription = Subscription(
        id=str(uuid4()),
        subscriber_id=subscriber_id,
        channel_id=channel_id,
    )
    session.add(subscription)
    await session.commit()
    await session.refresh(subscription)
    return subscription

async def count_subscribers(
        session: AsyncSession,
        channel_id: str
) -> int:
    """
    channel을 구독하는 사람 수
    """
    statement = select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
    result = await session.exec(statement)
    count = result.one_or_none()
    return count if count is not None else 0

async def count_subscriptions(
        session: AsyncSession,
        subscriber_id: str
) -> int:
    """
    subscriber가 구독한 channel 수
    """
    statement = select(func.count(Subscription.id)).where(Subscription.subscriber_id == subscriber_id)
    result = await session.exec(statement)
    count = result.one_or_none()
    return count if count is not None else 0

async def is_subscribed(
        session: AsyncSession,
        subscriber_id: str,
        channel_id: str
) -> bool:
    statement = select(Subscription.id).where(
        Subscription.subscriber_id == subscriber_id,
        Subscription.channel_id == channel_id
    )
    result = await session.exec(statement)
    return result.first() is not None
