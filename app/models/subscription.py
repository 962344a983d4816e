# app/models/subscription.py

from sqlmodel import SQLModel, Field
from typing import Annotated
from uuid import uuid4
import datetime as dt

class Subscription(SQLModel, table=True):
    """
    subscriber -> channel 방향의 구독 관계
    """
    __tablename__ = "subscription"

    id: Annotated[str, Field(default_factory=lambda: str(uuid4()), primary_key=True)]
    subscriber_id: Annotated[str, Field(foreign_key="user.id", index=True)]
    channel_id: Annotated[str, Field(foreign_key="user.id", index=True)]
    created_at: Annotated[dt.datetime, Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))]
