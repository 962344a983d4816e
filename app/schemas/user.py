# app/schemas/user.py

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
import datetime as dt

class CamelModel(BaseModel):
    """
    JSON에서는 camelCase (fullName, accessToken ...), Python에서는 snake_case
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class UserOut(CamelModel):
    """
    응답용 User (hashed_password, refresh_token 제외)
    """
    id: str
    username: Annotated[str, Field(..., examples=["alice"])]
    email: Annotated[EmailStr, Field(..., examples=["alice@example.com"])]
    full_name: Annotated[str, Field(..., examples=["Alice Kim"])]
    avatar: str
    cover_image: str = ""
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

class LoginIn(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None

class LoginOut(CamelModel):
    user: UserOut
    access_token: str
    refresh_token: str

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str

class RefreshTokenIn(CamelModel):
    refresh_token: str | None = None

class PasswordChange(CamelModel):
    old_password: str | None = None
    new_password: str | None = None

class AccountUpdate(CamelModel):
    full_name: str | None = None
    email: str | None = None

class ChannelProfile(CamelModel):
    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    avatar: str
    cover_image: str = ""
    email: EmailStr

class MessageOut(CamelModel):
    message: str
