# app/crud/user.py

from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from app.models.user import User
from uuid import uuid4
import datetime as dt

def _touch(user: User) -> None:
    user.updated_at = dt.datetime.now(dt.timezone.utc)

async def create_user(
        session: AsyncSession,
        username: str,
        email: str,
        full_name: str,
        hashed_password: str,
        avatar: str,
        cover_image: str = ""
) -> User:
    """
    User 생성
    - User Name (소문자로 저장)
    - Email
    - Full Name
    - Hashed Password
    - Avatar URL
    - Cover Image URL (Optional)
    """
    user = User(
        id=str(uuid4()),
        username=username.lower(),
        email=email,
        full_name=full_name,
        hashed_password=hashed_password,
        avatar=avatar,
        cover_image=cover_image,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user

async def get_user(
        session: AsyncSession,
        user_id: str
) -> User | None:
    return await session.get(User, user_id)

async def get_user_by_email(
        session: AsyncSession,
        email: str
) -> User | None:
    """
    Returns User by E-mail
    """
    statement = select(User).where(User.email == email)
    result = await session.exec(statement)
    return result.first()

async def get_user_by_username(
        session: AsyncSession,
        username: str
) -> User | None:
    """
    Returns User by User Name
    """
    statement = select(User).where(User.username == username)
    result = await session.exec(statement)
    return result.first()

async def get_user_by_username_or_email(
        session: AsyncSession,
        username: str | None = None,
        email: str | None = None
) -> User | None:
    """
    User Name 또는 E-mail 중 하나라도 일치하는 User 반환
    """
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    if not conditions:
        return None

    statement = select(User).where(or_(*conditions))
    result = await session.exec(statement)
    return result.first()

async def get_users_by_ids(
        session: AsyncSession,
        user_ids: list[str]
) -> dict[str, User]:
    if not user_ids:
        return {}
    statement = select(User).where(User.id.in_(user_ids))
    result = await session.exec(statement)
    return {u.id: u for u in result.all()}

async def set_refresh_token(
        session: AsyncSession,
        user_id: str,
        refresh_token: str | None
) -> User | None:
    """
    저장된 Refresh Token 교체 (None이면 삭제)
    """
    user = await session.get(User, user_id)
    if user:
        user.refresh_token = refresh_token
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user

async def update_password(
        session: AsyncSession,
        user_id: str,
        hashed_password: str
) -> User | None:
    user = await session.get(User, user_id)
    if user:
        user.hashed_password = hashed_password
        _touch(user)
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user

async def update_account_details(
        session: AsyncSession,
        user_id: str,
        full_name: str,
        email: str
) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise ValueError("User not found")

    user.full_name = full_name
    user.email = email
    _touch(user)

    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user

async def update_user_avatar(
        session: AsyncSession,
        user_id: str,
        avatar: str
) -> User | None:
    """
    Updates User Avatar
    """
    user = await session.get(User, user_id)
    if user:
        user.avatar = avatar
        _touch(user)
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user

async def update_user_cover_image(
        session: AsyncSession,
        user_id: str,
        cover_image: str
) -> User | None:
    """
    Updates User Cover Image
    """
    user = await session.get(User, user_id)
    if user:
        user.cover_image = cover_image
        _touch(user)
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user
