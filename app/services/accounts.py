# app/services/accounts.py
"""
계정 / 세션 관리
- 회원가입, 로그인, 로그아웃, 토큰 재발급(rotation), 비밀번호 변경, 프로필 수정
모든 함수는 요청한 User의 ID를 인자로 받는다. (전역 request 상태 사용 X)
"""

import hmac
import logging

from fastapi import UploadFile
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import Conflict, InternalError, NotFound, Unauthorized, UploadError, ValidationError
from app.core.security import create_access_token, create_refresh_token, decode_refresh_token, get_password_hash, verify_password
from app.crud import user as crud_user
from app.models.user import User
from app.services.storage import BlobStore

logger = logging.getLogger(__name__)

# bcrypt는 72 bytes까지만 hash 가능
MAX_PASSWORD_BYTES = 72

_email_adapter = TypeAdapter(EmailStr)


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()

def _require_password(value: str | None, field: str = "Password") -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"{field} must be at most {MAX_PASSWORD_BYTES} bytes")
    return value

def _require_email(value: str | None) -> str:
    email = _require(value, "Email").lower()
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        raise ValidationError("Email is not a valid email address")
    return email

def _has_file(file: UploadFile | None) -> bool:
    return file is not None and bool(file.filename)

def _normalize(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip().lower()


async def _issue_tokens(session: AsyncSession, user: User) -> tuple[str, str]:
    """
    Access / Refresh Token 발급 후 Refresh Token을 User에 저장
    이전에 저장된 Refresh Token은 덮어쓴다. (동시 요청 시 마지막 write가 남음)
    """
    access_token = create_access_token({
        "sub": user.id,
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
    })
    refresh_token = create_refresh_token({"sub": user.id})

    updated = await crud_user.set_refresh_token(session, user.id, refresh_token)
    if updated is None:
        raise InternalError("Error in generating tokens")
    return access_token, refresh_token


async def register(
        session: AsyncSession,
        store: BlobStore,
        full_name: str | None,
        username: str | None,
        email: str | None,
        password: str | None,
        avatar: UploadFile | None,
        cover_image: UploadFile | None = None
) -> User:
    full_name = _require(full_name, "Full Name")
    username = _require(username, "Username").lower()
    email = _require_email(email)
    password = _require_password(password)
    if not _has_file(avatar):
        raise ValidationError("Avatar image is required")

    existing_user = await crud_user.get_user_by_username_or_email(session, username=username, email=email)
    if existing_user:
        logger.info("Registration rejected, user already exists: %s", existing_user.id)
        raise Conflict("User with email or username already exists")

    avatar_url = await store.upload(avatar)

    cover_image_url = ""
    if _has_file(cover_image):
        try:
            cover_image_url = await store.upload(cover_image)
        except UploadError as e:
            # cover image는 선택 사항이라 실패해도 가입은 진행
            logger.warning("Cover image upload failed for %s: %s", username, e.message)

    try:
        user = await crud_user.create_user(
            session=session,
            username=username,
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            avatar=avatar_url,
            cover_image=cover_image_url,
        )
    except IntegrityError:
        await session.rollback()
        raise Conflict("User with email or username already exists")

    created_user = await crud_user.get_user(session, user.id)
    if created_user is None:
        raise InternalError("Something went wrong while registering the user")

    logger.info("Registered user %s (%s)", created_user.username, created_user.id)
    return created_user


async def login(
        session: AsyncSession,
        password: str | None,
        username: str | None = None,
        email: str | None = None
) -> tuple[User, str, str]:
    """
    username 또는 email + password로 로그인
    Returns (user, access_token, refresh_token)
    """
    username = _normalize(username)
    email = _normalize(email)
    if not username and not email:
        raise ValidationError("Username or Email is required")

    user = await crud_user.get_user_by_username_or_email(session, username=username, email=email)
    if user is None:
        raise NotFound("User does not exist")

    if not verify_password(password or "", user.hashed_password):
        logger.warning("Invalid password for user %s", user.id)
        raise Unauthorized("Invalid user credentials")

    access_token, refresh_token = await _issue_tokens(session, user)
    logger.info("User %s logged in", user.id)
    return user, access_token, refresh_token


async def logout(session: AsyncSession, user_id: str) -> None:
    """
    저장된 Refresh Token 삭제 (여러 번 호출해도 OK)
    """
    await crud_user.set_refresh_token(session, user_id, None)
    logger.info("User %s logged out", user_id)


async def refresh_session(
        session: AsyncSession,
        incoming_refresh_token: str | None
) -> tuple[str, str]:
    """
    Refresh Token으로 새 Access/Refresh Token 발급
    사용한 Refresh Token은 바로 무효화된다 (rotation)
    """
    if not incoming_refresh_token:
        raise Unauthorized("Unauthorized request")

    payload = decode_refresh_token(incoming_refresh_token)
    if payload is None:
        raise Unauthorized("Invalid refresh token")

    user = await crud_user.get_user(session, payload["sub"])
    if user is None:
        raise Unauthorized("Invalid refresh token")

    stored = user.refresh_token
    if stored is None or not hmac.compare_digest(stored.encode("utf-8"), incoming_refresh_token.encode("utf-8")):
        logger.warning("Refresh token reuse or mismatch for user %s", user.id)
        raise Unauthorized("Refresh token is expired or used")

    access_token, refresh_token = await _issue_tokens(session, user)
    logger.info("Rotated session tokens for user %s", user.id)
    return access_token, refresh_token


async def change_password(
        session: AsyncSession,
        user_id: str,
        old_password: str | None,
        new_password: str | None
) -> None:
    if not old_password:
        raise ValidationError("Old password is required")
    new_password = _require_password(new_password, "New password")

    user = await crud_user.get_user(session, user_id)
    if user is None:
        raise NotFound("User does not exist")

    if not verify_password(old_password, user.hashed_password):
        logger.warning("Password change rejected for user %s", user_id)
        raise Unauthorized("Invalid old password")

    await crud_user.update_password(session, user_id, get_password_hash(new_password))
    logger.info("Password changed for user %s", user_id)


async def update_account_details(
        session: AsyncSession,
        user_id: str,
        full_name: str | None,
        email: str | None
) -> User:
    if not full_name or not full_name.strip() or not email or not email.strip():
        raise ValidationError("All fields are required")
    full_name = full_name.strip()
    email = _require_email(email)

    owner = await crud_user.get_user_by_email(session, email)
    if owner is not None and owner.id != user_id:
        raise Conflict("Email is already in use")

    try:
        return await crud_user.update_account_details(session, user_id, full_name=full_name, email=email)
    except ValueError as e:
        raise NotFound(str(e))
    except IntegrityError:
        await session.rollback()
        raise Conflict("Email is already in use")


async def update_avatar(
        session: AsyncSession,
        store: BlobStore,
        user_id: str,
        avatar: UploadFile | None
) -> User:
    if not _has_file(avatar):
        raise ValidationError("Avatar file is missing")

    url = await store.upload(avatar)
    user = await crud_user.update_user_avatar(session, user_id, url)
    if user is None:
        raise NotFound("User does not exist")
    return user


async def update_cover_image(
        session: AsyncSession,
        store: BlobStore,
        user_id: str,
        cover_image: UploadFile | None
) -> User:
    if not _has_file(cover_image):
        raise ValidationError("Cover image file is missing")

    url = await store.upload(cover_image)
    user = await crud_user.update_user_cover_image(session, user_id, url)
    if user is None:
        raise NotFound("User does not exist")
    return user
