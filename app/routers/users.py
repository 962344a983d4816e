# app/routers/users.py

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, File, Form, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.configuration import settings
from app.db.database import get_session
from app.dependencies import get_blob_store, get_current_user
from app.models.user import User
from app.schemas.user import (
    AccountUpdate, ChannelProfile, LoginIn, LoginOut, MessageOut,
    PasswordChange, RefreshTokenIn, TokenPair, UserOut,
)
from app.schemas.video import WatchedVideo
from app.services import accounts, profiles
from app.services.storage import BlobStore

router = APIRouter()

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    session: Annotated[AsyncSession, Depends(get_session)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
    full_name: Annotated[str | None, Form(alias="fullName")] = None,
    username: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    avatar: Annotated[UploadFile | None, File()] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
):
    """
    회원가입 (multipart/form-data)
    - avatar 필수, coverImage 선택
    """
    user = await accounts.register(
        session,
        store,
        full_name=full_name,
        username=username,
        email=email,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )
    return UserOut.model_validate(user)


@router.post("/login", response_model=LoginOut)
async def login(
    login_in: LoginIn,
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)]
):
    """
    username 또는 email + password로 로그인
    Access/Refresh Token을 body와 쿠키로 반환
    """
    user, access_token, refresh_token = await accounts.login(
        session,
        password=login_in.password,
        username=login_in.username,
        email=login_in.email,
    )
    _set_session_cookies(response, access_token, refresh_token)

    return LoginOut(
        user=UserOut.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/logout", response_model=MessageOut)
async def logout(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)]
):
    await accounts.logout(session, user.id)

    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return MessageOut(message="User logged out successfully")


@router.post("/refresh-token", response_model=TokenPair)
async def refresh_token(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    body: RefreshTokenIn | None = None,
    cookie_token: Annotated[str | None, Cookie(alias=REFRESH_COOKIE)] = None,
):
    """
    Refresh Token으로 Access/Refresh Token 재발급
    쿠키를 우선 사용하고, 없으면 body의 refreshToken 사용
    """
    incoming = cookie_token or (body.refresh_token if body else None)
    access_token, new_refresh_token = await accounts.refresh_session(session, incoming)
    _set_session_cookies(response, access_token, new_refresh_token)

    return TokenPair(access_token=access_token, refresh_token=new_refresh_token)


@router.post("/change-password", response_model=MessageOut)
async def change_password(
    password_in: PasswordChange,
    session: Annotated[AsyncSession, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)]
):
    await accounts.change_password(
        session,
        user.id,
        old_password=password_in.old_password,
        new_password=password_in.new_password,
    )
    return MessageOut(message="Password changed successfully")


@router.get("/current-user", response_model=UserOut)
async def read_current_user(
    user: Annotated[User, Depends(get_current_user)]
):
    """
    Token의 User 정보 반환
    """
    return UserOut.model_validate(user)


@router.patch("/update-account", response_model=UserOut)
async def update_account(
    update: AccountUpdate,
    session: Annotated[AsyncSession, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)]
):
    updated_user = await accounts.update_account_details(
        session,
        user.id,
        full_name=update.full_name,
        email=update.email,
    )
    return UserOut.model_validate(updated_user)


@router.patch("/avatar", response_model=UserOut)
async def update_avatar(
    session: Annotated[AsyncSession, Depends(get_session)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
    user: Annotated[User, Depends(get_current_user)],
    avatar: Annotated[UploadFile | None, File()] = None,
):
    updated_user = await accounts.update_avatar(session, store, user.id, avatar)
    return UserOut.model_validate(updated_user)


@router.patch("/cover-image", response_model=UserOut)
async def update_cover_image(
    session: Annotated[AsyncSession, Depends(get_session)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
    user: Annotated[User, Depends(get_current_user)],
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
):
    updated_user = await accounts.update_cover_image(session, store, user.id, cover_image)
    return UserOut.model_validate(updated_user)


@router.get("/c/{username}", response_model=ChannelProfile)
async def get_channel(
    username: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)]
):
    """
    Channel 프로필 (구독자 수, 구독 여부 포함)
    """
    return await profiles.get_channel_profile(session, username, viewer_id=user.id)


@router.get("/history", response_model=list[WatchedVideo])
async def get_watch_history(
    session: Annotated[AsyncSession, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)]
):
    """
    시청 기록 (시청 순서대로)
    """
    return await profiles.get_watch_history(session, user.id)
