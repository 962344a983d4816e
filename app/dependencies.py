# app/dependencies.py

from functools import lru_cache
from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.configuration import settings
from app.core.exceptions import Unauthorized
from app.core.security import decode_access_token
from app.db.database import get_session
from app.models.user import User
from app.crud import user as crud_user
from app.services.storage import BlobStore, build_blob_store

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)

@lru_cache
def get_blob_store() -> BlobStore:
    return build_blob_store(settings)

async def get_current_user(
        session: Annotated[AsyncSession, Depends(get_session)],
        bearer_token: Annotated[str | None, Depends(oauth2_scheme)],
        access_token: Annotated[str | None, Cookie(alias="accessToken")] = None
) -> User:
    """
    accessToken 쿠키 또는 Authorization: Bearer 헤더에서 토큰을 읽어 User 반환
    """
    token = access_token or bearer_token
    if not token:
        raise Unauthorized("Unauthorized request")

    payload = decode_access_token(token)
    if payload is None:
        raise Unauthorized("Invalid access token")

    db_user = await crud_user.get_user(session, payload["sub"])
    if db_user is None:
        raise Unauthorized("Invalid access token")

    return db_user
