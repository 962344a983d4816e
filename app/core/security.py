# app/core/security.py

import datetime as dt
import logging
from uuid import uuid4

import bcrypt
import jwt

from app.core.configuration import settings
from app.core.exceptions import InternalError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def get_password_hash(password: str) -> str:
    """
    Salt를 포함한 bcrypt Hash 생성
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # 저장된 값이 bcrypt hash 형식이 아님
        return False


def _encode(payload: dict, secret: str) -> str:
    try:
        return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        logger.error("Token signing failed: %s", e)
        raise InternalError("Error in generating tokens") from e


def create_access_token(
        data: dict,
        expires_delta: dt.timedelta | None = None
) -> str:
    """
    Access Token 생성
    - sub: User ID
    - username, email, full_name 등 식별 정보 (data)
    """
    now = dt.datetime.now(dt.timezone.utc)
    expire = now + (expires_delta or dt.timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {**data, "type": ACCESS_TOKEN_TYPE, "iat": now, "exp": expire}
    return _encode(payload, settings.ACCESS_TOKEN_SECRET)


def create_refresh_token(
        data: dict,
        expires_delta: dt.timedelta | None = None
) -> str:
    """
    Refresh Token 생성
    jti를 넣어서 같은 시각에 발급된 토큰도 서로 다르게 만든다.
    """
    now = dt.datetime.now(dt.timezone.utc)
    expire = now + (expires_delta or dt.timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    payload = {
        "sub": data["sub"],
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid4().hex,
        "iat": now,
        "exp": expire,
    }
    return _encode(payload, settings.REFRESH_TOKEN_SECRET)


def _decode(token: str, secret: str, token_type: str) -> dict | None:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("%s token expired", token_type.capitalize())
        return None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid %s token: %s", token_type, e)
        return None

    if payload.get("type") != token_type or not payload.get("sub"):
        logger.warning("Token is not a valid %s token", token_type)
        return None
    return payload


def decode_access_token(token: str) -> dict | None:
    """
    Access Token 검증 후 payload 반환 (실패 시 None)
    """
    return _decode(token, settings.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict | None:
    """
    Refresh Token 검증 후 payload 반환 (실패 시 None)
    """
    return _decode(token, settings.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE)
