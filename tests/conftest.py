"""
Pytest 설정
- 테스트마다 새로 만드는 in-memory SQLite (aiosqlite)
- 업로드를 메모리에 기록하는 Fake Blob Store
- dependency override를 적용한 httpx AsyncClient
"""

import io

import pytest
import pytest_asyncio
from fastapi import UploadFile
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import UploadError
from app.db.database import get_session
from app.dependencies import get_blob_store
from app.services.storage import BlobStore
from app.services import accounts


class FakeBlobStore(BlobStore):
    """
    업로드 내용을 메모리에 보관하고 가짜 URL을 돌려준다
    fail_on: 이 파일 이름으로 업로드하면 UploadError
    """

    def __init__(self):
        self.uploads: list[tuple[str, bytes]] = []
        self.fail_on: set[str] = set()

    async def upload(self, file: UploadFile) -> str:
        if file.filename in self.fail_on:
            raise UploadError(f"Error uploading {file.filename}")
        content = await file.read()
        self.uploads.append((file.filename, content))
        return f"https://cdn.example.com/{len(self.uploads)}/{file.filename}"


def make_upload(filename: str = "avatar.png", content: bytes = b"\x89PNG fake") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


# ==================== 데이터베이스 Fixtures ====================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


# ==================== 테스트 데이터 Fixtures ====================

@pytest_asyncio.fixture
async def make_user(session, blob_store):
    """
    accounts.register를 통해 User 생성
    """
    async def _make_user(username: str, email: str | None = None, password: str = "strong_password", full_name: str | None = None):
        return await accounts.register(
            session,
            blob_store,
            full_name=full_name or username.title(),
            username=username,
            email=email or f"{username}@example.com",
            password=password,
            avatar=make_upload(f"{username}.png"),
        )
    return _make_user


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice", full_name="Alice Kim")


# ==================== HTTP Client Fixtures ====================

@pytest_asyncio.fixture
async def client(session, blob_store):
    from app.main import app

    async def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    # 쿠키가 secure로 설정되므로 https 사용
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://test") as client:
        yield client

    app.dependency_overrides.clear()
