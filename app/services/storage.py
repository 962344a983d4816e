# app/services/storage.py

import io
import logging
from pathlib import Path
from uuid import uuid4

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.configuration import Settings
from app.core.exceptions import UploadError

logger = logging.getLogger(__name__)


class BlobStore:
    """
    업로드된 파일을 저장하고 접근 가능한 URL을 돌려주는 저장소
    실패하면 UploadError를 발생시킨다 (빈 값 반환 X)
    """

    async def upload(self, file: UploadFile) -> str:
        raise NotImplementedError


def _suffix(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    return suffix if suffix else ".bin"


class LocalBlobStore(BlobStore):
    """
    static 디렉터리에 저장 (/static/<upload_dir>/<uuid>.<ext>)
    """

    def __init__(self, static_dir: str, upload_dir: str = "img", url_prefix: str = "/static"):
        self.root = Path(static_dir)
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")

    async def upload(self, file: UploadFile) -> str:
        name = f"{uuid4().hex}{_suffix(file.filename)}"
        target_dir = self.root / self.upload_dir
        try:
            content = await file.read()
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target_dir / name, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error("Failed to store %s locally: %s", file.filename, e)
            raise UploadError(f"Error uploading {file.filename}") from e

        return f"{self.url_prefix}/{self.upload_dir}/{name}"


class CloudinaryBlobStore(BlobStore):
    """
    Cloudinary SDK로 업로드 (resource_type="auto")
    SDK 호출은 blocking이라 threadpool에서 실행
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float = 30.0):
        if not (cloud_name and api_key and api_secret):
            raise ValueError("Cloudinary credentials are not configured")
        self.options = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }
        self.timeout = timeout

    async def upload(self, file: UploadFile) -> str:
        try:
            content = await file.read()
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(content),
                filename=file.filename or "upload",
                resource_type="auto",
                timeout=self.timeout,
                **self.options,
            )
        except CloudinaryError as e:
            logger.error("Cloudinary upload failed for %s: %s", file.filename, e)
            raise UploadError(f"Error uploading {file.filename} to cloudinary") from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise UploadError(f"Cloudinary returned no URL for {file.filename}")
        return url


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.STORAGE_BACKEND == "cloudinary":
        return CloudinaryBlobStore(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            timeout=settings.UPLOAD_TIMEOUT_SECONDS,
        )
    return LocalBlobStore(settings.STATIC_DIR, settings.UPLOAD_DIR)
