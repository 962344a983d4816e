# app/core/configuration.py

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    환경 변수 / .env 파일에서 읽어오는 설정값
    """
    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "VideoTube"
    PROJECT_VERSION: str = "1.0.0"
    DESCRIPTION: str = "User accounts, sessions, channels and watch history for a video-sharing app"
    TAGS_METADATA: list[dict] = [
        {"name": "Users", "description": "Registration, login, session refresh and profile management"},
    ]

    DATABASE_URL: str = "sqlite+aiosqlite:///./videotube.db"

    # JWT
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_SECRET: str = Field(default="change-me-access-secret", min_length=8)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_SECRET: str = Field(default="change-me-refresh-secret", min_length=8)
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10

    CORS_ORIGINS: list[str] = ["*"]
    COOKIE_SECURE: bool = True

    # Blob Store: "local" | "cloudinary"
    STORAGE_BACKEND: str = "local"
    STATIC_DIR: str = "app/static"
    UPLOAD_DIR: str = "img"
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    UPLOAD_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("local", "cloudinary"):
            raise ValueError(f"Unknown storage backend: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return "INFO"
        return v


settings = Settings()
