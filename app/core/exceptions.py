# app/core/exceptions.py

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """
    Service 계층에서 발생시키는 오류의 기본 클래스
    - status_code: HTTP 상태 코드
    - message: 사용자에게 보여줄 메시지
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class UploadError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error while uploading file"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status_code": exc.status_code,
            "detail": exc.message,
            "success": False,
        },
    )
