import logging

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.config import settings

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """An expected failure carrying a stable error code for the client."""

    def __init__(self, status_code: int, error: str, message: str):
        super().__init__(status_code=status_code, detail=message)
        self.error = error
        self.message = message


def bad_request(error: str, message: str) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, error, message)


def not_found(error: str, message: str) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, error, message)


def create_response(
    message: str,
    data=None,
    status_code: int = status.HTTP_200_OK,
    error: str | None = None,
    count: int | None = None,
    warning: str | None = None,
    details: str | None = None,
) -> JSONResponse:
    """Return a consistent API response payload and status code."""
    content = {
        "success": status_code < 400,
        "message": message,
    }
    if data is not None:
        content["data"] = jsonable_encoder(data)
    if error is not None:
        content["error"] = error
    if count is not None:
        content["count"] = count
    if warning is not None:
        content["warning"] = warning
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def handle_exception(error: Exception, fallback_message: str = "An unexpected error occurred") -> JSONResponse:
    """Coerce raised errors into the shared response structure."""
    if isinstance(error, ApiError):
        return create_response(error.message, status_code=error.status_code, error=error.error)

    if isinstance(error, HTTPException):
        detail = error.detail if isinstance(error.detail, str) else str(error.detail)
        return create_response(detail, status_code=error.status_code, error="REQUEST_FAILED")

    logger.exception("Unhandled error: %s", fallback_message)
    return create_response(
        fallback_message,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="INTERNAL_SERVER_ERROR",
        details=str(error) if settings.is_development else None,
    )
