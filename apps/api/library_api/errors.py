"""Application exception types."""

from typing import Any

from library_api.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to ``{"error": ...}`` payloads."""

    def __init__(self, status_code: int, message: str, details: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=message, details=details)
        super().__init__(message)


def unauthorized() -> ApiError:
    return ApiError(status_code=401, message="Unauthorized")


def forbidden() -> ApiError:
    return ApiError(status_code=403, message="Forbidden")


def not_found(message: str = "Resource not found") -> ApiError:
    return ApiError(status_code=404, message=message)


def bad_request(message: str, details: dict[str, Any] | None = None) -> ApiError:
    return ApiError(status_code=400, message=message, details=details)


def internal_error() -> ApiError:
    return ApiError(status_code=500, message="Internal server error")


def gateway_timeout() -> ApiError:
    return ApiError(status_code=504, message="Request timed out")


__all__ = [
    "ApiError",
    "bad_request",
    "forbidden",
    "gateway_timeout",
    "internal_error",
    "not_found",
    "unauthorized",
]
