from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Failure reported by (or while talking to) the Bill.com API."""

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        provider_status: Optional[int] = 1,
        response_data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.provider_status = provider_status
        self.response_data = response_data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, http_status={self.http_status!r})"


class AuthenticationError(ApiError):
    def __init__(self, message: str, response_data: Any = None):
        super().__init__(message, 401, 1, response_data)


class SessionExpiredError(ApiError):
    def __init__(self, message: str = "Session expired", response_data: Any = None):
        super().__init__(message, 401, 1, response_data)


class NotFoundError(ApiError):
    def __init__(self, message: str, response_data: Any = None):
        super().__init__(message, 404, 1, response_data)


class ValidationError(ApiError):
    def __init__(
        self,
        message: str,
        response_data: Any = None,
        *,
        http_status: Optional[int] = 400,
    ):
        provider_status = 1 if http_status is not None else None
        super().__init__(message, http_status, provider_status, response_data)

    @classmethod
    def local(cls, message: str, errors: Any = None) -> "ValidationError":
        """Build a validation failure detected before any request was sent."""
        return cls(message, errors, http_status=None)


class ConfigurationError(Exception):
    """Client used before any credentials were configured."""


def classify_error_array(message: str, status_code: int, response_data: Any) -> ApiError:
    """Map the provider's ``[{"message": ...}]`` error shape to an error kind."""
    lowered = message.lower()
    if "session" in lowered and "expired" in lowered:
        return SessionExpiredError(message, response_data)
    if status_code == 401 or "unauthorized" in lowered or "authentication" in lowered:
        return AuthenticationError(message, response_data)
    if status_code == 404 or "not found" in lowered:
        return NotFoundError(message, response_data)
    if status_code == 400 or "invalid" in lowered or "required" in lowered:
        return ValidationError(message, response_data)
    return ApiError(message, status_code, 1, response_data)
