"""Common error types and helpers for API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping


@dataclass(slots=True)
class AppError(Exception):
    """Base application error with a JSON friendly payload."""

    message: str
    code: str = "error"
    status_code: int = 400
    details: Mapping[str, Any] | None = None

    def to_dict(self) -> Mapping[str, Any]:
        payload: MutableMapping[str, Any] = {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details or {}),
        }
        return payload


@dataclass(slots=True)
class ValidationAppError(AppError):
    """Error raised for invalid user input."""

    code: str = "validation_error"
    status_code: int = 400


@dataclass(slots=True)
class NotFoundAppError(AppError):
    """Error raised when a resource or route is missing."""

    code: str = "not_found"
    status_code: int = 404


@dataclass(slots=True)
class MethodNotAllowedAppError(AppError):
    code: str = "method_not_allowed"
    status_code: int = 405


@dataclass(slots=True)
class PayloadTooLargeAppError(AppError):
    code: str = "payload_too_large"
    status_code: int = 413


@dataclass(slots=True)
class InternalAppError(AppError):
    """Generic internal error wrapper to avoid leaking implementation details."""

    code: str = "internal_error"
    status_code: int = 500


_HTTP_ERRORS: dict[int, type[AppError]] = {
    400: ValidationAppError,
    404: NotFoundAppError,
    405: MethodNotAllowedAppError,
    413: PayloadTooLargeAppError,
}


def from_http_status(status_code: int, message: str) -> AppError:
    """Map an HTTP status raised by Flask/werkzeug onto the matching error type."""

    error_cls = _HTTP_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls(message=message)
    if status_code < 500:
        return AppError(message=message, code="http_error", status_code=status_code)
    return InternalAppError(message="Internal server error")


__all__ = [
    "AppError",
    "ValidationAppError",
    "NotFoundAppError",
    "MethodNotAllowedAppError",
    "PayloadTooLargeAppError",
    "InternalAppError",
    "from_http_status",
]
