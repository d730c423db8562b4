from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, ids)
        code: machine-readable error code rendered in the error envelope
        http_status: HTTP status code used by the API handlers
    """

    http_status = 500
    default_message = "Application error"
    default_code = "APP_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class UnauthorizedError(AppError):
    """Raised when the caller cannot be identified."""

    http_status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Raised when the caller is known but lacks the role or membership required."""

    http_status = 403
    default_message = "Forbidden - insufficient permissions"
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Raised when a resource conflict occurs (duplicate email, meal already logged)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"
