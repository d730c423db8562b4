"""MessMate settings and the service-layer error hierarchy."""

from app.config import settings
from app.exceptions import (
    AppError,
    ServiceValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)

__all__ = [
    "settings",
    "AppError",
    "ServiceValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
]
