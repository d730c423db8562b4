"""
Response envelopes shared by every MessMate endpoint.

Success bodies look like ``{success, message, data, timestamp}``; failures
look like ``{success: false, error: {code, message, details?}, timestamp}``.
"""

from typing import Generic, TypeVar, Optional, Any, List
from pydantic import BaseModel, Field
from datetime import datetime, timezone

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class APIResponse(BaseModel, Generic[T]):
    """Success envelope around a typed payload"""

    success: bool = Field(..., description="Indicates if the operation was successful")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[T] = Field(None, description="Response payload")
    timestamp: datetime = Field(default_factory=_now, description="Response timestamp")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of an admin listing"""

    items: List[T]
    total: int = Field(..., description="Items matching the filters")
    page: int = Field(..., description="Current page number, starting at 1")
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None


class ErrorResponse(BaseModel):
    """Failure envelope, documented on routes that raise service errors"""

    success: bool = False
    error: ErrorBody
    timestamp: datetime = Field(default_factory=_now)


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    return {"success": True, "message": message, "data": data, "timestamp": _now()}


def error_response(code: str, message: str, details: Optional[dict] = None) -> dict:
    """Build the failure envelope; JSON-ready, since handlers bypass response models"""
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details or None))
    return body.model_dump(mode="json", exclude_none=True)


def paginated_response(items: List[Any], total: int, page: int, page_size: int) -> dict:
    total_pages = (total + page_size - 1) // page_size if page_size else 0
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
