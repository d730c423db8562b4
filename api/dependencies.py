"""
API dependencies for dependency injection
"""

import logging
from datetime import date
from typing import Generator, Optional
from uuid import UUID
from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ServiceValidationError, UnauthorizedError
from domain.models import User, get_db_session
from repositories import UserRepository
from services.period import Period, period_from_filters

logger = logging.getLogger("messmate.api.auth")


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the caller from the ``X-User-ID`` header.

    Raises:
        UnauthorizedError: If the header is missing or malformed, or names
            an unknown or soft-deleted user
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-ID header")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise UnauthorizedError("Invalid X-User-ID header")

    user = UserRepository(db).get_active_by_id(user_id)
    if not user:
        logger.warning(f"unknown_caller user_id={user_id}")
        raise UnauthorizedError("User not found or inactive")
    return user


class Pagination:
    """``page``/``limit`` query parameters for admin listings"""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number, starting at 1"),
        limit: int = Query(
            settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description="Items per page",
        ),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_user_filter(user_id: Optional[str]) -> Optional[UUID]:
    """``user_id`` list filter; ``all`` or empty means no filter"""
    if not user_id or user_id == "all":
        return None
    try:
        return UUID(user_id)
    except ValueError:
        raise ServiceValidationError(f"Invalid user_id filter: {user_id}")


def period_params(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
) -> Optional[Period]:
    """Optional period filter from ``year``/``month`` or ``start_date``/``end_date``"""
    return period_from_filters(year, month, start_date, end_date)
