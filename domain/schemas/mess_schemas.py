from pydantic import BaseModel, Field, EmailStr, model_validator
from typing import Optional, List
from datetime import datetime, date
from uuid import UUID

from domain.enums import CleanupType
from domain.schemas.user_schemas import UserSummary


class PeriodInfo(BaseModel):
    """Accounting period covered by an aggregate"""

    start: date
    end: date
    month: str


class MessCreate(BaseModel):
    """Schema for creating a mess (admin only)"""

    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    address: Optional[str] = None
    manager_id: UUID


class MessUpdate(BaseModel):
    """Partial mess update"""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    address: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=1, max_length=8)
    manager_id: Optional[UUID] = None


class MemberAdd(BaseModel):
    """Add an existing user to a mess by email"""

    email: EmailStr


class MessResponse(BaseModel):
    """Mess with its manager and members"""

    mess_id: UUID
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    manager_id: UUID
    manager: Optional[UserSummary] = None
    members: List[UserSummary] = []
    meal_rate: float
    currency: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealRateResponse(BaseModel):
    """Current meal rate together with the totals it was derived from"""

    mess_id: UUID
    meal_rate: float
    total_expenses: float
    total_meals: float
    calculation: str
    period: PeriodInfo


class CleanupRequest(BaseModel):
    """Admin request to purge records in a date range"""

    mess_id: UUID
    start_date: date
    end_date: date
    type: CleanupType = CleanupType.ALL

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class CleanupResponse(BaseModel):
    deleted_count: int
