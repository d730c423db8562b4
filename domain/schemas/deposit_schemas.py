import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID

from domain.schemas.user_schemas import UserSummary
from domain.schemas.mess_schemas import PeriodInfo


class DepositBase(BaseModel):
    user_id: UUID
    amount: float = Field(..., ge=1, description="Deposited amount, at least 1")
    date: dt.date
    description: Optional[str] = Field(None, max_length=500)


class DepositCreate(DepositBase):
    """Schema for recording a deposit"""

    mess_id: UUID


class DepositUpdate(DepositBase):
    """Schema for replacing a deposit"""


class DepositResponse(BaseModel):
    """Schema for deposit response"""

    deposit_id: UUID
    mess_id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    amount: float
    date: dt.date
    description: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class DepositTotals(BaseModel):
    total_amount: float
    deposit_count: int


class MemberDepositTotal(BaseModel):
    user_id: UUID
    user_name: Optional[str] = None
    total_amount: float
    deposit_count: int


class DepositStatsResponse(BaseModel):
    """Current-month deposit totals for a mess"""

    monthly: DepositTotals
    member_stats: List[MemberDepositTotal]
    period: PeriodInfo
