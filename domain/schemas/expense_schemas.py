import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

from domain.enums import ExpenseCategory
from domain.schemas.user_schemas import UserSummary


class ExpenseBase(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    amount: float = Field(..., gt=0, description="Amount spent, in mess currency")
    category: ExpenseCategory = ExpenseCategory.FOOD
    expensed_by: UUID = Field(..., description="Member who paid for the expense")


class ExpenseCreate(ExpenseBase):
    """Schema for recording an expense"""

    mess_id: UUID
    date: Optional[dt.date] = None


class ExpenseUpdate(ExpenseBase):
    """Schema for replacing an expense"""

    date: dt.date


class ExpenseResponse(BaseModel):
    """Schema for expense response"""

    expense_id: UUID
    mess_id: UUID
    description: str
    amount: float
    category: ExpenseCategory
    added_by: Optional[UUID] = None
    expensed_by: Optional[UUID] = None
    added_by_user: Optional[UserSummary] = None
    expensed_by_user: Optional[UserSummary] = None
    date: dt.date
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}
