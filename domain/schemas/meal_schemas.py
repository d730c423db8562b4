import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from uuid import UUID

from domain.enums import MealStatus, MealType
from domain.schemas.user_schemas import UserSummary


class MealCounts(BaseModel):
    """Breakfast/lunch/dinner unit counts"""

    breakfast: float = Field(0, ge=0)
    lunch: float = Field(0, ge=0)
    dinner: float = Field(0, ge=0)


class MealEntry(MealCounts):
    """One member's meals for one date"""

    user_id: UUID
    date: dt.date
    status: MealStatus = MealStatus.TAKEN
    is_guest: bool = False
    guest_name: Optional[str] = None
    meal_type: MealType = MealType.REGULAR
    preferences: Optional[Dict[str, Any]] = None


class MealCreate(MealEntry):
    """Schema for logging a single meal entry"""

    mess_id: UUID


class MealBulkCreate(BaseModel):
    """Schema for logging several members' meals for the same date"""

    mess_id: UUID
    meals: List[MealEntry] = Field(..., min_length=1)


class MealUpdate(MealCounts):
    """Replace the counts and date of a meal entry"""

    date: dt.date


class MealResponse(BaseModel):
    """Schema for meal entry response"""

    meal_id: UUID
    mess_id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    date: dt.date
    breakfast: float
    lunch: float
    dinner: float
    status: MealStatus
    is_guest: bool
    guest_name: Optional[str] = None
    meal_type: MealType
    preferences: Optional[Dict[str, Any]] = None
    cost: Optional[float] = None
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class MealStatistics(BaseModel):
    """Aggregated counters over a set of meal entries"""

    total_entries: int
    breakfast_count: float
    lunch_count: float
    dinner_count: float
    total_meal_count: float
    guest_meals: int
    skipped_meals: int
    offday_meals: int
    regular_meals: int
    vegetarian_meals: int
    total_cost: float


class UserMealSummary(BaseModel):
    """Meal totals for one member"""

    user_id: UUID
    total_days: int
    total_breakfast: float
    total_lunch: float
    total_dinner: float
    total_meals: float
    total_cost: float
    skipped_days: int
    guest_meals: int
    off_days: int


class CalculateCostsRequest(BaseModel):
    """Rate to apply; the current computed rate is used when omitted"""

    meal_rate: Optional[float] = Field(None, ge=0)


class CalculateCostsResponse(BaseModel):
    updated: int
    meal_rate: float
