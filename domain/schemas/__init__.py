"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserCreate,
    UserProfileUpdate,
    UserAdminUpdate,
    UserSummary,
    UserResponse,
    UserStatsResponse,
)
from domain.schemas.mess_schemas import (
    PeriodInfo,
    MessCreate,
    MessUpdate,
    MemberAdd,
    MessResponse,
    MealRateResponse,
    CleanupRequest,
    CleanupResponse,
)
from domain.schemas.meal_schemas import (
    MealEntry,
    MealCreate,
    MealBulkCreate,
    MealUpdate,
    MealResponse,
    MealStatistics,
    UserMealSummary,
    CalculateCostsRequest,
    CalculateCostsResponse,
)
from domain.schemas.expense_schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
)
from domain.schemas.deposit_schemas import (
    DepositCreate,
    DepositUpdate,
    DepositResponse,
    DepositStatsResponse,
)
from domain.schemas.report_schemas import (
    MemberBalance,
    MemberBalanceReport,
    DashboardResponse,
    AnalyticsResponse,
    ReportResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserProfileUpdate",
    "UserAdminUpdate",
    "UserSummary",
    "UserResponse",
    "UserStatsResponse",
    # Mess schemas
    "PeriodInfo",
    "MessCreate",
    "MessUpdate",
    "MemberAdd",
    "MessResponse",
    "MealRateResponse",
    "CleanupRequest",
    "CleanupResponse",
    # Meal schemas
    "MealEntry",
    "MealCreate",
    "MealBulkCreate",
    "MealUpdate",
    "MealResponse",
    "MealStatistics",
    "UserMealSummary",
    "CalculateCostsRequest",
    "CalculateCostsResponse",
    # Expense schemas
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseResponse",
    # Deposit schemas
    "DepositCreate",
    "DepositUpdate",
    "DepositResponse",
    "DepositStatsResponse",
    # Report schemas
    "MemberBalance",
    "MemberBalanceReport",
    "DashboardResponse",
    "AnalyticsResponse",
    "ReportResponse",
]
