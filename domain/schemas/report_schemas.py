from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID

from domain.schemas.mess_schemas import PeriodInfo
from domain.schemas.meal_schemas import MealResponse
from domain.schemas.expense_schemas import ExpenseResponse
from domain.schemas.user_schemas import UserSummary


class MemberBalance(BaseModel):
    """One member's position for the period"""

    user_id: UUID
    name: Optional[str] = None
    total_meals: float
    meal_cost: float
    total_deposit: float
    expense_share: float
    balance: float


class MemberBalanceReport(BaseModel):
    """Balance reconciliation for every current member of a mess"""

    mess_id: UUID
    period: PeriodInfo
    meal_rate: float
    member_count: int
    total_expenses: float
    total_deposits: float
    total_meals: float
    total_meal_cost: float
    total_balance: float
    balances: List[MemberBalance]


class MonthlyStats(BaseModel):
    total_members: int
    total_meals: float
    total_expenses: float
    total_deposits: float
    meal_rate: float
    expense_count: int
    meal_entries: int
    deposit_count: int


class MemberMealStats(BaseModel):
    user_id: UUID
    user_name: Optional[str] = None
    total_meals: float
    days_with_meals: int
    avg_meals_per_day: float


class CategoryTotal(BaseModel):
    category: str
    total_amount: float
    count: int


class CalculationBreakdown(BaseModel):
    total_expenses: float
    total_meals: float
    meal_rate: float
    calculation: str
    period: PeriodInfo


class DashboardMess(BaseModel):
    mess_id: UUID
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    manager: Optional[UserSummary] = None
    members: List[UserSummary]
    meal_rate: float
    total_expenses: float
    total_meals: float
    total_deposits: float
    currency: str


class DashboardResponse(BaseModel):
    mess: DashboardMess
    monthly_stats: MonthlyStats
    member_stats: List[MemberMealStats]
    expense_breakdown: List[CategoryTotal]
    recent_meals: List[MealResponse]
    recent_expenses: List[ExpenseResponse]
    calculation_breakdown: CalculationBreakdown


class AnalyticsSummary(MonthlyStats):
    period: PeriodInfo


class MemberAnalytics(BaseModel):
    user_id: UUID
    name: Optional[str] = None
    meals: float
    meal_days: int
    total_deposit: float
    meal_cost: float


class NamedValue(BaseModel):
    name: str
    value: float
    count: Optional[int] = None


class DailyMealTrend(BaseModel):
    date: str
    meals: float


class AnalyticsCalculations(BaseModel):
    avg_meals_per_member: float
    avg_expense_per_member: float
    net_balance: float
    meal_cost_percentage: float


class AnalyticsResponse(BaseModel):
    summary: AnalyticsSummary
    member_stats: List[MemberAnalytics]
    financial_overview: List[NamedValue]
    category_stats: List[NamedValue]
    daily_trends: List[DailyMealTrend]
    calculations: AnalyticsCalculations


class ReportResponse(BaseModel):
    summary: AnalyticsSummary
    balances: MemberBalanceReport
