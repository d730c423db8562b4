"""Services package - Business logic layer"""

from services.meal_rate_service import MealRateCalculator
from services.balance_service import BalanceReconciler
from services.mess_service import MessService
from services.meal_service import MealService
from services.expense_service import ExpenseService
from services.deposit_service import DepositService
from services.dashboard_service import DashboardService
from services.analytics_service import AnalyticsService
from services.report_service import ReportService
from services.user_service import UserService

__all__ = [
    "MealRateCalculator",
    "BalanceReconciler",
    "MessService",
    "MealService",
    "ExpenseService",
    "DepositService",
    "DashboardService",
    "AnalyticsService",
    "ReportService",
    "UserService",
]
