"""
Dashboard read model: one call returning everything the mess home screen
shows for the current month.
"""

import logging
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Mess, User
from domain.schemas.meal_schemas import MealResponse
from domain.schemas.expense_schemas import ExpenseResponse
from domain.schemas.user_schemas import UserSummary
from domain.schemas.report_schemas import (
    CalculationBreakdown,
    CategoryTotal,
    DashboardMess,
    DashboardResponse,
    MemberMealStats,
    MonthlyStats,
)
from repositories import (
    DepositRepository,
    ExpenseRepository,
    MealRepository,
    MessRepository,
)
from services.access import get_mess_or_404, ensure_member
from services.meal_rate_service import MealRateBreakdown, MealRateCalculator
from services.period import Period, current_month, round_money

logger = logging.getLogger("messmate.dashboard")

RECENT_ITEMS = 10


def build_monthly_stats(
    db: Session, mess: Mess, period: Period, breakdown: MealRateBreakdown
) -> MonthlyStats:
    """Period totals and record counts shared by dashboard, analytics and reports"""
    deposits = DepositRepository(db)
    return MonthlyStats(
        total_members=MessRepository(db).member_count(mess.mess_id),
        total_meals=breakdown.total_meals,
        total_expenses=round_money(breakdown.total_expenses),
        total_deposits=round_money(
            deposits.sum_amounts(mess.mess_id, period.start, period.end)
        ),
        meal_rate=breakdown.meal_rate,
        expense_count=ExpenseRepository(db).count_in_period(
            mess.mess_id, period.start, period.end
        ),
        meal_entries=MealRepository(db).count_entries(
            mess.mess_id, period.start, period.end
        ),
        deposit_count=deposits.count_in_period(mess.mess_id, period.start, period.end),
    )


class DashboardService:
    @staticmethod
    def get_dashboard(db: Session, mess_id: UUID, requesting_user: User) -> DashboardResponse:
        """
        Assemble the current-month dashboard of a mess.

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller does not belong to the mess
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)

        period = current_month()
        breakdown = MealRateCalculator.breakdown(db, mess_id, period)
        stats = build_monthly_stats(db, mess, period, breakdown)

        meals = MealRepository(db)
        expenses = ExpenseRepository(db)
        units = meals.sum_units_by_member(mess_id, period.start, period.end)
        days = meals.days_with_meals_by_member(mess_id, period.start, period.end)

        member_stats = []
        for member in mess.members:
            total = units.get(member.user_id, 0.0)
            meal_days = days.get(member.user_id, 0)
            member_stats.append(
                MemberMealStats(
                    user_id=member.user_id,
                    user_name=member.name,
                    total_meals=total,
                    days_with_meals=meal_days,
                    avg_meals_per_day=round_money(total / meal_days) if meal_days else 0.0,
                )
            )

        logger.debug(f"dashboard mess_id={mess_id} period={period.label}")

        return DashboardResponse(
            mess=DashboardMess(
                mess_id=mess.mess_id,
                name=mess.name,
                description=mess.description,
                address=mess.address,
                manager=UserSummary.model_validate(mess.manager) if mess.manager else None,
                members=[UserSummary.model_validate(m) for m in mess.members],
                meal_rate=breakdown.meal_rate,
                total_expenses=stats.total_expenses,
                total_meals=stats.total_meals,
                total_deposits=stats.total_deposits,
                currency=mess.currency,
            ),
            monthly_stats=stats,
            member_stats=member_stats,
            expense_breakdown=[
                CategoryTotal(
                    category=row["category"],
                    total_amount=round_money(row["total_amount"]),
                    count=row["count"],
                )
                for row in expenses.totals_by_category(mess_id, period.start, period.end)
            ],
            recent_meals=[
                MealResponse.model_validate(m)
                for m in meals.recent(mess_id, period.start, period.end, RECENT_ITEMS)
            ],
            recent_expenses=[
                ExpenseResponse.model_validate(e)
                for e in expenses.recent(mess_id, period.start, period.end, RECENT_ITEMS)
            ],
            calculation_breakdown=CalculationBreakdown(
                total_expenses=round_money(breakdown.total_expenses),
                total_meals=breakdown.total_meals,
                meal_rate=breakdown.meal_rate,
                calculation=breakdown.calculation,
                period=period.to_info(),
            ),
        )
