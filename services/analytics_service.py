import logging
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import User
from domain.schemas.report_schemas import (
    AnalyticsCalculations,
    AnalyticsResponse,
    AnalyticsSummary,
    DailyMealTrend,
    MemberAnalytics,
    NamedValue,
)
from repositories import DepositRepository, ExpenseRepository, MealRepository
from services.access import get_mess_or_404, ensure_member
from services.dashboard_service import build_monthly_stats
from services.meal_rate_service import MealRateCalculator
from services.period import current_month, round_money

logger = logging.getLogger("messmate.analytics")


class AnalyticsService:
    @staticmethod
    def get_analytics(db: Session, mess_id: UUID, requesting_user: User) -> AnalyticsResponse:
        """
        Current-month analytics of a mess.

        Derived figures: average meals per member (1 dp), average expense per
        member (2 dp), net balance (deposits - expenses) and the share of
        expenses covered by meal costs as a percentage (1 dp).
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)

        period = current_month()
        breakdown = MealRateCalculator.breakdown(db, mess_id, period)
        stats = build_monthly_stats(db, mess, period, breakdown)
        rate = breakdown.meal_rate

        meals = MealRepository(db)
        units = meals.sum_units_by_member(mess_id, period.start, period.end)
        days = meals.days_with_meals_by_member(mess_id, period.start, period.end)
        deposits = DepositRepository(db).sum_amounts_by_member(
            mess_id, period.start, period.end
        )

        member_stats = [
            MemberAnalytics(
                user_id=member.user_id,
                name=member.name,
                meals=units.get(member.user_id, 0.0),
                meal_days=days.get(member.user_id, 0),
                total_deposit=round_money(deposits.get(member.user_id, 0.0)),
                meal_cost=round_money(units.get(member.user_id, 0.0) * rate),
            )
            for member in mess.members
        ]

        categories = ExpenseRepository(db).totals_by_category(
            mess_id, period.start, period.end
        )

        members = stats.total_members
        total_expenses = breakdown.total_expenses
        meal_cost_total = breakdown.total_meals * rate
        calculations = AnalyticsCalculations(
            avg_meals_per_member=round(stats.total_meals / members, 1) if members else 0.0,
            avg_expense_per_member=round_money(total_expenses / members) if members else 0.0,
            net_balance=round_money(stats.total_deposits - total_expenses),
            meal_cost_percentage=(
                round(meal_cost_total / total_expenses * 100, 1) if total_expenses > 0 else 0.0
            ),
        )

        logger.debug(f"analytics mess_id={mess_id} period={period.label}")

        return AnalyticsResponse(
            summary=AnalyticsSummary(**stats.model_dump(), period=period.to_info()),
            member_stats=member_stats,
            financial_overview=[
                NamedValue(name="Expenses", value=stats.total_expenses),
                NamedValue(name="Deposits", value=stats.total_deposits),
            ],
            category_stats=[
                NamedValue(
                    name=row["category"],
                    value=round_money(row["total_amount"]),
                    count=row["count"],
                )
                for row in categories
            ],
            daily_trends=[
                DailyMealTrend(date=day.isoformat(), meals=total)
                for day, total in meals.units_by_day(mess_id, period.start, period.end)
            ],
            calculations=calculations,
        )
