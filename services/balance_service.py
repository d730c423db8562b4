"""
Member balance reconciliation.

For every current member of a mess, over one period:

    meal_cost     = total_meals * meal_rate
    expense_share = total_expenses / member_count
    balance       = total_deposit - (meal_cost + expense_share)

Total expenses are split equally across all current members, including
members who joined mid-period or logged no meals. Amounts are rounded to
2 decimal places only when the rows are built, never inside the sums.
"""

import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import User
from domain.schemas.report_schemas import MemberBalance, MemberBalanceReport
from repositories.deposit_repository import DepositRepository
from repositories.expense_repository import ExpenseRepository
from repositories.meal_repository import MealRepository
from repositories.mess_repository import MessRepository
from services.access import get_mess_or_404, ensure_member
from services.meal_rate_service import MealRateCalculator
from services.period import Period, current_month, round_money

logger = logging.getLogger("messmate.balance")


class BalanceReconciler:
    @staticmethod
    def expense_share(total_expenses: float, member_count: int) -> float:
        """Equal share of the period's expenses per current member"""
        if member_count <= 0:
            return 0.0
        return total_expenses / member_count

    @staticmethod
    def compute_member_balances(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
        meal_rate: Optional[float] = None,
    ) -> MemberBalanceReport:
        """
        Compute one balance row per current member of a mess.

        Args:
            db: Database session
            mess_id: UUID of the mess
            requesting_user: Caller; must be a member, the manager or an admin
            period: Accounting period (default: current calendar month)
            meal_rate: Precomputed rate; computed from the period when omitted

        Returns:
            MemberBalanceReport with rows sorted by meal count, highest first

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller may not read this mess
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)

        period = period or current_month()
        if meal_rate is None:
            meal_rate = MealRateCalculator.compute_meal_rate(db, mess_id, period)

        members = list(mess.members)
        member_count = MessRepository(db).member_count(mess_id)
        total_expenses = ExpenseRepository(db).sum_amounts(mess_id, period.start, period.end)
        meals_by_member = MealRepository(db).sum_units_by_member(
            mess_id, period.start, period.end
        )
        deposits_by_member = DepositRepository(db).sum_amounts_by_member(
            mess_id, period.start, period.end
        )
        share = BalanceReconciler.expense_share(total_expenses, member_count)

        rows = []
        sums = {"meals": 0.0, "meal_cost": 0.0, "deposits": 0.0, "balance": 0.0}
        for member in members:
            total_meals = meals_by_member.get(member.user_id, 0.0)
            total_deposit = deposits_by_member.get(member.user_id, 0.0)
            meal_cost = total_meals * meal_rate
            balance = total_deposit - (meal_cost + share)

            sums["meals"] += total_meals
            sums["meal_cost"] += meal_cost
            sums["deposits"] += total_deposit
            sums["balance"] += balance

            rows.append(
                MemberBalance(
                    user_id=member.user_id,
                    name=member.name,
                    total_meals=total_meals,
                    meal_cost=round_money(meal_cost),
                    total_deposit=round_money(total_deposit),
                    expense_share=round_money(share),
                    balance=round_money(balance),
                )
            )

        # Display order only
        rows.sort(key=lambda row: row.total_meals, reverse=True)

        logger.info(
            f"member_balances mess_id={mess_id} period={period.label} "
            f"members={member_count} rate={meal_rate} expenses={total_expenses}"
        )

        return MemberBalanceReport(
            mess_id=mess_id,
            period=period.to_info(),
            meal_rate=meal_rate,
            member_count=member_count,
            total_expenses=round_money(total_expenses),
            total_deposits=round_money(sums["deposits"]),
            total_meals=sums["meals"],
            total_meal_cost=round_money(sums["meal_cost"]),
            total_balance=round_money(sums["balance"]),
            balances=rows,
        )
