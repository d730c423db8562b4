"""
Meal-rate calculation.

The meal rate of a mess is the cost of one meal-unit (one breakfast, lunch or
dinner) over a period: total expenses divided by total meal-units, rounded to
2 decimal places.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from domain.models import Mess, DEFAULT_MEAL_RATE
from repositories.expense_repository import ExpenseRepository
from repositories.meal_repository import MealRepository
from repositories.mess_repository import MessRepository
from services.period import Period, current_month, format_amount, round_money

logger = logging.getLogger("messmate.meal_rate")

# Rate reported when no meal-units were logged in the period
ZERO_MEALS_MEAL_RATE = 0.0


@dataclass(frozen=True)
class MealRateBreakdown:
    """A meal rate and the totals it was derived from"""

    total_expenses: float
    total_meals: float
    meal_rate: float
    period: Period

    @property
    def calculation(self) -> str:
        if self.total_meals <= 0:
            return "No meals recorded"
        return (
            f"{format_amount(self.total_expenses)} / {format_amount(self.total_meals)}"
            f" = {format_amount(self.meal_rate)}"
        )


class MealRateCalculator:
    @staticmethod
    def rate_from_totals(total_expenses: float, total_meal_units: float) -> float:
        """
        Divide expenses by meal-units.

        Zero meal-units yields ZERO_MEALS_MEAL_RATE instead of a division by
        zero, so the cached rate on a mess is always a finite number.
        """
        if not total_meal_units or total_meal_units <= 0:
            return ZERO_MEALS_MEAL_RATE
        return round_money(total_expenses / total_meal_units)

    @staticmethod
    def breakdown(
        db: Session, mess_id: UUID, period: Optional[Period] = None
    ) -> MealRateBreakdown:
        """
        Aggregate the period's expenses and meal-units for a mess.

        Args:
            db: Database session
            mess_id: UUID of the mess
            period: Accounting period (default: current calendar month)

        Returns:
            MealRateBreakdown with totals and the rounded rate

        Raises:
            SQLAlchemyError: If the data store fails and the fallback policy
                (settings.meal_rate_fallback_on_error) is disabled
        """
        period = period or current_month()
        try:
            total_expenses = ExpenseRepository(db).sum_amounts(
                mess_id, period.start, period.end
            )
            total_meals = MealRepository(db).sum_units(mess_id, period.start, period.end)
        except SQLAlchemyError as e:
            if not settings.meal_rate_fallback_on_error:
                raise
            db.rollback()
            logger.warning(
                f"meal_rate_fallback mess_id={mess_id} rate={DEFAULT_MEAL_RATE} error={e}"
            )
            return MealRateBreakdown(0.0, 0.0, DEFAULT_MEAL_RATE, period)

        rate = MealRateCalculator.rate_from_totals(total_expenses, total_meals)
        logger.debug(
            f"meal_rate mess_id={mess_id} period={period.label} "
            f"expenses={total_expenses} meals={total_meals} rate={rate}"
        )
        return MealRateBreakdown(total_expenses, total_meals, rate, period)

    @staticmethod
    def compute_meal_rate(
        db: Session, mess_id: UUID, period: Optional[Period] = None
    ) -> float:
        """Current per-meal-unit cost of a mess; pure read, nothing is written"""
        return MealRateCalculator.breakdown(db, mess_id, period).meal_rate

    @staticmethod
    def recompute_and_persist(
        db: Session, mess: Mess, period: Optional[Period] = None
    ) -> float:
        """
        Recompute the meal rate and store it as the mess's cached ``meal_rate``.

        Called by the "get mess" read path, so the cached value is only
        guaranteed fresh right after a read. Concurrent callers each write
        their own result; the last write wins.
        """
        rate = MealRateCalculator.compute_meal_rate(db, mess.mess_id, period)
        if mess.meal_rate != rate:
            logger.info(
                f"meal_rate_updated mess_id={mess.mess_id} old={mess.meal_rate} new={rate}"
            )
        MessRepository(db).save_meal_rate(mess, rate)
        return rate
