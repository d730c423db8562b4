"""
Meal logging: one entry per member and date holding breakfast/lunch/dinner
unit counts, plus per-mess statistics and lazily filled meal costs.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from domain.enums import MealStatus, MealType
from domain.models import Meal, User
from domain.schemas.meal_schemas import (
    MealCreate,
    MealBulkCreate,
    MealUpdate,
    MealStatistics,
    UserMealSummary,
)
from repositories import MealRepository
from services.access import (
    get_mess_or_404,
    ensure_admin,
    ensure_manager,
    ensure_member,
    ensure_in_mess,
)
from services.meal_rate_service import MealRateCalculator
from services.period import Period, round_money

logger = logging.getLogger("messmate.meals")


def _period_bounds(period: Optional[Period]) -> dict:
    if not period:
        return {}
    return {"start": period.start, "end": period.end}


class MealService:
    @staticmethod
    def create_meal(db: Session, meal_data: MealCreate, requesting_user: User) -> Meal:
        """
        Log one member's meals for a date.

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller is not the mess manager
            ServiceValidationError: If the user is not a member of the mess
        """
        mess = get_mess_or_404(db, meal_data.mess_id)
        ensure_manager(mess, requesting_user, "add meals")
        ensure_in_mess(mess, meal_data.user_id, "User is not a member of this mess")

        meal = MealRepository(db).create(Meal(**meal_data.model_dump()))
        logger.info(
            f"meal_created meal_id={meal.meal_id} mess_id={mess.mess_id} "
            f"user_id={meal.user_id} date={meal.date} units={meal.units}"
        )
        return meal

    @staticmethod
    def bulk_create_meals(
        db: Session, bulk: MealBulkCreate, requesting_user: User
    ) -> List[Meal]:
        """
        Log meals for several members at once.

        Every entry is checked before anything is written, so a rejected
        request leaves no partial data behind.

        Raises:
            ForbiddenError: If the caller is not the mess manager
            ServiceValidationError: If any user is not a member
            ConflictError: If a user already has a meal on that date
        """
        mess = get_mess_or_404(db, bulk.mess_id)
        ensure_manager(mess, requesting_user, "add meals")

        repo = MealRepository(db)
        users_by_date = {}
        for entry in bulk.meals:
            ensure_in_mess(mess, entry.user_id, f"User {entry.user_id} is not a member of this mess")
            users_by_date.setdefault(entry.date, []).append(entry.user_id)

        for on, user_ids in users_by_date.items():
            if len(set(user_ids)) != len(user_ids):
                raise ConflictError(f"Duplicate users in request for {on}")
            existing = repo.existing_for_date(mess.mess_id, user_ids, on)
            if existing:
                raise ConflictError(
                    f"Meals already exist for some users on {on}",
                    details={"user_ids": [str(m.user_id) for m in existing]},
                )

        meals = repo.bulk_create(
            [Meal(mess_id=mess.mess_id, **entry.model_dump()) for entry in bulk.meals]
        )
        logger.info(f"meals_bulk_created mess_id={mess.mess_id} count={len(meals)}")
        return meals

    @staticmethod
    def get_meals(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
        user_id: Optional[UUID] = None,
    ) -> List[Meal]:
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        return MealRepository(db).list_meals(
            mess_id=mess_id, user_id=user_id, **_period_bounds(period)
        )

    @staticmethod
    def list_all_meals(
        db: Session,
        requesting_user: User,
        skip: int,
        limit: int,
        mess_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        period: Optional[Period] = None,
    ) -> Tuple[List[Meal], int]:
        """Admin listing across all messes, newest first"""
        ensure_admin(requesting_user)
        return MealRepository(db).paginate(
            skip, limit, mess_id=mess_id, user_id=user_id, **_period_bounds(period)
        )

    @staticmethod
    def _get_managed_meal(db: Session, meal_id: UUID, requesting_user: User, action: str) -> Meal:
        meal = MealRepository(db).get_by_id(meal_id)
        if not meal:
            raise NotFoundError(f"Meal {meal_id} not found")
        ensure_manager(meal.mess, requesting_user, action)
        return meal

    @staticmethod
    def update_meal(
        db: Session, meal_id: UUID, update: MealUpdate, requesting_user: User
    ) -> Meal:
        meal = MealService._get_managed_meal(db, meal_id, requesting_user, "update meals")
        for field, value in update.model_dump().items():
            setattr(meal, field, value)
        # The stored cost was priced on the old counts
        meal.cost = None
        meal = MealRepository(db).update(meal)
        logger.info(f"meal_updated meal_id={meal_id} date={meal.date} units={meal.units}")
        return meal

    @staticmethod
    def delete_meal(db: Session, meal_id: UUID, requesting_user: User) -> None:
        meal = MealService._get_managed_meal(db, meal_id, requesting_user, "delete meals")
        MealRepository(db).delete(meal.meal_id)
        logger.info(f"meal_deleted meal_id={meal_id}")

    @staticmethod
    def get_statistics(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
        user_id: Optional[UUID] = None,
    ) -> MealStatistics:
        """Entry counters and unit totals over the mess's meals"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        meals = MealRepository(db).list_meals(
            mess_id=mess_id, user_id=user_id, **_period_bounds(period)
        )

        return MealStatistics(
            total_entries=len(meals),
            breakfast_count=sum(m.breakfast for m in meals),
            lunch_count=sum(m.lunch for m in meals),
            dinner_count=sum(m.dinner for m in meals),
            total_meal_count=sum(m.units for m in meals),
            guest_meals=sum(1 for m in meals if m.is_guest),
            skipped_meals=sum(1 for m in meals if m.status == MealStatus.SKIPPED),
            offday_meals=sum(1 for m in meals if m.meal_type == MealType.OFFDAY),
            regular_meals=sum(1 for m in meals if m.meal_type == MealType.REGULAR),
            vegetarian_meals=sum(
                1 for m in meals if (m.preferences or {}).get("vegetarian")
            ),
            total_cost=round_money(sum(m.cost or 0 for m in meals)),
        )

    @staticmethod
    def calculate_costs(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        meal_rate: Optional[float] = None,
    ) -> Tuple[int, float]:
        """
        Price every meal of the mess that has no cost yet.

        Args:
            meal_rate: Rate to apply; the current computed rate when omitted

        Returns:
            (number of meals updated, rate applied)
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_manager(mess, requesting_user, "calculate meal costs")
        if meal_rate is None:
            meal_rate = MealRateCalculator.compute_meal_rate(db, mess_id)

        meals = MealRepository(db).without_cost(mess_id)
        for meal in meals:
            meal.cost = round_money(meal.units * meal_rate)
        db.commit()

        logger.info(f"meal_costs_calculated mess_id={mess_id} updated={len(meals)} rate={meal_rate}")
        return len(meals), meal_rate

    @staticmethod
    def get_user_summary(
        db: Session,
        mess_id: UUID,
        user_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
    ) -> UserMealSummary:
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        meals = MealRepository(db).list_meals(
            mess_id=mess_id, user_id=user_id, **_period_bounds(period)
        )

        return UserMealSummary(
            user_id=user_id,
            total_days=len({m.date for m in meals}),
            total_breakfast=sum(m.breakfast for m in meals),
            total_lunch=sum(m.lunch for m in meals),
            total_dinner=sum(m.dinner for m in meals),
            total_meals=sum(m.units for m in meals),
            total_cost=round_money(sum(m.cost or 0 for m in meals)),
            skipped_days=sum(1 for m in meals if m.status == MealStatus.SKIPPED),
            guest_meals=sum(1 for m in meals if m.is_guest),
            off_days=sum(1 for m in meals if m.meal_type == MealType.OFFDAY),
        )
