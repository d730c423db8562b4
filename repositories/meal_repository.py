"""
Meal Repository - Data access layer for meal entries and meal-unit aggregates
"""

from typing import Dict, List, Tuple
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Meal

# breakfast + lunch + dinner of one entry
MEAL_UNITS = Meal.breakfast + Meal.lunch + Meal.dinner


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    id_field = "meal_id"

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def _in_period(self, mess_id: UUID, start: date, end: date) -> Query:
        return self.db.query(Meal).filter(
            Meal.mess_id == mess_id, Meal.date >= start, Meal.date <= end
        )

    def filter(
        self,
        mess_id: UUID = None,
        user_id: UUID = None,
        start: date = None,
        end: date = None,
    ) -> Query:
        """Build a meal query from optional filters"""
        query = self.db.query(Meal)
        if mess_id:
            query = query.filter(Meal.mess_id == mess_id)
        if user_id:
            query = query.filter(Meal.user_id == user_id)
        if start:
            query = query.filter(Meal.date >= start)
        if end:
            query = query.filter(Meal.date <= end)
        return query

    def list_meals(self, **filters) -> List[Meal]:
        return self.filter(**filters).order_by(Meal.date, Meal.created_at).all()

    def paginate(self, skip: int, limit: int, **filters) -> Tuple[List[Meal], int]:
        return self.page(
            self.filter(**filters), skip, limit, Meal.date.desc(), Meal.created_at.desc()
        )

    def recent(self, mess_id: UUID, start: date, end: date, limit: int = 10) -> List[Meal]:
        return (
            self._in_period(mess_id, start, end)
            .order_by(Meal.date.desc(), Meal.created_at.desc())
            .limit(limit)
            .all()
        )

    def existing_for_date(self, mess_id: UUID, user_ids: List[UUID], on: date) -> List[Meal]:
        """Meals already logged on a date for any of the given users"""
        return (
            self.db.query(Meal)
            .filter(Meal.mess_id == mess_id, Meal.user_id.in_(user_ids), Meal.date == on)
            .all()
        )

    def bulk_create(self, meals: List[Meal]) -> List[Meal]:
        self.db.add_all(meals)
        self.db.commit()
        for meal in meals:
            self.db.refresh(meal)
        return meals

    def without_cost(self, mess_id: UUID) -> List[Meal]:
        return (
            self.db.query(Meal)
            .filter(Meal.mess_id == mess_id, Meal.cost.is_(None))
            .all()
        )

    def delete_in_range(self, mess_id: UUID, start: date, end: date) -> int:
        return self._in_period(mess_id, start, end).delete(synchronize_session=False)

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def sum_units(self, mess_id: UUID, start: date, end: date) -> float:
        """Total meal-units of the mess in the period (0 if none)"""
        total = (
            self.db.query(func.coalesce(func.sum(MEAL_UNITS), 0))
            .filter(Meal.mess_id == mess_id, Meal.date >= start, Meal.date <= end)
            .scalar()
        )
        return float(total or 0)

    def count_entries(self, mess_id: UUID, start: date, end: date) -> int:
        return self._in_period(mess_id, start, end).count()

    def sum_units_by_member(
        self, mess_id: UUID, start: date, end: date
    ) -> Dict[UUID, float]:
        """Meal-units per user in the period; users without meals are absent"""
        rows = (
            self.db.query(Meal.user_id, func.sum(MEAL_UNITS).label("units"))
            .filter(Meal.mess_id == mess_id, Meal.date >= start, Meal.date <= end)
            .group_by(Meal.user_id)
            .all()
        )
        return {row.user_id: float(row.units or 0) for row in rows}

    def days_with_meals_by_member(
        self, mess_id: UUID, start: date, end: date
    ) -> Dict[UUID, int]:
        """Distinct dates per user on which at least one entry was logged"""
        rows = (
            self.db.query(Meal.user_id, func.count(func.distinct(Meal.date)).label("days"))
            .filter(Meal.mess_id == mess_id, Meal.date >= start, Meal.date <= end)
            .group_by(Meal.user_id)
            .all()
        )
        return {row.user_id: int(row.days) for row in rows}

    def units_by_day(self, mess_id: UUID, start: date, end: date) -> List[Tuple[date, float]]:
        rows = (
            self.db.query(Meal.date, func.sum(MEAL_UNITS).label("units"))
            .filter(Meal.mess_id == mess_id, Meal.date >= start, Meal.date <= end)
            .group_by(Meal.date)
            .order_by(Meal.date)
            .all()
        )
        return [(row.date, float(row.units or 0)) for row in rows]
