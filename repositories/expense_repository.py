"""
Expense Repository - Data access layer for expenses and expense aggregates
"""

from typing import List, Tuple
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Expense
from domain.enums import ExpenseCategory


class ExpenseRepository(BaseRepository[Expense]):
    """Repository for expense data access"""

    id_field = "expense_id"

    def __init__(self, db: Session):
        super().__init__(db, Expense)

    def filter(
        self,
        mess_id: UUID = None,
        expensed_by: UUID = None,
        category: ExpenseCategory = None,
        start: date = None,
        end: date = None,
    ) -> Query:
        """Build an expense query from optional filters"""
        query = self.db.query(Expense)
        if mess_id:
            query = query.filter(Expense.mess_id == mess_id)
        if expensed_by:
            query = query.filter(Expense.expensed_by == expensed_by)
        if category:
            query = query.filter(Expense.category == category)
        if start:
            query = query.filter(Expense.date >= start)
        if end:
            query = query.filter(Expense.date <= end)
        return query

    def list_expenses(self, **filters) -> List[Expense]:
        return (
            self.filter(**filters)
            .order_by(Expense.date.desc(), Expense.created_at.desc())
            .all()
        )

    def paginate(self, skip: int, limit: int, **filters) -> Tuple[List[Expense], int]:
        return self.page(
            self.filter(**filters), skip, limit, Expense.date.desc(), Expense.created_at.desc()
        )

    def recent(self, mess_id: UUID, start: date, end: date, limit: int = 10) -> List[Expense]:
        return (
            self.filter(mess_id=mess_id, start=start, end=end)
            .order_by(Expense.date.desc(), Expense.created_at.desc())
            .limit(limit)
            .all()
        )

    def delete_in_range(self, mess_id: UUID, start: date, end: date) -> int:
        return self.filter(mess_id=mess_id, start=start, end=end).delete(
            synchronize_session=False
        )

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def sum_amounts(self, mess_id: UUID, start: date, end: date) -> float:
        """Total expense amount of the mess in the period (0 if none)"""
        total = (
            self.db.query(func.coalesce(func.sum(Expense.amount), 0))
            .filter(Expense.mess_id == mess_id, Expense.date >= start, Expense.date <= end)
            .scalar()
        )
        return float(total or 0)

    def count_in_period(self, mess_id: UUID, start: date, end: date) -> int:
        return self.filter(mess_id=mess_id, start=start, end=end).count()

    def totals_by_category(self, mess_id: UUID, start: date, end: date) -> List[dict]:
        """Amount and count per category, largest amount first"""
        total = func.sum(Expense.amount)
        rows = (
            self.db.query(
                Expense.category,
                total.label("total_amount"),
                func.count(Expense.expense_id).label("count"),
            )
            .filter(Expense.mess_id == mess_id, Expense.date >= start, Expense.date <= end)
            .group_by(Expense.category)
            .order_by(total.desc())
            .all()
        )
        return [
            {
                "category": r.category.value if isinstance(r.category, ExpenseCategory) else r.category,
                "total_amount": float(r.total_amount or 0),
                "count": r.count,
            }
            for r in rows
        ]
