"""
Deposit Repository - Data access layer for member deposits
"""

from typing import Dict, List, Tuple
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Deposit, User


class DepositRepository(BaseRepository[Deposit]):
    """Repository for deposit data access"""

    id_field = "deposit_id"

    def __init__(self, db: Session):
        super().__init__(db, Deposit)

    def filter(
        self,
        mess_id: UUID = None,
        user_id: UUID = None,
        start: date = None,
        end: date = None,
    ) -> Query:
        """Build a deposit query from optional filters"""
        query = self.db.query(Deposit)
        if mess_id:
            query = query.filter(Deposit.mess_id == mess_id)
        if user_id:
            query = query.filter(Deposit.user_id == user_id)
        if start:
            query = query.filter(Deposit.date >= start)
        if end:
            query = query.filter(Deposit.date <= end)
        return query

    def list_deposits(self, limit: int = None, **filters) -> List[Deposit]:
        query = self.filter(**filters).order_by(
            Deposit.date.desc(), Deposit.created_at.desc()
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def paginate(self, skip: int, limit: int, **filters) -> Tuple[List[Deposit], int]:
        return self.page(
            self.filter(**filters), skip, limit, Deposit.date.desc(), Deposit.created_at.desc()
        )

    def delete_in_range(self, mess_id: UUID, start: date, end: date) -> int:
        return self.filter(mess_id=mess_id, start=start, end=end).delete(
            synchronize_session=False
        )

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def sum_amounts(self, mess_id: UUID, start: date, end: date) -> float:
        """Total deposited into the mess in the period (0 if none)"""
        total = (
            self.db.query(func.coalesce(func.sum(Deposit.amount), 0))
            .filter(Deposit.mess_id == mess_id, Deposit.date >= start, Deposit.date <= end)
            .scalar()
        )
        return float(total or 0)

    def count_in_period(self, mess_id: UUID, start: date, end: date) -> int:
        return self.filter(mess_id=mess_id, start=start, end=end).count()

    def sum_amounts_by_member(
        self, mess_id: UUID, start: date, end: date
    ) -> Dict[UUID, float]:
        """Deposit total per user in the period; users without deposits are absent"""
        rows = (
            self.db.query(Deposit.user_id, func.sum(Deposit.amount).label("total"))
            .filter(Deposit.mess_id == mess_id, Deposit.date >= start, Deposit.date <= end)
            .group_by(Deposit.user_id)
            .all()
        )
        return {row.user_id: float(row.total or 0) for row in rows}

    def member_totals(self, mess_id: UUID, start: date, end: date) -> List[dict]:
        """Per-member totals with names, largest total first"""
        total = func.sum(Deposit.amount)
        rows = (
            self.db.query(
                Deposit.user_id,
                User.name,
                total.label("total_amount"),
                func.count(Deposit.deposit_id).label("deposit_count"),
            )
            .join(User, User.user_id == Deposit.user_id)
            .filter(Deposit.mess_id == mess_id, Deposit.date >= start, Deposit.date <= end)
            .group_by(Deposit.user_id, User.name)
            .order_by(total.desc())
            .all()
        )
        return [
            {
                "user_id": r.user_id,
                "user_name": r.name,
                "total_amount": float(r.total_amount or 0),
                "deposit_count": r.deposit_count,
            }
            for r in rows
        ]
