import logging
from datetime import date
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.enums import ExpenseCategory
from domain.models import Expense, User
from domain.schemas.expense_schemas import ExpenseCreate, ExpenseUpdate
from repositories import ExpenseRepository
from services.access import (
    get_mess_or_404,
    ensure_admin,
    ensure_manager,
    ensure_member,
    ensure_in_mess,
)
from services.period import Period

logger = logging.getLogger("messmate.expenses")


class ExpenseService:
    @staticmethod
    def create_expense(
        db: Session, expense_data: ExpenseCreate, requesting_user: User
    ) -> Expense:
        """
        Record an expense paid by a member; the caller is stored as ``added_by``.

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller is not the mess manager
            ServiceValidationError: If ``expensed_by`` is not a member
        """
        mess = get_mess_or_404(db, expense_data.mess_id)
        ensure_manager(mess, requesting_user, "add expenses")
        ensure_in_mess(mess, expense_data.expensed_by, "Expensed by user must be a member of this mess")

        expense = Expense(
            mess_id=mess.mess_id,
            description=expense_data.description,
            amount=expense_data.amount,
            category=expense_data.category,
            added_by=requesting_user.user_id,
            expensed_by=expense_data.expensed_by,
            date=expense_data.date or date.today(),
        )
        expense = ExpenseRepository(db).create(expense)
        logger.info(
            f"expense_created expense_id={expense.expense_id} mess_id={mess.mess_id} "
            f"amount={expense.amount} category={expense.category.value}"
        )
        return expense

    @staticmethod
    def get_expenses(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
        category: Optional[ExpenseCategory] = None,
        user_id: Optional[UUID] = None,
    ) -> List[Expense]:
        """Expenses of a mess, newest first; ``user_id`` matches ``expensed_by``"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        return ExpenseRepository(db).list_expenses(
            mess_id=mess_id,
            expensed_by=user_id,
            category=category,
            start=period.start if period else None,
            end=period.end if period else None,
        )

    @staticmethod
    def list_all_expenses(
        db: Session,
        requesting_user: User,
        skip: int,
        limit: int,
        mess_id: Optional[UUID] = None,
        category: Optional[ExpenseCategory] = None,
        period: Optional[Period] = None,
    ) -> Tuple[List[Expense], int]:
        ensure_admin(requesting_user)
        return ExpenseRepository(db).paginate(
            skip,
            limit,
            mess_id=mess_id,
            category=category,
            start=period.start if period else None,
            end=period.end if period else None,
        )

    @staticmethod
    def _get_managed_expense(
        db: Session, expense_id: UUID, requesting_user: User, action: str
    ) -> Expense:
        expense = ExpenseRepository(db).get_by_id(expense_id)
        if not expense:
            raise NotFoundError(f"Expense {expense_id} not found")
        ensure_manager(expense.mess, requesting_user, action)
        return expense

    @staticmethod
    def update_expense(
        db: Session, expense_id: UUID, update: ExpenseUpdate, requesting_user: User
    ) -> Expense:
        expense = ExpenseService._get_managed_expense(
            db, expense_id, requesting_user, "update expenses"
        )
        ensure_in_mess(expense.mess, update.expensed_by, "Expensed by user must be a member of this mess")

        for field, value in update.model_dump().items():
            setattr(expense, field, value)
        expense = ExpenseRepository(db).update(expense)
        logger.info(f"expense_updated expense_id={expense_id} amount={expense.amount}")
        return expense

    @staticmethod
    def delete_expense(db: Session, expense_id: UUID, requesting_user: User) -> None:
        expense = ExpenseService._get_managed_expense(
            db, expense_id, requesting_user, "delete expenses"
        )
        ExpenseRepository(db).delete(expense.expense_id)
        logger.info(f"expense_deleted expense_id={expense_id}")
