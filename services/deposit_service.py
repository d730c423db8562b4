"""
Member deposits: money paid into the mess fund.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import Deposit, User
from domain.schemas.deposit_schemas import (
    DepositCreate,
    DepositUpdate,
    DepositStatsResponse,
    DepositTotals,
    MemberDepositTotal,
)
from repositories import DepositRepository
from services.access import (
    get_mess_or_404,
    ensure_admin,
    ensure_manager,
    ensure_member,
    ensure_in_mess,
)
from services.period import Period, current_month, round_money

logger = logging.getLogger("messmate.deposits")

MESS_DEPOSITS_LIMIT = 100
USER_DEPOSITS_LIMIT = 50


class DepositService:
    @staticmethod
    def create_deposit(
        db: Session, deposit_data: DepositCreate, requesting_user: User
    ) -> Deposit:
        """
        Record a deposit for a member.

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller is not the mess manager
            ServiceValidationError: If the user is not a member
        """
        mess = get_mess_or_404(db, deposit_data.mess_id)
        ensure_manager(mess, requesting_user, "add deposits")
        ensure_in_mess(mess, deposit_data.user_id, "User is not a member of this mess")

        deposit = DepositRepository(db).create(Deposit(**deposit_data.model_dump()))
        logger.info(
            f"deposit_created deposit_id={deposit.deposit_id} mess_id={mess.mess_id} "
            f"user_id={deposit.user_id} amount={deposit.amount}"
        )
        return deposit

    @staticmethod
    def get_deposits(
        db: Session,
        mess_id: UUID,
        requesting_user: User,
        period: Optional[Period] = None,
        user_id: Optional[UUID] = None,
    ) -> List[Deposit]:
        """Newest deposits of a mess, at most MESS_DEPOSITS_LIMIT rows"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        return DepositRepository(db).list_deposits(
            limit=MESS_DEPOSITS_LIMIT,
            mess_id=mess_id,
            user_id=user_id,
            start=period.start if period else None,
            end=period.end if period else None,
        )

    @staticmethod
    def get_user_deposits(
        db: Session, mess_id: UUID, user_id: UUID, requesting_user: User
    ) -> List[Deposit]:
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        return DepositRepository(db).list_deposits(
            limit=USER_DEPOSITS_LIMIT, mess_id=mess_id, user_id=user_id
        )

    @staticmethod
    def list_all_deposits(
        db: Session,
        requesting_user: User,
        skip: int,
        limit: int,
        mess_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
    ) -> Tuple[List[Deposit], int]:
        ensure_admin(requesting_user)
        return DepositRepository(db).paginate(skip, limit, mess_id=mess_id, user_id=user_id)

    @staticmethod
    def get_stats(
        db: Session, mess_id: UUID, requesting_user: User, period: Optional[Period] = None
    ) -> DepositStatsResponse:
        """Period total and count plus per-member totals, largest first"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        period = period or current_month()

        repo = DepositRepository(db)
        total = repo.sum_amounts(mess_id, period.start, period.end)
        count = repo.count_in_period(mess_id, period.start, period.end)
        members = repo.member_totals(mess_id, period.start, period.end)

        return DepositStatsResponse(
            monthly=DepositTotals(total_amount=round_money(total), deposit_count=count),
            member_stats=[
                MemberDepositTotal(
                    user_id=row["user_id"],
                    user_name=row["user_name"],
                    total_amount=round_money(row["total_amount"]),
                    deposit_count=row["deposit_count"],
                )
                for row in members
            ],
            period=period.to_info(),
        )

    @staticmethod
    def _get_managed_deposit(
        db: Session, deposit_id: UUID, requesting_user: User, action: str
    ) -> Deposit:
        deposit = DepositRepository(db).get_by_id(deposit_id)
        if not deposit:
            raise NotFoundError(f"Deposit {deposit_id} not found")
        ensure_manager(deposit.mess, requesting_user, action)
        return deposit

    @staticmethod
    def update_deposit(
        db: Session, deposit_id: UUID, update: DepositUpdate, requesting_user: User
    ) -> Deposit:
        deposit = DepositService._get_managed_deposit(
            db, deposit_id, requesting_user, "update deposits"
        )
        ensure_in_mess(deposit.mess, update.user_id, "User is not a member of this mess")

        for field, value in update.model_dump().items():
            setattr(deposit, field, value)
        deposit = DepositRepository(db).update(deposit)
        logger.info(f"deposit_updated deposit_id={deposit_id} amount={deposit.amount}")
        return deposit

    @staticmethod
    def delete_deposit(db: Session, deposit_id: UUID, requesting_user: User) -> None:
        deposit = DepositService._get_managed_deposit(
            db, deposit_id, requesting_user, "delete deposits"
        )
        DepositRepository(db).delete(deposit.deposit_id)
        logger.info(f"deposit_deleted deposit_id={deposit_id}")
