"""
Mess management: creation, membership, the recompute-on-read meal rate and
admin maintenance operations.
"""

import logging
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import CleanupType, UserRole
from domain.models import Mess, User, DEFAULT_MEAL_RATE
from domain.schemas.mess_schemas import (
    MessCreate,
    MessUpdate,
    MealRateResponse,
    CleanupRequest,
)
from repositories import (
    MessRepository,
    UserRepository,
    MealRepository,
    ExpenseRepository,
    DepositRepository,
)
from services.access import (
    get_mess_or_404,
    ensure_admin,
    ensure_manager,
    ensure_manager_or_admin,
    ensure_member,
)
from services.meal_rate_service import MealRateCalculator

logger = logging.getLogger("messmate.mess")


class MessService:
    @staticmethod
    def create_mess(db: Session, mess_data: MessCreate, requesting_user: User) -> Mess:
        """
        Create a mess with the given manager as its first member.

        Raises:
            ForbiddenError: If the caller is not an admin
            NotFoundError: If the manager does not exist
            ConflictError: If the manager already belongs to a mess
        """
        ensure_admin(
            requesting_user,
            "Only admins can create messes. Please ask an existing mess manager to add you.",
        )

        manager = UserRepository(db).get_active_by_id(mess_data.manager_id)
        if not manager:
            raise NotFoundError("Selected manager not found")
        if manager.mess_id:
            raise ConflictError("Selected manager is already in a mess")

        mess = Mess(
            name=mess_data.name,
            description=mess_data.description,
            address=mess_data.address,
            manager_id=manager.user_id,
            meal_rate=DEFAULT_MEAL_RATE,
            currency=settings.default_currency,
        )
        db.add(mess)
        db.flush()

        manager.mess_id = mess.mess_id
        if manager.role == UserRole.USER:
            manager.role = UserRole.MANAGER
        db.commit()
        db.refresh(mess)

        logger.info(
            f"mess_created mess_id={mess.mess_id} manager_id={manager.user_id} "
            f"by={requesting_user.user_id}"
        )
        return mess

    @staticmethod
    def get_mess(db: Session, mess_id: UUID, requesting_user: User) -> Mess:
        """
        Fetch a mess and refresh its cached meal rate.

        Every read recomputes the current month's rate and persists it on the
        mess before returning.
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        MealRateCalculator.recompute_and_persist(db, mess)
        return mess

    @staticmethod
    def get_meal_rate(db: Session, mess_id: UUID, requesting_user: User) -> MealRateResponse:
        """Current meal rate with its totals; the cached value is not touched"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)
        breakdown = MealRateCalculator.breakdown(db, mess.mess_id)
        return MealRateResponse(
            mess_id=mess.mess_id,
            meal_rate=breakdown.meal_rate,
            total_expenses=breakdown.total_expenses,
            total_meals=breakdown.total_meals,
            calculation=breakdown.calculation,
            period=breakdown.period.to_info(),
        )

    @staticmethod
    def list_messes(db: Session, requesting_user: User) -> List[Mess]:
        ensure_admin(requesting_user)
        return MessRepository(db).list_all()

    @staticmethod
    def update_mess(
        db: Session, mess_id: UUID, update: MessUpdate, requesting_user: User
    ) -> Mess:
        """
        Update mess details; ``manager_id`` hands the mess over to another member.

        Raises:
            NotFoundError: If the mess does not exist
            ForbiddenError: If the caller is neither the manager nor an admin
            ServiceValidationError: If the new manager is not a member
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_manager_or_admin(mess, requesting_user, "update the mess")

        changes = update.model_dump(exclude_unset=True, exclude={"manager_id"})
        for field, value in changes.items():
            if value is not None:
                setattr(mess, field, value)

        new_manager_id = update.manager_id
        if new_manager_id and new_manager_id != mess.manager_id:
            new_manager = UserRepository(db).get_active_by_id(new_manager_id)
            if not new_manager or new_manager.mess_id != mess.mess_id:
                raise ServiceValidationError("New manager must be a member of this mess")
            if new_manager.role == UserRole.USER:
                new_manager.role = UserRole.MANAGER
            old_manager = mess.manager
            mess.manager_id = new_manager.user_id
            if old_manager and old_manager.role == UserRole.MANAGER:
                old_manager.role = UserRole.USER
            logger.info(
                f"mess_manager_changed mess_id={mess_id} "
                f"from={old_manager.user_id if old_manager else None} to={new_manager_id}"
            )

        db.commit()
        db.refresh(mess)
        logger.info(f"mess_updated mess_id={mess_id} fields={sorted(changes)}")
        return mess

    @staticmethod
    def add_member(db: Session, mess_id: UUID, email: str, requesting_user: User) -> Mess:
        """
        Add an existing user to the mess by email.

        Raises:
            ForbiddenError: If the caller is not the manager
            NotFoundError: If no active user has this email
            ConflictError: If the user already belongs to a mess
        """
        mess = get_mess_or_404(db, mess_id)
        ensure_manager(mess, requesting_user, "add members")

        user = UserRepository(db).get_by_email(email)
        if not user or user.is_deleted:
            raise NotFoundError("User not found")
        if user.mess_id:
            raise ConflictError("User is already in a mess")

        mess = MessRepository(db).add_member(mess, user)
        logger.info(f"member_added mess_id={mess_id} user_id={user.user_id}")
        return mess

    @staticmethod
    def remove_member(
        db: Session, mess_id: UUID, user_id: UUID, requesting_user: User
    ) -> Mess:
        """Remove a member; the manager cannot be removed"""
        mess = get_mess_or_404(db, mess_id)
        ensure_manager_or_admin(mess, requesting_user, "remove members")

        if user_id == mess.manager_id:
            raise ServiceValidationError("The mess manager cannot be removed")

        user = UserRepository(db).get_by_id(user_id)
        if not user or user.mess_id != mess.mess_id:
            raise NotFoundError(f"User {user_id} is not a member of this mess")

        mess = MessRepository(db).remove_member(mess, user)
        logger.info(f"member_removed mess_id={mess_id} user_id={user_id}")
        return mess

    @staticmethod
    def delete_mess(db: Session, mess_id: UUID, requesting_user: User) -> None:
        """Delete a mess with all its meals, expenses and deposits"""
        ensure_admin(requesting_user)
        mess = get_mess_or_404(db, mess_id)

        detached = UserRepository(db).clear_mess(mess_id)
        manager = mess.manager
        if manager and manager.role == UserRole.MANAGER:
            manager.role = UserRole.USER
        db.delete(mess)
        db.commit()
        logger.info(f"mess_deleted mess_id={mess_id} members_detached={detached}")

    @staticmethod
    def cleanup_data(db: Session, request: CleanupRequest, requesting_user: User) -> int:
        """
        Delete a mess's records dated within [start_date, end_date].

        Returns:
            Number of deleted records
        """
        ensure_admin(requesting_user)
        get_mess_or_404(db, request.mess_id)

        args = (request.mess_id, request.start_date, request.end_date)
        deleted = 0
        if request.type in (CleanupType.MEALS, CleanupType.ALL):
            deleted += MealRepository(db).delete_in_range(*args)
        if request.type in (CleanupType.EXPENSES, CleanupType.ALL):
            deleted += ExpenseRepository(db).delete_in_range(*args)
        if request.type in (CleanupType.DEPOSITS, CleanupType.ALL):
            deleted += DepositRepository(db).delete_in_range(*args)
        db.commit()

        logger.info(
            f"data_cleanup mess_id={request.mess_id} type={request.type.value} "
            f"range={request.start_date}..{request.end_date} deleted={deleted}"
        )
        return deleted

