"""
User accounts: registration, profiles and admin account management.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.enums import UserRole
from domain.models import User
from domain.schemas.user_schemas import (
    UserCreate,
    UserProfileUpdate,
    UserAdminUpdate,
    UserStatsResponse,
)
from repositories import MessRepository, UserRepository
from services.access import ensure_admin

logger = logging.getLogger("messmate.users")


class UserService:
    @staticmethod
    def register_user(db: Session, user_data: UserCreate) -> User:
        """
        Create a plain user account.

        Raises:
            ConflictError: If the email is already registered
        """
        user = UserRepository(db).create_user(
            name=user_data.name, email=user_data.email, phone=user_data.phone
        )
        logger.info(f"user_registered user_id={user.user_id}")
        return user

    @staticmethod
    def update_profile(db: Session, user: User, update: UserProfileUpdate) -> User:
        for field, value in update.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, field, value)
        user = UserRepository(db).update_user(user)
        logger.info(f"profile_updated user_id={user.user_id}")
        return user

    @staticmethod
    def list_users(
        db: Session,
        requesting_user: User,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        include_admins: bool = True,
        include_deleted: bool = False,
    ) -> List[User]:
        ensure_admin(requesting_user, "Only admins can access all users")
        return UserRepository(db).search(
            search=search,
            role=role,
            include_admins=include_admins,
            include_deleted=include_deleted,
        )

    @staticmethod
    def get_stats(db: Session, requesting_user: User) -> UserStatsResponse:
        ensure_admin(requesting_user)
        repo = UserRepository(db)
        return UserStatsResponse(
            total_users=repo.count(),
            active_users=repo.count(is_deleted=False),
            deleted_users=repo.count(is_deleted=True),
            users_with_mess=repo.count(has_mess=True),
            users_without_mess=repo.count(has_mess=False),
            by_role=repo.count_by_role(),
        )

    @staticmethod
    def get_user(db: Session, user_id: UUID, requesting_user: User) -> User:
        """Admins may read any account, other users only their own"""
        if not requesting_user.is_admin and requesting_user.user_id != user_id:
            logger.warning(f"access_denied user_id={user_id} by={requesting_user.user_id}")
            raise ForbiddenError("Access denied")
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def update_user(
        db: Session, user_id: UUID, update: UserAdminUpdate, requesting_user: User
    ) -> User:
        """
        Admin update of name, email, phone and role.

        Raises:
            ForbiddenError: If the caller is not an admin
            NotFoundError: If the user does not exist
            ConflictError: If the new email is already taken
        """
        ensure_admin(requesting_user, "Only admins can update users")
        repo = UserRepository(db)
        user = repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        changes = update.model_dump(exclude_unset=True)
        if changes.get("email"):
            changes["email"] = changes["email"].strip().lower()
            other = repo.get_by_email(changes["email"])
            if other and other.user_id != user.user_id:
                raise ConflictError(f"User with email {changes['email']} already exists")

        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)
        user = repo.update_user(user)
        logger.info(f"user_updated user_id={user_id} fields={sorted(changes)}")
        return user

    @staticmethod
    def _get_deletable(db: Session, user_id: UUID, requesting_user: User) -> User:
        ensure_admin(requesting_user, "Only admins can delete users")
        if requesting_user.user_id == user_id:
            raise ServiceValidationError("Cannot delete your own account")
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        managed = MessRepository(db).managed_by(user_id)
        if managed:
            raise ConflictError(
                "User manages a mess; transfer or delete the mess first",
                details={"mess_id": str(managed.mess_id)},
            )
        return user

    @staticmethod
    def delete_user(db: Session, user_id: UUID, requesting_user: User) -> None:
        """Permanently delete an account"""
        user = UserService._get_deletable(db, user_id, requesting_user)
        db.delete(user)
        db.commit()
        logger.info(f"user_deleted user_id={user_id} by={requesting_user.user_id}")

    @staticmethod
    def soft_delete_user(db: Session, user_id: UUID, requesting_user: User) -> User:
        """Flag an account as deleted and detach it from its mess"""
        user = UserService._get_deletable(db, user_id, requesting_user)
        if user.is_deleted:
            raise ConflictError("User is already deleted")
        user.is_deleted = True
        user.deleted_at = datetime.now(timezone.utc)
        user.mess_id = None
        user = UserRepository(db).update_user(user)
        logger.info(f"user_soft_deleted user_id={user_id} by={requesting_user.user_id}")
        return user

    @staticmethod
    def restore_user(db: Session, user_id: UUID, requesting_user: User) -> User:
        ensure_admin(requesting_user, "Only admins can restore users")
        repo = UserRepository(db)
        user = repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        if not user.is_deleted:
            raise ConflictError("User is not deleted")
        user.is_deleted = False
        user.deleted_at = None
        user = repo.update_user(user)
        logger.info(f"user_restored user_id={user_id} by={requesting_user.user_id}")
        return user
