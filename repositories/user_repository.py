"""
User Repository - Data access layer for user accounts
"""

from typing import Optional, List, Dict
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, or_

from repositories.base import BaseRepository
from domain.models import User
from domain.enums import UserRole
from app.exceptions import ConflictError


class UserRepository(BaseRepository[User]):
    """Repository for user data access"""

    id_field = "user_id"

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_active_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user that has not been soft-deleted"""
        return (
            self.db.query(User)
            .filter(User.user_id == user_id, User.is_deleted.is_(False))
            .first()
        )

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def create_user(self, name: str, email: str, phone: str = None) -> User:
        """Create a new user"""
        if self.get_by_email(email):
            raise ConflictError(f"User with email {email} already exists")
        user = User(name=name, email=email.strip().lower(), phone=phone)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")

    def update_user(self, user: User) -> User:
        """Persist changes made to a user"""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {user.email} already exists")
        self.db.refresh(user)
        return user

    def search(
        self,
        search: str = None,
        role: UserRole = None,
        include_admins: bool = True,
        include_deleted: bool = False,
    ) -> List[User]:
        """Filter users by name/email substring, role and deletion state"""
        query = self.db.query(User)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern))
            )
        if role:
            query = query.filter(User.role == role)
        if not include_admins:
            query = query.filter(User.role != UserRole.ADMIN)
        if not include_deleted:
            query = query.filter(User.is_deleted.is_(False))
        return query.order_by(User.name).all()

    def count_by_role(self) -> Dict[str, int]:
        """Count users per role"""
        rows = self.db.query(User.role, func.count(User.user_id)).group_by(User.role).all()
        counts = {role.value: 0 for role in UserRole}
        for role, count in rows:
            counts[role.value if isinstance(role, UserRole) else role] = count
        return counts

    def count(self, is_deleted: bool = None, has_mess: bool = None) -> int:
        """Count users, optionally by deletion state and mess membership"""
        query = self.db.query(func.count(User.user_id))
        if is_deleted is not None:
            query = query.filter(User.is_deleted.is_(is_deleted))
        if has_mess is not None:
            query = query.filter(
                User.mess_id.isnot(None) if has_mess else User.mess_id.is_(None)
            )
        return query.scalar() or 0

    def clear_mess(self, mess_id: UUID) -> int:
        """Detach every member from a mess"""
        return (
            self.db.query(User)
            .filter(User.mess_id == mess_id)
            .update({User.mess_id: None}, synchronize_session="fetch")
        )
