"""
Mess Repository - Data access layer for messes and their membership
"""

from typing import List, Optional, Set
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Mess, User


class MessRepository(BaseRepository[Mess]):
    """Repository for mess data access"""

    id_field = "mess_id"

    def __init__(self, db: Session):
        super().__init__(db, Mess)

    def list_all(self) -> List[Mess]:
        """Get all messes ordered by name"""
        return self.db.query(Mess).order_by(Mess.name).all()

    def member_ids(self, mess_id: UUID) -> Set[UUID]:
        """Ids of the users currently in the mess"""
        rows = self.db.query(User.user_id).filter(User.mess_id == mess_id).all()
        return {row.user_id for row in rows}

    def member_count(self, mess_id: UUID) -> int:
        """Number of current members; the divisor of the equal expense split"""
        return self.db.query(User).filter(User.mess_id == mess_id).count()

    def add_member(self, mess: Mess, user: User) -> Mess:
        """Attach a user to the mess"""
        user.mess_id = mess.mess_id
        self.db.commit()
        self.db.expire(mess, ["members"])
        self.db.refresh(mess)
        return mess

    def remove_member(self, mess: Mess, user: User) -> Mess:
        """Detach a user from the mess"""
        user.mess_id = None
        self.db.commit()
        self.db.expire(mess, ["members"])
        self.db.refresh(mess)
        return mess

    def save_meal_rate(self, mess: Mess, meal_rate: float) -> Optional[Mess]:
        """Write back a recomputed meal rate"""
        mess.meal_rate = meal_rate
        self.db.commit()
        self.db.refresh(mess)
        return mess

    def managed_by(self, user_id: UUID) -> Optional[Mess]:
        """The mess a user manages, if any"""
        return self.db.query(Mess).filter(Mess.manager_id == user_id).first()
