"""
Authorization checks shared by the services.

Roles: admins manage messes and accounts; the mess manager records meals,
expenses and deposits; members read their own mess.
"""

import logging
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Mess, User
from repositories.mess_repository import MessRepository
from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError

logger = logging.getLogger("messmate.access")


def get_mess_or_404(db: Session, mess_id: UUID) -> Mess:
    mess = MessRepository(db).get_by_id(mess_id)
    if not mess:
        raise NotFoundError(f"Mess {mess_id} not found")
    return mess


def is_manager(mess: Mess, user: User) -> bool:
    return mess.manager_id == user.user_id


def is_member(mess: Mess, user: User) -> bool:
    return user.mess_id == mess.mess_id or is_manager(mess, user)


def ensure_admin(user: User, message: str = "Admin access required") -> None:
    if not user.is_admin:
        logger.warning(f"admin_required user_id={user.user_id}")
        raise ForbiddenError(message)


def ensure_manager(mess: Mess, user: User, action: str) -> None:
    """Only the mess manager may perform ``action``"""
    if not is_manager(mess, user):
        logger.warning(
            f"manager_required mess_id={mess.mess_id} user_id={user.user_id} action={action}"
        )
        raise ForbiddenError(f"Only mess managers can {action}")


def ensure_manager_or_admin(mess: Mess, user: User, action: str) -> None:
    if not (user.is_admin or is_manager(mess, user)):
        logger.warning(
            f"manager_required mess_id={mess.mess_id} user_id={user.user_id} action={action}"
        )
        raise ForbiddenError(f"Only the mess manager or an admin can {action}")


def ensure_member(mess: Mess, user: User) -> None:
    """Members, the manager and admins may read a mess"""
    if not (user.is_admin or is_member(mess, user)):
        logger.warning(f"access_denied mess_id={mess.mess_id} user_id={user.user_id}")
        raise ForbiddenError("Access denied to this mess")


def ensure_in_mess(mess: Mess, user_id: UUID, message: str) -> None:
    """The target user of a record must currently belong to the mess"""
    if user_id not in mess.member_ids:
        raise ServiceValidationError(message, details={"user_id": str(user_id)})
