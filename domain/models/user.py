"""
User account model.
"""

from sqlalchemy import (
    Column,
    Text,
    Boolean,
    TIMESTAMP,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import UserRole, enum_values


class User(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, unique=True, nullable=False)
    phone = Column(Text)
    role = Column(
        SQLEnum(UserRole, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=UserRole.USER,
    )
    # A user belongs to at most one mess; membership is read from this column.
    mess_id = Column(Uuid, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
