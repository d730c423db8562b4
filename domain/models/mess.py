"""
Mess (shared household) model.
"""

from sqlalchemy import Column, Text, Float, TIMESTAMP, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base

DEFAULT_MEAL_RATE = 50.0


class Mess(Base):
    """A group of members sharing meals and expenses"""

    __tablename__ = "mess"

    mess_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    description = Column(Text)
    address = Column(Text)
    manager_id = Column(Uuid, ForeignKey("app_user.user_id"), nullable=False)
    # Cached result of the last meal-rate recomputation
    meal_rate = Column(Float, nullable=False, default=DEFAULT_MEAL_RATE)
    currency = Column(Text, nullable=False, default="৳")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    manager = relationship("User", foreign_keys=[manager_id])
    members = relationship(
        "User",
        primaryjoin="Mess.mess_id == foreign(User.mess_id)",
        viewonly=True,
        order_by="User.name",
    )
    meals = relationship("Meal", back_populates="mess", cascade="all, delete-orphan")
    expenses = relationship(
        "Expense", back_populates="mess", cascade="all, delete-orphan"
    )
    deposits = relationship(
        "Deposit", back_populates="mess", cascade="all, delete-orphan"
    )

    @property
    def member_ids(self) -> set:
        return {member.user_id for member in self.members}
