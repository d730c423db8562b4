"""
Money movement models: expenses paid for the mess and member deposits.
"""

from sqlalchemy import (
    Column,
    Text,
    Float,
    Date,
    TIMESTAMP,
    ForeignKey,
    Uuid,
    CheckConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import ExpenseCategory, enum_values


class Expense(Base):
    """Money spent on behalf of the mess"""

    __tablename__ = "expense"

    expense_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    mess_id = Column(
        Uuid, ForeignKey("mess.mess_id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(
        SQLEnum(ExpenseCategory, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=ExpenseCategory.FOOD,
    )
    added_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    expensed_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    date = Column(Date, nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    mess = relationship("Mess", back_populates="expenses")
    added_by_user = relationship("User", foreign_keys=[added_by])
    expensed_by_user = relationship("User", foreign_keys=[expensed_by])

    __table_args__ = (CheckConstraint("amount > 0", name="ck_expense_amount_pos"),)


class Deposit(Base):
    """Money a member paid into the mess fund"""

    __tablename__ = "deposit"

    deposit_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    mess_id = Column(
        Uuid, ForeignKey("mess.mess_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    mess = relationship("Mess", back_populates="deposits")
    user = relationship("User")

    __table_args__ = (CheckConstraint("amount >= 1", name="ck_deposit_amount_min"),)
