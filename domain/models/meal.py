"""
Meal log model.
"""

from sqlalchemy import (
    Column,
    Text,
    Float,
    Date,
    Boolean,
    JSON,
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
from domain.enums import MealStatus, MealType, enum_values


class Meal(Base):
    """Breakfast/lunch/dinner unit counts for one member on one date"""

    __tablename__ = "meal"

    meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    mess_id = Column(
        Uuid, ForeignKey("mess.mess_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    date = Column(Date, nullable=False, index=True)
    breakfast = Column(Float, nullable=False, default=0)
    lunch = Column(Float, nullable=False, default=0)
    dinner = Column(Float, nullable=False, default=0)
    status = Column(
        SQLEnum(MealStatus, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=MealStatus.TAKEN,
    )
    is_guest = Column(Boolean, nullable=False, default=False)
    guest_name = Column(Text)
    meal_type = Column(
        SQLEnum(MealType, native_enum=False, values_callable=enum_values),
        nullable=False,
        default=MealType.REGULAR,
    )
    preferences = Column(JSON)
    cost = Column(Float)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    mess = relationship("Mess", back_populates="meals")
    user = relationship("User")

    __table_args__ = (
        CheckConstraint(
            "breakfast >= 0 AND lunch >= 0 AND dinner >= 0",
            name="ck_meal_units_nonneg",
        ),
    )

    @property
    def units(self) -> float:
        return (self.breakfast or 0) + (self.lunch or 0) + (self.dinner or 0)
