"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import User
from domain.models.mess import Mess, DEFAULT_MEAL_RATE
from domain.models.meal import Meal
from domain.models.finance import Expense, Deposit

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Models
    "User",
    "Mess",
    "Meal",
    "Expense",
    "Deposit",
    "DEFAULT_MEAL_RATE",
]
