"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.mess_repository import MessRepository
from repositories.meal_repository import MealRepository
from repositories.expense_repository import ExpenseRepository
from repositories.deposit_repository import DepositRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MessRepository",
    "MealRepository",
    "ExpenseRepository",
    "DepositRepository",
]
