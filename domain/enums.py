"""
Domain enums for MessMate application.
Contains all enumeration types used across the domain models.
"""

import enum


class UserRole(str, enum.Enum):
    """Account roles, from least to most privileged"""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class ExpenseCategory(str, enum.Enum):
    """Expense categories"""

    FOOD = "food"
    UTILITIES = "utilities"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class MealStatus(str, enum.Enum):
    """Whether a logged meal was eaten"""

    TAKEN = "taken"
    SKIPPED = "skipped"


class MealType(str, enum.Enum):
    """Kind of meal day"""

    REGULAR = "regular"
    OFFDAY = "offday"
    SPECIAL = "special"


class CleanupType(str, enum.Enum):
    """Record families removable through the admin cleanup endpoint"""

    MEALS = "meals"
    EXPENSES = "expenses"
    DEPOSITS = "deposits"
    ALL = "all"


def enum_values(enum_cls):
    """Persist enum values ("food") rather than member names ("FOOD")."""
    return [member.value for member in enum_cls]
