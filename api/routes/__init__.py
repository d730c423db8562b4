"""API routes package"""

from . import health, users, mess, meals, expenses, deposits, dashboard, analytics, reports

__all__ = [
    "health",
    "users",
    "mess",
    "meals",
    "expenses",
    "deposits",
    "dashboard",
    "analytics",
    "reports",
]
