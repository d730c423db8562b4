"""
Domain layer: ORM models, request/response schemas and enums for messes,
members, meals, expenses and deposits.
"""

from domain import enums, models, schemas

__all__ = ["enums", "models", "schemas"]
