"""
Backend resource services.

Each module maps one REST resource onto plain functions that take an
``ApiClient`` and return pydantic models.
"""

from __future__ import annotations

from pos_admin.services import categories, products, reports, users

__all__ = ["categories", "products", "reports", "users"]
