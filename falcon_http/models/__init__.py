"""
Models package for Falcon HTTP.

Exports all SQLAlchemy models for database operations.
"""

from .document import StoreDocument

__all__ = [
    "StoreDocument",
]
