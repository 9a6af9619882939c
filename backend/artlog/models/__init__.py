"""
SQLModel/SQLAlchemy ORM models.

Import specific models directly:
    from artlog.models.document import StoredDocument
"""

# Re-export SQLModel for convenience
from sqlmodel import SQLModel

from artlog.models.base import TimestampedModel
from artlog.models.document import StoredDocument

__all__ = [
    "SQLModel",
    "TimestampedModel",
    "StoredDocument",
]
