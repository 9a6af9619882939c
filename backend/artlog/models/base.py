"""
Base SQLModel classes with common fields.

Design decisions:
- Use SQLModel for combined Pydantic + SQLAlchemy functionality
- Timezone-aware timestamps on every table

Note on Column reuse: SQLAlchemy Column objects cannot be shared between
tables. When using inheritance, we must define columns without sa_column
or use sa_column_kwargs to avoid sharing Column objects.
"""

from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

__all__ = [
    "SQLModel",
    "TimestampedModel",
    "utc_now",
]


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class TimestampedModel(SQLModel):
    """
    Base class for database table models.

    Provides:
    - id: Internal integer primary key
    - created_at, updated_at: Automatic timestamps

    Note: Subclasses must set table=True to create actual tables.
    """

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),
    )
