"""
StoredDocument model - one JSON document of the SQL-backed document store.

Design notes:
- (collection, doc_id) is the natural key; the integer id is internal
- version increases by one on every write and drives optimistic commits
- data is JSONB on PostgreSQL and plain JSON elsewhere
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Column, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field

from artlog.models.base import TimestampedModel

__all__ = ["StoredDocument"]


class StoredDocument(TimestampedModel, table=True):
    """A versioned JSON document keyed by collection and document ID."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc_id"),
        Index("idx_documents_collection", "collection"),
    )

    collection: str = Field(
        sa_column=Column(String(100), nullable=False),
        max_length=100,
    )
    doc_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        max_length=255,
    )
    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False),
        ge=1,
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )
