"""
Pydantic schemas and value types.

Re-exports all schemas for convenient importing:
    from artlog.schemas import CatalogRecord, ArtistDetails, ReviewDraft
"""

from artlog.schemas.artist import (
    PRESENT,
    UNKNOWN,
    ArtistAggregate,
    ArtistDetails,
    ArtistIdentity,
    TopArtist,
)
from artlog.schemas.catalog import COLUMN_LAYOUTS, CatalogRecord, ColumnLayout
from artlog.schemas.claims import ClaimValue, MissingClaim, ObjectClaim, StringClaim
from artlog.schemas.enums import ArtworkSource, CatalogLayout
from artlog.schemas.journal import (
    ArtworkDocument,
    ArtworkDraft,
    ReviewDocument,
    ReviewDraft,
    SubmissionResult,
)

__all__ = [
    # Enums
    "ArtworkSource",
    "CatalogLayout",
    # Catalog
    "CatalogRecord",
    "ColumnLayout",
    "COLUMN_LAYOUTS",
    # Claims
    "ClaimValue",
    "StringClaim",
    "ObjectClaim",
    "MissingClaim",
    # Artist
    "UNKNOWN",
    "PRESENT",
    "ArtistIdentity",
    "ArtistDetails",
    "ArtistAggregate",
    "TopArtist",
    # Journal
    "ArtworkDraft",
    "ReviewDraft",
    "ArtworkDocument",
    "ReviewDocument",
    "SubmissionResult",
]
