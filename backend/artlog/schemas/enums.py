"""
Enum definitions for the Artlog package.

All enums are defined as StrEnum so they serialize as plain strings in
stored documents and environment variables.
"""

from enum import StrEnum

__all__ = [
    "CatalogLayout",
    "ArtworkSource",
]


class CatalogLayout(StrEnum):
    """
    Column layout of the bundled Met catalog CSV.

    The two layouts carry no version tag in the data, so the parser is
    configured for exactly one of them.
    """

    LEGACY_42 = "legacy_42"
    CURRENT_53 = "current_53"


class ArtworkSource(StrEnum):
    """Where an artwork draft came from."""

    MANUAL = "manual"
    CATALOG = "catalog"
