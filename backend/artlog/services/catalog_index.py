"""
In-memory index over the parsed Met catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from artlog.core.config import MetSettings, get_settings
from artlog.schemas.catalog import CatalogRecord
from artlog.services.catalog_parser import DelimitedCatalogParser
from artlog.services.exceptions import NotFoundError, ServiceError

logger = logging.getLogger(__name__)

__all__ = ["SEARCH_FIELDS", "CatalogIndex"]

SEARCH_FIELDS = (
    "title",
    "artist_display_name",
    "object_name",
    "department",
    "classification",
    "tags",
)


class CatalogIndex:
    """
    Holds catalog records for substring search and ID lookup.

    The catalog is a few tens of thousands of rows, so both search and
    lookup are linear scans.
    """

    def __init__(self, records: Iterable[CatalogRecord] = ()):
        self._records: list[CatalogRecord] = list(records)
        self.is_loaded = bool(self._records)

    def load(self, settings: MetSettings | None = None) -> int:
        """
        Load the bundled catalog file once.

        Returns:
            Number of records in the index

        Raises:
            NotFoundError: The catalog file does not exist
            ServiceError: The file could not be read
        """
        if self.is_loaded:
            return self.count()

        settings = settings or get_settings().met
        path = Path(settings.catalog_path)
        if not path.is_file():
            raise NotFoundError("Met database CSV file", str(path))

        try:
            raw_text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ServiceError(f"Failed to read CSV file: {e}") from e

        parser = DelimitedCatalogParser(settings.catalog_layout)
        self._records = parser.parse(raw_text)
        self.is_loaded = True
        logger.info(f"Loaded {len(self._records)} catalog records from {path}")
        return self.count()

    def search(self, query: str) -> list[CatalogRecord]:
        """Case-insensitive substring match on any of SEARCH_FIELDS."""
        normalized = query.strip().lower()
        if not normalized:
            return []

        return [
            record
            for record in self._records
            if any(normalized in getattr(record, field).lower() for field in SEARCH_FIELDS)
        ]

    def get_by_id(self, object_id: str) -> CatalogRecord | None:
        """First record with exactly this ID."""
        return next((record for record in self._records if record.id == object_id), None)

    def count(self) -> int:
        return len(self._records)
