"""
Services package - business logic layer.

Re-exports all service classes for convenient importing.
"""

from artlog.services.artist_aggregate_service import ArtistAggregateService
from artlog.services.catalog_index import CatalogIndex
from artlog.services.catalog_parser import DelimitedCatalogParser
from artlog.services.journal_repository import JournalRepository
from artlog.services.journal_service import JournalService
from artlog.services.met_service import MetCollectionService
from artlog.services.wikidata_service import WikidataService

__all__ = [
    "ArtistAggregateService",
    "CatalogIndex",
    "DelimitedCatalogParser",
    "JournalRepository",
    "JournalService",
    "MetCollectionService",
    "WikidataService",
]
