"""
Service wiring.

Builds each service once per session and passes it to the services that
need it, so caches and HTTP sessions are shared and nothing is global.

Usage:
    async with open_journal() as journal:
        results = await journal.search_catalog("sunflowers")
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from artlog.core.config import Settings, get_settings
from artlog.database import create_engine, create_session_factory, init_db
from artlog.services.artist_aggregate_service import ArtistAggregateService
from artlog.services.catalog_index import CatalogIndex
from artlog.services.journal_repository import JournalRepository
from artlog.services.journal_service import JournalService
from artlog.services.met_service import MetCollectionService
from artlog.services.wikidata_service import WikidataService
from artlog.storage.base import DocumentStore
from artlog.storage.sql import SQLDocumentStore

__all__ = ["build_journal_service", "open_journal"]


def build_journal_service(
    store: DocumentStore,
    settings: Settings | None = None,
    catalog: CatalogIndex | None = None,
) -> JournalService:
    """Wire a JournalService around an existing store."""
    settings = settings or get_settings()
    wikidata = WikidataService(settings=settings.wikidata)
    return JournalService(
        catalog=catalog if catalog is not None else CatalogIndex(),
        wikidata=wikidata,
        met=MetCollectionService(settings=settings.met),
        repository=JournalRepository(store),
        aggregates=ArtistAggregateService(store, wikidata, settings=settings.aggregate),
        settings=settings,
    )


@asynccontextmanager
async def open_journal(
    settings: Settings | None = None,
    load_catalog: bool = True,
) -> AsyncGenerator[JournalService, None]:
    """
    JournalService on the configured SQL database.

    Creates missing tables, loads the bundled catalog, and closes HTTP
    sessions and the engine on exit.
    """
    settings = settings or get_settings()
    engine = create_engine(settings)
    journal: JournalService | None = None
    try:
        await init_db(engine)

        catalog = CatalogIndex()
        if load_catalog:
            catalog.load(settings.met)

        journal = build_journal_service(
            SQLDocumentStore(create_session_factory(engine)), settings=settings, catalog=catalog
        )
        yield journal
    finally:
        if journal is not None:
            await journal.wikidata.close()
            await journal.met.close()
        await engine.dispose()
