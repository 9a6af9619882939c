"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from artlog.core.config import AggregateSettings, MetSettings, Settings, WikidataSettings
from artlog.database import create_engine, create_session_factory, init_db
from artlog.schemas.catalog import CatalogRecord
from artlog.services.met_service import MetCollectionService
from artlog.services.wikidata_service import WikidataService
from artlog.storage.memory import InMemoryDocumentStore
from artlog.storage.sql import SQLDocumentStore


@pytest.fixture
def wikidata_settings() -> WikidataSettings:
    return WikidataSettings(
        timeout=5.0,
        user_agent="artlog-tests/0.1",
        resolve_timeout=1.0,
    )


@pytest.fixture
def met_settings(tmp_path: Path) -> MetSettings:
    return MetSettings(
        timeout=5.0,
        catalog_path=str(tmp_path / "met_database.csv"),
    )


@pytest.fixture
def aggregate_settings() -> AggregateSettings:
    return AggregateSettings(max_attempts=5, default_top_limit=10)


@pytest.fixture
def test_settings(
    tmp_path: Path,
    wikidata_settings: WikidataSettings,
    met_settings: MetSettings,
    aggregate_settings: AggregateSettings,
) -> Settings:
    """Test settings with a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        debug=False,
        wikidata=wikidata_settings,
        met=met_settings,
        aggregate=aggregate_settings,
    )


@pytest.fixture
async def wikidata_service(wikidata_settings: WikidataSettings) -> AsyncGenerator[WikidataService, None]:
    service = WikidataService(settings=wikidata_settings)
    yield service
    await service.close()


@pytest.fixture
async def met_service(met_settings: MetSettings) -> AsyncGenerator[MetCollectionService, None]:
    service = MetCollectionService(settings=met_settings)
    yield service
    await service.close()


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
async def test_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_engine(test_settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SQLDocumentStore:
    return SQLDocumentStore(session_factory)


@pytest.fixture
def sunflowers() -> CatalogRecord:
    """A catalog record with its artist identity filled in."""
    return CatalogRecord(
        id="436524",
        object_number="49.41",
        is_public_domain=True,
        department="European Paintings",
        object_name="Painting",
        title="Sunflowers",
        artist_display_name="Vincent van Gogh",
        artist_nationality="Dutch",
        artist_ulan_url="http://vocab.getty.edu/page/ulan/500115588",
        artist_wikidata_url="https://www.wikidata.org/wiki/Q5582",
        object_date="1887",
        medium="Oil on canvas",
        classification="Paintings",
        tags="Flowers|Still Life",
    )


@pytest.fixture
def catalog_records(sunflowers: CatalogRecord) -> list[CatalogRecord]:
    return [
        sunflowers,
        CatalogRecord(
            id="437980",
            title="Wheat Field with Cypresses",
            artist_display_name="Vincent van Gogh",
            department="European Paintings",
            object_name="Painting",
            classification="Paintings",
            tags="Landscapes|Cypresses",
        ),
        CatalogRecord(
            id="10481",
            title="The Sunflower Quilt",
            artist_display_name="",
            department="The American Wing",
            object_name="Quilt",
            classification="Textiles",
        ),
        CatalogRecord(
            id="544740",
            title="Seated statue of Hatshepsut",
            department="Egyptian Art",
            object_name="Statue",
            classification="Sculpture",
            tags="Queens|Sphinxes",
        ),
    ]
