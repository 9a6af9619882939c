"""Tests for service wiring."""

from datetime import date
from pathlib import Path

import pytest

from artlog.core.config import Settings
from artlog.deps import build_journal_service, open_journal
from artlog.schemas.journal import ArtworkDraft, ReviewDraft
from artlog.services.exceptions import NotFoundError
from artlog.storage.memory import InMemoryDocumentStore


def test_build_shares_one_wikidata_client(test_settings: Settings):
    journal = build_journal_service(InMemoryDocumentStore(), settings=test_settings)

    assert journal.aggregates.wikidata is journal.wikidata
    assert journal.aggregates.store is journal.repository.store
    assert journal.settings is test_settings
    assert not journal.catalog.is_loaded


async def test_open_journal_uses_sql_store(test_settings: Settings):
    async with open_journal(test_settings, load_catalog=False) as journal:
        artwork = ArtworkDraft(title="Irises", artist="")
        review = ReviewDraft(date_viewed=date(2024, 5, 1))

        result = await journal.submit_review("alice", artwork, review)
        reviews = await journal.get_user_reviews("alice")

    assert result.aggregate_updated is False
    assert [r.id for r in reviews] == [review.id]
    assert Path(test_settings.database_url.removeprefix("sqlite+aiosqlite:///")).is_file()


async def test_open_journal_loads_catalog(test_settings: Settings):
    Path(test_settings.met.catalog_path).write_text("header\n" + "," * 52 + "\n", encoding="utf-8")

    async with open_journal(test_settings) as journal:
        assert journal.catalog.is_loaded
        assert journal.catalog.count() == 1


async def test_open_journal_without_catalog_file(test_settings: Settings):
    with pytest.raises(NotFoundError):
        async with open_journal(test_settings):
            pass
