"""Tests for JournalRepository."""

from __future__ import annotations

from datetime import date

import pytest

from artlog.schemas.journal import ArtworkDraft, ReviewDraft
from artlog.services.exceptions import PersistenceError
from artlog.services.journal_repository import (
    ARTWORKS_COLLECTION,
    REVIEWS_COLLECTION,
    JournalRepository,
)
from artlog.storage.errors import StorageError
from artlog.storage.memory import InMemoryDocumentStore


class BrokenStore(InMemoryDocumentStore):
    async def set(self, collection, doc_id, data):
        raise StorageError("connection lost")


@pytest.fixture
def repository(memory_store) -> JournalRepository:
    return JournalRepository(memory_store)


def stored_review(user_id: str, created_at: str, **extra) -> dict:
    return {
        "userId": user_id,
        "metSourceId": "436524",
        "dateViewed": "2024-05-01",
        "createdAt": created_at,
        **extra,
    }


class TestSave:
    async def test_save_artwork(self, repository, memory_store):
        artwork = ArtworkDraft(title="The Starry Night", artist="Vincent van Gogh", date="1889")

        artwork_id = await repository.save_artwork("alice", artwork)

        assert artwork_id == artwork.id
        stored = await repository.get_artwork(artwork_id)
        assert stored.user_id == "alice"
        assert stored.title == "The Starry Night"
        assert stored.date == "1889"

    async def test_get_missing_artwork(self, repository):
        assert await repository.get_artwork("nope") is None

    async def test_get_malformed_artwork(self, repository, memory_store):
        await memory_store.set(ARTWORKS_COLLECTION, "no-title", {"userId": "alice", "artist": "Vermeer"})

        assert await repository.get_artwork("no-title") is None

    async def test_save_review_needs_exactly_one_artwork_reference(self, repository):
        review = ReviewDraft(date_viewed=date(2024, 5, 1))

        with pytest.raises(PersistenceError):
            await repository.save_review("alice", review)

        with pytest.raises(PersistenceError):
            await repository.save_review("alice", review, artwork_id="a1", met_source_id="436524")

    async def test_storage_failure_becomes_persistence_error(self):
        repository = JournalRepository(BrokenStore())

        with pytest.raises(PersistenceError) as exc_info:
            await repository.save_artwork("alice", ArtworkDraft(title="Irises"))

        assert exc_info.value.entity == "artwork"
        assert "connection lost" in str(exc_info.value)


class TestGetUserReviews:
    async def test_newest_first(self, repository, memory_store):
        await memory_store.set(REVIEWS_COLLECTION, "old", stored_review("alice", "2024-01-01T10:00:00Z"))
        await memory_store.set(REVIEWS_COLLECTION, "new", stored_review("alice", "2024-06-01T10:00:00Z"))
        await memory_store.set(REVIEWS_COLLECTION, "mid", stored_review("alice", "2024-03-01T10:00:00Z"))
        await memory_store.set(REVIEWS_COLLECTION, "bob", stored_review("bob", "2024-04-01T10:00:00Z"))

        reviews = await repository.get_user_reviews("alice")

        assert [review.id for review in reviews] == ["new", "mid", "old"]
        assert reviews[0].met_source_id == "436524"

    async def test_malformed_documents_are_skipped(self, repository, memory_store):
        await memory_store.set(REVIEWS_COLLECTION, "ok", stored_review("alice", "2024-01-01T10:00:00Z"))
        await memory_store.set(REVIEWS_COLLECTION, "no-date", {"userId": "alice", "artworkId": "a1"})
        await memory_store.set(
            REVIEWS_COLLECTION,
            "two-refs",
            stored_review("alice", "2024-01-02T10:00:00Z", artworkId="a1"),
        )

        reviews = await repository.get_user_reviews("alice")

        assert [review.id for review in reviews] == ["ok"]

    async def test_saved_review_round_trips(self, repository, memory_store):
        review = ReviewDraft(
            date_viewed=date(2024, 5, 1),
            location="The Met",
            review_text="Glowing.",
            artist_wikidata_url="https://www.wikidata.org/wiki/Q5582",
        )
        await repository.save_review("alice", review, met_source_id="436524")

        (loaded,) = await repository.get_user_reviews("alice")

        assert loaded.id == review.id
        assert loaded.date_viewed == date(2024, 5, 1)
        assert loaded.review_text == "Glowing."
        assert loaded.artist_wikidata_url == "https://www.wikidata.org/wiki/Q5582"
        assert await memory_store.get(ARTWORKS_COLLECTION, review.id) is None
