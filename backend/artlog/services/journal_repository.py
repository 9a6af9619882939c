"""
Artwork and review persistence on the document store.

Key methods:
- save_artwork() - Store a manually entered artwork
- save_review() - Store a review of a manual or catalog artwork
- get_user_reviews() - A user's reviews, newest first
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from artlog.schemas.journal import ArtworkDocument, ArtworkDraft, ReviewDocument, ReviewDraft
from artlog.services.exceptions import PersistenceError
from artlog.storage.base import DocumentStore
from artlog.storage.errors import StorageError

logger = logging.getLogger(__name__)

ARTWORKS_COLLECTION = "artworks"
REVIEWS_COLLECTION = "reviews"


class JournalRepository:
    """Reads and writes artwork and review documents."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def save_artwork(self, user_id: str, artwork: ArtworkDraft) -> str:
        """Store a manual artwork under its draft ID and return the ID."""
        document = ArtworkDocument.from_draft(user_id, artwork)
        try:
            await self.store.set(ARTWORKS_COLLECTION, artwork.id, document.to_document())
        except StorageError as e:
            logger.error(f"Saving artwork {artwork.id} failed: {e}")
            raise PersistenceError("artwork", str(e)) from e
        return artwork.id

    async def save_review(
        self,
        user_id: str,
        review: ReviewDraft,
        artwork_id: str | None = None,
        met_source_id: str | None = None,
    ) -> str:
        """
        Store a review and return its ID.

        Pass ``artwork_id`` for a manual artwork or ``met_source_id`` for a
        catalog artwork.
        """
        try:
            document = ReviewDocument.from_draft(
                user_id, review, artwork_id=artwork_id, met_source_id=met_source_id
            )
        except PydanticValidationError as e:
            raise PersistenceError("review", "review must reference exactly one artwork") from e

        try:
            await self.store.set(REVIEWS_COLLECTION, review.id, document.to_document())
        except StorageError as e:
            logger.error(f"Saving review {review.id} failed: {e}")
            raise PersistenceError("review", str(e)) from e
        return review.id

    async def get_user_reviews(self, user_id: str) -> list[ReviewDocument]:
        """All reviews by a user, newest first; malformed documents are skipped."""
        rows = await self.store.query(REVIEWS_COLLECTION, userId=user_id)

        reviews = []
        for doc_id, data in rows:
            try:
                reviews.append(ReviewDocument.model_validate({**data, "id": doc_id}))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed review {doc_id}: {e}")

        reviews.sort(key=lambda review: review.created_at, reverse=True)
        return reviews

    async def get_artwork(self, artwork_id: str) -> ArtworkDocument | None:
        """One artwork, or None when it is absent or malformed."""
        data = await self.store.get(ARTWORKS_COLLECTION, artwork_id)
        if data is None:
            return None
        try:
            return ArtworkDocument.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Malformed artwork {artwork_id}: {e}")
            return None
