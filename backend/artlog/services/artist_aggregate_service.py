"""
Per-user artist aggregates: how often each artist was logged, plus one
representative image.

All of a user's aggregates live in one document of the ``artists``
collection, keyed by the artist's Wikidata URL:

    {"https://www.wikidata.org/wiki/Q5582": {"count": 3, "imageURL": "..."}}

Older documents hold a bare integer instead of the object.
"""

from __future__ import annotations

import logging

from artlog.core.config import AggregateSettings, get_settings
from artlog.schemas.artist import ArtistAggregate, TopArtist
from artlog.services.exceptions import AggregateWriteError
from artlog.services.wikidata_service import WikidataService
from artlog.storage.base import DocumentStore, Transaction
from artlog.storage.errors import StorageError

logger = logging.getLogger(__name__)

ARTISTS_COLLECTION = "artists"


class ArtistAggregateService:
    """
    Maintains artist view counts per user.

    Increments run as store transactions so concurrent submissions for the
    same artist never lose a count. The image is first-write-wins: once an
    aggregate has an image URL it is never replaced.
    """

    def __init__(
        self,
        store: DocumentStore,
        wikidata: WikidataService,
        settings: AggregateSettings | None = None,
    ):
        self.store = store
        self.wikidata = wikidata
        self.settings = settings or get_settings().aggregate

    async def increment(self, user_id: str, identity_url: str | None) -> ArtistAggregate | None:
        """
        Add one view of an artist for a user.

        Returns:
            The aggregate as committed, or None when ``identity_url`` is empty

        Raises:
            AggregateWriteError: The transaction could not be committed
        """
        if not identity_url:
            return None

        # Candidate image, only written if the aggregate has none yet
        candidate_image = await self.wikidata.get_artist_image_url(identity_url)

        async def apply(transaction: Transaction) -> ArtistAggregate:
            document = await transaction.get(ARTISTS_COLLECTION, user_id) or {}
            current = ArtistAggregate.from_stored(document.get(identity_url))

            if current is None:
                updated = ArtistAggregate(count=1, image_url=candidate_image)
            else:
                updated = ArtistAggregate(
                    count=current.count + 1,
                    image_url=current.image_url or candidate_image,
                )

            document[identity_url] = updated.to_stored()
            transaction.set(ARTISTS_COLLECTION, user_id, document)
            return updated

        try:
            aggregate = await self.store.run_transaction(
                apply, max_attempts=self.settings.max_attempts
            )
        except StorageError as e:
            logger.error(f"Aggregate update for user {user_id} and {identity_url} failed: {e}")
            raise AggregateWriteError(user_id, identity_url, str(e)) from e

        logger.debug(f"Artist {identity_url} now has {aggregate.count} views for user {user_id}")
        return aggregate

    async def get_counts(self, user_id: str) -> dict[str, ArtistAggregate]:
        """All aggregates of a user; unreadable entries are skipped."""
        document = await self.store.get(ARTISTS_COLLECTION, user_id) or {}

        counts = {}
        for identity_url, value in document.items():
            aggregate = ArtistAggregate.from_stored(value)
            if aggregate is None:
                logger.warning(f"Skipping unreadable aggregate for {identity_url}: {value!r}")
                continue
            counts[identity_url] = aggregate
        return counts

    async def get_top(self, user_id: str, limit: int | None = None) -> list[TopArtist]:
        """A user's most-viewed artists, highest count first."""
        limit = self.settings.default_top_limit if limit is None else limit
        if limit <= 0:
            return []

        counts = await self.get_counts(user_id)
        ranked = sorted(counts.items(), key=lambda item: item[1].count, reverse=True)
        return [
            TopArtist(identity_url=identity_url, count=aggregate.count, image_url=aggregate.image_url)
            for identity_url, aggregate in ranked[:limit]
        ]
