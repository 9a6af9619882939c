"""
Journal service - the artwork logging flow on top of the enrichment clients.

Key methods:
- prepare_manual_artwork() - Resolve the artist identity of a typed-in artwork
- prepare_catalog_artwork() - Build a draft from a catalog record
- submit_review() - Save artwork and review, then count the artist
- search_catalog() - Local catalog search with API images for the first hits
- get_artist_details() / top_artists() / get_user_reviews() - read side

The service holds no state of its own; every collaborator is passed in.
"""

from __future__ import annotations

import asyncio
import logging

from artlog.core.config import Settings, get_settings
from artlog.schemas.artist import ArtistDetails, ArtistIdentity, TopArtist
from artlog.schemas.catalog import CatalogRecord
from artlog.schemas.enums import ArtworkSource
from artlog.schemas.journal import ArtworkDraft, ReviewDocument, ReviewDraft, SubmissionResult
from artlog.services.artist_aggregate_service import ArtistAggregateService
from artlog.services.catalog_index import CatalogIndex
from artlog.services.journal_repository import JournalRepository
from artlog.services.met_service import MetCollectionService
from artlog.services.wikidata_service import WikidataService

logger = logging.getLogger(__name__)


class JournalService:
    """
    Orchestrates identity resolution, persistence and aggregation.

    Usage:
        journal = JournalService(catalog, wikidata, met, repository, aggregates)
        draft = await journal.prepare_manual_artwork(ArtworkDraft(title=..., artist=...))
        result = await journal.submit_review(user_id, draft, review)
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        wikidata: WikidataService,
        met: MetCollectionService,
        repository: JournalRepository,
        aggregates: ArtistAggregateService,
        settings: Settings | None = None,
    ):
        self.catalog = catalog
        self.wikidata = wikidata
        self.met = met
        self.repository = repository
        self.aggregates = aggregates
        self.settings = settings or get_settings()

    async def _resolve_identity(self, artist_name: str) -> ArtistIdentity:
        timeout = self.settings.wikidata.resolve_timeout
        try:
            return await asyncio.wait_for(
                self.wikidata.resolve_identity(artist_name), timeout=timeout
            )
        except TimeoutError:
            logger.warning(f"Identity resolution for '{artist_name}' timed out after {timeout}s")
            return ArtistIdentity()

    async def prepare_manual_artwork(self, artwork: ArtworkDraft) -> ArtworkDraft:
        """
        Attach the artist's identity URLs to a manually entered artwork.

        Never fails: an unresolved or timed-out lookup leaves both URLs None.
        """
        identity = await self._resolve_identity(artwork.artist)
        return artwork.with_identity(identity)

    async def prepare_catalog_artwork(self, record: CatalogRecord) -> ArtworkDraft:
        """
        Draft for a catalog artwork.

        The record's own identity URLs are used when it has them; otherwise
        the artist name is resolved like a manual entry.
        """
        artwork = ArtworkDraft.from_catalog(record)
        if artwork.artist_wikidata_url or not artwork.artist:
            return artwork
        return artwork.with_identity(await self._resolve_identity(artwork.artist))

    async def submit_review(
        self, user_id: str, artwork: ArtworkDraft, review: ReviewDraft
    ) -> SubmissionResult:
        """
        Save a review (and a manual artwork) and count the artist.

        The review gets a snapshot of the artwork's image and identity URLs.
        Catalog artworks are referenced by ``metSourceId`` and not stored
        separately.

        Raises:
            PersistenceError: The artwork or review could not be saved

        The aggregate update runs only after the review is saved, and its
        failure is logged, not raised.
        """
        review = review.with_artwork_snapshot(artwork)

        artwork_id = None
        if artwork.source == ArtworkSource.CATALOG:
            review_id = await self.repository.save_review(
                user_id, review, met_source_id=artwork.met_source_id
            )
        else:
            artwork_id = await self.repository.save_artwork(user_id, artwork)
            review_id = await self.repository.save_review(user_id, review, artwork_id=artwork_id)

        aggregate_updated = False
        if review.artist_wikidata_url:
            try:
                await self.aggregates.increment(user_id, review.artist_wikidata_url)
                aggregate_updated = True
            except Exception:
                # The review is already saved; a missed count must not fail the submission
                logger.exception(
                    f"Artist aggregate update failed for review {review_id} "
                    f"({review.artist_wikidata_url})"
                )

        return SubmissionResult(
            review_id=review_id,
            artwork_id=artwork_id,
            aggregate_updated=aggregate_updated,
        )

    async def search_catalog(self, query: str) -> list[CatalogRecord]:
        """
        Search the catalog and add API images to the first matches.

        At most ``max_enriched_results`` matches are returned, in search
        order. Results are returned once every enrichment has settled; a
        failed enrichment keeps the record as it was.
        """
        limit = self.settings.met.max_enriched_results
        matches = self.catalog.search(query)[:limit]
        if not matches:
            return []

        enriched = await asyncio.gather(
            *(self.met.enrich(record) for record in matches),
            return_exceptions=True,
        )

        results = []
        for record, outcome in zip(matches, enriched):
            if isinstance(outcome, BaseException):
                logger.warning(f"Enrichment of object {record.id} raised: {outcome!r}")
                results.append(record)
            else:
                results.append(outcome)
        return results

    async def get_artist_details(self, wikidata_url: str) -> ArtistDetails | None:
        return await self.wikidata.fetch_details(wikidata_url)

    async def top_artists(self, user_id: str, limit: int | None = None) -> list[TopArtist]:
        """A user's top artists with display names looked up concurrently."""
        top = await self.aggregates.get_top(user_id, limit)
        names = await asyncio.gather(
            *(self.wikidata.get_artist_name(artist.identity_url) for artist in top)
        )
        return [artist.model_copy(update={"name": name}) for artist, name in zip(top, names)]

    async def get_user_reviews(self, user_id: str) -> list[ReviewDocument]:
        return await self.repository.get_user_reviews(user_id)
