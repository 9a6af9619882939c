"""
Artwork and review schemas.

Patterns:
- ArtworkDraft / ReviewDraft: what the logging flow builds before saving
- ArtworkDocument / ReviewDocument: the stored document shape (camelCase keys)

Identity and image URLs are snapshotted onto the review at submission time
and never recomputed, so history does not depend on re-resolving artists.
"""

from __future__ import annotations

import uuid as uuid_lib
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from artlog.models.base import utc_now
from artlog.schemas.artist import ArtistIdentity
from artlog.schemas.catalog import CatalogRecord
from artlog.schemas.enums import ArtworkSource

__all__ = [
    "ArtworkDraft",
    "ReviewDraft",
    "ArtworkDocument",
    "ReviewDocument",
    "SubmissionResult",
]


def _new_id() -> str:
    return str(uuid_lib.uuid4())


class ArtworkDraft(BaseModel):
    """An artwork being logged, entered manually or picked from the catalog."""

    id: str = Field(default_factory=_new_id)
    title: str
    artist: str = ""
    date: str = ""
    medium: str = ""
    movement: str = ""
    met_source_id: str | None = None
    image_url: str | None = None
    artist_wikidata_url: str | None = None
    artist_ulan_url: str | None = None

    @property
    def source(self) -> ArtworkSource:
        if self.met_source_id:
            return ArtworkSource.CATALOG
        return ArtworkSource.MANUAL

    @property
    def identity(self) -> ArtistIdentity:
        return ArtistIdentity(
            wikidata_url=self.artist_wikidata_url,
            ulan_url=self.artist_ulan_url,
        )

    def with_identity(self, identity: ArtistIdentity) -> ArtworkDraft:
        """Copy with the artist identity URLs replaced."""
        return self.model_copy(
            update={
                "artist_wikidata_url": identity.wikidata_url,
                "artist_ulan_url": identity.ulan_url,
            }
        )

    @classmethod
    def from_catalog(cls, record: CatalogRecord) -> ArtworkDraft:
        """Build a draft from a catalog record, keeping its identity URLs."""
        return cls(
            title=record.title,
            artist=record.artist_display_name,
            date=record.object_date,
            medium=record.medium,
            met_source_id=record.id,
            image_url=record.primary_image_small or record.primary_image or None,
            artist_wikidata_url=record.artist_wikidata_url or None,
            artist_ulan_url=record.artist_ulan_url or None,
        )


class ReviewDraft(BaseModel):
    """The experiential part of a log entry."""

    id: str = Field(default_factory=_new_id)
    date_viewed: date
    location: str = ""
    review_text: str = ""
    image_url: str | None = None
    artist_wikidata_url: str | None = None
    artist_ulan_url: str | None = None

    def with_artwork_snapshot(self, artwork: ArtworkDraft) -> ReviewDraft:
        """Copy the artwork's image and identity URLs onto the review."""
        return self.model_copy(
            update={
                "image_url": artwork.image_url,
                "artist_wikidata_url": artwork.artist_wikidata_url,
                "artist_ulan_url": artwork.artist_ulan_url,
            }
        )


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ArtworkDocument(_Document):
    """Stored shape of a manually entered artwork."""

    user_id: str = Field(alias="userId")
    title: str
    artist: str = ""
    date: str = ""
    medium: str = ""
    movement: str = ""
    image_url: str | None = Field(default=None, alias="imageURL")
    artist_wikidata_url: str | None = Field(default=None, alias="artistWikidataURL")
    artist_ulan_url: str | None = Field(default=None, alias="artistULANURL")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    @classmethod
    def from_draft(cls, user_id: str, artwork: ArtworkDraft) -> ArtworkDocument:
        return cls(
            user_id=user_id,
            title=artwork.title,
            artist=artwork.artist,
            date=artwork.date,
            medium=artwork.medium,
            movement=artwork.movement,
            image_url=artwork.image_url,
            artist_wikidata_url=artwork.artist_wikidata_url,
            artist_ulan_url=artwork.artist_ulan_url,
        )


class ReviewDocument(_Document):
    """
    Stored shape of a review.

    Exactly one of ``artworkId`` (manual artwork) and ``metSourceId``
    (catalog artwork) is set.
    """

    id: str | None = Field(default=None, exclude=True)
    user_id: str = Field(alias="userId")
    artwork_id: str | None = Field(default=None, alias="artworkId")
    met_source_id: str | None = Field(default=None, alias="metSourceId")
    date_viewed: date = Field(alias="dateViewed")
    location: str = ""
    review_text: str = Field(default="", alias="reviewText")
    image_url: str | None = Field(default=None, alias="imageURL")
    artist_wikidata_url: str | None = Field(default=None, alias="artistWikidataURL")
    artist_ulan_url: str | None = Field(default=None, alias="artistULANURL")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    @model_validator(mode="after")
    def _check_artwork_reference(self) -> ReviewDocument:
        if bool(self.artwork_id) == bool(self.met_source_id):
            raise ValueError("exactly one of artworkId and metSourceId must be set")
        return self

    @classmethod
    def from_draft(
        cls,
        user_id: str,
        review: ReviewDraft,
        artwork_id: str | None = None,
        met_source_id: str | None = None,
    ) -> ReviewDocument:
        return cls(
            id=review.id,
            user_id=user_id,
            artwork_id=artwork_id,
            met_source_id=met_source_id,
            date_viewed=review.date_viewed,
            location=review.location,
            review_text=review.review_text,
            image_url=review.image_url,
            artist_wikidata_url=review.artist_wikidata_url,
            artist_ulan_url=review.artist_ulan_url,
        )


class SubmissionResult(BaseModel):
    """Outcome of a successful review submission."""

    review_id: str
    artwork_id: str | None = None
    aggregate_updated: bool = False
