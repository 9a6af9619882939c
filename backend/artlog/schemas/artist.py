"""
Artist value types: resolved identity, fetched details, per-user aggregate.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "UNKNOWN",
    "PRESENT",
    "ArtistIdentity",
    "ArtistDetails",
    "ArtistAggregate",
    "TopArtist",
]

UNKNOWN = "Unknown"
PRESENT = "Present"


class ArtistIdentity(BaseModel):
    """
    Knowledge-graph identity URLs for an artist.

    ``wikidata_url`` is the primary identity; ``ulan_url`` the Getty ULAN
    authority URL. A ULAN URL is only ever present alongside a Wikidata URL.
    """

    model_config = ConfigDict(frozen=True)

    wikidata_url: str | None = None
    ulan_url: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.wikidata_url is not None


class ArtistDetails(BaseModel):
    """Best-effort artist profile assembled from independent lookups."""

    model_config = ConfigDict(frozen=True)

    name: str
    birth_year: str = UNKNOWN
    death_year: str = UNKNOWN
    image_url: str | None = None
    movements: list[str] = Field(default_factory=list)
    nationality: str = UNKNOWN
    biography: str = ""


class ArtistAggregate(BaseModel):
    """View count and representative image for one artist, for one user."""

    count: int = Field(ge=0)
    image_url: str | None = None

    @classmethod
    def from_stored(cls, value: Any) -> ArtistAggregate | None:
        """
        Read a stored aggregate value.

        Older documents stored a bare integer count with no image.
        Unreadable values, including counts below one, give None.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return cls(count=value) if value >= 1 else None
        if isinstance(value, dict):
            count = value.get("count")
            if isinstance(count, bool) or not isinstance(count, int) or count < 1:
                return None
            image_url = value.get("imageURL")
            if not isinstance(image_url, str) or not image_url:
                image_url = None
            return cls(count=count, image_url=image_url)
        return None

    def to_stored(self) -> dict[str, Any]:
        data: dict[str, Any] = {"count": self.count}
        if self.image_url:
            data["imageURL"] = self.image_url
        return data


class TopArtist(BaseModel):
    """One row of a user's top-artists listing."""

    identity_url: str
    count: int
    image_url: str | None = None
    name: str | None = None
