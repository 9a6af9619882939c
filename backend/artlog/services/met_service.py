"""
Met Museum collection API integration service.

Fetches single objects from the public collection API and uses them to add
images to catalog records found by local search.
Uses niquests AsyncSession for HTTP requests.
"""

from __future__ import annotations

import logging
from typing import Any

import niquests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from artlog.core.config import MetSettings, get_settings
from artlog.schemas.catalog import CatalogRecord

logger = logging.getLogger(__name__)


class MetServiceError(Exception):
    """Base exception for Met collection API errors."""

    pass


class MetNetworkError(MetServiceError):
    """Network error or unreadable response from the collection API."""

    pass


class MetObjectNotFoundError(MetServiceError):
    """The collection API has no object with this ID."""

    def __init__(self, object_id: str):
        self.object_id = object_id
        super().__init__(f"Met object '{object_id}' not found")


def _scalar_or_none(value: Any) -> str | None:
    """Nested scalars as strings; nulls, containers and booleans become None."""
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    return str(value)


class MetTag(BaseModel):
    """One entry of an object's ``tags`` list."""

    model_config = ConfigDict(extra="ignore")

    term: str = ""
    aat_url: str | None = Field(default=None, alias="AAT_URL")
    wikidata_url: str | None = Field(default=None, alias="Wikidata_URL")

    @field_validator("term", mode="before")
    @classmethod
    def _term_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("aat_url", "wikidata_url", mode="before")
    @classmethod
    def _url_or_none(cls, value: Any) -> str | None:
        return _scalar_or_none(value)


class MetConstituent(BaseModel):
    """One entry of an object's ``constituents`` list."""

    model_config = ConfigDict(extra="ignore")

    role: str | None = None
    name: str | None = None
    ulan_url: str | None = Field(default=None, alias="constituentULAN_URL")
    wikidata_url: str | None = Field(default=None, alias="constituentWikidata_URL")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> str | None:
        return _scalar_or_none(value)


class MetObjectPayload(BaseModel):
    """
    Response body of ``GET /objects/{id}``.

    Every field is optional and scalars are coerced to strings, since the
    API leaves fields out, sends null, or mixes ints and strings.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    object_id: str = Field(default="", alias="objectID")
    accession_number: str = Field(default="", alias="accessionNumber")
    is_highlight: bool = Field(default=False, alias="isHighlight")
    is_timeline_work: bool = Field(default=False, alias="isTimelineWork")
    is_public_domain: bool = Field(default=False, alias="isPublicDomain")
    primary_image: str = Field(default="", alias="primaryImage")
    primary_image_small: str = Field(default="", alias="primaryImageSmall")
    additional_images: list[str] = Field(default_factory=list, alias="additionalImages")
    gallery_number: str = Field(default="", alias="GalleryNumber")
    department: str = ""
    accession_year: str = Field(default="", alias="accessionYear")
    object_name: str = Field(default="", alias="objectName")
    title: str = ""
    culture: str = ""
    period: str = ""
    dynasty: str = ""
    reign: str = ""
    portfolio: str = ""
    artist_role: str = Field(default="", alias="artistRole")
    artist_prefix: str = Field(default="", alias="artistPrefix")
    artist_display_name: str = Field(default="", alias="artistDisplayName")
    artist_display_bio: str = Field(default="", alias="artistDisplayBio")
    artist_suffix: str = Field(default="", alias="artistSuffix")
    artist_alpha_sort: str = Field(default="", alias="artistAlphaSort")
    artist_nationality: str = Field(default="", alias="artistNationality")
    artist_begin_date: str = Field(default="", alias="artistBeginDate")
    artist_end_date: str = Field(default="", alias="artistEndDate")
    artist_gender: str = Field(default="", alias="artistGender")
    artist_ulan_url: str = Field(default="", alias="artistULAN_URL")
    artist_wikidata_url: str = Field(default="", alias="artistWikidata_URL")
    object_date: str = Field(default="", alias="objectDate")
    object_begin_date: str = Field(default="", alias="objectBeginDate")
    object_end_date: str = Field(default="", alias="objectEndDate")
    medium: str = ""
    dimensions: str = ""
    credit_line: str = Field(default="", alias="creditLine")
    geography_type: str = Field(default="", alias="geographyType")
    city: str = ""
    state: str = ""
    county: str = ""
    country: str = ""
    region: str = ""
    subregion: str = ""
    locale: str = ""
    locus: str = ""
    excavation: str = ""
    river: str = ""
    classification: str = ""
    rights_and_reproduction: str = Field(default="", alias="rightsAndReproduction")
    link_resource: str = Field(default="", alias="linkResource")
    object_wikidata_url: str = Field(default="", alias="objectWikidata_URL")
    metadata_date: str = Field(default="", alias="metadataDate")
    repository: str = ""
    constituents: list[MetConstituent] = Field(default_factory=list)
    tags: list[MetTag] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info: ValidationInfo) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is str:
            if value is None or isinstance(value, (dict, list)):
                return ""
            return str(value)
        if annotation is bool:
            return value if isinstance(value, bool) else False
        if not isinstance(value, list):
            return []
        if info.field_name == "additional_images":
            return [item for item in value if isinstance(item, str)]
        return [item for item in value if isinstance(item, dict)]

    def artist_urls(self) -> tuple[str, str]:
        """
        Wikidata and ULAN URLs of the artist.

        Falls back to the first constituent that has either URL when the
        object-level fields are empty.
        """
        if self.artist_wikidata_url or self.artist_ulan_url:
            return self.artist_wikidata_url, self.artist_ulan_url
        for constituent in self.constituents:
            if constituent.wikidata_url or constituent.ulan_url:
                return constituent.wikidata_url or "", constituent.ulan_url or ""
        return "", ""

    def to_record(self) -> CatalogRecord:
        """Convert to a CatalogRecord, joining tags the way the CSV does."""
        artist_wikidata_url, artist_ulan_url = self.artist_urls()
        return CatalogRecord(
            id=self.object_id,
            object_number=self.accession_number,
            is_highlight=self.is_highlight,
            is_timeline_work=self.is_timeline_work,
            is_public_domain=self.is_public_domain,
            gallery_number=self.gallery_number,
            department=self.department,
            accession_year=self.accession_year,
            object_name=self.object_name,
            title=self.title,
            culture=self.culture,
            period=self.period,
            dynasty=self.dynasty,
            reign=self.reign,
            portfolio=self.portfolio,
            artist_role=self.artist_role,
            artist_prefix=self.artist_prefix,
            artist_display_name=self.artist_display_name,
            artist_display_bio=self.artist_display_bio,
            artist_suffix=self.artist_suffix,
            artist_alpha_sort=self.artist_alpha_sort,
            artist_nationality=self.artist_nationality,
            artist_begin_date=self.artist_begin_date,
            artist_end_date=self.artist_end_date,
            artist_gender=self.artist_gender,
            artist_ulan_url=artist_ulan_url,
            artist_wikidata_url=artist_wikidata_url,
            object_date=self.object_date,
            object_begin_date=self.object_begin_date,
            object_end_date=self.object_end_date,
            medium=self.medium,
            dimensions=self.dimensions,
            credit_line=self.credit_line,
            geography_type=self.geography_type,
            city=self.city,
            state=self.state,
            county=self.county,
            country=self.country,
            region=self.region,
            subregion=self.subregion,
            locale=self.locale,
            locus=self.locus,
            excavation=self.excavation,
            river=self.river,
            classification=self.classification,
            rights_and_reproduction=self.rights_and_reproduction,
            link_resource=self.link_resource,
            object_wikidata_url=self.object_wikidata_url,
            metadata_date=self.metadata_date,
            repository=self.repository,
            tags="|".join(tag.term for tag in self.tags if tag.term),
            tags_aat_url="|".join(tag.aat_url or "" for tag in self.tags if tag.term),
            tags_wikidata_url="|".join(tag.wikidata_url or "" for tag in self.tags if tag.term),
            primary_image=self.primary_image,
            primary_image_small=self.primary_image_small,
            additional_images=tuple(self.additional_images),
        )


class MetCollectionService:
    """
    Service for the Met collection API.

    Usage:
        async with MetCollectionService() as met:
            record = await met.enrich(record)
    """

    def __init__(self, settings: MetSettings | None = None):
        self.settings = settings or get_settings().met
        self._session: niquests.AsyncSession | None = None

    async def __aenter__(self) -> "MetCollectionService":
        """Context manager entry - creates session."""
        self._session = niquests.AsyncSession()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit - closes session."""
        await self.close()

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def _get_session(self) -> niquests.AsyncSession:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = niquests.AsyncSession()
        return self._session

    async def fetch_by_id(self, object_id: str) -> CatalogRecord:
        """
        Fetch one object, including its image fields.

        Raises:
            MetObjectNotFoundError: The API answered 404
            MetNetworkError: On network errors or an unreadable body
        """
        session = await self._get_session()
        url = f"{self.settings.base_url}/objects/{object_id}"

        try:
            response = await session.get(url, timeout=self.settings.timeout)
            if response.status_code == 404:
                raise MetObjectNotFoundError(object_id)
            response.raise_for_status()
            data = response.json()

        except niquests.exceptions.Timeout as e:
            logger.error(f"Met API timeout for object {object_id}: {e}")
            raise MetNetworkError(f"Request timed out after {self.settings.timeout}s") from e

        except niquests.exceptions.RequestException as e:
            logger.error(f"Met API request error for object {object_id}: {e}")
            raise MetNetworkError(f"Request failed: {e}") from e

        except ValueError as e:
            logger.error(f"Met API returned invalid JSON for object {object_id}: {e}")
            raise MetNetworkError("Invalid JSON response") from e

        if not isinstance(data, dict):
            raise MetNetworkError("Unexpected response shape")

        try:
            payload = MetObjectPayload.model_validate(data)
        except ValidationError as e:
            logger.error(f"Met API returned an unreadable object {object_id}: {e}")
            raise MetNetworkError("Unexpected response shape") from e

        if not payload.object_id:
            payload = payload.model_copy(update={"object_id": object_id})
        return payload.to_record()

    async def enrich(self, record: CatalogRecord) -> CatalogRecord:
        """
        Copy of ``record`` with its three image fields from the API.

        Any failure returns ``record`` itself unchanged; a missing image
        never removes a search result.
        """
        try:
            fetched = await self.fetch_by_id(record.id)
        except MetServiceError as e:
            logger.warning(f"Image enrichment for object {record.id} failed: {e}")
            return record

        return record.model_copy(
            update={
                "primary_image": fetched.primary_image,
                "primary_image_small": fetched.primary_image_small,
                "additional_images": fetched.additional_images,
            }
        )
