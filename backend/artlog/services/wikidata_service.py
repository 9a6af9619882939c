"""
Wikidata API integration service.

Provides async methods for resolving artist names to Wikidata identities and
for fetching artist details from entity claims.
Uses niquests AsyncSession for HTTP requests.

Raw API methods (search_entities, get_entity, get_claims)
raise WikidataServiceError. The artist-level methods (resolve_identity,
fetch_details, get_artist_name, get_artist_image_url) never raise for
network or data problems; they degrade to None or "Unknown" instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, TypeVar

import niquests

from artlog.core.config import WikidataSettings, get_settings
from artlog.schemas.artist import PRESENT, UNKNOWN, ArtistDetails, ArtistIdentity
from artlog.schemas.claims import (
    ObjectClaim,
    StringClaim,
    claim_values,
    first_claim_value,
    year_from_time,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Wikidata property IDs used for artists
IMAGE_PROPERTY = "P18"
COUNTRY_OF_CITIZENSHIP_PROPERTY = "P27"
MOVEMENT_PROPERTY = "P135"
ULAN_ID_PROPERTY = "P245"
DATE_OF_BIRTH_PROPERTY = "P569"
DATE_OF_DEATH_PROPERTY = "P570"


@dataclass
class WikidataEntity:
    """Represents a Wikidata entity."""

    qid: str
    label: str | None = None
    description: str | None = None
    claims: dict[str, Any] | None = None


@dataclass
class WikidataSearchResult:
    """Result from Wikidata entity search."""

    qid: str
    label: str
    description: str | None = None


class WikidataServiceError(Exception):
    """Base exception for Wikidata service errors."""

    pass


class WikidataNetworkError(WikidataServiceError):
    """Network error when communicating with Wikidata API."""

    pass


class WikidataAPIError(WikidataServiceError):
    """Wikidata API returned an error or unreadable response."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


def entity_id_from_url(url: str) -> str | None:
    """
    Extract the entity ID from a Wikidata URL or bare ID.

    Accepts ``https://www.wikidata.org/wiki/Q123``,
    ``http://www.wikidata.org/entity/Q123`` and ``Q123``.
    """
    if not url:
        return None
    url = url.strip()

    for marker in ("/wiki/", "/entity/"):
        if marker in url:
            entity_id = url.split(marker, 1)[1].split("/", 1)[0]
            return entity_id or None

    if url.upper().startswith("Q") and url[1:].isdigit():
        return url.upper()
    return None


def _label_in(entity_data: dict[str, Any], key: str, language: str) -> str | None:
    """Read labels/descriptions[language].value from raw entity JSON."""
    values = entity_data.get(key)
    if not isinstance(values, dict):
        return None
    value_data = values.get(language)
    if not isinstance(value_data, dict):
        return None
    value = value_data.get("value")
    return value if isinstance(value, str) and value else None


class WikidataService:
    """
    Service for interacting with Wikidata API.

    Artist names and image URLs are cached per identity URL for the life of
    the instance; artist metadata changes rarely enough that the cache is
    never invalidated.
    """

    def __init__(self, settings: WikidataSettings | None = None):
        self.settings = settings or get_settings().wikidata
        self._session: niquests.AsyncSession | None = None
        self._name_cache: dict[str, str] = {}
        self._image_cache: dict[str, str] = {}

    async def __aenter__(self) -> "WikidataService":
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

    async def _make_request(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        Make an API request to Wikidata.

        Args:
            params: Query parameters for the API call

        Returns:
            JSON response from the API

        Raises:
            WikidataNetworkError: On network/timeout issues
            WikidataAPIError: On API error responses or undecodable bodies
        """
        session = await self._get_session()

        # Add format parameter
        params = {**params, "format": "json"}

        try:
            response = await session.get(
                self.settings.base_url,
                params=params,
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            data = response.json()

        except niquests.exceptions.Timeout as e:
            logger.error(f"Wikidata API timeout: {e}")
            raise WikidataNetworkError(f"Request timed out after {self.settings.timeout}s") from e

        except niquests.exceptions.ConnectionError as e:
            logger.error(f"Wikidata connection error: {e}")
            raise WikidataNetworkError(f"Connection error: {e}") from e

        except niquests.exceptions.RequestException as e:
            logger.error(f"Wikidata request error: {e}")
            raise WikidataNetworkError(f"Request failed: {e}") from e

        except ValueError as e:
            logger.error(f"Wikidata returned invalid JSON: {e}")
            raise WikidataAPIError("Invalid JSON response", "invalid-json") from e

        if not isinstance(data, dict):
            raise WikidataAPIError("Unexpected response shape", "invalid-response")

        # Check for API-level errors
        if "error" in data:
            error = data["error"] if isinstance(data["error"], dict) else {}
            raise WikidataAPIError(
                error.get("info", "Unknown error"),
                error.get("code"),
            )

        return data

    # =========================================================================
    # Raw API methods
    # =========================================================================

    async def search_entities(
        self,
        query: str,
        language: str | None = None,
        entity_type: str | None = None,
        limit: int = 10,
    ) -> list[WikidataSearchResult]:
        """
        Search for Wikidata entities matching a query.

        Uses the wbsearchentities API action.

        Args:
            query: Search term
            language: Language code (default from settings)
            entity_type: Entity type filter ('item', 'property', etc.)
            limit: Maximum number of results (1-50)

        Returns:
            List of search results, best match first

        Raises:
            WikidataServiceError: On API or network errors
        """
        if not query or not query.strip():
            return []

        language = language or self.settings.default_language
        limit = max(1, min(50, limit))  # Clamp to valid range

        params = {
            "action": "wbsearchentities",
            "search": query.strip(),
            "language": language,
            "uselang": language,
            "limit": limit,
        }

        if entity_type:
            params["type"] = entity_type

        data = await self._make_request(params)

        items = data.get("search")
        if not isinstance(items, list):
            return []

        results = []
        for item in items:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            results.append(
                WikidataSearchResult(
                    qid=item["id"],
                    label=item.get("label", ""),
                    description=item.get("description"),
                )
            )

        return results

    async def get_entity(
        self,
        qid: str,
        language: str | None = None,
        props: str = "labels|descriptions|claims",
    ) -> WikidataEntity | None:
        """
        Fetch a single Wikidata entity by QID.

        Uses the wbgetentities API action.

        Args:
            qid: Wikidata entity ID (e.g., "Q42")
            language: Language for labels/descriptions
            props: Pipe-separated entity parts to fetch

        Returns:
            WikidataEntity or None if not found

        Raises:
            WikidataServiceError: On API or network errors
        """
        if not qid or not qid.strip():
            return None

        language = language or self.settings.default_language
        qid = qid.strip().upper()

        params = {
            "action": "wbgetentities",
            "ids": qid,
            "languages": language,
            "props": props,
        }

        data = await self._make_request(params)

        entities = data.get("entities")
        if not isinstance(entities, dict):
            return None
        entity_data = entities.get(qid)

        if not isinstance(entity_data, dict) or "missing" in entity_data:
            return None

        return self._parse_entity(qid, entity_data, language)

        for qid, entity_data in entities.items():
            if not isinstance(entity_data, dict) or "missing" in entity_data:
                continue
            results[qid] = self._parse_entity(qid, entity_data, language)

        return results

    async def get_claims(self, qid: str, property_id: str) -> dict[str, Any]:
        """
        Fetch the claims of one property of an entity.

        Uses the wbgetclaims API action.

        Returns:
            Raw claims mapping (``{property_id: [statement, ...]}``), possibly empty

        Raises:
            WikidataServiceError: On API or network errors
        """
        params = {
            "action": "wbgetclaims",
            "entity": qid,
            "property": property_id,
        }

        data = await self._make_request(params)

        claims = data.get("claims")
        return claims if isinstance(claims, dict) else {}

    def _parse_entity(
        self, qid: str, entity_data: dict[str, Any], language: str
    ) -> WikidataEntity:
        claims = entity_data.get("claims")

        return WikidataEntity(
            qid=qid,
            label=_label_in(entity_data, "labels", language),
            description=_label_in(entity_data, "descriptions", language),
            claims=claims if isinstance(claims, dict) and claims else None,
        )

    # =========================================================================
    # Artist identity and details
    # =========================================================================

    def entity_url(self, qid: str) -> str:
        return f"{self.settings.entity_base_url}/{qid}"

    def image_url(self, filename: str) -> str:
        return self.settings.image_url_template.format(filename=filename.replace(" ", "_"))

    async def resolve_identity(self, name: str) -> ArtistIdentity:
        """
        Resolve a free-text artist name to Wikidata and ULAN URLs.

        Takes the top search hit with no disambiguation. If the search fails
        or finds nothing, both URLs are None. If only the ULAN lookup fails,
        the Wikidata URL is still returned.
        """
        if not name or not name.strip():
            return ArtistIdentity()

        try:
            results = await self.search_entities(name, entity_type="item", limit=1)
        except WikidataServiceError as e:
            logger.warning(f"Identity search for '{name}' failed: {e}")
            return ArtistIdentity()

        if not results:
            logger.info(f"No Wikidata match for '{name}'")
            return ArtistIdentity()

        qid = results[0].qid
        ulan_url = None
        try:
            claims = await self.get_claims(qid, ULAN_ID_PROPERTY)
        except WikidataServiceError as e:
            logger.warning(f"ULAN lookup for {qid} failed: {e}")
        else:
            value = first_claim_value(claims, ULAN_ID_PROPERTY)
            if isinstance(value, StringClaim) and value.value:
                ulan_url = f"{self.settings.ulan_base_url}/{value.value}"

        return ArtistIdentity(wikidata_url=self.entity_url(qid), ulan_url=ulan_url)

    async def get_artist_name(self, wikidata_url: str) -> str | None:
        """Display label for an artist, cached per URL."""
        if wikidata_url in self._name_cache:
            return self._name_cache[wikidata_url]

        qid = entity_id_from_url(wikidata_url)
        if qid is None:
            return None

        try:
            entity = await self.get_entity(qid, props="labels")
        except WikidataServiceError as e:
            logger.warning(f"Name lookup for {qid} failed: {e}")
            return None

        if entity is None or entity.label is None:
            return None

        self._name_cache[wikidata_url] = entity.label
        return entity.label

    async def get_artist_image_url(self, wikidata_url: str) -> str | None:
        """Commons image URL for an artist's P18 image, cached per URL."""
        if wikidata_url in self._image_cache:
            return self._image_cache[wikidata_url]

        qid = entity_id_from_url(wikidata_url)
        if qid is None:
            return None

        try:
            claims = await self.get_claims(qid, IMAGE_PROPERTY)
        except WikidataServiceError as e:
            logger.warning(f"Image lookup for {qid} failed: {e}")
            return None

        value = first_claim_value(claims, IMAGE_PROPERTY)
        if not isinstance(value, StringClaim) or not value.value:
            return None

        image_url = self.image_url(value.value)
        self._image_cache[wikidata_url] = image_url
        return image_url

    async def fetch_details(self, wikidata_url: str) -> ArtistDetails | None:
        """
        Assemble an artist profile from independent lookups.

        Label, birth, death, nationality, movements and image are fetched
        concurrently; each one that fails or is absent falls back on its own
        without affecting the others. The result is built once all have
        settled.

        Returns:
            ArtistDetails, or None if the URL has no entity ID in it
        """
        qid = entity_id_from_url(wikidata_url)
        if qid is None:
            logger.warning(f"Cannot extract entity ID from '{wikidata_url}'")
            return None

        label, birth_year, death_year, nationality, movements, image_url = await asyncio.gather(
            self._settle(self._lookup_label(qid), None, f"label of {qid}"),
            self._settle(self._lookup_year(qid, DATE_OF_BIRTH_PROPERTY), None, f"birth of {qid}"),
            self._settle(self._lookup_year(qid, DATE_OF_DEATH_PROPERTY), None, f"death of {qid}"),
            self._settle(self._lookup_nationality(qid), None, f"nationality of {qid}"),
            self._settle(self._lookup_movements(qid), [], f"movements of {qid}"),
            self.get_artist_image_url(wikidata_url),
        )

        name, biography = label or (None, None)
        if name:
            self._name_cache.setdefault(wikidata_url, name)

        if death_year is None:
            # No death claim: presumed living when a birth year is known
            death_year = PRESENT if birth_year else UNKNOWN

        return ArtistDetails(
            name=name or f"Artist {qid}",
            birth_year=birth_year or UNKNOWN,
            death_year=death_year,
            image_url=image_url,
            movements=movements,
            nationality=nationality or UNKNOWN,
            biography=biography or "",
        )

    async def _settle(self, awaitable: Awaitable[T], fallback: T, what: str) -> T:
        try:
            return await awaitable
        except WikidataServiceError as e:
            logger.warning(f"Lookup of {what} failed: {e}")
            return fallback

    async def _lookup_label(self, qid: str) -> tuple[str | None, str | None]:
        entity = await self.get_entity(qid, props="labels|descriptions")
        if entity is None:
            return None, None
        return entity.label, entity.description

    async def _lookup_year(self, qid: str, property_id: str) -> str | None:
        claims = await self.get_claims(qid, property_id)
        value = first_claim_value(claims, property_id)
        if not isinstance(value, ObjectClaim):
            return None
        return year_from_time(value.fields.get("time"))

    async def _lookup_nationality(self, qid: str) -> str | None:
        claims = await self.get_claims(qid, COUNTRY_OF_CITIZENSHIP_PROPERTY)
        value = first_claim_value(claims, COUNTRY_OF_CITIZENSHIP_PROPERTY)
        if not isinstance(value, ObjectClaim) or value.entity_id is None:
            return None
        return await self._safe_label(value.entity_id)

    async def _lookup_movements(self, qid: str) -> list[str]:
        claims = await self.get_claims(qid, MOVEMENT_PROPERTY)
        movement_ids = [
            value.entity_id
            for value in claim_values(claims, MOVEMENT_PROPERTY)
            if isinstance(value, ObjectClaim) and value.entity_id
        ]
        labels = await asyncio.gather(*(self._safe_label(movement_id) for movement_id in movement_ids))
        # A movement whose label lookup failed is dropped; order is kept
        return [label for label in labels if label]

    async def _safe_label(self, qid: str) -> str | None:
        try:
            entity = await self.get_entity(qid, props="labels")
        except WikidataServiceError as e:
            logger.warning(f"Label lookup for {qid} failed: {e}")
            return None
        if entity is None:
            return None
        return entity.label
