"""
Catalog record schema and CSV column layouts.

A CatalogRecord is one row of the Met open-access catalog. Records are
frozen; image enrichment produces a copy via ``model_copy``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from artlog.schemas.enums import CatalogLayout

__all__ = [
    "CatalogRecord",
    "ColumnLayout",
    "COLUMN_LAYOUTS",
    "BOOLEAN_FIELDS",
]


class CatalogRecord(BaseModel):
    """One artwork from the museum catalog."""

    model_config = ConfigDict(frozen=True)

    # Identifiers
    id: str = Field(description="Source-assigned object ID")
    object_number: str = ""
    is_highlight: bool = False
    is_timeline_work: bool = False
    is_public_domain: bool = False
    gallery_number: str = ""
    department: str = ""
    accession_year: str = ""
    object_name: str = ""
    title: str = ""
    culture: str = ""
    period: str = ""
    dynasty: str = ""
    reign: str = ""
    portfolio: str = ""

    # Artist
    constituent_id: str = ""
    artist_role: str = ""
    artist_prefix: str = ""
    artist_display_name: str = ""
    artist_display_bio: str = ""
    artist_suffix: str = ""
    artist_alpha_sort: str = ""
    artist_nationality: str = ""
    artist_begin_date: str = ""
    artist_end_date: str = ""
    artist_gender: str = ""
    artist_ulan_url: str = ""
    artist_wikidata_url: str = ""

    # Object dates and physical description
    object_date: str = ""
    object_begin_date: str = ""
    object_end_date: str = ""
    medium: str = ""
    dimensions: str = ""
    credit_line: str = ""

    # Geography
    geography_type: str = ""
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

    # Rights and provenance
    classification: str = ""
    rights_and_reproduction: str = ""
    link_resource: str = ""
    object_wikidata_url: str = ""
    metadata_date: str = ""
    repository: str = ""

    # Tags are pipe-delimited in the CSV
    tags: str = ""
    tags_aat_url: str = ""
    tags_wikidata_url: str = ""

    # Populated lazily by the collection API
    primary_image: str = ""
    primary_image_small: str = ""
    additional_images: tuple[str, ...] = ()

    @property
    def has_image(self) -> bool:
        return bool(self.primary_image_small or self.primary_image)


BOOLEAN_FIELDS = frozenset({"is_highlight", "is_timeline_work", "is_public_domain"})


class ColumnLayout(BaseModel):
    """
    Fixed column positions for one catalog CSV layout.

    ``required`` columns must all be present for a row to be kept;
    ``optional`` columns are read only when the row is long enough.
    """

    model_config = ConfigDict(frozen=True)

    required: dict[str, int]
    optional: dict[str, int] = Field(default_factory=dict)

    @property
    def min_fields(self) -> int:
        return max(self.required.values()) + 1


_LEGACY_COLUMNS = [
    "object_number",
    "is_highlight",
    "is_public_domain",
    "id",
    "department",
    "object_name",
    "title",
    "culture",
    "period",
    "dynasty",
    "reign",
    "portfolio",
    "artist_role",
    "artist_prefix",
    "artist_display_name",
    "artist_display_bio",
    "artist_suffix",
    "artist_alpha_sort",
    "artist_nationality",
    "artist_begin_date",
    "artist_end_date",
    "object_date",
    "object_begin_date",
    "object_end_date",
    "medium",
    "dimensions",
    "credit_line",
    "geography_type",
    "city",
    "state",
    "county",
    "country",
    "region",
    "subregion",
    "locale",
    "locus",
    "excavation",
    "river",
    "classification",
    "rights_and_reproduction",
    "link_resource",
    "metadata_date",
]

# Matches the header of MetObjects.csv from the open-access repository
_CURRENT_COLUMNS = [
    "object_number",
    "is_highlight",
    "is_timeline_work",
    "is_public_domain",
    "id",
    "gallery_number",
    "department",
    "accession_year",
    "object_name",
    "title",
    "culture",
    "period",
    "dynasty",
    "reign",
    "portfolio",
    "constituent_id",
    "artist_role",
    "artist_prefix",
    "artist_display_name",
    "artist_display_bio",
    "artist_suffix",
    "artist_alpha_sort",
    "artist_nationality",
    "artist_begin_date",
    "artist_end_date",
    "artist_gender",
    "artist_ulan_url",
    "artist_wikidata_url",
    "object_date",
    "object_begin_date",
    "object_end_date",
    "medium",
    "dimensions",
    "credit_line",
    "geography_type",
    "city",
    "state",
    "county",
    "country",
    "region",
    "subregion",
    "locale",
    "locus",
    "excavation",
    "river",
    "classification",
    "rights_and_reproduction",
    "link_resource",
    "object_wikidata_url",
    "metadata_date",
    "repository",
    "tags",
    "tags_aat_url",
]

COLUMN_LAYOUTS: dict[CatalogLayout, ColumnLayout] = {
    CatalogLayout.LEGACY_42: ColumnLayout(
        required={name: index for index, name in enumerate(_LEGACY_COLUMNS)},
        optional={"repository": len(_LEGACY_COLUMNS)},
    ),
    CatalogLayout.CURRENT_53: ColumnLayout(
        required={name: index for index, name in enumerate(_CURRENT_COLUMNS)},
        optional={"tags_wikidata_url": len(_CURRENT_COLUMNS)},
    ),
}
