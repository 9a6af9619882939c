"""Tests for CatalogIndex."""

from __future__ import annotations

from pathlib import Path

import pytest

from artlog.core.config import MetSettings
from artlog.schemas.catalog import COLUMN_LAYOUTS, CatalogRecord
from artlog.schemas.enums import CatalogLayout
from artlog.services.catalog_index import CatalogIndex
from artlog.services.exceptions import NotFoundError


def write_catalog(path: Path, rows: list[dict[str, str]]) -> None:
    columns = COLUMN_LAYOUTS[CatalogLayout.CURRENT_53]
    lines = ["Object Number,Is Highlight,Is Timeline Work,..."]
    for row in rows:
        fields = [""] * columns.min_fields
        for name, value in row.items():
            fields[columns.required[name]] = value
        lines.append(",".join(fields))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestSearch:
    def test_matches_title_case_insensitively(self, catalog_records: list[CatalogRecord]):
        index = CatalogIndex(catalog_records)

        results = index.search("SUNFLOWER")

        assert [record.id for record in results] == ["436524", "10481"]

    def test_matches_artist_name(self, catalog_records: list[CatalogRecord]):
        results = CatalogIndex(catalog_records).search("van gogh")

        assert [record.id for record in results] == ["436524", "437980"]

    @pytest.mark.parametrize(
        ("query", "expected_id"),
        [
            ("statue", "544740"),
            ("egyptian", "544740"),
            ("textiles", "10481"),
            ("cypresses", "437980"),
        ],
    )
    def test_matches_other_search_fields(
        self, catalog_records: list[CatalogRecord], query: str, expected_id: str
    ):
        results = CatalogIndex(catalog_records).search(query)

        assert [record.id for record in results] == [expected_id]

    def test_does_not_match_unsearched_fields(self, catalog_records: list[CatalogRecord]):
        # medium and nationality are not searched
        index = CatalogIndex(catalog_records)

        assert index.search("oil on canvas") == []
        assert index.search("dutch") == []

    def test_blank_query_returns_nothing(self, catalog_records: list[CatalogRecord]):
        index = CatalogIndex(catalog_records)

        assert index.search("") == []
        assert index.search("   ") == []

    def test_query_is_trimmed(self, catalog_records: list[CatalogRecord]):
        assert len(CatalogIndex(catalog_records).search("  quilt  ")) == 1


class TestLookup:
    def test_get_by_id(self, catalog_records: list[CatalogRecord]):
        index = CatalogIndex(catalog_records)

        assert index.get_by_id("437980").title == "Wheat Field with Cypresses"
        assert index.get_by_id("0") is None

    def test_get_by_id_returns_first_duplicate(self):
        index = CatalogIndex([CatalogRecord(id="1", title="First"), CatalogRecord(id="1", title="Second")])

        assert index.get_by_id("1").title == "First"

    def test_count(self, catalog_records: list[CatalogRecord]):
        assert CatalogIndex(catalog_records).count() == 4
        assert CatalogIndex().count() == 0


class TestLoad:
    def test_load_parses_file(self, met_settings: MetSettings):
        write_catalog(
            Path(met_settings.catalog_path),
            [
                {"id": "436524", "title": "Sunflowers", "artist_display_name": "Vincent van Gogh"},
                {"id": "437980", "title": "Wheat Field with Cypresses"},
            ],
        )
        index = CatalogIndex()

        assert index.load(met_settings) == 2
        assert index.is_loaded
        assert index.get_by_id("436524").artist_display_name == "Vincent van Gogh"

    def test_load_runs_once(self, met_settings: MetSettings):
        path = Path(met_settings.catalog_path)
        write_catalog(path, [{"id": "1", "title": "One"}])
        index = CatalogIndex()
        index.load(met_settings)

        write_catalog(path, [{"id": "1"}, {"id": "2"}])

        assert index.load(met_settings) == 1

    def test_missing_file_raises_not_found(self, tmp_path: Path):
        settings = MetSettings(catalog_path=str(tmp_path / "nope.csv"))

        with pytest.raises(NotFoundError) as exc_info:
            CatalogIndex().load(settings)

        assert "Met database CSV file" in str(exc_info.value)
