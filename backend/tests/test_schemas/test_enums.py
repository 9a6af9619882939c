"""Tests for enum definitions and settings that use them."""

from artlog.core.config import MetSettings
from artlog.schemas.enums import ArtworkSource, CatalogLayout


class TestEnumValues:
    def test_catalog_layout_values(self):
        assert CatalogLayout.LEGACY_42 == "legacy_42"
        assert CatalogLayout.CURRENT_53 == "current_53"
        assert len(CatalogLayout) == 2

    def test_artwork_source_values(self):
        assert ArtworkSource.MANUAL == "manual"
        assert ArtworkSource.CATALOG == "catalog"


class TestLayoutSetting:
    def test_default_layout(self):
        assert MetSettings().catalog_layout == CatalogLayout.CURRENT_53

    def test_layout_from_environment(self, monkeypatch):
        monkeypatch.setenv("MET_CATALOG_LAYOUT", "legacy_42")

        assert MetSettings().catalog_layout == CatalogLayout.LEGACY_42
