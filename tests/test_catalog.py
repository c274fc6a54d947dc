"""Tests for productphoto.catalog."""

from __future__ import annotations

import pytest

from productphoto.catalog import GARMIN_WATCHES, default_catalog, load_catalog
from productphoto.types import CatalogItem


class TestDefaultCatalog:
    def test_size_and_order(self):
        items = default_catalog()
        assert len(items) == 31
        assert items[0] == CatalogItem("Forerunner", "Forerunner", "245_Music")
        assert items[-1] == CatalogItem("MARQ", "MARQ", "Aviator")

    def test_file_keys_unique(self):
        keys = [item.file_key for item in GARMIN_WATCHES]
        assert len(keys) == len(set(keys))

    def test_returns_copy(self):
        items = default_catalog()
        items.clear()
        assert len(default_catalog()) == 31


class TestLoadCatalog:
    def test_top_level_list(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "- {series: Fenix, product: Fenix, model: 7}\n"
            "- {series: Venu, product: Venu}\n"
        )
        items = load_catalog(path)
        assert items == [
            CatalogItem("Fenix", "Fenix", "7"),
            CatalogItem("Venu", "Venu", ""),
        ]

    def test_catalog_key(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("catalog:\n  - series: D2\n    product: D2\n    model: Air\n")
        assert load_catalog(path) == [CatalogItem("D2", "D2", "Air")]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_catalog(path) == []

    def test_missing_product_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- {series: Fenix}\n")
        with pytest.raises(ValueError, match="series"):
            load_catalog(path)

    def test_scalar_document_raises(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n")
        with pytest.raises(ValueError, match="list of entries"):
            load_catalog(path)
