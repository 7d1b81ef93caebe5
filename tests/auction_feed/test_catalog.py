"""Tests for the source catalog and brand/model discovery."""

from __future__ import annotations

import dataclasses
from unittest.mock import MagicMock

import pytest

from src.auction_feed.catalog.brand_scraper import CatalogScraper
from src.auction_feed.catalog.models import Brand, Model
from src.auction_feed.catalog.registry import (
    BRAND_DESCRIPTIONS,
    DEFAULT_DESCRIPTION,
    SourceCatalog,
)
from src.auction_feed.common.errors import NetworkFailure


class TestSourceCatalog:
    def test_default_models(self):
        catalog = SourceCatalog.default()
        assert len(catalog) == 18
        assert len(catalog.brands) == 7

    def test_listing_urls(self):
        urls = SourceCatalog.default().listing_urls()
        assert urls[0] == "https://motobay.su/brands/2/models/1430"
        assert "https://motobay.su/brands/7/models/1060" in urls
        assert len(set(urls)) == len(urls)

    def test_brand_index_url(self):
        honda = SourceCatalog.default().brands[0]
        assert honda == Brand(id=2, name="Honda", index_url="https://motobay.su/brands/2")

    def test_custom_base_url(self):
        catalog = SourceCatalog.default("http://localhost:8080/")
        assert catalog.listing_urls()[0] == "http://localhost:8080/brands/2/models/1430"

    def test_models_for_brand(self):
        kawasaki = SourceCatalog.default().models_for(4)
        assert [m.name for m in kawasaki] == ["Ninja ZX-10R", "Ninja ZX-6R", "Z900RS"]

    def test_entries_are_immutable(self):
        model = SourceCatalog.default().models[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.name = "changed"

    def test_description_for(self):
        assert SourceCatalog.description_for("Honda CB1000R") == BRAND_DESCRIPTIONS["Honda"]
        assert SourceCatalog.description_for("Ducati Monster 821") == BRAND_DESCRIPTIONS["Ducati"]
        assert SourceCatalog.description_for("Unknown Bike") == DEFAULT_DESCRIPTION

    def test_from_yaml(self, fixtures_dir):
        catalog = SourceCatalog.from_yaml(fixtures_dir / "sources.yaml")

        assert [b.name for b in catalog.brands] == ["Honda", "Kawasaki"]
        assert catalog.listing_urls() == [
            "https://motobay.su/brands/2/models/1430",
            "https://motobay.su/brands/4/models/1888",
            "https://motobay.su/brands/4/models/9999?page=2",
        ]

    def test_from_yaml_requires_ids(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("models:\n  - name: NoId\n    brand_id: 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            SourceCatalog.from_yaml(path)

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        catalog = SourceCatalog.from_yaml(path)
        assert len(catalog) == 0
        assert catalog.listing_urls() == []

    def test_load_uses_configured_yaml(self, config, fixtures_dir):
        config.source_catalog_path = str(fixtures_dir / "sources.yaml")
        assert len(SourceCatalog.load(config)) == 3

    def test_load_defaults(self, config):
        assert len(SourceCatalog.load(config)) == 18


class TestCatalogScraper:
    def test_parse_brands(self, fixtures_dir):
        html = (fixtures_dir / "motobay_brands.html").read_text(encoding="utf-8")
        brands = CatalogScraper.parse_brands(html, "https://motobay.su")

        # id 0 entries are dropped
        assert [(b.id, b.name) for b in brands] == [(1, "Yamaha"), (2, "Honda"), (13, "BMW")]
        assert brands[1].index_url == "https://motobay.su/brands/2"

    def test_parse_models(self, fixtures_dir):
        html = (fixtures_dir / "motobay_brand_models.html").read_text(encoding="utf-8")
        models = CatalogScraper.parse_models(html, "https://motobay.su")

        assert [m.name for m in models] == ["CB1000R", "CBR1000RR", "Africa Twin"]
        assert models[0] == Model(
            id=1430,
            name="CB1000R",
            brand_id=2,
            listing_page_url="https://motobay.su/brands/2/models/1430",
        )

    def test_fetch_brands(self, config, fixtures_dir):
        client = MagicMock()
        client.get_text.return_value = (fixtures_dir / "motobay_brands.html").read_text(encoding="utf-8")

        brands = CatalogScraper(config, client).fetch_brands()

        assert len(brands) == 3
        client.get_text.assert_called_once_with("https://motobay.su/brands", cache_key="brands_index")

    @pytest.mark.parametrize("limit,expected", [(2, 2), (10, 3), (0, 3), (-1, 3)])
    def test_fetch_models_limit(self, config, fixtures_dir, limit, expected):
        client = MagicMock()
        client.get_text.return_value = (fixtures_dir / "motobay_brand_models.html").read_text(encoding="utf-8")
        honda = Brand(id=2, name="Honda", index_url="https://motobay.su/brands/2")

        models = CatalogScraper(config, client).fetch_models(honda, limit=limit)
        assert len(models) == expected

    def test_fetch_errors_propagate(self, config):
        client = MagicMock()
        client.get_text.side_effect = NetworkFailure("https://motobay.su/brands", "timeout")
        with pytest.raises(NetworkFailure):
            CatalogScraper(config, client).fetch_brands()
