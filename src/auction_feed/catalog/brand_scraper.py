"""Brand and model discovery from the auction site's index pages.

Parses the brand index (``/brands``) and a brand's model list
(``/brands/{id}``) with the same text-pattern approach the listing
extractor uses.
"""

from __future__ import annotations

import logging
import re

from ..common.config import Config
from ..common.http_client import HTTPClient
from .models import Brand, Model
from .registry import brand_index_url

logger = logging.getLogger(__name__)

_BRAND_RE = re.compile(r'<li><a href="/brands/(\d+)">([^<]+)</a></li>', re.DOTALL)
_MODEL_RE = re.compile(r'<a href="(/brands/(\d+)/models/(\d+))">([^<]+)</a>', re.DOTALL)


class CatalogScraper:
    """Discovers brands and models live from the auction site.

    Usage:
        with CatalogScraper() as scraper:
            brands = scraper.fetch_brands()
            models = scraper.fetch_models(brands[0], limit=10)

    Fetch errors (InvalidURL, NetworkFailure, BadResponse) propagate.
    """

    def __init__(self, config: Config | None = None, client: HTTPClient | None = None) -> None:
        self.config = config or Config()
        self._client = client or HTTPClient(self.config)

    @property
    def brands_url(self) -> str:
        return f"{self.config.base_url}/brands"

    def fetch_brands(self) -> list[Brand]:
        html = self._client.get_text(self.brands_url, cache_key="brands_index")
        brands = self.parse_brands(html, self.config.base_url)
        logger.info("Found %d brands", len(brands))
        return brands

    def fetch_models(self, brand: Brand, limit: int = 10) -> list[Model]:
        """Fetch a brand's models; ``limit <= 0`` returns all of them."""
        html = self._client.get_text(brand.index_url, cache_key=f"brand_{brand.id}")
        models = self.parse_models(html, self.config.base_url)
        if limit > 0:
            models = models[:limit]
        logger.info("Found %d models for %s", len(models), brand.name)
        return models

    @staticmethod
    def parse_brands(html: str, base_url: str) -> list[Brand]:
        brands: list[Brand] = []
        for match in _BRAND_RE.finditer(html):
            brand_id = int(match.group(1))
            if brand_id <= 0:
                continue
            brands.append(
                Brand(
                    id=brand_id,
                    name=match.group(2).strip(),
                    index_url=brand_index_url(base_url, brand_id),
                )
            )
        return brands

    @staticmethod
    def parse_models(html: str, base_url: str) -> list[Model]:
        models: list[Model] = []
        for match in _MODEL_RE.finditer(html):
            relative_url, brand_id, model_id, name = match.groups()
            if int(model_id) <= 0:
                continue
            models.append(
                Model(
                    id=int(model_id),
                    name=name.strip(),
                    brand_id=int(brand_id),
                    listing_page_url=base_url + relative_url,
                )
            )
        return models

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CatalogScraper:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
