"""Source Catalog - brand/model registry and listing-page URLs."""

from .brand_scraper import CatalogScraper
from .models import Brand, Model
from .registry import SourceCatalog

__all__ = [
    "Brand",
    "CatalogScraper",
    "Model",
    "SourceCatalog",
]
