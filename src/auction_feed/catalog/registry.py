"""Static registry of brands and models, and the listing URLs derived from them.

The built-in set is the list of popular models that reliably carry images
on the auction site. It can be replaced by a YAML file of the form::

    brands:
      - {id: 2, name: Honda}
    models:
      - {id: 1430, name: CB1000R, brand_id: 2}
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..common.config import Config
from .models import Brand, Model

logger = logging.getLogger(__name__)

# (id, name)
_DEFAULT_BRANDS: tuple[tuple[int, str], ...] = (
    (2, "Honda"),
    (1, "Yamaha"),
    (3, "Suzuki"),
    (4, "Kawasaki"),
    (7, "KTM"),
    (13, "BMW"),
    (7, "Ducati"),
)

# (model_id, name, brand_id)
_DEFAULT_MODELS: tuple[tuple[int, str, int], ...] = (
    # Honda
    (1430, "CB1000R", 2),
    (1432, "CBR1000RR", 2),
    (1419, "Africa Twin", 2),
    (1391, "Gold Wing", 2),
    # Yamaha
    (746, "YZF-R1", 1),
    (747, "YZF-R6", 1),
    (569, "MT-09", 1),
    (568, "MT-07", 1),
    # Suzuki
    (1586, "GSX-R1000", 3),
    (1560, "Hayabusa", 3),
    (1533, "V-Strom 650", 3),
    # Kawasaki
    (1830, "Ninja ZX-10R", 4),
    (1832, "Ninja ZX-6R", 4),
    (1888, "Z900RS", 4),
    # BMW
    (1317, "S1000RR", 13),
    (1311, "R1200GS", 13),
    # Ducati
    (1047, "Panigale", 7),
    (1060, "Monster", 7),
)

BRAND_DESCRIPTIONS: dict[str, str] = {
    "Honda": (
        "Honda is the world's largest motorcycle manufacturer, known for "
        "reliability, quality, and a diverse range of bikes from commuters "
        "to superbikes."
    ),
    "Yamaha": (
        "Yamaha Motor Company produces motorcycles known for their "
        "performance, excitement, and innovative engineering, specifically "
        "in the sport and naked segments."
    ),
    "Suzuki": (
        "Suzuki offers a wide range of motorcycles, from the legendary "
        "Hayabusa to practical scooters, known for value and durability."
    ),
    "Kawasaki": (
        "Kawasaki motorcycles, often branded as 'Ninja', are famous for "
        "their high-performance engines, aggressive styling, and racing "
        "heritage."
    ),
    "BMW": (
        "BMW Motorrad manufactures premium motorcycles known for their "
        "technology, touring capabilities (GS series), and quality "
        "engineering."
    ),
    "Ducati": (
        "Ducati is an Italian manufacturer famous for its desmodromic "
        "valves, L-twin engines, and stunning design, often called the "
        "'Ferrari of motorcycles'."
    ),
}
DEFAULT_DESCRIPTION = "A premium motorcycle from a top manufacturer."


def brand_index_url(base_url: str, brand_id: int) -> str:
    return f"{base_url}/brands/{brand_id}"


def model_listing_url(base_url: str, brand_id: int, model_id: int) -> str:
    return f"{base_url}/brands/{brand_id}/models/{model_id}"


class SourceCatalog:
    """Immutable set of brands and models the aggregator draws sources from.

    Usage:
        catalog = SourceCatalog.load(config)
        urls = catalog.listing_urls()
    """

    def __init__(
        self,
        brands: tuple[Brand, ...],
        models: tuple[Model, ...],
    ) -> None:
        self._brands = tuple(brands)
        self._models = tuple(models)

    @property
    def brands(self) -> tuple[Brand, ...]:
        return self._brands

    @property
    def models(self) -> tuple[Model, ...]:
        return self._models

    @classmethod
    def default(cls, base_url: str = "https://motobay.su") -> SourceCatalog:
        """Build the catalog from the built-in popular model list."""
        base_url = base_url.rstrip("/")
        brands = tuple(
            Brand(id=bid, name=name, index_url=brand_index_url(base_url, bid))
            for bid, name in _DEFAULT_BRANDS
        )
        models = tuple(
            Model(
                id=mid,
                name=name,
                brand_id=bid,
                listing_page_url=model_listing_url(base_url, bid, mid),
            )
            for mid, name, bid in _DEFAULT_MODELS
        )
        return cls(brands, models)

    @classmethod
    def from_yaml(cls, path: str | Path, base_url: str = "https://motobay.su") -> SourceCatalog:
        """Load brands/models from a YAML file.

        Entries are mapped through explicit constructors; unknown keys are
        ignored, missing ``name`` defaults to an empty string.

        Raises:
            ValueError: If an entry is missing its id (or brand_id for models).
        """
        base_url = base_url.rstrip("/")
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        brands = tuple(
            _brand_from_entry(entry, base_url) for entry in data.get("brands") or []
        )
        models = tuple(
            _model_from_entry(entry, base_url) for entry in data.get("models") or []
        )
        logger.info(
            "Loaded source catalog from %s: %d brands, %d models",
            path, len(brands), len(models),
        )
        return cls(brands, models)

    @classmethod
    def load(cls, config: Config | None = None) -> SourceCatalog:
        """YAML catalog if one is configured, otherwise the built-in one."""
        config = config or Config()
        if config.source_catalog_path:
            return cls.from_yaml(config.source_catalog_path, config.base_url)
        return cls.default(config.base_url)

    def listing_urls(self) -> list[str]:
        """Listing-page URLs for every model, in registry order."""
        return [m.listing_page_url for m in self._models]

    def models_for(self, brand_id: int) -> list[Model]:
        return [m for m in self._models if m.brand_id == brand_id]

    @staticmethod
    def description_for(name: str) -> str:
        """Blurb for the first known brand whose name appears in ``name``."""
        for brand_name, description in BRAND_DESCRIPTIONS.items():
            if brand_name in name:
                return description
        return DEFAULT_DESCRIPTION

    def __len__(self) -> int:
        return len(self._models)


def _brand_from_entry(entry: dict, base_url: str) -> Brand:
    if "id" not in entry:
        raise ValueError(f"Brand entry missing 'id': {entry!r}")
    brand_id = int(entry["id"])
    return Brand(
        id=brand_id,
        name=str(entry.get("name", "")).strip(),
        index_url=entry.get("index_url") or brand_index_url(base_url, brand_id),
    )


def _model_from_entry(entry: dict, base_url: str) -> Model:
    if "id" not in entry or "brand_id" not in entry:
        raise ValueError(f"Model entry needs 'id' and 'brand_id': {entry!r}")
    model_id = int(entry["id"])
    brand_id = int(entry["brand_id"])
    return Model(
        id=model_id,
        name=str(entry.get("name", "")).strip(),
        brand_id=brand_id,
        listing_page_url=(
            entry.get("listing_page_url")
            or model_listing_url(base_url, brand_id, model_id)
        ),
    )
