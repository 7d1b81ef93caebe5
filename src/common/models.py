"""Shared Pydantic data models for the auction feed.

These models define the data contract between the aggregation engine and
the apps that render its output (catalog screens, cart). Consumers only
ever see these; the engine's internal dataclasses stay internal.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

CATEGORY_MOTORCYCLES = "Motorcycles"


class CatalogItem(BaseModel):
    """One listing as shown in the catalog."""
    id: int
    title: str
    price: str = Field(description="Formatted KZT price, e.g. '₸6,000,000'")
    price_value: int = Field(ge=0, description="Converted price in KZT")
    price_local: int = Field(ge=0, description="Source price in RUB")
    category: str = CATEGORY_MOTORCYCLES
    image_url: str = ""
    description: str = ""
    lot_number: str | None = None
    auction_house: str | None = None
    year: str | None = None
    engine_displacement: str | None = None
    mileage: str | None = None
    status: str | None = None


class ExchangeRateInfo(BaseModel):
    """The multiplier used for a pass."""
    multiplier: float = Field(gt=0)
    resolved_at: datetime
    is_fallback: bool = False


class SourceStatus(BaseModel):
    """Per-source outcome of a pass."""
    url: str
    records: int = Field(ge=0)
    found: int = Field(ge=0)
    error: str | None = None


class CatalogExport(BaseModel):
    """Full catalog feed for one aggregation pass. The main data contract."""
    generated_at: datetime
    exchange_rate: ExchangeRateInfo | None = None
    source_count: int = Field(ge=0)
    failed_sources: int = Field(ge=0)
    sources: list[SourceStatus] = []
    items: list[CatalogItem] = []
