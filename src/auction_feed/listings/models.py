"""Data models for auction listings."""

from __future__ import annotations

from dataclasses import dataclass

PLACEHOLDER_TITLE = "Unknown Bike"


@dataclass
class ListingRecord:
    """One auctioned vehicle row extracted from a model's listing page.

    Optional fields keep the cleaned source text as-is ("2019", "12 500 km",
    "4.5"); a field the page didn't match is simply None.
    """

    id: int
    title: str = PLACEHOLDER_TITLE
    price_local: int = 0  # RUB
    price_converted: int = 0  # KZT
    image_url: str = ""
    lot_number: str | None = None
    auction_house: str | None = None
    listed_date: str | None = None
    year: str | None = None
    engine_displacement: str | None = None
    frame_code: str | None = None
    mileage: str | None = None
    rating_score: str | None = None
    start_price: str | None = None
    status: str | None = None
    source_url: str = ""

    @property
    def formatted_price(self) -> str:
        return f"₸{self.price_converted:,}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "price_local": self.price_local,
            "price_converted": self.price_converted,
            "image_url": self.image_url,
            "lot_number": self.lot_number,
            "auction_house": self.auction_house,
            "listed_date": self.listed_date,
            "year": self.year,
            "engine_displacement": self.engine_displacement,
            "frame_code": self.frame_code,
            "mileage": self.mileage,
            "rating_score": self.rating_score,
            "start_price": self.start_price,
            "status": self.status,
            "source_url": self.source_url,
        }
