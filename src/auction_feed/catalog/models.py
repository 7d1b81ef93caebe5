"""Data models for the source catalog."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Brand:
    """A manufacturer on the auction site.

    index_url points at the brand's model-list page.
    """

    id: int
    name: str
    index_url: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "index_url": self.index_url}


@dataclass(frozen=True)
class Model:
    """A model under a brand; listing_page_url is its auction listing table."""

    id: int
    name: str
    brand_id: int
    listing_page_url: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "brand_id": self.brand_id,
            "listing_page_url": self.listing_page_url,
        }
