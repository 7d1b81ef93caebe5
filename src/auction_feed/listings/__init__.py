"""Listing Extractor - text-pattern extraction of auction listing rows."""

from .extractor import ListingExtractor, absolutize_url, parse_price
from .models import PLACEHOLDER_TITLE, ListingRecord

__all__ = [
    "ListingExtractor",
    "ListingRecord",
    "PLACEHOLDER_TITLE",
    "absolutize_url",
    "parse_price",
]
