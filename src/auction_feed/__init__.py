"""
Auction Feed: motorcycle auction listing aggregation engine

Modules:
- catalog: Brand/model registry and listing-page URLs
- currency: RUB -> KZT exchange-rate resolution with fallback
- listings: Text-pattern extraction of listing rows
- aggregator: Concurrent fetch+extract orchestration and JSON export
- common: Config, page fetcher, error taxonomy
"""

__version__ = "0.1.0"
