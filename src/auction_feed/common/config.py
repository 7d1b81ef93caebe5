"""Configuration management for the auction feed engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(_PROJECT_ROOT / ".env")

MIN_REQUEST_TIMEOUT = 30
MAX_REQUEST_TIMEOUT = 60

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Auction site
    base_url: str = "https://motobay.su"

    # Scraping
    request_timeout: int = 30
    http_pool_maxsize: int = 32
    cache_raw_html: bool = False
    raw_html_cache_dir: str = "data/raw_html"

    # Currency (CBR daily feed, Valute R01335 = KZT)
    currency_feed_url: str = "https://www.cbr.ru/scripts/XML_daily.asp"
    currency_id: str = "R01335"
    fallback_rate: float = 5.0
    resolve_exchange_rate: bool = True

    # Aggregation
    per_source_cap: int = 2

    # Optional YAML override for the built-in source catalog
    source_catalog_path: str | None = None

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("AUCTION_BASE_URL"):
            self.base_url = url
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = int(timeout)
        if pool_size := os.getenv("HTTP_POOL_MAXSIZE"):
            self.http_pool_maxsize = int(pool_size)
        if flag := os.getenv("CACHE_RAW_HTML"):
            self.cache_raw_html = _env_flag(flag)
        if cache_dir := os.getenv("RAW_HTML_CACHE_DIR"):
            self.raw_html_cache_dir = cache_dir
        if url := os.getenv("CURRENCY_FEED_URL"):
            self.currency_feed_url = url
        if currency_id := os.getenv("CURRENCY_ID"):
            self.currency_id = currency_id
        if rate := os.getenv("FALLBACK_RATE"):
            self.fallback_rate = float(rate)
        if flag := os.getenv("RESOLVE_EXCHANGE_RATE"):
            self.resolve_exchange_rate = _env_flag(flag)
        if cap := os.getenv("PER_SOURCE_CAP"):
            self.per_source_cap = int(cap)
        if path := os.getenv("SOURCE_CATALOG_PATH"):
            self.source_catalog_path = path

        self.base_url = self.base_url.rstrip("/")

        if not MIN_REQUEST_TIMEOUT <= self.request_timeout <= MAX_REQUEST_TIMEOUT:
            raise ValueError(
                f"request_timeout must be between {MIN_REQUEST_TIMEOUT} and "
                f"{MAX_REQUEST_TIMEOUT} seconds, got {self.request_timeout}"
            )
        if self.http_pool_maxsize < 1:
            raise ValueError("http_pool_maxsize must be >= 1")
        if self.fallback_rate <= 0:
            raise ValueError("fallback_rate must be positive")
        if self.per_source_cap < 0:
            raise ValueError("per_source_cap must be >= 0")

    @property
    def base_host(self) -> str:
        """Host part of base_url (e.g. 'motobay.su')."""
        return self.base_url.split("://", 1)[-1].split("/", 1)[0]

    @property
    def raw_html_cache_abs_dir(self) -> Path:
        """Resolve raw HTML cache dir relative to project root."""
        p = Path(self.raw_html_cache_dir)
        if p.is_absolute():
            return p
        return _PROJECT_ROOT / p
