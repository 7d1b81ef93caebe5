"""Shared test fixtures for the auction feed engine."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.auction_feed.common.config import Config
from src.auction_feed.common.errors import NetworkFailure

FIXTURES_DIR = PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def listing_html() -> str:
    """Model listing page with four lot rows."""
    return (FIXTURES_DIR / "motobay_model_listing.html").read_text(encoding="utf-8")


@pytest.fixture
def cbr_xml() -> str:
    """CBR daily feed with KZT at 100 per 16,0000 RUB (multiplier 6.25)."""
    return (FIXTURES_DIR / "cbr_daily.xml").read_text(encoding="utf-8")


@pytest.fixture
def config(monkeypatch) -> Config:
    """Config with environment overrides cleared."""
    for var in (
        "AUCTION_BASE_URL",
        "REQUEST_TIMEOUT",
        "CACHE_RAW_HTML",
        "RAW_HTML_CACHE_DIR",
        "CURRENCY_FEED_URL",
        "CURRENCY_ID",
        "FALLBACK_RATE",
        "RESOLVE_EXCHANGE_RATE",
        "PER_SOURCE_CAP",
        "HTTP_POOL_MAXSIZE",
        "SOURCE_CATALOG_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    return Config()


def make_listing_page(ids: list[int], price: str = "1 000 000") -> str:
    """Minimal listing page with one titled, priced row per id."""
    rows = "\n".join(
        f'<tr class="lot" data-id="{i}"><td><span class="make">Bike {i}</span></td>'
        f"<td><span>{price} р.</span></td></tr>"
        for i in ids
    )
    return f"<table><tbody>\n{rows}\n</tbody></table>"


@pytest.fixture
def page_factory():
    return make_listing_page


@pytest.fixture
def fake_client():
    """Build a mocked HTTPClient from a {url: html | exception} mapping.

    Unknown URLs raise NetworkFailure.
    """

    def _build(pages: dict) -> MagicMock:
        client = MagicMock()

        def get_text(url, cache_key=None):
            body = pages.get(url)
            if body is None:
                raise NetworkFailure(url, "connection refused")
            if isinstance(body, Exception):
                raise body
            return body

        client.get_text.side_effect = get_text
        return client

    return _build
