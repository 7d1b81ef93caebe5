"""Listing extractor for auction model pages.

The listing table is matched as text, not parsed as a DOM: each
``<tr data-id="...">`` row is cut out with a pattern and a fixed battery
of independent field patterns is run over the row body. A field that does
not match is left unset. This ties extraction to the current page markup
on purpose; when the site changes, fields go missing rather than wrong.

Row shape the patterns target::

    <tr class="lot" data-id="48213">
      <td><img src="/upload/lots/48213.jpg"></td>
      <td><span class="make">Honda CB1000R</span>
          <span class="number">1042</span>
          <span class="area">BDS Tokyo</span>
          <span class="date">2024-05-18</span></td>
      <td>2019</td><td>998</td>
      <td><span class="chassis_n">SC80-1001234</span></td>
      <td class="mileage">12 500 km</td>
      <td class="score">4.5</td>
      <td><span class="price-start">350 000 ¥</span>
          <span>1 200 000 р.</span></td>
      <td>SOLD</td>
    </tr>
"""

from __future__ import annotations

import logging
import re

from .models import PLACEHOLDER_TITLE, ListingRecord

logger = logging.getLogger(__name__)

_ROW_RE = re.compile(r'<tr[^>]*data-id="(\d+)"[^>]*>(.*?)</tr>', re.DOTALL)

_TITLE_RE = re.compile(r'<span class="make">([^<]+)</span>', re.DOTALL)
_LOT_RE = re.compile(r'<span class="number">([^<]+)</span>', re.DOTALL)
_AUCTION_RE = re.compile(r'<span class="area">([^<]+)</span>', re.DOTALL)
_DATE_RE = re.compile(r'<span class="date">([^<]+)</span>', re.DOTALL)
_FRAME_RE = re.compile(r'<span class="chassis_n">([^<]+)</span>', re.DOTALL)
_MILEAGE_RE = re.compile(r'class="mileage">([^<]+)</td>', re.DOTALL)
_RATING_RE = re.compile(r'class="score">([^<]+)</td>', re.DOTALL)

_YEAR_RE = re.compile(r"<td>(\d{4})</td>", re.DOTALL)
_DISPLACEMENT_RE = re.compile(r"<td>(\d{3,4})</td>", re.DOTALL)
_STATUS_RE = re.compile(r"<td>(SOLD|Unsold|Available)</td>", re.DOTALL)

_PRICE_RUB_RE = re.compile(r"<span>([\d\s]+) р\.", re.DOTALL)
_PRICE_START_RE = re.compile(r'<span class="price-start">([\d\s]+ ¥)</span>', re.DOTALL)
_IMAGE_RE = re.compile(r'<img[^>]+src="([^"]+)"', re.DOTALL)


def parse_price(text: str) -> int:
    """Parse a price, dropping grouping separators and currency marks.

    "1 200 000 р." -> 1200000 (plain or non-breaking spaces). No digits -> 0.
    """
    digits = re.sub(r"\D", "", text or "")
    return int(digits) if digits else 0


def absolutize_url(url: str, host: str) -> str:
    """Make a site-relative path absolute on ``https://{host}``.

    Absolute URLs come back unchanged, so applying this twice is a no-op.
    """
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return f"https://{host}{url}"
    return url


def _clean(text: str) -> str:
    return text.strip().replace("&#13;", "").replace("&nbsp;", " ")


def _first(pattern: re.Pattern, content: str) -> str | None:
    match = pattern.search(content)
    return match.group(1) if match else None


def _field(pattern: re.Pattern, content: str) -> str | None:
    value = _first(pattern, content)
    return _clean(value) if value is not None else None


class ListingExtractor:
    """Turns raw listing-page HTML into ListingRecords.

    Extraction is pure: the same HTML and multiplier always give the same
    records, in document order, duplicates included.

    Usage:
        extractor = ListingExtractor(host="motobay.su")
        records = extractor.extract(html, multiplier=5.0)
    """

    def __init__(self, host: str = "motobay.su") -> None:
        self.host = host

    def extract(self, html: str, multiplier: float, source_url: str = "") -> list[ListingRecord]:
        if multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {multiplier}")

        records = [
            self._parse_row(int(match.group(1)), match.group(2), multiplier, source_url)
            for match in _ROW_RE.finditer(html)
        ]
        logger.debug("Extracted %d listings from %s", len(records), source_url or "page")
        return records

    def _parse_row(
        self,
        listing_id: int,
        content: str,
        multiplier: float,
        source_url: str,
    ) -> ListingRecord:
        image = _first(_IMAGE_RE, content)
        image_url = absolutize_url(image, self.host) if image else ""

        # Year and displacement both live in bare digit cells. Only the first
        # 3-4 digit cell is considered for displacement, and it is dropped
        # when it is the year itself.
        year = _first(_YEAR_RE, content)
        displacement = _first(_DISPLACEMENT_RE, content)
        if displacement == year:
            displacement = None

        # A yen-only row (price-total) has no RUB price and stays at 0.
        price_text = _first(_PRICE_RUB_RE, content)
        price_local = parse_price(price_text) if price_text else 0

        return ListingRecord(
            id=listing_id,
            title=_field(_TITLE_RE, content) or PLACEHOLDER_TITLE,
            price_local=price_local,
            price_converted=max(0, round(price_local * multiplier)),
            image_url=image_url,
            lot_number=_field(_LOT_RE, content),
            auction_house=_field(_AUCTION_RE, content),
            listed_date=_field(_DATE_RE, content),
            year=year,
            engine_displacement=displacement,
            frame_code=_field(_FRAME_RE, content),
            mileage=_field(_MILEAGE_RE, content),
            rating_score=_field(_RATING_RE, content),
            start_price=_first(_PRICE_START_RE, content),
            status=_first(_STATUS_RE, content),
            source_url=source_url,
        )
