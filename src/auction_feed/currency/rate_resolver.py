"""Exchange-rate resolver backed by the Central Bank of Russia daily feed.

The feed is a sequence of ``<Valute ID="...">`` elements, each with a
``<Nominal>`` and a comma-decimal ``<Value>`` (RUB per Nominal units).
For KZT (ID R01335) the RUB -> KZT multiplier is ``Nominal / Value``.

Resolution is best effort: any failure yields the configured fallback
rate and is never raised to the caller.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime

from bs4 import BeautifulSoup

from ..common.config import Config
from ..common.errors import FetchError
from ..common.http_client import HTTPClient
from .models import ExchangeRate

logger = logging.getLogger(__name__)

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


class CurrencyResolutionError(Exception):
    """The feed was fetched but no usable rate could be read from it."""


class CurrencyRateResolver:
    """Resolves the RUB -> KZT multiplier once per aggregation pass.

    Usage:
        resolver = CurrencyRateResolver(config, client)
        rate = resolver.resolve()
        rate.convert(1_200_000)
    """

    def __init__(self, config: Config | None = None, client: HTTPClient | None = None) -> None:
        self.config = config or Config()
        self._client = client or HTTPClient(self.config)

    def fallback(self) -> ExchangeRate:
        return ExchangeRate(
            multiplier=self.config.fallback_rate,
            resolved_at=datetime.now(),
            is_fallback=True,
        )

    def resolve(self) -> ExchangeRate:
        """Return the current multiplier, or the fallback on any failure."""
        if not self.config.resolve_exchange_rate:
            logger.info("Exchange-rate lookup disabled, using %.2f", self.config.fallback_rate)
            return self.fallback()

        try:
            xml = self._client.get_text(self.config.currency_feed_url)
            multiplier = self.parse_multiplier(xml, self.config.currency_id)
        except FetchError as exc:
            logger.warning("Currency feed unreachable (%s), using fallback rate", exc)
            return self.fallback()
        except CurrencyResolutionError as exc:
            logger.warning("Currency feed unusable (%s), using fallback rate", exc)
            return self.fallback()
        except Exception:
            logger.warning("Unexpected currency feed failure, using fallback rate", exc_info=True)
            return self.fallback()

        logger.info("Resolved exchange rate %s: %.4f", self.config.currency_id, multiplier)
        return ExchangeRate(multiplier=multiplier, resolved_at=datetime.now())

    @staticmethod
    def parse_multiplier(xml: str, currency_id: str) -> float:
        """Compute ``Nominal / Value`` for the given Valute ID.

        Raises:
            CurrencyResolutionError: Element or fields missing, or the
                result is not a positive finite number.
        """
        # lxml refuses str input that still carries an encoding declaration
        soup = BeautifulSoup(_XML_DECLARATION_RE.sub("", xml, count=1), "xml")
        valute = soup.find("Valute", attrs={"ID": currency_id})
        if valute is None:
            raise CurrencyResolutionError(f"Valute {currency_id} not found")

        value_el = valute.find("Value")
        if value_el is None:
            raise CurrencyResolutionError(f"Valute {currency_id} has no Value")
        value = _parse_decimal(value_el.get_text())

        nominal = 1.0
        nominal_el = valute.find("Nominal")
        if nominal_el is not None:
            nominal = _parse_decimal(nominal_el.get_text())

        if value <= 0 or nominal <= 0:
            raise CurrencyResolutionError(
                f"Non-positive Value/Nominal for {currency_id}: {value}/{nominal}"
            )

        multiplier = nominal / value
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise CurrencyResolutionError(f"Bad multiplier {multiplier}")
        return multiplier


def _parse_decimal(text: str) -> float:
    try:
        return float(text.strip().replace(",", "."))
    except ValueError as exc:
        raise CurrencyResolutionError(f"Not a number: {text!r}") from exc
