"""Currency Rate Resolver - RUB -> KZT multiplier with a safe fallback."""

from .models import ExchangeRate
from .rate_resolver import CurrencyRateResolver, CurrencyResolutionError

__all__ = [
    "CurrencyRateResolver",
    "CurrencyResolutionError",
    "ExchangeRate",
]
