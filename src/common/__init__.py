# Common utilities and shared modules
"""
Shared components used by the engine and its consumers:
- Export contract (Pydantic schemas)
- Logging configuration
"""

from .logging import setup_logging
from .models import CatalogExport, CatalogItem, ExchangeRateInfo, SourceStatus

__all__ = [
    "CatalogExport",
    "CatalogItem",
    "ExchangeRateInfo",
    "SourceStatus",
    "setup_logging",
]
