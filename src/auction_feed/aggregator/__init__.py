"""Aggregation Orchestrator - concurrent fan-out/fan-in over listing pages."""

from .exporter import CatalogExporter
from .orchestrator import AggregationState, CatalogAggregator, SourceResult

__all__ = [
    "AggregationState",
    "CatalogAggregator",
    "CatalogExporter",
    "SourceResult",
]
