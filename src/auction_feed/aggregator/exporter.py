"""Catalog exporter: converts a pass's records into the JSON feed contract."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable

from src.common.models import (
    CatalogExport,
    CatalogItem,
    ExchangeRateInfo,
    SourceStatus,
)

from ..catalog.registry import SourceCatalog
from ..currency.models import ExchangeRate
from ..listings.models import ListingRecord
from .orchestrator import SourceResult

logger = logging.getLogger(__name__)


class CatalogExporter:
    """Export aggregated listings as a CatalogExport."""

    @staticmethod
    def to_item(record: ListingRecord) -> CatalogItem:
        return CatalogItem(
            id=record.id,
            title=record.title,
            price=record.formatted_price,
            price_value=record.price_converted,
            price_local=record.price_local,
            image_url=record.image_url,
            description=SourceCatalog.description_for(record.title),
            lot_number=record.lot_number,
            auction_house=record.auction_house,
            year=record.year,
            engine_displacement=record.engine_displacement,
            mileage=record.mileage,
            status=record.status,
        )

    @classmethod
    def build(
        cls,
        records: Iterable[ListingRecord],
        rate: ExchangeRate | None = None,
        results: Iterable[SourceResult] = (),
    ) -> CatalogExport:
        """Assemble the export for one pass.

        Args:
            records: Published catalog records.
            rate: Exchange rate used for the pass.
            results: Per-source outcomes, for the sources section.
        """
        sources = [SourceStatus(**r.to_dict()) for r in results]
        rate_info = None
        if rate is not None:
            rate_info = ExchangeRateInfo(
                multiplier=rate.multiplier,
                resolved_at=rate.resolved_at,
                is_fallback=rate.is_fallback,
            )

        return CatalogExport(
            generated_at=datetime.now(),
            exchange_rate=rate_info,
            source_count=len(sources),
            failed_sources=sum(1 for s in sources if s.error),
            sources=sources,
            items=[cls.to_item(r) for r in records],
        )

    @staticmethod
    def write(export: CatalogExport, output_path: str | Path) -> Path:
        """Write the export as pretty-printed UTF-8 JSON."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(export.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Catalog export written to %s (%d items)", path, len(export.items))
        return path
