"""CLI entry point for the auction catalog aggregator.

Usage:
    python -m src.auction_feed.aggregator.main --output data/exports/catalog.json
    python -m src.auction_feed.aggregator.main --sources 8 --cap 3 --limit 20
    python -m src.auction_feed.aggregator.main --stream --catalog config/sources.yaml
    python -m src.auction_feed.aggregator.main --discover-brands
"""

from __future__ import annotations

import argparse
import json
import logging
import random

from src.common.logging import setup_logging

from ..catalog.brand_scraper import CatalogScraper
from ..catalog.registry import SourceCatalog
from ..common.config import Config
from ..common.http_client import HTTPClient
from .exporter import CatalogExporter
from .orchestrator import CatalogAggregator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auction Listing Catalog Aggregator")
    parser.add_argument(
        "--sources",
        type=int,
        help="Number of catalog listing pages to aggregate (default: all)",
    )
    parser.add_argument(
        "--cap",
        type=int,
        help="Max records per source page (default: PER_SOURCE_CAP or 2)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Truncate the final catalog to this many records",
    )
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Log the catalog as each source completes",
    )
    parser.add_argument(
        "--no-reshuffle",
        action="store_true",
        help="Keep completion order in the final catalog",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="YAML source catalog replacing the built-in model list",
    )
    parser.add_argument(
        "--discover-brands",
        action="store_true",
        help="List brands and models from the live site instead of aggregating",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output JSON file path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def discover(config: Config, client: HTTPClient, model_limit: int = 10) -> dict:
    """Brand index + per-brand model lists from the live site."""
    scraper = CatalogScraper(config, client)
    brands = scraper.fetch_brands()
    return {
        "brands": [
            {
                **brand.to_dict(),
                "models": [m.to_dict() for m in scraper.fetch_models(brand, model_limit)],
            }
            for brand in brands
        ]
    }


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = Config()
    if args.catalog:
        config.source_catalog_path = args.catalog

    with HTTPClient(config) as client:
        if args.discover_brands:
            output_data = discover(config, client)
            for brand in output_data["brands"]:
                logger.info("  [%d] %s: %d models", brand["id"], brand["name"], len(brand["models"]))
            if args.output:
                with open(args.output, "w", encoding="utf-8") as f:
                    json.dump(output_data, f, ensure_ascii=False, indent=2)
                logger.info("Output written to %s", args.output)
            return

        catalog = SourceCatalog.load(config)
        aggregator = CatalogAggregator(config, client=client, catalog=catalog)

        if args.stream:
            aggregator.subscribe(
                lambda records: logger.info("Catalog now has %d records", len(records))
            )

        urls = catalog.listing_urls()
        if args.sources is not None:
            urls = random.sample(urls, min(max(args.sources, 0), len(urls)))

        records = aggregator.refresh(
            urls,
            per_source_cap=args.cap,
            stream=args.stream,
            limit=args.limit,
            reshuffle=not args.no_reshuffle,
        )

    for record in records:
        logger.info(
            "  [%s] %s | %s (%s RUB) %s",
            record.id,
            record.title[:40],
            record.formatted_price,
            f"{record.price_local:,}",
            record.status or "",
        )

    if args.output:
        export = CatalogExporter.build(records, aggregator.last_rate, aggregator.last_results)
        CatalogExporter.write(export, args.output)


if __name__ == "__main__":
    main()
