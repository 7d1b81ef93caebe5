"""Aggregation orchestrator: concurrent fetch+extract across listing pages.

One refresh is one pass:

1. Shuffle the source URLs so a capped feed doesn't always favour the
   same models.
2. Resolve the exchange rate once; it is read-only for the whole pass.
3. Submit one fetch+extract unit per URL to a worker pool sized to the
   URL list (full fan-out).
4. Keep the first ``per_source_cap`` records of each unit.
5. Fan in on the calling thread with ``as_completed``. In stream mode the
   published catalog grows and observers are notified per unit; in batch
   mode everything is published once.
6. Optionally reshuffle and truncate, publish, notify.

A unit that fails to fetch or parse, for any reason, contributes zero
records; the pass itself never fails because of a source. Workers only return values, so the
aggregated collection has a single writer (the thread running the pass).
Overlapping refresh calls are queued behind a lock and run one after
another, each as a complete pass.
"""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Sequence
from urllib.parse import urlparse

from ..catalog.registry import SourceCatalog
from ..common.config import Config
from ..common.errors import FetchError
from ..common.http_client import HTTPClient
from ..currency.models import ExchangeRate
from ..currency.rate_resolver import CurrencyRateResolver
from ..listings.extractor import ListingExtractor
from ..listings.models import ListingRecord

logger = logging.getLogger(__name__)

CatalogObserver = Callable[[tuple[ListingRecord, ...]], None]


class AggregationState(str, Enum):
    """Lifecycle of the aggregator across a pass."""
    IDLE = "idle"
    FETCHING = "fetching"
    STREAMING = "streaming"
    COLLECTING = "collecting"
    COMPLETED = "completed"


@dataclass
class SourceResult:
    """Outcome of one fetch+extract unit."""

    url: str
    records: list[ListingRecord] = field(default_factory=list)
    found: int = 0  # rows on the page before the per-source cap
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "records": len(self.records),
            "found": self.found,
            "error": self.error,
        }


class CatalogAggregator:
    """Builds the listing catalog from many model pages concurrently.

    Construct one per process (e.g. in the CLI's main) and share it.

    Usage:
        aggregator = CatalogAggregator(config)
        aggregator.subscribe(lambda records: print(len(records)))
        records = aggregator.refresh(per_source_cap=2, stream=True)
    """

    def __init__(
        self,
        config: Config | None = None,
        client: HTTPClient | None = None,
        resolver: CurrencyRateResolver | None = None,
        extractor: ListingExtractor | None = None,
        catalog: SourceCatalog | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or Config()
        self._client = client or HTTPClient(self.config)
        self._resolver = resolver or CurrencyRateResolver(self.config, self._client)
        self._extractor = extractor or ListingExtractor(self.config.base_host)
        self._catalog = catalog if catalog is not None else SourceCatalog.load(self.config)
        self._rng = rng or random.Random()

        self._observers: list[CatalogObserver] = []
        self._records: tuple[ListingRecord, ...] = ()
        self._results: list[SourceResult] = []
        self._last_rate: ExchangeRate | None = None
        self._state = AggregationState.IDLE
        self._pass_lock = threading.Lock()

    # --- Published state ---

    @property
    def catalog(self) -> tuple[ListingRecord, ...]:
        """The most recently published catalog."""
        return self._records

    @property
    def state(self) -> AggregationState:
        return self._state

    @property
    def last_rate(self) -> ExchangeRate | None:
        return self._last_rate

    @property
    def last_results(self) -> list[SourceResult]:
        """Per-source outcomes of the last completed pass."""
        return list(self._results)

    @property
    def source_catalog(self) -> SourceCatalog:
        return self._catalog

    def subscribe(self, observer: CatalogObserver) -> CatalogObserver:
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: CatalogObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # --- Aggregation ---

    def refresh(
        self,
        urls: Sequence[str] | None = None,
        per_source_cap: int | None = None,
        *,
        stream: bool = False,
        limit: int | None = None,
        reshuffle: bool = True,
    ) -> list[ListingRecord]:
        """Run one aggregation pass and publish its catalog.

        Args:
            urls: Listing-page URLs. Defaults to every URL in the source
                  catalog.
            per_source_cap: Max records kept per source (K). Defaults to
                            Config.per_source_cap.
            stream: Publish and notify observers as each source completes
                    instead of once at the end.
            limit: Truncate the final catalog to this many records.
            reshuffle: Shuffle the final catalog before publishing.

        Returns:
            The published records. Empty (never an error) if every
            source fails.
        """
        cap = self.config.per_source_cap if per_source_cap is None else per_source_cap
        if cap < 0:
            raise ValueError("per_source_cap must be >= 0")
        if limit is not None and limit < 0:
            raise ValueError("limit must be >= 0")

        with self._pass_lock:
            try:
                return self._run_pass(urls, cap, stream, limit, reshuffle)
            except Exception:
                self._state = AggregationState.IDLE
                raise

    def _run_pass(
        self,
        urls: Sequence[str] | None,
        cap: int,
        stream: bool,
        limit: int | None,
        reshuffle: bool,
    ) -> list[ListingRecord]:
        sources = list(urls) if urls is not None else self._catalog.listing_urls()
        self._rng.shuffle(sources)

        self._state = AggregationState.FETCHING
        logger.info(
            "Aggregating %d sources (cap=%d, mode=%s)",
            len(sources), cap, "stream" if stream else "batch",
        )
        rate = self._resolver.resolve()
        self._last_rate = rate

        self._state = AggregationState.STREAMING if stream else AggregationState.COLLECTING
        collected: list[ListingRecord] = []
        results: list[SourceResult] = []

        for result in self.iter_source_results(sources, cap, rate):
            results.append(result)
            collected.extend(result.records)
            if stream and result.records:
                self._publish(tuple(collected))

        final = list(collected)
        if reshuffle:
            self._rng.shuffle(final)
        if limit is not None:
            final = final[:limit]

        self._results = results
        self._state = AggregationState.COMPLETED
        self._publish(tuple(final))

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Aggregation complete: %d records from %d sources (%d failed)",
            len(final), len(results), failed,
        )
        return final

    def iter_source_results(
        self,
        urls: Sequence[str],
        per_source_cap: int,
        rate: ExchangeRate,
    ) -> Iterator[SourceResult]:
        """Yield each unit's result in completion order.

        Closing the iterator early doesn't cancel anything: in-flight units
        run to completion and their results are dropped.
        """
        if not urls:
            return

        with ThreadPoolExecutor(
            max_workers=len(urls), thread_name_prefix="auction-source"
        ) as pool:
            futures = [
                pool.submit(self._run_unit, url, per_source_cap, rate.multiplier)
                for url in urls
            ]
            for future in as_completed(futures):
                yield future.result()

    def _run_unit(self, url: str, per_source_cap: int, multiplier: float) -> SourceResult:
        """Fetch one listing page and extract its records (worker thread)."""
        try:
            html = self._client.get_text(url, cache_key=_cache_key(url))
        except FetchError as exc:
            logger.warning("Source failed, skipping: %s", exc)
            return SourceResult(url=url, error=f"{type(exc).__name__}: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error fetching %s", url)
            return SourceResult(url=url, error=f"{type(exc).__name__}: {exc}")

        try:
            records = self._extractor.extract(html, multiplier, source_url=url)
        except Exception as exc:
            logger.exception("Failed to extract listings from %s", url)
            return SourceResult(url=url, error=f"ExtractionError: {exc}")

        return SourceResult(url=url, records=records[:per_source_cap], found=len(records))

    def _publish(self, records: tuple[ListingRecord, ...]) -> None:
        self._records = records
        for observer in list(self._observers):
            try:
                observer(records)
            except Exception:
                logger.exception("Catalog observer raised; continuing")


def _cache_key(url: str) -> str:
    path = urlparse(url).path.strip("/") or "index"
    return "listing_" + path.replace("/", "_")
