"""
Catalog loading (two JSON endpoints -> one deduplicated Catalog).

- Fetches the majors and liberal-arts partitions concurrently
- Merges them in order; the later-listed partition wins duplicate ids
- Caches the merged catalog for the lifetime of one search session

Failure policy:
- if either fetch fails, the whole load fails
- the loader logs it, keeps it on `last_error` and returns an empty catalog
- empty results are never cached, so the next load() fetches again
"""

from __future__ import annotations

import asyncio
import logging
import time
from functools import partial
from typing import Any, Callable, Optional, Sequence

import requests

from coursefinder.config import LIBERAL_ARTS_URL, MAJORS_URL, REQUEST_TIMEOUT
from coursefinder.model import Catalog, CourseRecord

log = logging.getLogger(__name__)


Fetch = Callable[[str], Any]


class LoadFailure(RuntimeError):
    """Raised (and recorded) when a catalog partition cannot be loaded."""


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def fetch_partition(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> list[dict[str, Any]]:
    """
    Download one catalog partition and return the decoded JSON list.
    """
    http = session if session is not None else requests
    resp = http.get(url, timeout=timeout)
    resp.raise_for_status()

    data = resp.json()
    if not isinstance(data, list):
        raise LoadFailure(f"{url} returned {type(data).__name__}, expected a list")
    return data


def parse_records(rows: Sequence[Any], source: str = "") -> list[CourseRecord]:
    """
    Convert raw JSON objects into records, skipping the ones that are unusable.
    """
    records: list[CourseRecord] = []
    for row in rows:
        try:
            records.append(CourseRecord.from_dict(row))
        except ValueError as e:
            log.warning("Skipping course record from %s: %s", source or "catalog", e)
    return records


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class CatalogCache:
    """
    Holds the last successfully loaded catalog for one search session.
    """

    def __init__(self) -> None:
        self._catalog: Optional[Catalog] = None

    def get(self) -> Optional[Catalog]:
        return self._catalog

    def store(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def invalidate(self) -> None:
        self._catalog = None

    @property
    def is_warm(self) -> bool:
        return bool(self._catalog)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class CatalogLoader:
    """
    Loads the merged catalog, reusing the cache when it holds records.

    `fetch` takes a URL and returns the decoded JSON list. It runs in a
    worker thread, one per partition, so both requests are in flight at
    the same time.
    """

    def __init__(
        self,
        urls: Sequence[str] = (MAJORS_URL, LIBERAL_ARTS_URL),
        cache: Optional[CatalogCache] = None,
        fetch: Optional[Fetch] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.urls = tuple(urls)
        self.cache = cache if cache is not None else CatalogCache()
        self.fetch = fetch if fetch is not None else partial(fetch_partition, timeout=timeout)
        self.last_error: Optional[LoadFailure] = None
        self._pending: Optional[asyncio.Future[Catalog]] = None

    async def load(self) -> Catalog:
        cached = self.cache.get()
        if cached:
            log.debug("Catalog cache hit (%d records)", len(cached))
            return cached

        # A second caller joins the load already in flight
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load_fresh())
            self._pending.add_done_callback(self._clear_pending)
        return await self._pending

    def _clear_pending(self, _future: "asyncio.Future[Catalog]") -> None:
        self._pending = None

    def _fail(self, failure: LoadFailure) -> Catalog:
        self.last_error = failure
        log.error("Catalog load failed: %s", failure)
        return Catalog()

    async def _load_fresh(self) -> Catalog:
        t0 = time.perf_counter()
        log.info("Loading catalog from %d endpoints", len(self.urls))

        try:
            partitions = await asyncio.gather(*(asyncio.to_thread(self.fetch, url) for url in self.urls))
        except LoadFailure as e:
            return self._fail(e)
        except (requests.RequestException, ValueError) as e:
            failure = LoadFailure(str(e))
            failure.__cause__ = e
            return self._fail(failure)

        records = [parse_records(rows, source=url) for url, rows in zip(self.urls, partitions)]
        catalog = Catalog.merge(*records)

        self.last_error = None
        if catalog:
            self.cache.store(catalog)

        log.info(
            "Catalog loaded: %d records (%d before dedupe) in %.2fs",
            len(catalog),
            sum(len(r) for r in records),
            time.perf_counter() - t0,
        )
        return catalog
