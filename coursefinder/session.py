"""
One active course search.

Wires the pieces together the same way the search dialog does:

    CatalogLoader -> FilterEngine <- OptionStore
    FilterEngine  -> PaginationController -> window()
    add()         -> ScheduleExporter -> table store

The session owns the catalog cache and the criteria; nothing is shared
between sessions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from coursefinder.catalog import CatalogLoader
from coursefinder.config import DEBOUNCE_SECONDS, PAGE_SIZE
from coursefinder.export import ScheduleExporter, TableStore
from coursefinder.filtering import FilterEngine
from coursefinder.model import Catalog, CourseRecord, ScheduleSlot, SearchContext, SearchCriteria
from coursefinder.options import CallLater, OptionStore, TimerHandle
from coursefinder.pagination import PaginationController, ScrollRegion

log = logging.getLogger(__name__)


class SearchSession:
    def __init__(
        self,
        loader: CatalogLoader,
        store: TableStore,
        on_close: Optional[Callable[[], None]] = None,
        region: Optional[ScrollRegion] = None,
        page_size: int = PAGE_SIZE,
        delay: float = DEBOUNCE_SECONDS,
        call_later: Optional[CallLater] = None,
    ) -> None:
        self.loader = loader
        self.region = region if region is not None else ScrollRegion()
        self.options = OptionStore(delay=delay, call_later=call_later)
        self.engine = FilterEngine()
        self.pagination = PaginationController(page_size=page_size)
        self.exporter = ScheduleExporter(store, on_close=self.close)

        self.catalog = Catalog()
        self.context: Optional[SearchContext] = None
        self.closed = False
        self._on_close = on_close

        self.options.on_commit(self._criteria_committed)
        self._unsubscribe = self.region.subscribe(self.pagination.on_reached_end)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self, context: Optional[SearchContext] = None) -> Catalog:
        """
        Load (or reuse) the catalog and apply the context hint.
        """
        if context is not None:
            self.set_context(context)
        self.catalog = await self.loader.load()
        self.pagination.resize(len(self.filtered))
        return self.catalog

    def close(self) -> None:
        """
        Cancel pending updates, detach from the scroll region and notify
        the caller. Safe to call more than once.
        """
        if self.closed:
            return
        self.closed = True
        self.options.cancel()
        self._unsubscribe()
        self.region.teardown()
        if self._on_close is not None:
            self._on_close()

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    @property
    def criteria(self) -> SearchCriteria:
        return self.options.criteria

    def set_context(self, context: Optional[SearchContext]) -> None:
        """Apply the day/time hint immediately (no debounce)."""
        self._check_open()
        self.context = context
        self.options.apply_context(context)

    def update(self, name: str, value: Any) -> TimerHandle:
        self._check_open()
        return self.options.update(name, value)

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("Search session is closed")

    def _criteria_committed(self, _criteria: SearchCriteria) -> None:
        self.pagination.reset()
        self.pagination.resize(len(self.filtered))
        self.region.scroll_to_top()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def filtered(self) -> tuple[CourseRecord, ...]:
        return self.engine.filter(self.catalog, self.criteria)

    def window(self) -> tuple[CourseRecord, ...]:
        return tuple(self.pagination.current_window(self.filtered))

    def majors(self) -> list[str]:
        return self.catalog.majors()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def add(self, course: CourseRecord) -> list[ScheduleSlot]:
        """
        Add the course to the context's table. Without a context there is
        no target table and nothing happens.
        """
        if self.context is None:
            log.debug("No target table; ignoring add of %s", course.id)
            return []
        return self.exporter.add_to_table(self.context.table_id, course)
