"""In-memory facility cache with pagination and stale-cache fallback.

FacilityStore is the single writer of the cached list, its fetch timestamp,
the pagination cursor and the load-more in-flight flag. Outcomes are reported
as ``Resource`` values; ``FacilityError`` raised by the data source never
crosses the store boundary.

A failed refresh with a cached list on hand is reported as ``Success`` with
the cached first page. Only a failure with nothing cached surfaces as
``Error``. The fallback path leaves ``fetched_at`` untouched, so the entry
stays stale and the next ``load()`` tries the network again.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from facilitydir.errors import ErrorCode, FacilityError
from facilitydir.models.cache import CacheEntry, PaginationCursor
from facilitydir.models.resource import Error, Loading, Resource, Success

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from facilitydir.config import Settings
    from facilitydir.models.facility import Facility
    from facilitydir.protocols import Clock, DataSourceProtocol

log = structlog.get_logger()

DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=5)
DEFAULT_INITIAL_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE = 20

NO_DATA_MESSAGE = "No data available"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FacilityStore:
    """Cache-backed, paginated provider of the facility list."""

    def __init__(
        self,
        source: DataSourceProtocol,
        *,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        initial_page_size: int = DEFAULT_INITIAL_PAGE_SIZE,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = _utcnow,
    ) -> None:
        self._source = source
        self._freshness_window = freshness_window
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._cursor = PaginationCursor(initial_page_size=initial_page_size, page_size=page_size)
        self._loading_more = False
        # Bumped by invalidate(); a load_more stream only clears the flag it set.
        self._load_more_epoch = 0
        # Guards the entry + cursor + in-flight flag triple.
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        source: DataSourceProtocol,
        settings: Settings,
        *,
        clock: Clock = _utcnow,
    ) -> FacilityStore:
        return cls(
            source,
            freshness_window=settings.cache.freshness_window,
            initial_page_size=settings.pagination.initial_page_size,
            page_size=settings.pagination.page_size,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> AsyncIterator[Resource[list[Facility]]]:
        """Yield ``Loading`` then the first page, served from cache when fresh."""
        yield Loading()
        async with self._lock:
            result = await self._load_locked()
        yield result

    async def _load_locked(self) -> Resource[list[Facility]]:
        entry = self._entry
        if entry is not None and entry.is_fresh(self._clock(), self._freshness_window):
            log.debug("facility_cache_hit", count=len(entry.items))
            self._cursor.reset()
            return Success(self._first_page(entry))

        try:
            facilities = await self._source.fetch_all()
        except FacilityError as exc:
            if self._entry is None:
                log.warning(
                    "facility_load_failed",
                    code=ErrorCode.EMPTY_CACHE,
                    cause=exc.code,
                    reason=exc.message,
                    recoverable=exc.recoverable,
                )
                return Error(exc.message)
            log.warning(
                "facility_load_fallback",
                cause=exc.code,
                reason=exc.message,
                recoverable=exc.recoverable,
                count=len(self._entry.items),
                fetched_at=self._entry.fetched_at.isoformat(),
            )
            self._cursor.reset()
            return Success(self._first_page(self._entry))

        self._entry = CacheEntry(items=tuple(facilities), fetched_at=self._clock())
        self._cursor.reset()
        log.info("facility_cache_replaced", count=len(facilities))
        return Success(self._first_page(self._entry))

    async def load_more(self) -> AsyncIterator[Resource[list[Facility]]]:
        """Yield ``Loading`` then the next page; yields nothing if one is in flight.

        An exhausted list yields an empty page, not an error. A stream
        superseded by ``invalidate()`` ends after ``Loading`` without a page.
        """
        if self._loading_more:
            log.debug("facility_load_more_skipped", reason="in_flight")
            return
        self._loading_more = True
        epoch = self._load_more_epoch
        try:
            yield Loading()
            async with self._lock:
                if epoch != self._load_more_epoch:
                    # invalidate() ran while suspended; the page is no longer wanted.
                    log.debug("facility_load_more_superseded")
                    return
                result = self._next_page_locked()
            yield result
        finally:
            if epoch == self._load_more_epoch:
                self._loading_more = False

    def _next_page_locked(self) -> Resource[list[Facility]]:
        entry = self._entry
        if entry is None:
            log.warning("facility_load_more_failed", code=ErrorCode.NO_DATA)
            return Error(NO_DATA_MESSAGE)

        self._cursor.advance()
        try:
            start, end = self._cursor.page_bounds(len(entry.items))
            page = list(entry.items[start:end])
        except Exception as exc:
            # Roll back so a retry recomputes the same range.
            self._cursor.rollback()
            log.error(
                "facility_load_more_failed",
                code=ErrorCode.LOAD_MORE_FAILED,
                pages_loaded=self._cursor.pages_loaded,
                exc_info=True,
            )
            return Error(f"Failed to load more: {exc}")

        log.debug(
            "facility_page_loaded",
            page=self._cursor.pages_loaded,
            start=start,
            end=end,
        )
        return Success(page)

    async def invalidate(self) -> None:
        """Drop the cached list and reset pagination. No I/O."""
        async with self._lock:
            self._entry = None
            self._cursor.reset()
            self._loading_more = False
            self._load_more_epoch += 1
        log.info("facility_cache_invalidated")

    # ------------------------------------------------------------------
    # Filtering (always over the full cached list)
    # ------------------------------------------------------------------

    def search_local(self, query: str) -> list[Facility]:
        """Match ``query`` against name, address, province and region.

        A blank query returns every cached facility.
        """
        if self._entry is None:
            return []
        if not query.strip():
            return list(self._entry.items)
        return [facility for facility in self._entry.items if facility.matches(query)]

    def filter_by_province(self, province: str) -> list[Facility]:
        if self._entry is None:
            return []
        wanted = province.strip().casefold()
        return [f for f in self._entry.items if f.province.casefold() == wanted]

    def filter_by_region(self, region: str) -> list[Facility]:
        if self._entry is None:
            return []
        needle = region.strip().casefold()
        return [f for f in self._entry.items if needle in f.region.casefold()]

    def provinces(self) -> list[str]:
        """Distinct provinces in the cached list, sorted."""
        if self._entry is None:
            return []
        return sorted({facility.province for facility in self._entry.items})

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def has_more(self) -> bool:
        if self._entry is None:
            return False
        return self._cursor.loaded_count(len(self._entry.items)) < len(self._entry.items)

    @property
    def current_page(self) -> int:
        return self._cursor.pages_loaded

    @property
    def loaded_count(self) -> int:
        return self._cursor.loaded_count(self.total_count)

    @property
    def total_count(self) -> int:
        return len(self._entry.items) if self._entry is not None else 0

    @property
    def is_loading_more(self) -> bool:
        return self._loading_more

    @property
    def fetched_at(self) -> datetime | None:
        return self._entry.fetched_at if self._entry is not None else None

    def _first_page(self, entry: CacheEntry) -> list[Facility]:
        return list(entry.items[: self._cursor.initial_page_size])
