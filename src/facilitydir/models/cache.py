from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict

from facilitydir.models.facility import Facility


class CacheEntry(BaseModel):
    """Full facility list from one successful fetch. Replaced, never mutated."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Facility, ...]
    fetched_at: datetime

    def is_fresh(self, now: datetime, window: timedelta) -> bool:
        return bool(self.items) and now - self.fetched_at < window


@dataclass
class PaginationCursor:
    """Tracks how many pages beyond the initial page have been handed out.

    loaded_count = initial_page_size + pages_loaded * page_size, clamped to
    the number of cached items.
    """

    initial_page_size: int
    page_size: int
    pages_loaded: int = 0

    def reset(self) -> None:
        self.pages_loaded = 0

    def advance(self) -> None:
        self.pages_loaded += 1

    def rollback(self) -> None:
        self.pages_loaded = max(0, self.pages_loaded - 1)

    def loaded_count(self, total: int) -> int:
        return min(self.initial_page_size + self.pages_loaded * self.page_size, total)

    def page_bounds(self, total: int) -> tuple[int, int]:
        """Return the clamped ``[start, end)`` range of the most recent page."""
        if self.pages_loaded == 0:
            return 0, min(self.initial_page_size, total)
        start = self.initial_page_size + (self.pages_loaded - 1) * self.page_size
        end = start + self.page_size
        return min(start, total), min(end, total)
