"""Observable presentation snapshot over FacilityStore.

FacilityViewModel consumes the store's ``Resource`` streams and publishes an
immutable FacilityViewState to its subscribers after every transition. The
text filter always runs over every page loaded so far, never just the latest
page.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from facilitydir.models.facility import Facility
from facilitydir.models.resource import Error, Loading, Success

if TYPE_CHECKING:
    from facilitydir.store import FacilityStore

log = structlog.get_logger()


class FacilityViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[Facility, ...] = ()
    visible_items: tuple[Facility, ...] = ()
    query: str = ""
    loading: bool = False
    loading_more: bool = False
    error_message: str | None = None
    has_more: bool = True
    current_page: int = 0
    total_count: int = 0


Listener = Callable[[FacilityViewState], None]


def apply_filter(facilities: Iterable[Facility], query: str) -> tuple[Facility, ...]:
    """Keep facilities matching ``query``; a blank query keeps everything."""
    if not query.strip():
        return tuple(facilities)
    return tuple(facility for facility in facilities if facility.matches(query))


class FacilityViewModel:
    def __init__(self, store: FacilityStore) -> None:
        self._store = store
        self._state = FacilityViewState()
        self._loaded: list[Facility] = []
        self._listeners: list[Listener] = []

    @property
    def state(self) -> FacilityViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes: object) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def load(self) -> None:
        async for resource in self._store.load():
            match resource:
                case Loading():
                    self._update(loading=True, error_message=None)
                case Success(data=facilities):
                    self._loaded = list(facilities)
                    self._update(
                        items=tuple(self._loaded),
                        visible_items=apply_filter(self._loaded, self._state.query),
                        loading=False,
                        error_message=None,
                        has_more=self._store.has_more(),
                        current_page=self._store.current_page,
                        total_count=self._store.total_count,
                    )
                case Error(message=message):
                    self._update(loading=False, error_message=message)

    async def load_more(self) -> None:
        if self._state.loading_more or not self._state.has_more:
            log.debug(
                "view_load_more_skipped",
                loading_more=self._state.loading_more,
                has_more=self._state.has_more,
            )
            return

        async for resource in self._store.load_more():
            match resource:
                case Loading():
                    self._update(loading_more=True)
                case Success(data=[]):
                    self._update(loading_more=False, has_more=False)
                case Success(data=page):
                    self._loaded.extend(page)
                    self._update(
                        items=tuple(self._loaded),
                        visible_items=apply_filter(self._loaded, self._state.query),
                        loading_more=False,
                        has_more=self._store.has_more(),
                        current_page=self._store.current_page,
                    )
                case Error(message=message):
                    self._update(loading_more=False, error_message=message)

    async def refresh(self) -> None:
        """Drop everything cached and loaded, then load from the network."""
        await self._store.invalidate()
        self._loaded.clear()
        self._update(
            items=(),
            visible_items=(),
            has_more=True,
            current_page=0,
            loading_more=False,
        )
        await self.load()

    def search(self, query: str) -> None:
        self._update(query=query, visible_items=apply_filter(self._loaded, query))

    def clear_error(self) -> None:
        self._update(error_message=None)

    def facilities_by_province(self, province: str) -> list[Facility]:
        """Loaded facilities whose province equals ``province``, ignoring case."""
        wanted = province.strip().casefold()
        return [f for f in self._loaded if f.province.casefold() == wanted]
