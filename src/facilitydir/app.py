"""Runtime wiring.

Responsibilities (and nothing more):
- Configure structlog
- Own the shared httpx client for the lifetime of the application
- Build the data source, store and view model into an AppState
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog

from facilitydir import __version__
from facilitydir.config import Settings
from facilitydir.source import HttpFacilitySource, build_http_client
from facilitydir.state import AppState
from facilitydir.store import FacilityStore
from facilitydir.view_model import FacilityViewModel

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

log = structlog.get_logger()


def setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def build_state(settings: Settings, client: httpx.AsyncClient) -> AppState:
    source = HttpFacilitySource(client, settings.source.url)
    store = FacilityStore.from_settings(source, settings)
    return AppState(
        settings=settings,
        http_client=client,
        source=source,
        store=store,
        view_model=FacilityViewModel(store),
    )


@asynccontextmanager
async def app_lifespan(settings: Settings | None = None) -> AsyncGenerator[AppState, None]:
    """Create AppState on entry and close the HTTP client on exit."""
    settings = settings or Settings()
    setup_logging(settings)
    log.info("app_starting", version=__version__, source_url=settings.source.url)

    async with build_http_client(settings) as client:
        state = build_state(settings, client)
        try:
            yield state
        finally:
            log.info("app_stopping", cached=state.store.total_count)
