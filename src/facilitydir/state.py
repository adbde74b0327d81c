"""Application state container.

AppState is created once inside ``app_lifespan`` and handed to whatever
presentation layer drives the view model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from facilitydir.config import Settings
    from facilitydir.protocols import DataSourceProtocol
    from facilitydir.store import FacilityStore
    from facilitydir.view_model import FacilityViewModel


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    http_client: httpx.AsyncClient
    source: DataSourceProtocol
    store: FacilityStore
    view_model: FacilityViewModel
