"""Protocol interfaces for swappable components.

The store references these protocols, not the concrete implementations.
This allows tests to use lightweight in-memory data sources and fixed clocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from facilitydir.models.facility import Facility


class DataSourceProtocol(Protocol):
    """Interface for the facility directory endpoint."""

    async def fetch_all(self) -> list[Facility]:
        """Return the complete facility list.

        Implementations must signal every failure as
        ``FacilityError(code=ErrorCode.NETWORK_ERROR)``. The store only falls
        back to its cached list for that exception; anything else propagates.
        """
        ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...
