"""HTTP data source for the facility directory.

One GET per call, no retries of its own. The source receives an
httpx.AsyncClient via constructor injection — the lifespan owns the client
lifecycle and its timeouts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from facilitydir import __version__
from facilitydir.errors import ErrorCode, FacilityError
from facilitydir.models.facility import Facility

if TYPE_CHECKING:
    from facilitydir.config import Settings

log = structlog.get_logger()

_FACILITY_LIST = TypeAdapter(list[Facility])


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.source.timeout_seconds),
        headers={"User-Agent": f"facilitydir/{__version__}"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


class HttpFacilitySource:
    """Fetches the complete facility list from a JSON endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url

    async def fetch_all(self) -> list[Facility]:
        """Return every facility the endpoint lists.

        Raises FacilityError(NETWORK_ERROR) on transport errors, non-2xx
        responses and bodies that do not decode to a list of facilities.
        """
        try:
            response = await self._client.get(self._url)
        except httpx.HTTPError as exc:
            raise FacilityError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error: {exc}",
                recoverable=True,
            ) from exc

        if not response.is_success:
            raise FacilityError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Failed to fetch facilities: {response.status_code}",
                recoverable=response.status_code >= 500,
            )

        try:
            facilities = _FACILITY_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise FacilityError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Failed to decode facilities: {exc.error_count()} invalid field(s)",
                recoverable=False,
            ) from exc

        log.info(
            "fetch_complete",
            url=self._url,
            status_code=response.status_code,
            count=len(facilities),
        )
        return facilities
