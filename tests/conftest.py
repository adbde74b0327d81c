"""Shared test fixtures for the facilitydir test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from facilitydir.errors import ErrorCode, FacilityError
from facilitydir.models.facility import Facility
from facilitydir.store import FacilityStore


class FakeSource:
    """In-memory data source.

    Set ``error`` to make the next fetches fail, or ``gate`` to hold them until
    the event is set.
    """

    def __init__(self, facilities: list[Facility]) -> None:
        self.facilities = facilities
        self.error: FacilityError | None = None
        self.gate: asyncio.Event | None = None
        self.calls = 0

    async def fetch_all(self) -> list[Facility]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.facilities)

    def fail(self, message: str = "Network error: connection refused") -> None:
        self.error = FacilityError(code=ErrorCode.NETWORK_ERROR, message=message, recoverable=True)

    def recover(self) -> None:
        self.error = None


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_facilities(count: int) -> list[Facility]:
    return [
        Facility(
            name=f"RS Facility {i}",
            address=f"Jl. Example No. {i}",
            region=f"KOTA {i}",
            province="Aceh" if i % 2 else "Bali",
            phone=f"(0651) {i:05d}",
        )
        for i in range(count)
    ]


@pytest.fixture()
def sample_facilities() -> list[Facility]:
    """Two records in the shape the directory endpoint returns."""
    return [
        Facility(
            name="RS UMUM DAERAH DR. ZAINOEL ABIDIN",
            address="JL. TGK DAUD BEUREUEH, NO. 108 B. ACEH",
            region="KOTA BANDA ACEH, ACEH",
            phone="(0651) 34565",
            province="Aceh",
        ),
        Facility(
            name="RSUP SANGLAH",
            address="JL. DIPONEGORO DENPASAR BALI",
            region="KOTA DENPASAR, BALI",
            phone="(0361) 227912",
            province="Bali",
        ),
    ]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def many_source() -> FakeSource:
    """55 facilities: one initial page of 10, then pages of 20, 20 and 5."""
    return FakeSource(make_facilities(55))


@pytest.fixture()
def store(many_source: FakeSource, clock: FakeClock) -> FacilityStore:
    return FacilityStore(many_source, initial_page_size=10, page_size=20, clock=clock)


@pytest.fixture()
def source_factory() -> type[FakeSource]:
    return FakeSource


@pytest.fixture()
def facility_factory() -> Callable[[int], list[Facility]]:
    return make_facilities
