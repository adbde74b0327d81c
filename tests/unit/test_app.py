"""Unit tests for runtime wiring in facilitydir.app."""

from __future__ import annotations

import httpx
import respx
import structlog

from facilitydir.app import app_lifespan, build_state, setup_logging
from facilitydir.config import LoggingSettings, Settings, SourceSettings
from facilitydir.source import HttpFacilitySource

URL = "https://directory.example.com/hospitals"

BODY = [
    {
        "name": "RSUP SANGLAH",
        "address": "JL. DIPONEGORO DENPASAR BALI",
        "region": "KOTA DENPASAR, BALI",
        "phone": "(0361) 227912",
        "province": "Bali",
    }
]


class TestSetupLogging:
    def test_text_format(self) -> None:
        setup_logging(Settings(logging=LoggingSettings(level="DEBUG", format="text")))
        assert structlog.is_configured()

    def test_json_format(self) -> None:
        setup_logging(Settings(logging=LoggingSettings(format="json")))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestBuildState:
    async def test_wires_components(self) -> None:
        settings = Settings(source=SourceSettings(url=URL))
        async with httpx.AsyncClient() as client:
            state = build_state(settings, client)

        assert isinstance(state.source, HttpFacilitySource)
        assert state.http_client is client
        assert state.view_model.state.items == ()


class TestAppLifespan:
    async def test_end_to_end_load(self) -> None:
        settings = Settings(source=SourceSettings(url=URL))
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(200, json=BODY))
            async with app_lifespan(settings) as state:
                await state.view_model.load()
                await state.view_model.load()
                view = state.view_model.state
                client = state.http_client

        assert route.call_count == 1
        assert [f.name for f in view.items] == ["RSUP SANGLAH"]
        assert view.items[0].is_referral_center
        assert view.has_more is False
        assert client.is_closed

    async def test_server_error_surfaces_message(self) -> None:
        settings = Settings(source=SourceSettings(url=URL))
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(500))
            async with app_lifespan(settings) as state:
                await state.view_model.load()
                view = state.view_model.state

        assert view.error_message == "Failed to fetch facilities: 500"
