"""Tests for the environmental data provider."""

import asyncio
from datetime import date

import httpx
import pytest

from forestsim.config import settings
from forestsim.services.environment import (
    EnvironmentalDataProvider, RateLimiter, parse_current, parse_history, parse_soil,
)

SOIL_PAYLOAD = {
    "properties": {
        "layers": [
            {"name": "soc", "depths": [{"values": {"mean": 452}}]},
            {"name": "phh2o", "depths": [{"values": {"mean": 63}}]},
        ]
    }
}

CURRENT_PAYLOAD = {
    "current_weather": {"temperature": 18.4},
    "daily": {"precipitation_sum": [2.6, 0.0]},
}

ARCHIVE_PAYLOAD = {
    "daily": {
        "time": ["2022-12-30", "2022-12-31", "2023-01-01", "2023-01-02"],
        "temperature_2m_mean": [4.0, 6.0, 1.0, None],
        "precipitation_sum": [1.0, 3.0, 0.5, 2.0],
    }
}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def test_blocks_after_limit(self):
        limiter = RateLimiter(2, 60, clock=FakeClock())
        assert limiter.is_allowed("soil")
        assert limiter.is_allowed("soil")
        assert not limiter.is_allowed("soil")

    def test_keys_are_independent(self):
        limiter = RateLimiter(1, 60, clock=FakeClock())
        assert limiter.is_allowed("soil")
        assert limiter.is_allowed("climate")

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimiter(1, 60, clock=clock)
        assert limiter.is_allowed("soil")
        clock.now = 61
        assert limiter.is_allowed("soil")


class TestParsers:
    def test_soil_units(self):
        carbon, ph = parse_soil(SOIL_PAYLOAD)
        assert carbon == pytest.approx(45.2)
        assert ph == pytest.approx(6.3)

    def test_soil_missing_layers(self):
        assert parse_soil({}) == (None, None)

    def test_current(self):
        assert parse_current(CURRENT_PAYLOAD) == (18.4, 2.6)
        assert parse_current({}) == (None, None)

    def test_history_yearly_means(self):
        history = parse_history(ARCHIVE_PAYLOAD)
        assert [h.year for h in history] == [2022, 2023]
        assert history[0].temperature == pytest.approx(5.0)
        assert history[0].precipitation == pytest.approx(2.0)
        # Days with a missing value are skipped
        assert history[1].temperature == pytest.approx(1.0)
        assert history[1].precipitation == pytest.approx(0.5)


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "rest.isric.org":
        return httpx.Response(200, json=SOIL_PAYLOAD)
    if request.url.host == "archive-api.open-meteo.com":
        assert request.url.params["start_date"] == "2014-06-15"
        return httpx.Response(200, json=ARCHIVE_PAYLOAD)
    return httpx.Response(200, json=CURRENT_PAYLOAD)


class TestProvider:
    @pytest.fixture(autouse=True)
    def live_mode(self, monkeypatch):
        monkeypatch.setattr(settings, "demo_mode", False)

    def _provider(self, handler, limiter=None):
        return EnvironmentalDataProvider(
            rate_limiter=limiter or RateLimiter(10, 60, clock=FakeClock()),
            transport=httpx.MockTransport(handler),
            today=lambda: date(2024, 6, 15),
        )

    def test_fetch_combines_sources(self):
        obs = asyncio.run(self._provider(_handler).fetch(48.1, 11.6))
        assert obs.soil_carbon == pytest.approx(45.2)
        assert obs.soil_ph == pytest.approx(6.3)
        assert obs.temperature == 18.4
        assert obs.precipitation == 2.6
        assert len(obs.history) == 2

    def test_failures_degrade_to_unknown(self):
        provider = self._provider(lambda request: httpx.Response(503))
        obs = asyncio.run(provider.fetch(48.1, 11.6))
        assert obs.soil_carbon is None
        assert obs.temperature is None
        assert obs.history == ()

    def test_invalid_json_degrades_to_unknown(self):
        provider = self._provider(lambda request: httpx.Response(200, text="<html>"))
        obs = asyncio.run(provider.fetch(48.1, 11.6))
        assert obs.precipitation is None

    def test_non_object_json_degrades_to_unknown(self):
        provider = self._provider(lambda request: httpx.Response(200, json=[1, 2]))
        obs = asyncio.run(provider.fetch(48.1, 11.6))
        assert obs.soil_carbon is None
        assert obs.temperature is None
        assert obs.history == ()

    def test_malformed_fields_degrade_to_unknown(self):
        def handler(request):
            if "soilgrids" in str(request.url):
                layer = {"name": "soc", "depths": [{"values": {"mean": "lots"}}]}
                return httpx.Response(200, json={"properties": {"layers": [layer]}})
            if "archive" in str(request.url):
                return httpx.Response(200, json={"daily": {"time": "2020-01-01"}})
            return httpx.Response(200, json={"current_weather": "sunny"})

        obs = asyncio.run(self._provider(handler).fetch(48.1, 11.6))
        assert obs.soil_carbon is None
        assert obs.temperature is None
        assert obs.history == ()

    def test_rate_limited_source_is_unknown(self):
        limiter = RateLimiter(0, 60, clock=FakeClock())
        obs = asyncio.run(self._provider(_handler, limiter).fetch(48.1, 11.6))
        assert obs.soil_carbon is None
        assert obs.temperature is None

    def test_demo_mode_skips_network(self, monkeypatch):
        monkeypatch.setattr(settings, "demo_mode", True)

        def explode(request):
            raise AssertionError("network used in demo mode")

        obs = asyncio.run(self._provider(explode).fetch(48.1, 11.6))
        assert obs.temperature is None
