"""Environmental data provider: soil (ISRIC SoilGrids) and climate (Open-Meteo).

Every failure degrades to unknown fields so a simulation can always run from
coordinates and species alone. No retries; rate limiting is per data source.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict
from datetime import date
from typing import Callable, Optional

import httpx

from forestsim.config import settings
from forestsim.models.schemas import EnvironmentalObservation, HistoricalClimatePoint

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window limiter keyed by data source."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, key: str) -> bool:
        now = self._clock()
        window_start = now - self.window_seconds
        recent = [t for t in self._requests[key] if t > window_start]
        if len(recent) >= self.max_requests:
            self._requests[key] = recent
            return False
        recent.append(now)
        self._requests[key] = recent
        return True


def parse_soil(payload: dict) -> tuple[Optional[float], Optional[float]]:
    """Extract (organic carbon g/kg, pH) from a SoilGrids response.

    SoilGrids reports soc in dg/kg and pH×10, hence the division by 10.
    """
    carbon = ph = None
    for layer in payload.get("properties", {}).get("layers", []):
        depths = layer.get("depths") or []
        if not depths:
            continue
        raw = (depths[0].get("values") or {}).get("mean")
        if not raw:
            continue
        if layer.get("name") == "soc":
            carbon = float(raw) / 10
        elif layer.get("name") == "phh2o":
            ph = float(raw) / 10
    return carbon, ph


def parse_current(payload: dict) -> tuple[Optional[float], Optional[float]]:
    temperature = (payload.get("current_weather") or {}).get("temperature")
    sums = (payload.get("daily") or {}).get("precipitation_sum") or []
    precipitation = sums[0] if sums else None
    return (
        float(temperature) if temperature is not None else None,
        float(precipitation) if precipitation is not None else None,
    )


def parse_history(payload: dict) -> tuple[HistoricalClimatePoint, ...]:
    """Average daily archive values into one point per calendar year."""
    daily = payload.get("daily") or {}
    times = daily.get("time") or []
    temps = daily.get("temperature_2m_mean") or []
    precips = daily.get("precipitation_sum") or []

    by_year: dict[int, tuple[list[float], list[float]]] = {}
    for day, temp, precip in zip(times, temps, precips):
        if temp is None or precip is None:
            continue
        year = int(day[:4])
        year_temps, year_precips = by_year.setdefault(year, ([], []))
        year_temps.append(temp)
        year_precips.append(precip)

    return tuple(
        HistoricalClimatePoint(
            year=year,
            temperature=sum(t) / len(t),
            precipitation=sum(p) / len(p),
        )
        for year, (t, p) in sorted(by_year.items())
    )


class EnvironmentalDataProvider:
    def __init__(
        self,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Callable[[], date] = date.today,
    ):
        self.rate_limiter = rate_limiter or RateLimiter(
            settings.rate_limit_requests, settings.rate_limit_window_seconds
        )
        self._transport = transport
        self._today = today

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            headers={"Accept": "application/json", "User-Agent": settings.user_agent},
            transport=self._transport,
        )

    async def fetch(self, lat: float, lon: float) -> EnvironmentalObservation:
        """Fetch soil and climate for a coordinate; unknown fields stay None."""
        if settings.demo_mode:
            logger.info("Demo mode: skipping environmental data fetch")
            return EnvironmentalObservation()

        async with self._client() as client:
            soil, current, history = await asyncio.gather(
                self._fetch_soil(client, lat, lon),
                self._fetch_current(client, lat, lon),
                self._fetch_history(client, lat, lon),
            )

        carbon, ph = soil
        temperature, precipitation = current
        return EnvironmentalObservation(
            soil_carbon=carbon,
            soil_ph=ph,
            temperature=temperature,
            precipitation=precipitation,
            history=history,
        )

    async def _get_json(self, client: httpx.AsyncClient, key: str, url: str, params) -> Optional[dict]:
        if not self.rate_limiter.is_allowed(key):
            logger.warning("Rate limit exceeded for %s data", key)
            return None
        try:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("%s data fetch failed: %s", key.capitalize(), e)
            return None
        if not isinstance(payload, dict):
            logger.warning("%s data has unexpected shape: %s", key.capitalize(), type(payload).__name__)
            return None
        return payload

    def _parse(self, key: str, parser, payload: Optional[dict], unknown):
        if not payload:
            return unknown
        try:
            return parser(payload)
        except (AttributeError, TypeError, ValueError, IndexError) as e:
            logger.warning("%s data could not be parsed: %s", key.capitalize(), e)
            return unknown

    async def _fetch_soil(self, client, lat, lon):
        params = [
            ("lon", lon), ("lat", lat),
            ("property", "soc"), ("property", "phh2o"),
            ("depth", "0-5cm"), ("value", "mean"),
        ]
        payload = await self._get_json(client, "soil", settings.soilgrids_url, params)
        return self._parse("soil", parse_soil, payload, (None, None))

    async def _fetch_current(self, client, lat, lon):
        params = {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "daily": "precipitation_sum",
            "timezone": "auto",
        }
        payload = await self._get_json(client, "climate", settings.forecast_url, params)
        return self._parse("climate", parse_current, payload, (None, None))

    async def _fetch_history(self, client, lat, lon):
        end = self._today()
        start = date(end.year - settings.historical_years, end.month, min(end.day, 28))
        params = {
            "latitude": lat,
            "longitude": lon,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "daily": "temperature_2m_mean,precipitation_sum",
            "timezone": "auto",
        }
        payload = await self._get_json(client, "history", settings.archive_url, params)
        return self._parse("history", parse_history, payload, ())
