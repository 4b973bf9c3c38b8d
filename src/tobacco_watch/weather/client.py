"""Async OpenWeatherMap client for current conditions and forecasts."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from tobacco_watch.core.config import WeatherConfig
from tobacco_watch.core.exceptions import WeatherError
from tobacco_watch.core.models import WeatherData

logger = logging.getLogger(__name__)


def _rain_mm(rain: dict[str, Any] | None) -> float:
    """Hourly rainfall, preferring the 1h reading over a 3h average."""
    if not rain:
        return 0.0
    one_hour = float(rain.get("1h") or 0.0)
    three_hour = float(rain.get("3h") or 0.0)
    if one_hour == 0 and three_hour > 0:
        return three_hour / 3.0
    return one_hour


class WeatherClient:
    """Async client for the OpenWeatherMap 2.5 API (metric units).

    Use via ``async with WeatherClient(config) as client:`` or call
    ``close()`` when done.
    """

    def __init__(self, config: WeatherConfig) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.request_timeout),
        )

    async def __aenter__(self) -> WeatherClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch(self, region: str) -> WeatherData:
        """Current weather for ``region``.

        Raises:
            WeatherError: Missing API key, transport failure, non-200
                response or an unexpected payload.
        """
        payload = await self._get("/weather", region)
        try:
            main = payload["main"]
            weather = WeatherData(
                temp=main["temp"],
                humidity=main["humidity"],
                rain_mm=_rain_mm(payload.get("rain")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(
                f"Unexpected weather payload for {region}: {e}",
                context={"region": region, "status_code": 200},
            ) from e

        logger.info(
            "Weather fetched: %s temp=%.1f humidity=%d rain=%.2fmm",
            region,
            weather.temp,
            weather.humidity,
            weather.rain_mm,
        )
        return weather

    async def forecast(self, region: str) -> list[WeatherData]:
        """Three-hourly forecast entries; ``rain_mm`` is the 3h total."""
        payload = await self._get("/forecast", region)
        try:
            forecasts = [
                WeatherData(
                    temp=item["main"]["temp"],
                    humidity=item["main"]["humidity"],
                    rain_mm=float((item.get("rain") or {}).get("3h") or 0.0),
                )
                for item in payload.get("list", [])
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(
                f"Unexpected forecast payload for {region}: {e}",
                context={"region": region, "status_code": 200},
            ) from e
        logger.info("Forecast retrieved for %s: %d entries", region, len(forecasts))
        return forecasts

    async def fetch_many(self, regions: list[str]) -> dict[str, WeatherData]:
        """Fetch several regions concurrently. Failed regions are omitted."""
        results = await asyncio.gather(
            *(self.fetch(region) for region in regions), return_exceptions=True
        )
        weather: dict[str, WeatherData] = {}
        for region, result in zip(regions, results):
            if isinstance(result, WeatherError):
                logger.warning("Weather for %s unavailable: %s", region, result)
                continue
            if isinstance(result, BaseException):
                raise result
            weather[region] = result
        return weather

    async def _get(self, path: str, region: str) -> dict[str, Any]:
        if not self._config.api_key:
            raise WeatherError(
                "Weather API key is not configured",
                context={"region": region, "status_code": None},
            )
        params = {"q": region, "appid": self._config.api_key, "units": "metric"}
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise WeatherError(
                f"Weather request failed for {region}: {e!r}",
                context={"region": region, "status_code": None},
            ) from e

        if response.status_code != 200:
            logger.error(
                "Weather API error for %s (status %d): %s",
                region,
                response.status_code,
                response.text[:200],
            )
            raise WeatherError(
                f"Weather API returned status {response.status_code} for {region}",
                context={"region": region, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise WeatherError(
                f"Weather API returned invalid JSON for {region}",
                context={"region": region, "status_code": response.status_code},
            ) from e
