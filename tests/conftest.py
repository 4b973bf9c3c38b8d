"""Shared pytest fixtures for tobacco-watch."""

from datetime import datetime, timezone

import pytest

from tobacco_watch.core.config import StorageConfig
from tobacco_watch.core.models import NewPrice, ScrapedPrice, WeatherData
from tobacco_watch.storage.store import SqlitePriceStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 10, 1, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_scraped(fixed_now):
    """Factory for ScrapedPrice with overridable defaults."""

    def _make(**overrides) -> ScrapedPrice:
        defaults = dict(
            region="Jember",
            price=85000.0,
            quality="Standard",
            source="BAPPEBTI Info Harga",
            scraped_at=fixed_now,
            source_url="https://infoharga.bappebti.go.id/harga_komoditi_pedagang",
            provider="BAPPEBTI Info Harga",
        )
        defaults.update(overrides)
        return ScrapedPrice(**defaults)

    return _make


@pytest.fixture
def sample_new_price(fixed_now) -> NewPrice:
    return NewPrice(
        region="Temanggung",
        price=150000.0,
        source="Manual Input",
        recorded_at=fixed_now,
    )


@pytest.fixture
def sample_weather() -> WeatherData:
    return WeatherData(temp=27.5, humidity=70, rain_mm=2.0)


@pytest.fixture
def owm_current_json() -> dict:
    """Mock OpenWeatherMap /weather response."""
    return {
        "name": "Jember",
        "main": {"temp": 27.5, "humidity": 70},
        "rain": {"1h": 2.0},
        "weather": [{"main": "Rain", "description": "light rain"}],
    }


@pytest.fixture
async def store():
    """Create an in-memory SqlitePriceStore for testing."""
    s = SqlitePriceStore(StorageConfig(sqlite_path=":memory:"))
    await s.initialize()
    yield s
    await s.close()
