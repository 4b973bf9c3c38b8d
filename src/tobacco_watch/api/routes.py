"""FastAPI route definitions for the tobacco-watch API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query

import tobacco_watch
from tobacco_watch.acquisition.coordinator import AcquisitionCoordinator
from tobacco_watch.acquisition.simulation import SIMULATED_SOURCE, insert_simulated_batch
from tobacco_watch.advice.recommendation import advanced_recommendation, recommend
from tobacco_watch.api.deps import (
    get_config,
    get_coordinator,
    get_store,
    get_weather_client,
)
from tobacco_watch.api.schemas import (
    AddPriceRequest,
    AddPriceResponse,
    FetchedPriceResponse,
    FetchResponse,
    HealthResponse,
    PriceResponse,
    RecommendationResponse,
    ScrapedPriceResponse,
    WeatherResponse,
)
from tobacco_watch.core.config import TobaccoWatchConfig
from tobacco_watch.core.exceptions import AggregateFailureError, StorageError
from tobacco_watch.core.models import NewPrice, RecommendationResult, WeatherData, utcnow
from tobacco_watch.storage.store import PriceStore
from tobacco_watch.weather.client import WeatherClient

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_REGION = "Jember"


async def save_weather_history(
    store: PriceStore, region: str, weather: WeatherData
) -> None:
    """Background task: record a weather reading. Failures are only logged."""
    try:
        await store.save_weather(region, weather, utcnow())
    except StorageError as e:
        logger.warning("Failed to save weather history for %s: %s", region, e)


# -- Health --


@router.get("/health", response_model=HealthResponse)
async def health_check(store: PriceStore = Depends(get_store)):
    """System health and basic statistics."""
    stats = await store.get_statistics()
    return HealthResponse(
        status="ok",
        version=tobacco_watch.__version__,
        storage_ok=await store.health_check(),
        price_records=stats["price_records"],
        weather_records=stats["weather_records"],
    )


# -- Prices --


@router.get("/harga", response_model=list[PriceResponse])
async def list_prices(store: PriceStore = Depends(get_store)):
    """Every stored price, newest first."""
    records = await store.all_ordered_by_recency()
    return [PriceResponse.from_record(r) for r in records]


@router.post("/harga/add", response_model=AddPriceResponse)
async def add_price(
    request: AddPriceRequest,
    store: PriceStore = Depends(get_store),
):
    """Insert one price by hand. No provider is involved."""
    price = NewPrice(
        region=request.region,
        price=request.price,
        unit=request.unit,
        source=request.source,
        recorded_at=request.recorded_at or utcnow(),
    )
    record_id = await store.insert_price(price)
    return AddPriceResponse(
        status="ok", message="Data harga berhasil ditambahkan", id=record_id
    )


@router.post("/harga/fetch", response_model=FetchResponse)
async def fetch_prices(
    coordinator: AcquisitionCoordinator = Depends(get_coordinator),
    store: PriceStore = Depends(get_store),
):
    """Acquire prices through the provider chain and store them.

    If the whole chain fails, a simulated market batch is stored instead.
    """
    try:
        batch = await coordinator.acquire_all()
    except AggregateFailureError as e:
        logger.error("Acquisition failed, falling back to market simulation: %s", e)
        simulated = await insert_simulated_batch(store)
        return FetchResponse(
            status="ok",
            message="Berhasil simpan harga (simulasi pasar)",
            provider=SIMULATED_SOURCE,
            fallback=True,
            count=len(simulated),
            prices=[FetchedPriceResponse.from_new_price(p) for p in simulated],
        )

    return FetchResponse(
        status="ok",
        message="Berhasil fetch dan simpan harga",
        provider=batch[0].provider,
        count=len(batch),
        prices=[
            FetchedPriceResponse.from_new_price(NewPrice.from_scraped(p))
            for p in batch
        ],
    )


@router.get("/harga/current", response_model=ScrapedPriceResponse)
async def current_price(
    region: str | None = Query(None, description="Region, matched case-insensitively"),
    coordinator: AcquisitionCoordinator = Depends(get_coordinator),
):
    """Fresh price for a region from a new acquisition pass."""
    price = await coordinator.preview_region(region or DEFAULT_REGION)
    return ScrapedPriceResponse.from_scraped(price)


@router.get("/harga/latest", response_model=PriceResponse)
async def latest_price(
    region: str | None = Query(None, description="Exact region name"),
    store: PriceStore = Depends(get_store),
):
    """Most recently stored price for a region."""
    record = await store.latest_by_region(region or DEFAULT_REGION)
    return PriceResponse.from_record(record)


# -- Weather --


async def _current_weather(
    region: str,
    weather_client: WeatherClient,
    store: PriceStore,
    background_tasks: BackgroundTasks,
) -> WeatherData:
    weather = await weather_client.fetch(region)
    background_tasks.add_task(save_weather_history, store, region, weather)
    return weather


@router.get("/cuaca", response_model=WeatherResponse)
@router.get("/weather", response_model=WeatherResponse)
async def current_weather(
    background_tasks: BackgroundTasks,
    region: str | None = Query(None),
    config: TobaccoWatchConfig = Depends(get_config),
    weather_client: WeatherClient = Depends(get_weather_client),
    store: PriceStore = Depends(get_store),
):
    """Current weather for one region."""
    region = region or config.weather.default_region
    weather = await _current_weather(region, weather_client, store, background_tasks)
    return WeatherResponse(**weather.model_dump())


@router.get("/weather/multi", response_model=dict[str, WeatherResponse])
async def multi_region_weather(
    background_tasks: BackgroundTasks,
    config: TobaccoWatchConfig = Depends(get_config),
    weather_client: WeatherClient = Depends(get_weather_client),
    store: PriceStore = Depends(get_store),
):
    """Weather for every configured region, fetched concurrently."""
    results = await weather_client.fetch_many(config.weather.multi_regions)
    for region, weather in results.items():
        background_tasks.add_task(save_weather_history, store, region, weather)
    return {
        region: WeatherResponse(**weather.model_dump())
        for region, weather in results.items()
    }


# -- Recommendations --


@router.get("/rekomendasi", response_model=RecommendationResponse)
async def simple_recommendation(
    background_tasks: BackgroundTasks,
    region: str | None = Query(None),
    config: TobaccoWatchConfig = Depends(get_config),
    weather_client: WeatherClient = Depends(get_weather_client),
    store: PriceStore = Depends(get_store),
):
    """One-line farming advice from current weather."""
    region = region or config.weather.default_region
    weather = await _current_weather(region, weather_client, store, background_tasks)
    return RecommendationResponse(
        recommendation=recommend(weather.temp, weather.humidity, weather.rain_mm),
        region=region,
        temperature=weather.temp,
        humidity=weather.humidity,
        rain_mm=weather.rain_mm,
    )


@router.get("/rekomendasi/advanced", response_model=RecommendationResult)
async def detailed_recommendation(
    background_tasks: BackgroundTasks,
    region: str | None = Query(None),
    config: TobaccoWatchConfig = Depends(get_config),
    weather_client: WeatherClient = Depends(get_weather_client),
    store: PriceStore = Depends(get_store),
):
    """Detailed planting, irrigation, harvest, drying and pest advice."""
    region = region or config.weather.default_region
    weather = await _current_weather(region, weather_client, store, background_tasks)
    return advanced_recommendation(
        weather.temp, weather.humidity, weather.rain_mm, region
    )
