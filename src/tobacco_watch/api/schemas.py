"""API-specific request/response schemas (Pydantic v2)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from tobacco_watch.core.models import (
    DEFAULT_UNIT,
    NewPrice,
    PriceRecord,
    ScrapedPrice,
)


# -- Error --


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str
    detail: str | None = None


# -- Health --


class HealthResponse(BaseModel):
    status: str
    version: str
    storage_ok: bool
    price_records: int
    weather_records: int


# -- Prices --


class PriceResponse(BaseModel):
    """Persisted price record in API response format."""

    id: int
    region: str
    price: float
    unit: str
    source: str
    recorded_at: datetime
    created_at: datetime

    @classmethod
    def from_record(cls, record: PriceRecord) -> PriceResponse:
        return cls(**record.model_dump())


class AddPriceRequest(BaseModel):
    """Manual price entry."""

    region: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    unit: str = DEFAULT_UNIT
    source: str = Field("Manual Input", min_length=1)
    recorded_at: datetime | None = None

    @field_validator("region", "source")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class AddPriceResponse(BaseModel):
    status: str
    message: str
    id: int


class ScrapedPriceResponse(BaseModel):
    """A freshly acquired observation, before normalization."""

    region: str
    price: float
    quality: str
    source: str
    scraped_at: datetime
    source_url: str
    provider: str

    @classmethod
    def from_scraped(cls, scraped: ScrapedPrice) -> ScrapedPriceResponse:
        return cls(**scraped.model_dump())


class FetchedPriceResponse(BaseModel):
    """One record of a fetch batch, as handed to storage."""

    region: str
    price: float
    unit: str
    source: str
    recorded_at: datetime

    @classmethod
    def from_new_price(cls, price: NewPrice) -> FetchedPriceResponse:
        return cls(**price.model_dump())


class FetchResponse(BaseModel):
    """Result of a fetch: the whole accepted batch, whatever storage did."""

    status: str
    message: str
    provider: str
    fallback: bool = False
    count: int
    prices: list[FetchedPriceResponse]


# -- Weather & Advice --


class WeatherResponse(BaseModel):
    temp: float
    humidity: int
    rain_mm: float


class RecommendationResponse(BaseModel):
    """Simple one-line recommendation with the weather it was based on."""

    recommendation: str
    region: str
    temperature: float
    humidity: int
    rain_mm: float
