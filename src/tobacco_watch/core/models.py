"""Pydantic data models: the system's type contracts."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Type Aliases ---

Region = str
ProviderName = str

DEFAULT_UNIT = "kg"
DEFAULT_QUALITY = "Standard"


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


# --- Enumerations ---


class ProviderType(StrEnum):
    """Built-in price provider identifiers, usable in acquisition config."""

    BAPPEBTI = "bappebti"
    NEWS = "news"
    RESEARCH = "research"


class AdviceStatus(StrEnum):
    """Overall verdict of the advanced recommendation."""

    OPTIMAL = "optimal"
    GOOD = "good"
    CAUTION = "caution"
    NOT_RECOMMENDED = "not_recommended"


# --- Price Models ---


def _positive_price(v: float) -> float:
    if v <= 0:
        raise ValueError(f"price must be > 0, got {v}")
    if not math.isfinite(v):
        raise ValueError(f"price must be finite, got {v}")
    return v


def _non_empty(v: str, field: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{field} must not be empty")
    return v


class ScrapedPrice(BaseModel):
    """A single price observation produced by a provider.

    Providers never persist; the coordinator normalizes these into rows.
    """

    model_config = ConfigDict(frozen=True)

    region: Region
    price: float
    quality: str = DEFAULT_QUALITY
    source: str
    scraped_at: datetime
    source_url: str
    provider: ProviderName

    @field_validator("price")
    @classmethod
    def price_positive(cls, v: float) -> float:
        return _positive_price(v)

    @field_validator("source")
    @classmethod
    def source_not_empty(cls, v: str) -> str:
        return _non_empty(v, "source")

    @property
    def stamped_source(self) -> str:
        """Provenance string written to storage: source plus scrape marker."""
        return f"{self.source} (Scraped: {self.quality})"


class NewPrice(BaseModel):
    """Payload for inserting one price record."""

    model_config = ConfigDict(frozen=True)

    region: Region
    price: float
    unit: str = DEFAULT_UNIT
    source: str
    recorded_at: datetime = Field(default_factory=utcnow)

    @field_validator("region")
    @classmethod
    def region_not_empty(cls, v: str) -> str:
        return _non_empty(v, "region")

    @field_validator("price")
    @classmethod
    def price_positive(cls, v: float) -> float:
        return _positive_price(v)

    @field_validator("source")
    @classmethod
    def source_not_empty(cls, v: str) -> str:
        return _non_empty(v, "source")

    @classmethod
    def from_scraped(cls, scraped: ScrapedPrice) -> NewPrice:
        """Normalize a provider observation into an insert payload."""
        return cls(
            region=scraped.region,
            price=scraped.price,
            unit=DEFAULT_UNIT,
            source=scraped.stamped_source,
            recorded_at=scraped.scraped_at,
        )


class PriceRecord(BaseModel):
    """A persisted price row. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    id: int
    region: Region
    price: float
    unit: str = DEFAULT_UNIT
    source: str
    recorded_at: datetime
    created_at: datetime


class ResearchEntry(BaseModel):
    """One row of the manually curated research dataset."""

    model_config = ConfigDict(frozen=True)

    base_price: float
    date_checked: date
    source_label: str
    notes: str = ""

    @field_validator("base_price")
    @classmethod
    def base_price_positive(cls, v: float) -> float:
        return _positive_price(v)


# --- Weather & Advice Models ---


class WeatherData(BaseModel):
    """Current (or forecast) weather conditions for a region."""

    model_config = ConfigDict(frozen=True)

    temp: float
    humidity: int
    rain_mm: float = 0.0


class RecommendationResult(BaseModel):
    """Detailed farming advice derived from weather conditions."""

    status: AdviceStatus
    main_advice: str
    detailed_advice: list[str] = Field(default_factory=list)
    planting_advice: str = ""
    harvest_advice: str = ""
    drying_advice: str = ""
    pest_warning: str = ""
    irrigation_advice: str = ""
    temperature: float
    humidity: int
    rain_mm: float
    region: Region
