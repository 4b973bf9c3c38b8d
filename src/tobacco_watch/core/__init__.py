"""tobacco_watch.core: Foundation types, config, and exceptions."""

from tobacco_watch.core.config import (
    AcquisitionConfig,
    APIConfig,
    BappebtiConfig,
    NewsConfig,
    StorageConfig,
    TobaccoWatchConfig,
    WeatherConfig,
    load_config,
)
from tobacco_watch.core.exceptions import (
    AcquisitionError,
    AggregateFailureError,
    ConfigError,
    ParsingError,
    RegionNotFoundError,
    StorageError,
    TobaccoWatchError,
    TransportError,
    WeatherError,
)
from tobacco_watch.core.models import (
    AdviceStatus,
    NewPrice,
    PriceRecord,
    ProviderName,
    ProviderType,
    RecommendationResult,
    Region,
    ResearchEntry,
    ScrapedPrice,
    WeatherData,
)

__all__ = [
    # Type aliases
    "Region",
    "ProviderName",
    # Enums
    "ProviderType",
    "AdviceStatus",
    # Price models
    "ScrapedPrice",
    "NewPrice",
    "PriceRecord",
    "ResearchEntry",
    # Weather & advice models
    "WeatherData",
    "RecommendationResult",
    # Config
    "TobaccoWatchConfig",
    "BappebtiConfig",
    "NewsConfig",
    "AcquisitionConfig",
    "StorageConfig",
    "WeatherConfig",
    "APIConfig",
    "load_config",
    # Exceptions
    "TobaccoWatchError",
    "ConfigError",
    "AcquisitionError",
    "TransportError",
    "ParsingError",
    "AggregateFailureError",
    "RegionNotFoundError",
    "StorageError",
    "WeatherError",
]
