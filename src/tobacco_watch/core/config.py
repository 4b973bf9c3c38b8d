"""Configuration loading, validation, and access."""

from __future__ import annotations

import copy
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from tobacco_watch.core.exceptions import ConfigError
from tobacco_watch.core.models import ProviderType

_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)


def _split_csv(v: object) -> object:
    """Accept "a, b" from env vars wherever a list is expected."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class BappebtiConfig(BaseModel):
    """BAPPEBTI Info Harga live source configuration."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://infoharga.bappebti.go.id"
    commodities: list[str] = [
        "TEMBAKAU BOYOLALI",
        "TEMBAKAU BURLEY",
        "TEMBAKAU KASTURI",
    ]
    request_timeout: float = 10.0
    rate_limit: int = 5
    user_agent: str = "tobacco-watch/0.1 (+https://github.com/tobacco-watch)"
    concurrent_fetch: bool = True

    @field_validator("commodities", mode="before")
    @classmethod
    def commodities_from_csv(cls, v: object) -> object:
        return _split_csv(v)

    @field_validator("base_url")
    @classmethod
    def base_url_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    @field_validator("rate_limit")
    @classmethod
    def rate_limit_polite(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("rate_limit must be between 1 and 10")
        return v


class NewsConfig(BaseModel):
    """News portal backup source configuration."""

    model_config = ConfigDict(frozen=True)

    search_url: str = "https://www.google.com/search"
    query: str = "harga tembakau hari ini jember temanggung"
    request_timeout: float = 10.0
    user_agent: str = _BROWSER_USER_AGENT


class AcquisitionConfig(BaseModel):
    """Provider chain, tried strictly in this order."""

    model_config = ConfigDict(frozen=True)

    providers: list[ProviderType] = [ProviderType.BAPPEBTI, ProviderType.RESEARCH]

    @field_validator("providers", mode="before")
    @classmethod
    def providers_from_csv(cls, v: object) -> object:
        return _split_csv(v)

    @field_validator("providers")
    @classmethod
    def providers_valid(cls, v: list[ProviderType]) -> list[ProviderType]:
        if not v:
            raise ValueError("providers must not be empty")
        if len(set(v)) != len(v):
            raise ValueError("providers must not contain duplicates")
        return v


class StorageConfig(BaseModel):
    """Storage backend configuration."""

    model_config = ConfigDict(frozen=True)

    sqlite_path: str = "./data/tobacco_watch.db"


class WeatherConfig(BaseModel):
    """OpenWeatherMap access configuration."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    base_url: str = "https://api.openweathermap.org/data/2.5"
    request_timeout: float = 10.0
    default_region: str = "Jember"
    multi_regions: list[str] = ["Jember", "Surabaya", "Malang", "Banyuwangi"]

    @field_validator("multi_regions", mode="before")
    @classmethod
    def multi_regions_from_csv(cls, v: object) -> object:
        return _split_csv(v)


class APIConfig(BaseModel):
    """FastAPI server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8080


class TobaccoWatchConfig(BaseModel):
    """Root configuration for the entire tobacco-watch system."""

    model_config = ConfigDict(frozen=True)

    bappebti: BappebtiConfig = BappebtiConfig()
    news: NewsConfig = NewsConfig()
    acquisition: AcquisitionConfig = AcquisitionConfig()
    storage: StorageConfig = StorageConfig()
    weather: WeatherConfig = WeatherConfig()
    api: APIConfig = APIConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "TOBACCO_WATCH_",
) -> TobaccoWatchConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (TOBACCO_WATCH_WEATHER__API_KEY, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        TOBACCO_WATCH_BAPPEBTI__REQUEST_TIMEOUT=5  ->  bappebti.request_timeout = 5
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return TobaccoWatchConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("TOBACCO_WATCH_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from TOBACCO_WATCH_CONFIG not found: {env_path}",
                context={"field": "TOBACCO_WATCH_CONFIG", "value": env_path},
            )
        return p

    default = Path("tobacco-watch.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels.
    Values are auto-cast: "true"/"false" -> bool, numeric strings -> int.
    List fields accept comma-separated strings (see _split_csv).
    """
    result = copy.deepcopy(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        # Skip the CONFIG env var itself
        if parts == ["config"]:
            continue

        target = result
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[parts[-1]] = _auto_cast(value)

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
