"""Dependency injection for FastAPI routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from tobacco_watch.acquisition.coordinator import AcquisitionCoordinator
from tobacco_watch.core.config import TobaccoWatchConfig
from tobacco_watch.storage.store import PriceStore
from tobacco_watch.weather.client import WeatherClient


@dataclass
class AppState:
    """Shared application state, attached to app.state during lifespan."""

    config: TobaccoWatchConfig
    store: PriceStore
    coordinator: AcquisitionCoordinator
    weather: WeatherClient


def get_app_state(request: Request) -> AppState:
    """Dependency: retrieve AppState from the request."""
    return request.app.state.app_state


def get_config(request: Request) -> TobaccoWatchConfig:
    """Dependency: retrieve config."""
    return request.app.state.app_state.config


def get_store(request: Request) -> PriceStore:
    """Dependency: retrieve storage backend."""
    return request.app.state.app_state.store


def get_coordinator(request: Request) -> AcquisitionCoordinator:
    return request.app.state.app_state.coordinator


def get_weather_client(request: Request) -> WeatherClient:
    return request.app.state.app_state.weather
