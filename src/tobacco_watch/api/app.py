"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tobacco_watch.acquisition.coordinator import create_coordinator
from tobacco_watch.api.deps import AppState
from tobacco_watch.api.routes import router
from tobacco_watch.core.config import TobaccoWatchConfig, load_config
from tobacco_watch.core.exceptions import (
    ConfigError,
    RegionNotFoundError,
    TobaccoWatchError,
    WeatherError,
)
from tobacco_watch.storage.store import create_store
from tobacco_watch.weather.client import WeatherClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    config = app.state._pending_config or load_config()
    store = await create_store(config.storage)
    weather = WeatherClient(config.weather)

    app.state.app_state = AppState(
        config=config,
        store=store,
        coordinator=create_coordinator(config, store),
        weather=weather,
    )

    yield

    await weather.close()
    await store.close()


def create_app(config: TobaccoWatchConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    import tobacco_watch

    app = FastAPI(
        title="Tobacco Watch API",
        description="Tobacco commodity prices, weather and farming advice",
        version=tobacco_watch.__version__,
        lifespan=lifespan,
    )

    # Stash config so lifespan can retrieve it
    app.state._pending_config = config

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(router)

    # Exception handlers
    @app.exception_handler(TobaccoWatchError)
    async def tobacco_watch_exception_handler(
        request: Request, exc: TobaccoWatchError
    ):
        status_map = {
            RegionNotFoundError: 404,
            ConfigError: 400,
            WeatherError: 502,
        }
        status = status_map.get(type(exc), 500)
        return JSONResponse(
            status_code=status,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    return app
