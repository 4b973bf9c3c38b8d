"""Integration test fixtures: real SQLite on disk, network mocked with respx."""

from __future__ import annotations

from pathlib import Path

import pytest

from tobacco_watch.core.config import StorageConfig, TobaccoWatchConfig
from tobacco_watch.storage.store import SqlitePriceStore


@pytest.fixture
def integration_config(tmp_path: Path) -> TobaccoWatchConfig:
    """Default provider chain (BAPPEBTI then research) over an on-disk store."""
    return TobaccoWatchConfig(
        storage=StorageConfig(sqlite_path=str(tmp_path / "integration.db")),
    )


@pytest.fixture
async def integration_store(integration_config) -> SqlitePriceStore:
    """An initialized SqlitePriceStore for integration tests."""
    store = SqlitePriceStore(integration_config.storage)
    await store.initialize()
    yield store
    await store.close()
