"""Tests for tobacco_watch.acquisition.coordinator."""

from __future__ import annotations

import pytest

from tobacco_watch.acquisition.bappebti import BappebtiProvider
from tobacco_watch.acquisition.coordinator import (
    AcquisitionCoordinator,
    build_providers,
    create_coordinator,
)
from tobacco_watch.acquisition.news import NewsPortalProvider
from tobacco_watch.acquisition.research import ResearchProvider
from tobacco_watch.core.config import AcquisitionConfig, TobaccoWatchConfig
from tobacco_watch.core.exceptions import (
    AcquisitionError,
    AggregateFailureError,
    RegionNotFoundError,
    StorageError,
)
from tobacco_watch.core.models import ProviderType, ScrapedPrice


# --- Fakes ---


class FakeProvider:
    """Provider returning a fixed batch (or raising) and counting calls."""

    def __init__(self, name: str, batch=None, error: Exception | None = None):
        self.name = name
        self._batch = batch or []
        self._error = error
        self.calls = 0

    async def scrape(self) -> list[ScrapedPrice]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return list(self._batch)


class FakeStore:
    """Records inserts; optionally fails for selected regions."""

    def __init__(self, fail_regions: set[str] | None = None):
        self.saved: list[ScrapedPrice] = []
        self._fail_regions = fail_regions or set()

    async def insert_scraped(self, scraped: ScrapedPrice) -> int:
        if scraped.region in self._fail_regions:
            raise StorageError("disk full", context={"operation": "insert"})
        self.saved.append(scraped)
        return len(self.saved)


@pytest.fixture
def live_batch(make_scraped):
    return [
        make_scraped(region="Jember", price=85000),
        make_scraped(region="Boyolali", price=60000),
    ]


@pytest.fixture
def fallback_batch(make_scraped):
    return [
        make_scraped(
            region="Temanggung",
            price=150000,
            source="InfoPublik + ANTARA News (Last checked: 2024-09-18)",
            provider="fallback",
        )
    ]


# --- acquire_all ---


class TestAcquireAll:
    async def test_first_success_wins_and_second_never_called(
        self, live_batch, fallback_batch
    ):
        first = FakeProvider("live", live_batch)
        second = FakeProvider("fallback", fallback_batch)
        coordinator = AcquisitionCoordinator([first, second], FakeStore())

        result = await coordinator.acquire_all()

        assert result == live_batch
        assert first.calls == 1
        assert second.calls == 0

    async def test_empty_result_falls_through(self, fallback_batch):
        first = FakeProvider("live", [])
        second = FakeProvider("fallback", fallback_batch)
        coordinator = AcquisitionCoordinator([first, second], FakeStore())

        assert await coordinator.acquire_all() == fallback_batch
        assert first.calls == 1
        assert second.calls == 1

    @pytest.mark.parametrize(
        "error",
        [
            AcquisitionError("no commodities"),
            RuntimeError("unexpected"),
            ValueError("bad data"),
        ],
    )
    async def test_error_falls_through(self, fallback_batch, error):
        first = FakeProvider("live", error=error)
        second = FakeProvider("fallback", fallback_batch)
        coordinator = AcquisitionCoordinator([first, second], FakeStore())

        assert await coordinator.acquire_all() == fallback_batch

    async def test_batches_are_never_merged(self, live_batch, fallback_batch):
        coordinator = AcquisitionCoordinator(
            [FakeProvider("a", []), FakeProvider("b", live_batch), FakeProvider("c", fallback_batch)],
            FakeStore(),
        )
        result = await coordinator.acquire_all()
        assert {p.region for p in result} == {"Jember", "Boyolali"}

    async def test_accepted_batch_is_persisted(self, live_batch):
        store = FakeStore()
        coordinator = AcquisitionCoordinator([FakeProvider("live", live_batch)], store)
        await coordinator.acquire_all()
        assert store.saved == live_batch

    async def test_storage_failure_skips_only_that_record(self, make_scraped):
        batch = [
            make_scraped(region="Jember"),
            make_scraped(region="Malang"),
            make_scraped(region="Klaten"),
        ]
        store = FakeStore(fail_regions={"Malang"})
        coordinator = AcquisitionCoordinator([FakeProvider("live", batch)], store)

        result = await coordinator.acquire_all()

        assert result == batch
        assert [p.region for p in store.saved] == ["Jember", "Klaten"]

    async def test_all_exhausted_raises_aggregate_failure(self, caplog):
        coordinator = AcquisitionCoordinator(
            [FakeProvider("a", []), FakeProvider("b", error=RuntimeError("x"))],
            FakeStore(),
        )
        with pytest.raises(AggregateFailureError, match="all providers failed") as exc_info:
            await coordinator.acquire_all()
        assert exc_info.value.context["providers"] == ["a", "b"]
        assert any(r.levelname == "CRITICAL" for r in caplog.records)

    async def test_no_providers_raises_aggregate_failure(self):
        with pytest.raises(AggregateFailureError):
            await AcquisitionCoordinator([], FakeStore()).acquire_all()


# --- preview_region ---


class TestPreviewRegion:
    async def test_case_insensitive_match(self, live_batch):
        coordinator = AcquisitionCoordinator([FakeProvider("live", live_batch)], FakeStore())
        price = await coordinator.preview_region("jember")
        assert price.region == "Jember"

    async def test_first_match_returned(self, make_scraped):
        batch = [
            make_scraped(region="Jember", price=85000),
            make_scraped(region="JEMBER", price=90000),
        ]
        coordinator = AcquisitionCoordinator([FakeProvider("live", batch)], FakeStore())
        assert (await coordinator.preview_region("Jember")).price == 85000

    async def test_unknown_region_raises(self, live_batch):
        coordinator = AcquisitionCoordinator([FakeProvider("live", live_batch)], FakeStore())
        with pytest.raises(RegionNotFoundError) as exc_info:
            await coordinator.preview_region("Atlantis")
        assert exc_info.value.context["region"] == "Atlantis"

    async def test_runs_fresh_acquisition_each_time(self, live_batch):
        provider = FakeProvider("live", live_batch)
        store = FakeStore()
        coordinator = AcquisitionCoordinator([provider], store)
        await coordinator.preview_region("Jember")
        await coordinator.preview_region("Boyolali")
        assert provider.calls == 2
        assert len(store.saved) == 4


# --- Factories ---


class TestBuildProviders:
    def test_default_chain(self):
        providers = build_providers(TobaccoWatchConfig())
        assert [type(p) for p in providers] == [BappebtiProvider, ResearchProvider]

    def test_configured_order_preserved(self):
        config = TobaccoWatchConfig(
            acquisition=AcquisitionConfig(
                providers=[ProviderType.NEWS, ProviderType.BAPPEBTI, ProviderType.RESEARCH]
            )
        )
        providers = build_providers(config)
        assert [type(p) for p in providers] == [
            NewsPortalProvider,
            BappebtiProvider,
            ResearchProvider,
        ]

    def test_create_coordinator(self):
        coordinator = create_coordinator(TobaccoWatchConfig(), FakeStore())
        assert [p.name for p in coordinator.providers] == [
            "BAPPEBTI Info Harga",
            "Real Data Research + Market Simulation",
        ]
