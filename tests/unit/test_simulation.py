"""Tests for tobacco_watch.acquisition.simulation."""

from __future__ import annotations

import random

import pytest

from tobacco_watch.acquisition.simulation import (
    SIMULATED_REGIONS,
    insert_simulated_batch,
    simulate_market_batch,
)
from tobacco_watch.core.exceptions import StorageError


class TestSimulateMarketBatch:
    @pytest.mark.unit
    def test_shape(self, fixed_now):
        batch = simulate_market_batch(rng=random.Random(7), now=fixed_now)
        assert [p.region for p in batch] == SIMULATED_REGIONS
        assert all(p.unit == "per kg" for p in batch)
        assert all(p.source == "Market Data API" for p in batch)
        assert all(p.recorded_at == fixed_now for p in batch)

    @pytest.mark.unit
    def test_price_range(self):
        rng = random.Random(42)
        for _ in range(50):
            for p in simulate_market_batch(rng=rng):
                assert 5000 <= p.price < 8000
                assert p.price == int(p.price)

    @pytest.mark.unit
    def test_seeded_rng_is_repeatable(self):
        a = simulate_market_batch(rng=random.Random(1))
        b = simulate_market_batch(rng=random.Random(1))
        assert [p.price for p in a] == [p.price for p in b]


class TestInsertSimulatedBatch:
    async def test_inserts_every_record(self, store, fixed_now):
        batch = await insert_simulated_batch(store, rng=random.Random(3), now=fixed_now)
        records = await store.all_ordered_by_recency()
        assert len(records) == len(batch) == 4
        assert {r.region for r in records} == set(SIMULATED_REGIONS)

    async def test_first_failure_aborts(self):
        class FlakyStore:
            def __init__(self):
                self.inserted = []

            async def insert_price(self, price):
                if price.region == "Malang":
                    raise StorageError("locked")
                self.inserted.append(price)
                return len(self.inserted)

        flaky = FlakyStore()
        with pytest.raises(StorageError):
            await insert_simulated_batch(flaky)
        assert [p.region for p in flaky.inserted] == ["Jember"]
