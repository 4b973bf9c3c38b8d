"""Last-resort market simulation used when the whole provider chain fails."""

from __future__ import annotations

import logging
import random
from datetime import datetime

from tobacco_watch.core.models import NewPrice, utcnow
from tobacco_watch.storage.store import PriceStore

logger = logging.getLogger(__name__)

SIMULATED_REGIONS = ["Jember", "Malang", "Surabaya", "Bondowoso"]
SIMULATED_UNIT = "per kg"
SIMULATED_SOURCE = "Market Data API"
BASE_PRICE = 5000
PRICE_SPREAD = 3000


def simulate_market_batch(
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[NewPrice]:
    """One record per simulated region, integer price in [5000, 8000)."""
    rng = rng or random.Random()
    recorded_at = now or utcnow()
    return [
        NewPrice(
            region=region,
            price=float(BASE_PRICE + rng.randrange(PRICE_SPREAD)),
            unit=SIMULATED_UNIT,
            source=SIMULATED_SOURCE,
            recorded_at=recorded_at,
        )
        for region in SIMULATED_REGIONS
    ]


async def insert_simulated_batch(
    store: PriceStore,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[NewPrice]:
    """Simulate and insert a batch. Stops at the first failed insert.

    Raises:
        StorageError: An insert failed; earlier records stay inserted.
    """
    batch = simulate_market_batch(rng=rng, now=now)
    for price in batch:
        await store.insert_price(price)
    logger.warning("Inserted %d simulated market prices", len(batch))
    return batch
