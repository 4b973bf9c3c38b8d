"""Ordered-fallback acquisition across price providers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tobacco_watch.acquisition.bappebti import BappebtiProvider
from tobacco_watch.acquisition.news import NewsPortalProvider
from tobacco_watch.acquisition.provider import PriceProvider
from tobacco_watch.acquisition.research import ResearchProvider
from tobacco_watch.core.config import TobaccoWatchConfig
from tobacco_watch.core.exceptions import (
    AggregateFailureError,
    RegionNotFoundError,
    StorageError,
)
from tobacco_watch.core.models import ProviderType, ScrapedPrice
from tobacco_watch.storage.store import PriceStore

logger = logging.getLogger(__name__)


class AcquisitionCoordinator:
    """Tries providers in priority order; the first non-empty batch wins.

    At most one provider contributes to a call, so every accepted batch has
    a single provenance. Providers are awaited strictly one after another.

    Parameters
    ----------
    providers : Sequence[PriceProvider]
        Priority order, live sources first and the simulated fallback last.
    store : PriceStore
        Destination for every record of the accepted batch.
    """

    def __init__(self, providers: Sequence[PriceProvider], store: PriceStore) -> None:
        self._providers = list(providers)
        self._store = store

    @property
    def providers(self) -> list[PriceProvider]:
        return list(self._providers)

    async def acquire_all(self) -> list[ScrapedPrice]:
        """Run one acquisition pass and persist the accepted batch.

        Returns:
            The accepted batch, complete even if some inserts failed.

        Raises:
            AggregateFailureError: No provider produced a usable record.
        """
        for provider in self._providers:
            logger.info("Trying provider %s", provider.name)
            try:
                batch = await provider.scrape()
            except Exception as e:
                logger.warning("Provider %s failed: %s", provider.name, e)
                continue

            if not batch:
                logger.warning("Provider %s returned no data", provider.name)
                continue

            logger.info(
                "Accepted %d prices from provider %s", len(batch), provider.name
            )
            await self._persist(batch)
            return batch

        names = [p.name for p in self._providers]
        logger.critical("All price providers failed: %s", ", ".join(names))
        raise AggregateFailureError(
            "all providers failed", context={"providers": names}
        )

    async def preview_region(self, region: str) -> ScrapedPrice:
        """Acquire fresh prices and return the first one for ``region``.

        Matching is case-insensitive. The batch is persisted exactly as in
        ``acquire_all``.

        Raises:
            RegionNotFoundError: The accepted batch has no such region.
            AggregateFailureError: Propagated from ``acquire_all``.
        """
        wanted = region.casefold()
        for price in await self.acquire_all():
            if price.region.casefold() == wanted:
                return price
        raise RegionNotFoundError(
            f"No price found for region {region!r}", context={"region": region}
        )

    async def _persist(self, batch: list[ScrapedPrice]) -> None:
        for price in batch:
            try:
                record_id = await self._store.insert_scraped(price)
            except StorageError as e:
                logger.error("Failed to save price for %s: %s", price.region, e)
                continue
            logger.info(
                "Saved price: %s = Rp %.0f (id=%d)", price.region, price.price, record_id
            )


def build_providers(config: TobaccoWatchConfig) -> list[PriceProvider]:
    """Instantiate the configured provider chain, preserving order."""
    providers: list[PriceProvider] = []
    for kind in config.acquisition.providers:
        if kind == ProviderType.BAPPEBTI:
            providers.append(BappebtiProvider(config.bappebti))
        elif kind == ProviderType.NEWS:
            providers.append(NewsPortalProvider(config.news))
        elif kind == ProviderType.RESEARCH:
            providers.append(ResearchProvider())
    return providers


def create_coordinator(
    config: TobaccoWatchConfig, store: PriceStore
) -> AcquisitionCoordinator:
    """Build a coordinator over the configured providers and ``store``."""
    providers = build_providers(config)
    logger.debug("Provider chain: %s", [p.name for p in providers])
    return AcquisitionCoordinator(providers, store)
