"""BAPPEBTI Info Harga live-source provider.

Scrapes the public trader price tables at ``infoharga.bappebti.go.id``, one
page per tobacco commodity. Every URL is fetched independently: a URL that
times out or errors contributes nothing, while the other URLs still count.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

import httpx
from aiolimiter import AsyncLimiter

from tobacco_watch.acquisition.parser import PriceTableParser
from tobacco_watch.core.config import BappebtiConfig
from tobacco_watch.core.exceptions import AcquisitionError, ParsingError, TransportError
from tobacco_watch.core.models import ScrapedPrice, utcnow

logger = logging.getLogger(__name__)

_PRICE_PATH = "/harga_komoditi_pedagang"


class BappebtiProvider:
    """Live price provider backed by BAPPEBTI commodity pages.

    Parameters
    ----------
    config : BappebtiConfig
        Base URL, commodity list, timeout and politeness settings.
    parser : PriceTableParser | None
        Row extractor. Uses the default column layout if None.
    clock : Callable[[], datetime] | None
        Source of the ``scraped_at`` timestamp. Defaults to UTC now.
    """

    name = "BAPPEBTI Info Harga"

    def __init__(
        self,
        config: BappebtiConfig,
        parser: PriceTableParser | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._parser = parser or PriceTableParser()
        self._clock = clock or utcnow
        self._limiter = AsyncLimiter(max_rate=config.rate_limit, time_period=1.0)

    @property
    def urls(self) -> list[str]:
        """Display URLs for every configured commodity, in fetch order."""
        return [str(self._request_url(c)) for c in self._config.commodities]

    def _request_url(self, commodity: str) -> httpx.URL:
        return httpx.URL(
            f"{self._config.base_url}{_PRICE_PATH}",
            params={"komoditi": commodity},
        )

    async def scrape(self) -> list[ScrapedPrice]:
        """Fetch and parse every commodity page.

        Returns the concatenation of all rows from all pages that could be
        fetched, in commodity order. An empty list is a valid result.

        Raises:
            AcquisitionError: If no commodities are configured.
        """
        commodities = self._config.commodities
        if not commodities:
            raise AcquisitionError(
                "No BAPPEBTI commodities configured",
                context={"provider": self.name},
            )

        scraped_at = self._clock()
        async with httpx.AsyncClient(
            headers={"User-Agent": self._config.user_agent},
            timeout=httpx.Timeout(self._config.request_timeout),
            follow_redirects=True,
        ) as client:
            if self._config.concurrent_fetch:
                batches = await asyncio.gather(
                    *(self._scrape_one(client, c, scraped_at) for c in commodities)
                )
            else:
                batches = [
                    await self._scrape_one(client, c, scraped_at) for c in commodities
                ]

        prices = [price for batch in batches for price in batch]
        logger.info(
            "%s: %d prices from %d URLs", self.name, len(prices), len(commodities)
        )
        return prices

    async def _scrape_one(
        self,
        client: httpx.AsyncClient,
        commodity: str,
        scraped_at: datetime,
    ) -> list[ScrapedPrice]:
        """Fetch and parse one commodity page; per-URL errors yield []."""
        url = self._request_url(commodity)
        try:
            body = await self._fetch(client, url)
        except TransportError as e:
            logger.warning("Error fetching %s: %s", url, e)
            return []

        try:
            return self._parser.parse(
                body,
                provider=self.name,
                source_url=str(url),
                scraped_at=scraped_at,
            )
        except ParsingError as e:
            logger.warning("Error parsing HTML from %s: %s", url, e)
            return []

    async def _fetch(self, client: httpx.AsyncClient, url: httpx.URL) -> str:
        """GET a page body.

        Raises:
            TransportError: Connection failure, timeout or non-2xx status.
        """
        await self._limiter.acquire()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"HTTP {e.response.status_code} from {url}",
                context={"url": str(url), "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request failed for {url}: {e!r}",
                context={"url": str(url), "status_code": None},
            ) from e
        return response.text
