"""News portal backup provider.

Searches news headlines for today's tobacco prices and picks out snippets
that mention both a known growing region and a Rupiah amount, e.g.
``"Harga tembakau Temanggung tembus Rp150.000 per kg"``.

News prices are coarse, so records carry quality ``"News"``.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable
from datetime import datetime

import httpx
from bs4 import BeautifulSoup

from tobacco_watch.acquisition.research import RESEARCH_DATASET
from tobacco_watch.core.config import NewsConfig
from tobacco_watch.core.exceptions import TransportError
from tobacco_watch.core.models import ScrapedPrice, utcnow

logger = logging.getLogger(__name__)

NEWS_QUALITY = "News"

DEFAULT_NEWS_REGIONS: list[str] = [*RESEARCH_DATASET, "Bondowoso", "Boyolali"]

# Indonesian notation: "." (or ",") groups thousands, e.g. Rp 85.000 / Rp85,000
_RUPIAH = re.compile(r"Rp\.?\s?(\d{1,3}(?:[.,]\d{3})+|\d+)", re.IGNORECASE)


def parse_rupiah(text: str) -> float | None:
    """Return the first Rupiah amount in ``text`` as a number, if any."""
    match = _RUPIAH.search(text)
    if match is None:
        return None
    amount = float(re.sub(r"[.,]", "", match.group(1)))
    return amount if 0 < amount < math.inf else None


class NewsPortalProvider:
    """Backup provider that extracts prices from news search snippets.

    Parameters
    ----------
    config : NewsConfig
        Search URL, query, timeout and User-Agent.
    regions : Iterable[str] | None
        Region names to look for. Matching is case-insensitive.
    clock : Callable[[], datetime] | None
        Source of the ``scraped_at`` timestamp.
    """

    name = "News Portal Scraper"

    def __init__(
        self,
        config: NewsConfig,
        regions: Iterable[str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._regions = list(regions if regions is not None else DEFAULT_NEWS_REGIONS)
        self._clock = clock or utcnow

    def _search_url(self) -> httpx.URL:
        return httpx.URL(
            self._config.search_url,
            params={"q": self._config.query, "tbm": "nws"},
        )

    async def scrape(self) -> list[ScrapedPrice]:
        """Fetch the search page and extract one price per mentioned region.

        Raises:
            TransportError: The search page could not be fetched.
        """
        url = self._search_url()
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": self._config.user_agent},
                timeout=httpx.Timeout(self._config.request_timeout),
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(
                f"News search failed: {e!r}",
                context={"provider": self.name, "url": str(url)},
            ) from e

        return self.extract(response.text, source_url=str(url))

    def extract(self, raw_html: str, *, source_url: str) -> list[ScrapedPrice]:
        """Pull region prices out of a results page, first mention wins."""
        soup = BeautifulSoup(raw_html, "lxml")
        scraped_at = self._clock()
        found: dict[str, ScrapedPrice] = {}

        for snippet in soup.stripped_strings:
            region = self._match_region(snippet)
            if region is None or region in found:
                continue
            price = parse_rupiah(snippet)
            if price is None:
                continue
            found[region] = ScrapedPrice(
                region=region,
                price=price,
                quality=NEWS_QUALITY,
                source=self.name,
                scraped_at=scraped_at,
                source_url=source_url,
                provider=self.name,
            )

        logger.info("%s: %d prices from headlines", self.name, len(found))
        return list(found.values())

    def _match_region(self, snippet: str) -> str | None:
        lower = snippet.lower()
        for region in self._regions:
            if region.lower() in lower:
                return region
        return None
