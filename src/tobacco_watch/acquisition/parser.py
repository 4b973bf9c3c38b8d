"""HTML price-table extraction for commodity price pages."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime

from bs4 import BeautifulSoup
from pydantic import ValidationError

from tobacco_watch.core.exceptions import ParsingError
from tobacco_watch.core.models import DEFAULT_QUALITY, ScrapedPrice

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^\d.]")


def extract_price(raw: str | None) -> float:
    """Extract a numeric price from a display string.

    Every character that is not a digit or a decimal point is removed and
    the remainder is parsed as a float, so ``"Rp 85000,-"`` gives ``85000.0``
    and ``"1 234.5"`` gives ``1234.5``.

    Returns ``0.0`` when nothing parseable remains (no digits, or more than
    one decimal point, or a value too large to represent). Callers treat
    ``<= 0`` as "drop this row".
    """
    if not raw:
        return 0.0
    cleaned = _NON_NUMERIC.sub("", raw)
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


class PriceTableParser:
    """Extracts region/price rows from a commodity price HTML table.

    Row layout (BAPPEBTI ``harga_komoditi_pedagang``)::

        | No | Region | Price | Unit/Date | ... |

    Rows with fewer than ``min_columns`` data cells are skipped (headers,
    spacer rows, footers). Rows whose region is blank or whose price does not
    extract to a positive number are dropped silently.
    """

    def __init__(
        self,
        region_column: int = 1,
        price_column: int = 2,
        min_columns: int = 4,
        quality: str = DEFAULT_QUALITY,
    ) -> None:
        self.region_column = region_column
        self.price_column = price_column
        self.min_columns = min_columns
        self.quality = quality

    def parse(
        self,
        raw_html: str,
        *,
        provider: str,
        source_url: str,
        scraped_at: datetime,
    ) -> list[ScrapedPrice]:
        """Parse one document into price observations.

        Args:
            raw_html: Response body of a price page.
            provider: Provider name, stamped into ``source``.
            source_url: URL the document was fetched from.
            scraped_at: Observation time applied to every row.

        Returns:
            Observations in document order.

        Raises:
            ParsingError: If the document cannot be parsed at all.
        """
        try:
            soup = BeautifulSoup(raw_html, "lxml")
        except Exception as e:
            raise ParsingError(
                f"Could not parse HTML from {source_url}: {e}",
                context={"source_url": source_url, "reason": str(e)},
            ) from e

        prices: list[ScrapedPrice] = []
        dropped = 0
        for row in soup.select("table tr"):
            cells = row.find_all("td")
            if len(cells) < self.min_columns:
                continue

            region = cells[self.region_column].get_text(strip=True)
            raw_price = cells[self.price_column].get_text(strip=True)
            price = extract_price(raw_price)
            if not region or price <= 0:
                dropped += 1
                continue

            try:
                prices.append(
                    ScrapedPrice(
                        region=region,
                        price=price,
                        quality=self.quality,
                        source=provider,
                        scraped_at=scraped_at,
                        source_url=source_url,
                        provider=provider,
                    )
                )
            except ValidationError:
                dropped += 1

        if dropped:
            logger.debug("Dropped %d unusable rows from %s", dropped, source_url)
        return prices
