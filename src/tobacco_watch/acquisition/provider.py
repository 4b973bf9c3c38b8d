"""Price provider protocol: the interchangeable data-source interface.

Architecture
------------
Every price source, live or simulated, exposes the same two members:

    PriceProvider.scrape() → list[ScrapedPrice] → AcquisitionCoordinator → PriceStore

- **scrape()** performs one complete acquisition pass. It either returns a
  (possibly empty) list of observations or raises ``AcquisitionError``.
  Providers never write to storage; persistence belongs to the coordinator.

- **name** is a stable identity used in log lines and stamped into every
  record's ``source`` field.

Adding a new source = writing one class with these two members and
registering it in ``build_providers``. The coordinator needs no changes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tobacco_watch.core.models import ScrapedPrice


@runtime_checkable
class PriceProvider(Protocol):
    """A pluggable source of price data with a uniform success/failure contract."""

    @property
    def name(self) -> str:
        """Stable provider identity, e.g. ``"BAPPEBTI Info Harga"``."""
        ...

    async def scrape(self) -> list[ScrapedPrice]:
        """Attempt one full acquisition pass.

        Returns
        -------
        list[ScrapedPrice]
            Every usable observation. May be empty.

        Raises
        ------
        AcquisitionError
            If the provider cannot run at all (setup or total parse failure).
        """
        ...
