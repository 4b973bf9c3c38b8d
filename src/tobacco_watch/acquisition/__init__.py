"""tobacco_watch.acquisition: price providers and ordered-fallback coordination."""

from tobacco_watch.acquisition.bappebti import BappebtiProvider
from tobacco_watch.acquisition.coordinator import (
    AcquisitionCoordinator,
    build_providers,
    create_coordinator,
)
from tobacco_watch.acquisition.news import NewsPortalProvider
from tobacco_watch.acquisition.parser import PriceTableParser, extract_price
from tobacco_watch.acquisition.provider import PriceProvider
from tobacco_watch.acquisition.research import RESEARCH_DATASET, ResearchProvider
from tobacco_watch.acquisition.simulation import (
    insert_simulated_batch,
    simulate_market_batch,
)

__all__ = [
    "PriceProvider",
    "BappebtiProvider",
    "NewsPortalProvider",
    "ResearchProvider",
    "RESEARCH_DATASET",
    "PriceTableParser",
    "extract_price",
    "AcquisitionCoordinator",
    "build_providers",
    "create_coordinator",
    "simulate_market_batch",
    "insert_simulated_batch",
]
