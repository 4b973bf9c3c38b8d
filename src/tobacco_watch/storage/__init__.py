"""tobacco_watch.storage: append-only price persistence."""

from tobacco_watch.storage.store import PriceStore, SqlitePriceStore, create_store

__all__ = ["PriceStore", "SqlitePriceStore", "create_store"]
