"""Storage backend: Protocol definition, SQLite implementation, factory."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar, Protocol, runtime_checkable

import aiosqlite

from tobacco_watch.core.config import StorageConfig
from tobacco_watch.core.exceptions import RegionNotFoundError, StorageError
from tobacco_watch.core.models import (
    NewPrice,
    PriceRecord,
    ScrapedPrice,
    WeatherData,
    utcnow,
)

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"


def _timestamp(value: datetime) -> str:
    # Fixed-width text so lexical order matches chronological order.
    return value.isoformat(timespec="microseconds")


@runtime_checkable
class PriceStore(Protocol):
    """Append-only persistence for price records."""

    async def insert(
        self,
        region: str,
        price: float,
        unit: str,
        source: str,
        recorded_at: datetime,
    ) -> int: ...
    async def insert_price(self, price: NewPrice) -> int: ...
    async def insert_scraped(self, scraped: ScrapedPrice) -> int: ...
    async def latest_by_region(self, region: str) -> PriceRecord: ...
    async def all_ordered_by_recency(self) -> list[PriceRecord]: ...
    async def save_weather(
        self, region: str, weather: WeatherData, fetched_at: datetime | None = None
    ) -> int: ...
    async def get_statistics(self) -> dict[str, Any]: ...
    async def initialize(self) -> None: ...
    async def close(self) -> None: ...
    async def health_check(self) -> bool: ...


class SqlitePriceStore:
    """SQLite implementation of the price store.

    Uses aiosqlite for async access, WAL mode for concurrent reads,
    and a version-tracked migration system. SQLite allows a single writer,
    so every write goes through one ``asyncio.Lock``.
    """

    _MIGRATIONS: ClassVar[dict[int, tuple[str, list[str]]]] = {
        1: (
            "Initial schema",
            [
                """CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT DEFAULT (datetime('now'))
                )""",
                """CREATE TABLE IF NOT EXISTS prices (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    region TEXT NOT NULL,
                    price REAL NOT NULL CHECK (price > 0),
                    unit TEXT NOT NULL DEFAULT 'kg',
                    source TEXT NOT NULL CHECK (source <> ''),
                    recorded_at TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )""",
                """CREATE TABLE IF NOT EXISTS weather_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    region TEXT NOT NULL,
                    temp_c REAL NOT NULL,
                    humidity INTEGER NOT NULL,
                    rain_mm REAL NOT NULL DEFAULT 0,
                    fetched_at TEXT NOT NULL,
                    created_at TEXT DEFAULT (datetime('now'))
                )""",
                "CREATE INDEX IF NOT EXISTS idx_prices_region ON prices(region)",
                "CREATE INDEX IF NOT EXISTS idx_prices_created_at ON prices(created_at)",
                "CREATE INDEX IF NOT EXISTS idx_weather_region ON weather_history(region)",
            ],
        ),
    }

    def __init__(self, config: StorageConfig) -> None:
        self._path = config.sqlite_path
        self._db: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open connection, enable WAL, run migrations."""
        try:
            if self._path != _MEMORY:
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self._path)
            self._db.row_factory = aiosqlite.Row
            await self._db.execute("PRAGMA journal_mode=WAL")
            current = await self._get_schema_version()
            await self._apply_migrations(current)
            await self._db.commit()
        except Exception as e:
            raise StorageError(
                f"Failed to initialize SQLite store: {e}",
                context={"operation": "initialize", "path": self._path},
            ) from e

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def health_check(self) -> bool:
        if self._db is None:
            return False
        try:
            async with self._db.execute("SELECT 1") as cursor:
                row = await cursor.fetchone()
            return row is not None
        except Exception:
            return False

    # --- Schema Migration ---

    async def _get_schema_version(self) -> int:
        try:
            async with self._db.execute(
                "SELECT MAX(version) FROM schema_version"
            ) as cursor:
                row = await cursor.fetchone()
            return row[0] if row[0] is not None else 0
        except aiosqlite.OperationalError:
            return 0

    async def _apply_migrations(self, current_version: int) -> None:
        for version in sorted(self._MIGRATIONS.keys()):
            if version <= current_version:
                continue
            desc, statements = self._MIGRATIONS[version]
            logger.info("Applying migration %d: %s", version, desc)
            for sql in statements:
                await self._db.execute(sql)
            await self._db.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )

    def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StorageError(
                "Store is not initialized",
                context={"operation": "connect", "path": self._path},
            )
        return self._db

    # --- Price Operations ---

    async def insert(
        self,
        region: str,
        price: float,
        unit: str,
        source: str,
        recorded_at: datetime,
    ) -> int:
        """Append one price record and return its new id.

        No deduplication: identical payloads produce distinct rows.
        """
        db = self._connection()
        try:
            async with self._write_lock:
                cursor = await db.execute(
                    """INSERT INTO prices
                       (region, price, unit, source, recorded_at, created_at)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (
                        region,
                        price,
                        unit,
                        source,
                        _timestamp(recorded_at),
                        _timestamp(utcnow()),
                    ),
                )
                await db.commit()
            return cursor.lastrowid
        except Exception as e:
            raise StorageError(
                f"Failed to insert price: {e}",
                context={"operation": "insert", "table": "prices", "region": region},
            ) from e

    async def insert_price(self, price: NewPrice) -> int:
        return await self.insert(
            price.region, price.price, price.unit, price.source, price.recorded_at
        )

    async def insert_scraped(self, scraped: ScrapedPrice) -> int:
        return await self.insert_price(NewPrice.from_scraped(scraped))

    async def latest_by_region(self, region: str) -> PriceRecord:
        """Most recent record whose region equals ``region`` exactly.

        Raises:
            RegionNotFoundError: No record for that region.
        """
        db = self._connection()
        try:
            async with db.execute(
                """SELECT * FROM prices WHERE region = ?
                   ORDER BY created_at DESC, id DESC LIMIT 1""",
                (region,),
            ) as cursor:
                row = await cursor.fetchone()
        except Exception as e:
            raise StorageError(
                f"Failed to get latest price: {e}",
                context={"operation": "query", "table": "prices"},
            ) from e
        if row is None:
            raise RegionNotFoundError(
                f"No price recorded for region {region!r}",
                context={"region": region},
            )
        return self._row_to_price_record(row)

    async def all_ordered_by_recency(self) -> list[PriceRecord]:
        db = self._connection()
        try:
            async with db.execute(
                "SELECT * FROM prices ORDER BY created_at DESC, id DESC"
            ) as cursor:
                rows = await cursor.fetchall()
            return [self._row_to_price_record(r) for r in rows]
        except Exception as e:
            raise StorageError(
                f"Failed to list prices: {e}",
                context={"operation": "query", "table": "prices"},
            ) from e

    # --- Weather History ---

    async def save_weather(
        self,
        region: str,
        weather: WeatherData,
        fetched_at: datetime | None = None,
    ) -> int:
        db = self._connection()
        try:
            async with self._write_lock:
                cursor = await db.execute(
                    """INSERT INTO weather_history
                       (region, temp_c, humidity, rain_mm, fetched_at)
                       VALUES (?, ?, ?, ?, ?)""",
                    (
                        region,
                        weather.temp,
                        weather.humidity,
                        weather.rain_mm,
                        _timestamp(fetched_at or utcnow()),
                    ),
                )
                await db.commit()
            return cursor.lastrowid
        except Exception as e:
            raise StorageError(
                f"Failed to save weather: {e}",
                context={"operation": "insert", "table": "weather_history"},
            ) from e

    # --- Statistics ---

    async def get_statistics(self) -> dict[str, Any]:
        db = self._connection()
        try:
            async with db.execute(
                """SELECT COUNT(*) AS total, COUNT(DISTINCT region) AS regions,
                          MAX(created_at) AS last_created
                   FROM prices"""
            ) as cursor:
                prices = await cursor.fetchone()
            async with db.execute(
                "SELECT COUNT(*) AS total FROM weather_history"
            ) as cursor:
                weather = await cursor.fetchone()
        except Exception as e:
            raise StorageError(
                f"Failed to compute statistics: {e}",
                context={"operation": "query", "table": "prices"},
            ) from e
        return {
            "price_records": prices["total"],
            "regions": prices["regions"],
            "last_created_at": prices["last_created"],
            "weather_records": weather["total"],
        }

    # --- Row Mapping Helpers ---

    @staticmethod
    def _row_to_price_record(row: aiosqlite.Row) -> PriceRecord:
        return PriceRecord(
            id=row["id"],
            region=row["region"],
            price=row["price"],
            unit=row["unit"],
            source=row["source"],
            recorded_at=datetime.fromisoformat(row["recorded_at"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


async def create_store(config: StorageConfig) -> SqlitePriceStore:
    """Create and initialize the SQLite price store."""
    store = SqlitePriceStore(config)
    await store.initialize()
    return store
