import sqlite3
import threading
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from geoinfo.core.config import settings
from geoinfo.core.logger import logs

# SQLite schema definitions
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS coordinate (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS place_record (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    coordinate_id INTEGER NOT NULL UNIQUE REFERENCES coordinate(id),
    road TEXT,
    district TEXT,
    locality TEXT,
    city TEXT,
    county TEXT,
    country TEXT,
    formatted_address TEXT,
    currency_name TEXT,
    currency_code TEXT,
    currency_symbol TEXT,
    flag_glyph TEXT,
    photo_reference TEXT
);

-- Append-only; rows are never updated or deleted
CREATE TABLE IF NOT EXISTS currency_rate (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    base_currency TEXT NOT NULL,
    compare_currency TEXT NOT NULL,
    rate REAL NOT NULL,
    fetched_at INTEGER NOT NULL  -- microseconds since epoch, UTC
);

CREATE INDEX IF NOT EXISTS idx_coordinate_position ON coordinate(latitude, longitude);
CREATE INDEX IF NOT EXISTS idx_currency_rate_pair
    ON currency_rate(base_currency, compare_currency, fetched_at DESC);
"""


class SQLiteConnection:
    """
    Holds one long-lived SQLite handle for the whole app.
    Every store operation borrows it through transaction(), which serializes
    access and commits or rolls back before releasing it.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or settings.SQLITE_PATH
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self.init_db()
        logs.log(logging.INFO, f"SQLite connection initialized at {self.db_path}")

    def init_db(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        with self._lock:
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class AsyncDBConnection:
    """
    Manages the asynchronous connection to the MongoDB database.
    Only used when STORAGE_MODE=mongodb
    """
    _client: AsyncIOMotorClient | None = None

    def __init__(self):
        if settings.STORAGE_MODE == "mongodb":
            if AsyncDBConnection._client is None:
                # Motor client is non-blocking and pools its sockets
                AsyncDBConnection._client = AsyncIOMotorClient(settings.MONGO_URI)
                logs.log(logging.INFO, "MongoDB connection initialized")
        else:
            logs.log(logging.INFO, "Using local SQLite storage - MongoDB not initialized")

    def get_database(self) -> AsyncIOMotorDatabase:
        """
        Returns the async database instance.
        Only available when STORAGE_MODE=mongodb
        """
        if settings.STORAGE_MODE != "mongodb":
            raise RuntimeError("MongoDB not available - STORAGE_MODE is set to 'local'")

        if AsyncDBConnection._client is None:
            self.__init__()

        client = AsyncDBConnection._client
        return client[settings.MONGO_DB_NAME]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Mirror the SQLite constraints on the MongoDB collections."""
    await db["place_record"].create_index("coordinate_id", unique=True)
    await db["coordinate"].create_index([("latitude", ASCENDING), ("longitude", ASCENDING)])
    await db["currency_rate"].create_index([
        ("base_currency", ASCENDING),
        ("compare_currency", ASCENDING),
        ("fetched_at", DESCENDING),
        ("id", DESCENDING),
    ])


async def next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    """Hands out monotonically increasing integer ids per collection."""
    counter = await db["counters"].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER
    )
    return int(counter["seq"])


# Instantiate the connection manager
db_connection = AsyncDBConnection()

# Dependency for FastAPI
async def get_db() -> AsyncIOMotorDatabase:
    if settings.STORAGE_MODE != "mongodb":
        raise RuntimeError("MongoDB not available - using local storage")
    return db_connection.get_database()
