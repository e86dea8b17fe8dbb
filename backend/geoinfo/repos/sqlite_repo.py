"""
SQLite-backed repositories (STORAGE_MODE=local).
All three share one SQLiteConnection; each call is its own transaction.
"""
import sqlite3
import logging

from geoinfo.core.db_connection import SQLiteConnection
from geoinfo.core.errors import DuplicateRecordError, PersistenceError
from geoinfo.core.logger import logs
from geoinfo.models.places_model import PLACE_FIELDS
from geoinfo.repos.base_repo import (
    CoordinateRepository,
    CurrencyRateRepository,
    PlaceRecordRepository,
)


class SQLiteCoordinateRepository(CoordinateRepository):
    def __init__(self, connection: SQLiteConnection):
        self.connection = connection

    async def insert(self, latitude: float, longitude: float) -> int | None:
        try:
            with self.connection.transaction() as conn:
                cursor = conn.execute(
                    "INSERT INTO coordinate (latitude, longitude) VALUES (?, ?)",
                    (latitude, longitude),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logs.log(logging.ERROR, f"Failed to insert coordinate: {str(e)}")
            raise PersistenceError(f"Coordinate insert failed: {e}") from e

    async def find_by_id(self, coordinate_id: int) -> list[dict]:
        with self.connection.transaction() as conn:
            rows = conn.execute(
                "SELECT id, latitude, longitude FROM coordinate WHERE id = ?",
                (coordinate_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    async def find_by_position(self, latitude: float, longitude: float) -> list[dict]:
        with self.connection.transaction() as conn:
            rows = conn.execute(
                """
                SELECT id, latitude, longitude
                FROM coordinate
                WHERE latitude = ? AND longitude = ?
                ORDER BY id ASC
                """,
                (latitude, longitude),
            ).fetchall()
        return [dict(row) for row in rows]


class SQLitePlaceRecordRepository(PlaceRecordRepository):
    def __init__(self, connection: SQLiteConnection):
        self.connection = connection

    async def insert(self, row: dict) -> int | None:
        columns = ", ".join(PLACE_FIELDS)
        placeholders = ", ".join("?" for _ in PLACE_FIELDS)
        try:
            with self.connection.transaction() as conn:
                cursor = conn.execute(
                    f"INSERT INTO place_record ({columns}) VALUES ({placeholders})",
                    tuple(row.get(field) for field in PLACE_FIELDS),
                )
                return cursor.lastrowid
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e).upper():
                raise DuplicateRecordError(
                    f"Place record for coordinate {row.get('coordinate_id')} already exists"
                ) from e
            logs.log(logging.ERROR, f"Failed to insert place record: {str(e)}")
            raise PersistenceError(f"Place record insert failed: {e}") from e
        except sqlite3.Error as e:
            logs.log(logging.ERROR, f"Failed to insert place record: {str(e)}")
            raise PersistenceError(f"Place record insert failed: {e}") from e

    async def find_by_coordinate_id(self, coordinate_id: int) -> list[dict]:
        with self.connection.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM place_record WHERE coordinate_id = ?",
                (coordinate_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    async def find_all(self) -> list[dict]:
        with self.connection.transaction() as conn:
            rows = conn.execute("SELECT * FROM place_record ORDER BY id ASC").fetchall()
        return [dict(row) for row in rows]

    async def delete(self, place_id: int) -> int:
        try:
            with self.connection.transaction() as conn:
                cursor = conn.execute("DELETE FROM place_record WHERE id = ?", (place_id,))
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Place record delete failed: {e}") from e

    async def update_photo(self, place_id: int, photo_uri: str) -> int:
        try:
            with self.connection.transaction() as conn:
                cursor = conn.execute(
                    "UPDATE place_record SET photo_reference = ? WHERE id = ?",
                    (photo_uri, place_id),
                )
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Photo update failed: {e}") from e


class SQLiteCurrencyRateRepository(CurrencyRateRepository):
    def __init__(self, connection: SQLiteConnection):
        self.connection = connection

    async def insert(self, base: str, compare: str, rate: float, fetched_at: int) -> int | None:
        try:
            with self.connection.transaction() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO currency_rate (base_currency, compare_currency, rate, fetched_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (base, compare, rate, fetched_at),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logs.log(logging.ERROR, f"Failed to insert currency rate: {str(e)}")
            raise PersistenceError(f"Currency rate insert failed: {e}") from e

    async def find_latest(self, base: str, compare: str) -> dict | None:
        with self.connection.transaction() as conn:
            row = conn.execute(
                """
                SELECT id, base_currency, compare_currency, rate, fetched_at
                FROM currency_rate
                WHERE base_currency = ? AND compare_currency = ?
                ORDER BY fetched_at DESC, id DESC
                LIMIT 1
                """,
                (base, compare),
            ).fetchone()
        return dict(row) if row else None
