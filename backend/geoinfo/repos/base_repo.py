"""
Persistence interfaces shared by the SQLite and MongoDB backends.
Each method maps to exactly one statement against the backend.
"""
from abc import ABC, abstractmethod


class CoordinateRepository(ABC):
    """Raw access to the coordinate table"""

    @abstractmethod
    async def insert(self, latitude: float, longitude: float) -> int | None:
        """Insert a row and return its identity (None if none was assigned)"""
        pass

    @abstractmethod
    async def find_by_id(self, coordinate_id: int) -> list[dict]:
        pass

    @abstractmethod
    async def find_by_position(self, latitude: float, longitude: float) -> list[dict]:
        """Exact match on (latitude, longitude), ordered by identity"""
        pass


class PlaceRecordRepository(ABC):
    """Raw access to the place_record table"""

    @abstractmethod
    async def insert(self, row: dict) -> int | None:
        pass

    @abstractmethod
    async def find_by_coordinate_id(self, coordinate_id: int) -> list[dict]:
        pass

    @abstractmethod
    async def find_all(self) -> list[dict]:
        """Every row, ordered by identity ascending"""
        pass

    @abstractmethod
    async def delete(self, place_id: int) -> int:
        """Returns the number of rows affected"""
        pass

    @abstractmethod
    async def update_photo(self, place_id: int, photo_uri: str) -> int:
        """Returns the number of rows affected"""
        pass


class CurrencyRateRepository(ABC):
    """Raw access to the append-only currency_rate table"""

    @abstractmethod
    async def insert(self, base: str, compare: str, rate: float, fetched_at: int) -> int | None:
        """`fetched_at` is microseconds since the Unix epoch"""
        pass

    @abstractmethod
    async def find_latest(self, base: str, compare: str) -> dict | None:
        """Newest row by fetched_at, then identity"""
        pass
