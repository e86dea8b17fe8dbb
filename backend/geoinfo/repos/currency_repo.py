from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from geoinfo.core.db_connection import next_sequence
from geoinfo.core.errors import PersistenceError
from geoinfo.repos.base_repo import CurrencyRateRepository

class MongoCurrencyRateRepository(CurrencyRateRepository):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["currency_rate"]

    async def insert(self, base: str, compare: str, rate: float, fetched_at: int) -> int | None:
        """
        Appends a snapshot. Existing snapshots are never touched, staleness
        is resolved by reading the newest one.
        """
        try:
            rate_id = await next_sequence(self.db, "currency_rate")
            await self.collection.insert_one({
                "id": rate_id,
                "base_currency": base,
                "compare_currency": compare,
                "rate": rate,
                "fetched_at": fetched_at
            })
            return rate_id
        except PyMongoError as e:
            raise PersistenceError(f"Currency rate insert failed: {e}") from e

    async def find_latest(self, base: str, compare: str) -> dict | None:
        return await self.collection.find_one(
            {"base_currency": base, "compare_currency": compare},
            projection={"_id": 0},
            sort=[("fetched_at", -1), ("id", -1)]
        )
