from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from geoinfo.core.db_connection import next_sequence
from geoinfo.core.errors import PersistenceError
from geoinfo.repos.base_repo import CoordinateRepository

class MongoCoordinateRepository(CoordinateRepository):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["coordinate"]

    async def insert(self, latitude: float, longitude: float) -> int | None:
        try:
            coordinate_id = await next_sequence(self.db, "coordinate")
            await self.collection.insert_one({
                "id": coordinate_id,
                "latitude": latitude,
                "longitude": longitude
            })
            return coordinate_id
        except PyMongoError as e:
            raise PersistenceError(f"Coordinate insert failed: {e}") from e

    async def find_by_id(self, coordinate_id: int) -> list[dict]:
        cursor = self.collection.find({"id": coordinate_id}, projection={"_id": 0})
        return await cursor.to_list(length=None)

    async def find_by_position(self, latitude: float, longitude: float) -> list[dict]:
        cursor = self.collection.find(
            {"latitude": latitude, "longitude": longitude},
            projection={"_id": 0},
            sort=[("id", 1)]
        )
        return await cursor.to_list(length=None)
