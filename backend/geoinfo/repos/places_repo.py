from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from geoinfo.core.db_connection import next_sequence
from geoinfo.core.errors import DuplicateRecordError, PersistenceError
from geoinfo.repos.base_repo import PlaceRecordRepository

class MongoPlaceRecordRepository(PlaceRecordRepository):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["place_record"]

    async def insert(self, row: dict) -> int | None:
        """
        Inserts the record under a fresh integer id.
        The unique index on coordinate_id rejects a second record per coordinate.
        """
        try:
            place_id = await next_sequence(self.db, "place_record")
            await self.collection.insert_one({"id": place_id, **row})
            return place_id
        except DuplicateKeyError as e:
            raise DuplicateRecordError(
                f"Place record for coordinate {row.get('coordinate_id')} already exists"
            ) from e
        except PyMongoError as e:
            raise PersistenceError(f"Place record insert failed: {e}") from e

    async def find_by_coordinate_id(self, coordinate_id: int) -> list[dict]:
        cursor = self.collection.find({"coordinate_id": coordinate_id}, projection={"_id": 0})
        return await cursor.to_list(length=None)

    async def find_all(self) -> list[dict]:
        cursor = self.collection.find({}, projection={"_id": 0}, sort=[("id", 1)])
        return await cursor.to_list(length=None)

    async def delete(self, place_id: int) -> int:
        try:
            result = await self.collection.delete_one({"id": place_id})
            return result.deleted_count
        except PyMongoError as e:
            raise PersistenceError(f"Place record delete failed: {e}") from e

    async def update_photo(self, place_id: int, photo_uri: str) -> int:
        try:
            result = await self.collection.update_one(
                {"id": place_id},
                {"$set": {"photo_reference": photo_uri}}
            )
            return result.matched_count
        except PyMongoError as e:
            raise PersistenceError(f"Photo update failed: {e}") from e
