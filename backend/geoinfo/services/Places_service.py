import logging
from geoinfo.core.errors import NotFoundError, PersistenceError
from geoinfo.core.logger import logs
from geoinfo.models.base_model import WriteOutcome, WriteStatus
from geoinfo.models.places_model import PlaceRecord
from geoinfo.repos.base_repo import PlaceRecordRepository
from geoinfo.services.Coordinate_service import CoordinateService

class PlacesService:
    """
    Place Record Store: one reverse-geocoded place per coordinate identity.
    list_all never joins coordinates; list_saved_locations does, for the map view.
    """
    def __init__(self, repo: PlaceRecordRepository):
        self.repo = repo

    async def get_by_coordinate_id(self, coordinate_id: int) -> PlaceRecord:
        rows = await self.repo.find_by_coordinate_id(coordinate_id)

        if len(rows) != 1:
            if len(rows) > 1:
                logs.log(logging.ERROR, f"Coordinate {coordinate_id} has {len(rows)} place records")
            raise NotFoundError(
                f"Place record for coordinate {coordinate_id} not found (matches: {len(rows)})",
                matches=len(rows)
            )

        return PlaceRecord.from_row(rows[0])

    async def list_all(self) -> list[PlaceRecord]:
        rows = await self.repo.find_all()
        return [PlaceRecord.from_row(row) for row in rows]

    async def create(self, record: PlaceRecord) -> WriteOutcome[PlaceRecord]:
        # Guards against a double submission re-inserting the same record
        if record.has_identity:
            return WriteOutcome[PlaceRecord](
                status=WriteStatus.NOOP,
                value=record,
                reason=f"Place record already holds identity {record.id}"
            )

        if record.coordinate_id < 1:
            return WriteOutcome[PlaceRecord](
                status=WriteStatus.REJECTED,
                value=record,
                reason="A place record needs a persisted coordinate"
            )

        new_id = await self.repo.insert(record.to_row())
        if not new_id or new_id < 1:
            raise PersistenceError(f"Place record insert for coordinate {record.coordinate_id} returned no identity")

        logs.log(logging.INFO, f"Stored place record {new_id} for coordinate {record.coordinate_id}")
        return WriteOutcome[PlaceRecord](
            status=WriteStatus.PERSISTED,
            value=record.model_copy(update={"id": new_id})
        )

    async def delete_by_id(self, place_id: int) -> bool:
        if place_id is None or place_id < 1:
            return False

        affected = await self.repo.delete(place_id)
        logs.log(logging.INFO, f"Delete place record {place_id}: {affected} row(s)")
        return affected > 0

    async def update_photo_reference(self, photo_uri: str, place_id: int) -> bool:
        if not photo_uri or not photo_uri.strip() or place_id is None or place_id < 1:
            return False

        affected = await self.repo.update_photo(place_id, photo_uri)
        return affected > 0

    async def list_saved_locations(self, coordinates: CoordinateService) -> list[PlaceRecord]:
        """
        Lists every saved place for the map view, attaching each record's
        coordinate from the Coordinate Store when it is missing or zero-valued.
        """
        records = await self.list_all()
        resolved = []

        for record in records:
            if record.coordinate is None or not record.coordinate.has_position:
                try:
                    coordinate = await coordinates.get_coordinate_by_id(record.coordinate_id)
                    record = record.model_copy(update={"coordinate": coordinate})
                except NotFoundError as e:
                    logs.log(logging.WARNING, f"Saved place {record.id} has no usable coordinate: {str(e)}")
            resolved.append(record)

        return resolved
