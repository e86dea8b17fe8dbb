import logging
from geoinfo.core.errors import NotFoundError, PersistenceError
from geoinfo.core.logger import logs
from geoinfo.models.base_model import WriteOutcome, WriteStatus
from geoinfo.models.places_model import Coordinate
from geoinfo.repos.base_repo import CoordinateRepository

class CoordinateService:
    """
    Coordinate Store: persists latitude/longitude pairs and hands out identities.
    Deduplication is the caller's job (look up with find_by_position first).
    """
    def __init__(self, repo: CoordinateRepository):
        self.repo = repo

    async def upsert_coordinate(
        self, latitude: float | None, longitude: float | None, existing_id: int | None = None
    ) -> WriteOutcome[Coordinate]:
        coordinate = Coordinate(id=existing_id, latitude=latitude, longitude=longitude)

        if coordinate.has_identity:
            return WriteOutcome[Coordinate](
                status=WriteStatus.NOOP,
                value=coordinate,
                reason=f"Coordinate already holds identity {existing_id}"
            )

        if not coordinate.has_position:
            logs.log(logging.WARNING, "Refusing to store coordinate without position", extra={"lat": latitude, "lon": longitude})
            return WriteOutcome[Coordinate](
                status=WriteStatus.REJECTED,
                value=coordinate,
                reason="Latitude and longitude are required"
            )

        new_id = await self.repo.insert(latitude, longitude)
        if not new_id or new_id < 1:
            raise PersistenceError(f"Coordinate insert for ({latitude}, {longitude}) returned no identity")

        logs.log(logging.INFO, f"Stored coordinate {new_id} at {latitude}, {longitude}")
        return WriteOutcome[Coordinate](
            status=WriteStatus.PERSISTED,
            value=Coordinate(id=new_id, latitude=latitude, longitude=longitude)
        )

    async def get_coordinate_by_id(self, coordinate_id: int) -> Coordinate:
        rows = await self.repo.find_by_id(coordinate_id)

        if len(rows) != 1:
            if len(rows) > 1:
                logs.log(logging.ERROR, f"Coordinate identity {coordinate_id} matched {len(rows)} rows")
            raise NotFoundError(f"Coordinate {coordinate_id} not found (matches: {len(rows)})", matches=len(rows))

        return Coordinate(**rows[0])

    async def find_by_position(self, latitude: float | None, longitude: float | None) -> Coordinate | None:
        """Exact-match lookup used before creating a coordinate."""
        if not latitude or not longitude:
            return None

        rows = await self.repo.find_by_position(latitude, longitude)
        if not rows:
            return None

        if len(rows) > 1:
            logs.log(logging.WARNING, f"{len(rows)} stored coordinates share position {latitude}, {longitude}; using id {rows[0]['id']}")
        return Coordinate(**rows[0])
