"""
Session State Manager
Remembers the last coordinate the app loaded, so a later launch without
a device fix can start from it.
"""
import logging
from typing import Optional

from geoinfo.core.logger import logs
from geoinfo.models.places_model import Coordinate
from geoinfo.repos.info_repo import CURRENT_COORD_KEY, InfoRepository


class SessionStateManager:
    def __init__(self, repo: InfoRepository):
        self.repo = repo

    async def get_last_coordinate(self) -> Optional[Coordinate]:
        stored = await self.repo.get_info(CURRENT_COORD_KEY)
        if not stored:
            return None

        try:
            coordinate = Coordinate(**stored)
        except (TypeError, ValueError) as e:
            logs.log(logging.WARNING, f"Ignoring unreadable last coordinate: {str(e)}")
            return None

        return coordinate if coordinate.has_position else None

    async def remember_coordinate(self, coordinate: Coordinate) -> bool:
        """Only persisted coordinates are remembered"""
        if not coordinate.has_identity:
            return False
        return await self.repo.set_info(CURRENT_COORD_KEY, coordinate.model_dump())

    async def clear(self) -> bool:
        """Forget the last coordinate (for testing/reset)"""
        return await self.repo.remove_info(CURRENT_COORD_KEY)
