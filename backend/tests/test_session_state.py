import asyncio

from geoinfo.models.places_model import Coordinate
from geoinfo.repos.info_repo import CURRENT_COORD_KEY


def test_info_round_trip(info_repo) -> None:
    assert asyncio.run(info_repo.get_info("missing")) is None
    assert asyncio.run(info_repo.set_info("theme", {"dark": True}))
    assert asyncio.run(info_repo.get_info("theme")) == {"dark": True}
    assert asyncio.run(info_repo.remove_info("theme"))
    assert not asyncio.run(info_repo.remove_info("theme"))


def test_last_coordinate_is_remembered(session_state, info_repo) -> None:
    coordinate = Coordinate(id=3, latitude=48.8606, longitude=2.3376)

    assert asyncio.run(session_state.remember_coordinate(coordinate))
    assert asyncio.run(session_state.get_last_coordinate()) == coordinate
    assert asyncio.run(info_repo.get_info(CURRENT_COORD_KEY))["id"] == 3


def test_unsaved_coordinate_is_not_remembered(session_state) -> None:
    assert not asyncio.run(session_state.remember_coordinate(Coordinate(latitude=1.5, longitude=2.5)))
    assert asyncio.run(session_state.get_last_coordinate()) is None


def test_clear_forgets_the_coordinate(session_state) -> None:
    asyncio.run(session_state.remember_coordinate(Coordinate(id=1, latitude=1.5, longitude=2.5)))
    asyncio.run(session_state.clear())
    assert asyncio.run(session_state.get_last_coordinate()) is None
