import asyncio

import pytest

from geoinfo.core.errors import NotFoundError
from geoinfo.models.base_model import WriteStatus


def test_upsert_persists_and_reads_back(coordinate_service) -> None:
    outcome = asyncio.run(coordinate_service.upsert_coordinate(48.8606, 2.3376))

    assert outcome.status == WriteStatus.PERSISTED
    assert outcome.value.id >= 1

    stored = asyncio.run(coordinate_service.get_coordinate_by_id(outcome.value.id))
    assert stored.latitude == 48.8606
    assert stored.longitude == 2.3376


def test_identities_strictly_increase(coordinate_service) -> None:
    first = asyncio.run(coordinate_service.upsert_coordinate(10.5, 20.5))
    second = asyncio.run(coordinate_service.upsert_coordinate(11.5, 21.5))
    assert second.value.id > first.value.id


def test_existing_identity_is_a_noop(coordinate_service) -> None:
    outcome = asyncio.run(coordinate_service.upsert_coordinate(48.0, 2.0, existing_id=7))

    assert outcome.status == WriteStatus.NOOP
    assert outcome.value.id == 7
    assert asyncio.run(coordinate_service.find_by_position(48.0, 2.0)) is None


@pytest.mark.parametrize("latitude, longitude", [(None, 2.0), (48.0, None), (0.0, 2.0)])
def test_missing_position_is_rejected(coordinate_service, latitude, longitude) -> None:
    outcome = asyncio.run(coordinate_service.upsert_coordinate(latitude, longitude))

    assert outcome.rejected
    assert outcome.value.id is None


def test_unknown_identity_raises_not_found(coordinate_service) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        asyncio.run(coordinate_service.get_coordinate_by_id(999))
    assert excinfo.value.matches == 0
    assert not excinfo.value.ambiguous


def test_find_by_position_returns_lowest_identity(coordinate_service) -> None:
    first = asyncio.run(coordinate_service.upsert_coordinate(1.25, 3.75))
    asyncio.run(coordinate_service.upsert_coordinate(1.25, 3.75))

    found = asyncio.run(coordinate_service.find_by_position(1.25, 3.75))
    assert found.id == first.value.id
    assert asyncio.run(coordinate_service.find_by_position(1.25, 3.5)) is None
