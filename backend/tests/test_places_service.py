import asyncio

import pytest

from geoinfo.core.errors import DuplicateRecordError, NotFoundError
from geoinfo.models.base_model import WriteStatus
from geoinfo.models.places_model import PlaceRecord

from fakes import PARIS


def _stored_coordinate(coordinate_service, latitude=48.8606, longitude=2.3376):
    return asyncio.run(coordinate_service.upsert_coordinate(latitude, longitude)).value


def test_create_then_lookup_by_coordinate(coordinate_service, places_service) -> None:
    coordinate = _stored_coordinate(coordinate_service)
    outcome = asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS)))

    assert outcome.status == WriteStatus.PERSISTED
    assert outcome.value.id >= 1

    record = asyncio.run(places_service.get_by_coordinate_id(coordinate.id))
    assert record.id == outcome.value.id
    assert record.city == "Paris"
    assert record.currency_code == "EUR"
    assert record.currency_symbol == "€"
    assert record.flag_glyph == "🇫🇷"
    assert record.photo_reference is None


def test_record_with_identity_is_not_inserted_again(coordinate_service, places_service) -> None:
    coordinate = _stored_coordinate(coordinate_service)
    created = asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS))).value

    again = asyncio.run(places_service.create(created))
    assert again.status == WriteStatus.NOOP
    assert len(asyncio.run(places_service.list_all())) == 1


def test_record_without_coordinate_is_rejected(places_service) -> None:
    outcome = asyncio.run(places_service.create(PlaceRecord(coordinate_id=0, city="Nowhere")))
    assert outcome.rejected


def test_second_record_for_a_coordinate_is_refused(coordinate_service, places_service) -> None:
    coordinate = _stored_coordinate(coordinate_service)
    asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS)))

    with pytest.raises(DuplicateRecordError):
        asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS)))


def test_lookup_without_record_raises(places_service) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(places_service.get_by_coordinate_id(42))


def test_photo_update_and_delete(coordinate_service, places_service) -> None:
    coordinate = _stored_coordinate(coordinate_service)
    record = asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS))).value

    assert asyncio.run(places_service.update_photo_reference("file:///photos/louvre.jpg", record.id))
    assert asyncio.run(places_service.get_by_coordinate_id(coordinate.id)).photo_reference == "file:///photos/louvre.jpg"

    assert asyncio.run(places_service.delete_by_id(record.id))
    assert not asyncio.run(places_service.delete_by_id(record.id))
    assert asyncio.run(places_service.list_all()) == []


def test_invalid_ids_affect_nothing(places_service) -> None:
    assert not asyncio.run(places_service.delete_by_id(0))
    assert not asyncio.run(places_service.delete_by_id(999))
    assert not asyncio.run(places_service.update_photo_reference("file:///x.jpg", 999))
    assert not asyncio.run(places_service.update_photo_reference("", 1))


def test_list_all_is_ordered_by_identity(coordinate_service, places_service) -> None:
    for latitude in (10.5, 20.5, 30.5):
        coordinate = _stored_coordinate(coordinate_service, latitude, 5.5)
        asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS)))

    ids = [record.id for record in asyncio.run(places_service.list_all())]
    assert ids == sorted(ids)
    assert len(ids) == 3


def test_saved_locations_carry_their_coordinate(coordinate_service, places_service) -> None:
    coordinate = _stored_coordinate(coordinate_service)
    asyncio.run(places_service.create(PlaceRecord.from_geocode(coordinate.id, PARIS)))

    saved = asyncio.run(places_service.list_saved_locations(coordinate_service))
    assert len(saved) == 1
    assert saved[0].coordinate.id == coordinate.id
    assert saved[0].coordinate.latitude == 48.8606
