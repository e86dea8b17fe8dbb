import asyncio
from dataclasses import dataclass

import pytest
from mongomock_motor import AsyncMongoMockClient

from geoinfo.core.db_connection import SQLiteConnection, ensure_indexes
from geoinfo.core.providers import StaticLocationProvider
from geoinfo.models.places_model import Coordinate
from geoinfo.repos.base_repo import CoordinateRepository, CurrencyRateRepository, PlaceRecordRepository
from geoinfo.repos.coordinate_repo import MongoCoordinateRepository
from geoinfo.repos.currency_repo import MongoCurrencyRateRepository
from geoinfo.repos.info_repo import InfoRepository
from geoinfo.repos.places_repo import MongoPlaceRecordRepository
from geoinfo.repos.sqlite_repo import (
    SQLiteCoordinateRepository,
    SQLiteCurrencyRateRepository,
    SQLitePlaceRecordRepository,
)
from geoinfo.services.Coordinate_service import CoordinateService
from geoinfo.services.Currency_service import CurrencyRateService
from geoinfo.services.Pipeline_service import LoadPipeline
from geoinfo.services.Places_service import PlacesService
from geoinfo.services.session_state import SessionStateManager

from fakes import NOW, FakeGeocoder, FakeRates, FakeWeather


@dataclass
class Repositories:
    coordinates: CoordinateRepository
    places: PlaceRecordRepository
    rates: CurrencyRateRepository


@pytest.fixture(params=["sqlite", "mongodb"])
def repositories(request, tmp_path):
    """Every store test runs once per storage backend."""
    if request.param == "sqlite":
        conn = SQLiteConnection(str(tmp_path / "geoinfo.db"))
        try:
            yield Repositories(
                coordinates=SQLiteCoordinateRepository(conn),
                places=SQLitePlaceRecordRepository(conn),
                rates=SQLiteCurrencyRateRepository(conn),
            )
        finally:
            conn.close()
    else:
        db = AsyncMongoMockClient()["geoinfo_test"]
        asyncio.run(ensure_indexes(db))
        yield Repositories(
            coordinates=MongoCoordinateRepository(db),
            places=MongoPlaceRecordRepository(db),
            rates=MongoCurrencyRateRepository(db),
        )


@pytest.fixture
def coordinate_service(repositories):
    return CoordinateService(repositories.coordinates)


@pytest.fixture
def places_service(repositories):
    return PlacesService(repositories.places)


@pytest.fixture
def rate_service(repositories):
    return CurrencyRateService(repositories.rates)


@pytest.fixture
def info_repo(tmp_path):
    return InfoRepository(str(tmp_path / "info"))


@pytest.fixture
def session_state(info_repo):
    return SessionStateManager(info_repo)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def weather():
    return FakeWeather()


@pytest.fixture
def rate_provider():
    return FakeRates()


@pytest.fixture
def pipeline(coordinate_service, places_service, rate_service, session_state, geocoder, weather, rate_provider):
    return LoadPipeline(
        coordinates=coordinate_service,
        places=places_service,
        rates=rate_service,
        geocoder=geocoder,
        weather=weather,
        rate_provider=rate_provider,
        session_state=session_state,
        location=StaticLocationProvider(Coordinate(latitude=48.8606, longitude=2.3376)),
        clock=lambda: NOW,
    )

