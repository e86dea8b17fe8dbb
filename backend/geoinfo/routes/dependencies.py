from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from geoinfo.core.config import settings
from geoinfo.core.db_connection import SQLiteConnection, get_db
from geoinfo.core.providers import (
    BaseGeocoder,
    BaseRateProvider,
    BaseWeatherProvider,
    FrankfurterRateProvider,
    OpenCageGeocoder,
    WeatherbitProvider,
)
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


@dataclass
class Stores:
    coordinates: CoordinateService
    places: PlacesService
    rates: CurrencyRateService


@dataclass
class Providers:
    geocoder: BaseGeocoder
    weather: BaseWeatherProvider
    rates: BaseRateProvider


_sqlite: Optional[SQLiteConnection] = None

def get_sqlite_connection() -> SQLiteConnection:
    """One SQLite handle for the whole process"""
    global _sqlite
    if _sqlite is None:
        _sqlite = SQLiteConnection()
    return _sqlite

def close_sqlite_connection() -> None:
    global _sqlite
    if _sqlite is not None:
        _sqlite.close()
        _sqlite = None


# --- Dependency Injection Helpers ---
async def get_stores() -> Stores:
    """Get the stores backed by the configured storage mode."""
    if settings.STORAGE_MODE == "mongodb":
        db = await get_db()
        return Stores(
            coordinates=CoordinateService(MongoCoordinateRepository(db)),
            places=PlacesService(MongoPlaceRecordRepository(db)),
            rates=CurrencyRateService(MongoCurrencyRateRepository(db)),
        )

    connection = get_sqlite_connection()
    return Stores(
        coordinates=CoordinateService(SQLiteCoordinateRepository(connection)),
        places=PlacesService(SQLitePlaceRecordRepository(connection)),
        rates=CurrencyRateService(SQLiteCurrencyRateRepository(connection)),
    )

def get_providers() -> Providers:
    return Providers(
        geocoder=OpenCageGeocoder(),
        weather=WeatherbitProvider(),
        rates=FrankfurterRateProvider(),
    )

def get_session_state() -> SessionStateManager:
    return SessionStateManager(InfoRepository())

def get_pipeline(
    request: Request,
    stores: Stores = Depends(get_stores),
    providers: Providers = Depends(get_providers),
    session_state: SessionStateManager = Depends(get_session_state),
) -> LoadPipeline:
    """One pipeline per app session, kept on app.state so runs can supersede each other."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = LoadPipeline(
            coordinates=stores.coordinates,
            places=stores.places,
            rates=stores.rates,
            geocoder=providers.geocoder,
            weather=providers.weather,
            rate_provider=providers.rates,
            session_state=session_state,
            session=request.app.state.session,
        )
        request.app.state.pipeline = pipeline
    return pipeline
