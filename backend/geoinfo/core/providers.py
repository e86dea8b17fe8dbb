"""
External Provider Implementations
Reverse geocoding, weather and currency rates behind small unified interfaces,
plus the device location source.
"""
import httpx
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, date

from geoinfo.core.config import settings
from geoinfo.core.errors import GeocodeError, RateFetchError, WeatherError
from geoinfo.core.logger import logs
from geoinfo.models.places_model import Coordinate, CurrencyInfo, GeocodeResult
from geoinfo.models.weather_model import DailyForecast, HourlyForecast, WeatherSnapshot


class HTTPProvider:
    """Shared GET helper. A client can be injected (tests use httpx.MockTransport)."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self.client = client
        self.timeout = timeout or settings.HTTP_TIMEOUT

    async def _get_json(self, url: str, params: dict) -> dict:
        if self.client is not None:
            response = await self.client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient() as client:
            response = await client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()


# --- Interfaces ---
class BaseGeocoder(ABC):
    """Base class for reverse geocoders"""

    @abstractmethod
    async def reverse_geocode(self, coordinate: Coordinate) -> GeocodeResult:
        """Resolve a coordinate to a place; raises GeocodeError on failure"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass


class BaseWeatherProvider(ABC):
    """Base class for weather sources"""

    @abstractmethod
    async def current_weather(self, coordinate: Coordinate) -> WeatherSnapshot:
        pass

    @abstractmethod
    async def daily_forecast(self, weather_id: str, coordinate: Coordinate) -> list[DailyForecast]:
        pass

    @abstractmethod
    async def hourly_forecast(self, weather_id: str, coordinate: Coordinate) -> list[HourlyForecast]:
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass


class BaseRateProvider(ABC):
    """Base class for currency rate sources"""

    @abstractmethod
    async def fetch_rate(self, base: str, compare: str) -> float:
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass


class BaseLocationProvider(ABC):
    """Where the device coordinate comes from"""

    @abstractmethod
    async def current_coordinate(self) -> Coordinate | None:
        """None when the device has no fix"""
        pass


# --- Implementations ---
class OpenCageGeocoder(HTTPProvider, BaseGeocoder):
    """OpenCage reverse geocoding, with flag and currency annotations"""

    def __init__(self, api_key: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key or settings.OPENCAGE_API_KEY
        self.base_url = base_url or settings.OPENCAGE_URL

    async def reverse_geocode(self, coordinate: Coordinate) -> GeocodeResult:
        params = {
            "q": f"{coordinate.latitude},{coordinate.longitude}",
            "key": self.api_key,
            "limit": 1,
        }
        try:
            data = await self._get_json(self.base_url, params)
        except Exception as e:
            logs.log(logging.ERROR, f"OpenCage API error: {str(e)}")
            raise GeocodeError(f"Reverse geocoding failed for {coordinate.latitude}, {coordinate.longitude}") from e

        results = data.get("results") or []
        if not results:
            logs.log(logging.WARNING, f"OpenCage returned no result for {coordinate.latitude}, {coordinate.longitude}")
            raise GeocodeError(f"No place found at {coordinate.latitude}, {coordinate.longitude}")

        return self._to_result(results[0])

    def _to_result(self, result: dict) -> GeocodeResult:
        components = result.get("components", {})
        annotations = result.get("annotations", {})
        currency = annotations.get("currency") or {}

        return GeocodeResult(
            road=components.get("road", ""),
            district=components.get("city_district") or components.get("suburb", ""),
            locality=components.get("place") or components.get("village") or components.get("hamlet", ""),
            city=components.get("city") or components.get("town", ""),
            county=components.get("county", ""),
            country=components.get("country", ""),
            formatted=result.get("formatted", ""),
            currency=CurrencyInfo(
                name=currency.get("name", ""),
                code=currency.get("iso_code", ""),
                symbol=currency.get("symbol", ""),
            ),
            flag=annotations.get("flag", ""),
        )

    def get_provider_name(self) -> str:
        return "OpenCage"


class WeatherbitProvider(HTTPProvider, BaseWeatherProvider):
    """Weatherbit current conditions plus daily and hourly forecasts"""

    def __init__(self, api_key: str | None = None, base_url: str | None = None,
                 days: int | None = None, hours: int | None = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key or settings.WEATHERBIT_API_KEY
        self.base_url = (base_url or settings.WEATHERBIT_URL).rstrip("/")
        self.days = days or settings.FORECAST_DAYS
        self.hours = hours or settings.FORECAST_HOURS

    async def _fetch(self, path: str, coordinate: Coordinate, **extra) -> list[dict]:
        params = {"lat": coordinate.latitude, "lon": coordinate.longitude, "key": self.api_key, **extra}
        try:
            data = await self._get_json(f"{self.base_url}/{path}", params)
        except Exception as e:
            logs.log(logging.ERROR, f"Weatherbit API error ({path}): {str(e)}")
            raise WeatherError(f"Weather fetch '{path}' failed") from e

        rows = data.get("data") or []
        if not rows:
            raise WeatherError(f"Weather fetch '{path}' returned no data")
        return rows

    async def current_weather(self, coordinate: Coordinate) -> WeatherSnapshot:
        current = (await self._fetch("current", coordinate))[0]
        weather = current.get("weather") or {}

        try:
            return WeatherSnapshot(
                id=uuid.uuid4().hex,
                latitude=coordinate.latitude,
                longitude=coordinate.longitude,
                temperature=current["temp"],
                condition=weather.get("description", "Unknown"),
                feels_like=current.get("app_temp"),
                humidity=current.get("rh"),
                wind_speed=current.get("wind_spd"),
                wind_direction=current.get("wind_dir"),
                pressure=current.get("pres"),
                clouds=current.get("clouds"),
                uv_index=current.get("uv"),
                precipitation=current.get("precip"),
                visibility=current.get("vis"),
                air_quality=current.get("aqi"),
                sunrise=current.get("sunrise"),
                sunset=current.get("sunset"),
                part_of_day=current.get("pod"),
                icon=weather.get("icon"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(f"Unexpected current weather payload: {e}") from e

    async def daily_forecast(self, weather_id: str, coordinate: Coordinate) -> list[DailyForecast]:
        rows = await self._fetch("forecast/daily", coordinate, days=self.days)
        try:
            return [
                DailyForecast(
                    weather_id=weather_id,
                    date=date.fromisoformat(row["valid_date"]),
                    max_temp=row["max_temp"],
                    min_temp=row["min_temp"],
                    condition=(row.get("weather") or {}).get("description", "Unknown"),
                    rain_probability=row.get("pop", 0),
                    icon=(row.get("weather") or {}).get("icon"),
                )
                for row in rows
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(f"Unexpected daily forecast payload: {e}") from e

    async def hourly_forecast(self, weather_id: str, coordinate: Coordinate) -> list[HourlyForecast]:
        rows = await self._fetch("forecast/hourly", coordinate, hours=self.hours)
        try:
            return [
                HourlyForecast(
                    weather_id=weather_id,
                    timestamp=datetime.fromisoformat(row["timestamp_utc"]),
                    temperature=row["temp"],
                    condition=(row.get("weather") or {}).get("description", "Unknown"),
                    rain_probability=row.get("pop", 0),
                    icon=(row.get("weather") or {}).get("icon"),
                )
                for row in rows
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherError(f"Unexpected hourly forecast payload: {e}") from e

    def get_provider_name(self) -> str:
        return "Weatherbit"


class FrankfurterRateProvider(HTTPProvider, BaseRateProvider):
    """Frankfurter (ECB reference rates), no API key"""

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.CURRENCY_API_URL

    async def fetch_rate(self, base: str, compare: str) -> float:
        if base == compare:
            return 1.0

        try:
            data = await self._get_json(self.base_url, {"from": base, "to": compare})
        except Exception as e:
            logs.log(logging.ERROR, f"Frankfurter API error: {str(e)}")
            raise RateFetchError(f"Rate fetch for {base}/{compare} failed") from e

        rate = (data.get("rates") or {}).get(compare)
        if rate is None:
            raise RateFetchError(f"No {base}/{compare} rate in provider response")
        return float(rate)

    def get_provider_name(self) -> str:
        return "Frankfurter"


class StaticLocationProvider(BaseLocationProvider):
    """Coordinate handed over by the client (device GPS reading), if any"""

    def __init__(self, coordinate: Coordinate | None = None):
        self.coordinate = coordinate

    async def current_coordinate(self) -> Coordinate | None:
        return self.coordinate
