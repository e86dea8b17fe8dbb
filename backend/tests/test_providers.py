import asyncio

import httpx
import pytest

from geoinfo.core.errors import GeocodeError, RateFetchError, WeatherError
from geoinfo.core.providers import FrankfurterRateProvider, OpenCageGeocoder, WeatherbitProvider
from geoinfo.models.places_model import Coordinate

PARIS = Coordinate(id=1, latitude=48.8606, longitude=2.3376)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_opencage_payload_is_flattened() -> None:
    payload = {
        "results": [{
            "formatted": "Rue de Rivoli, 75001 Paris, France",
            "components": {
                "road": "Rue de Rivoli",
                "suburb": "Quartier Saint-Germain-l'Auxerrois",
                "city": "Paris",
                "county": "Paris",
                "country": "France",
            },
            "annotations": {
                "flag": "🇫🇷",
                "currency": {"name": "Euro", "iso_code": "EUR", "symbol": "€"},
            },
        }]
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "48.8606,2.3376"
        assert request.url.params["key"] == "test-key"
        return httpx.Response(200, json=payload)

    geocoder = OpenCageGeocoder(api_key="test-key", base_url="https://geo.test/json", client=_client(handler))
    result = asyncio.run(geocoder.reverse_geocode(PARIS))

    assert result.road == "Rue de Rivoli"
    assert result.district == "Quartier Saint-Germain-l'Auxerrois"
    assert result.city == "Paris"
    assert result.currency.code == "EUR"
    assert result.currency.symbol == "€"
    assert result.flag == "🇫🇷"


def test_opencage_without_results_raises() -> None:
    geocoder = OpenCageGeocoder(
        api_key="k", base_url="https://geo.test/json",
        client=_client(lambda request: httpx.Response(200, json={"results": []})),
    )
    with pytest.raises(GeocodeError):
        asyncio.run(geocoder.reverse_geocode(PARIS))


def test_opencage_http_error_raises() -> None:
    geocoder = OpenCageGeocoder(
        api_key="k", base_url="https://geo.test/json",
        client=_client(lambda request: httpx.Response(503)),
    )
    with pytest.raises(GeocodeError):
        asyncio.run(geocoder.reverse_geocode(PARIS))


def _weatherbit_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/current"):
        return httpx.Response(200, json={"data": [{
            "temp": 18.5, "app_temp": 17.9, "rh": 62, "wind_spd": 3.1, "wind_dir": 240,
            "pres": 1014.0, "clouds": 25, "uv": 3.2, "precip": 0, "vis": 10, "aqi": 31,
            "sunrise": "05:51", "sunset": "16:47", "pod": "d",
            "weather": {"icon": "c02d", "description": "Few clouds", "code": 801},
        }]})
    if path.endswith("/forecast/daily"):
        assert request.url.params["days"] == "3"
        return httpx.Response(200, json={"data": [
            {"valid_date": "2026-10-19", "max_temp": 20.0, "min_temp": 11.0, "pop": 10,
             "weather": {"icon": "c02d", "description": "Few clouds"}},
        ]})
    if path.endswith("/forecast/hourly"):
        return httpx.Response(200, json={"data": [
            {"timestamp_utc": "2026-10-19T12:00:00", "temp": 18.0, "pop": 5,
             "weather": {"icon": "c02d", "description": "Few clouds"}},
        ]})
    return httpx.Response(404)


def test_weatherbit_current_and_forecasts() -> None:
    provider = WeatherbitProvider(
        api_key="k", base_url="https://weather.test/v2.0", days=3, hours=1,
        client=_client(_weatherbit_handler),
    )

    current = asyncio.run(provider.current_weather(PARIS))
    daily = asyncio.run(provider.daily_forecast(current.id, PARIS))
    hourly = asyncio.run(provider.hourly_forecast(current.id, PARIS))

    assert current.temperature == 18.5
    assert current.condition == "Few clouds"
    assert current.icon_url == "https://www.weatherbit.io/static/img/icons/c02d.png"
    assert current.model_dump()["icon_url"] == current.icon_url
    assert daily[0].weather_id == current.id
    assert daily[0].rain_probability == 10
    assert hourly[0].timestamp.hour == 12


def test_weatherbit_empty_data_raises() -> None:
    provider = WeatherbitProvider(
        api_key="k", base_url="https://weather.test/v2.0",
        client=_client(lambda request: httpx.Response(200, json={"data": []})),
    )
    with pytest.raises(WeatherError):
        asyncio.run(provider.current_weather(PARIS))


def test_frankfurter_reads_the_compare_rate() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["from"] == "EUR"
        assert request.url.params["to"] == "USD"
        return httpx.Response(200, json={"amount": 1.0, "base": "EUR", "rates": {"USD": 1.0842}})

    provider = FrankfurterRateProvider(base_url="https://fx.test/latest", client=_client(handler))
    assert asyncio.run(provider.fetch_rate("EUR", "USD")) == 1.0842


def test_frankfurter_same_currency_skips_the_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    provider = FrankfurterRateProvider(base_url="https://fx.test/latest", client=_client(handler))
    assert asyncio.run(provider.fetch_rate("USD", "USD")) == 1.0


def test_frankfurter_missing_rate_raises() -> None:
    provider = FrankfurterRateProvider(
        base_url="https://fx.test/latest",
        client=_client(lambda request: httpx.Response(200, json={"rates": {}})),
    )
    with pytest.raises(RateFetchError):
        asyncio.run(provider.fetch_rate("EUR", "XYZ"))


def test_weatherbit_null_forecast_date_raises_weather_error() -> None:
    provider = WeatherbitProvider(
        api_key="k", base_url="https://weather.test/v2.0",
        client=_client(lambda request: httpx.Response(200, json={"data": [
            {"valid_date": None, "max_temp": 20.0, "min_temp": 11.0},
        ]})),
    )
    with pytest.raises(WeatherError):
        asyncio.run(provider.daily_forecast("weather-1", PARIS))


def test_weatherbit_null_hourly_timestamp_raises_weather_error() -> None:
    provider = WeatherbitProvider(
        api_key="k", base_url="https://weather.test/v2.0",
        client=_client(lambda request: httpx.Response(200, json={"data": [
            {"timestamp_utc": None, "temp": 18.0},
        ]})),
    )
    with pytest.raises(WeatherError):
        asyncio.run(provider.hourly_forecast("weather-1", PARIS))
