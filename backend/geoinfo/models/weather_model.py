from pydantic import BaseModel, computed_field
from typing import Optional
from datetime import datetime, date

WEATHER_ICON_URL = "https://www.weatherbit.io/static/img/icons/{icon}.png"

class WeatherSnapshot(BaseModel):
    id: str  # weather-session identity, keys the daily/hourly fetches
    latitude: float
    longitude: float
    temperature: float
    condition: str
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[int] = None
    pressure: Optional[float] = None
    clouds: Optional[int] = None
    uv_index: Optional[float] = None
    precipitation: Optional[float] = None
    visibility: Optional[float] = None
    air_quality: Optional[int] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    part_of_day: Optional[str] = None  # "d" or "n"
    icon: Optional[str] = None

    @computed_field
    @property
    def icon_url(self) -> Optional[str]:
        if not self.icon:
            return None
        return WEATHER_ICON_URL.format(icon=self.icon)

class DailyForecast(BaseModel):
    weather_id: str
    date: date
    max_temp: float
    min_temp: float
    condition: str
    rain_probability: int  # Percentage
    icon: Optional[str] = None

class HourlyForecast(BaseModel):
    weather_id: str
    timestamp: datetime
    temperature: float
    condition: str
    rain_probability: int  # Percentage
    icon: Optional[str] = None
