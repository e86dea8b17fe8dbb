from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar
from enum import Enum

from geoinfo.models.places_model import Coordinate, PlaceRecord
from geoinfo.models.currency_model import CurrencyRateSnapshot
from geoinfo.models.weather_model import WeatherSnapshot, DailyForecast, HourlyForecast

T = TypeVar("T")

# --- Enums ---
class WriteStatus(str, Enum):
    PERSISTED = "persisted"
    NOOP = "noop"          # input already carried an identity
    REJECTED = "rejected"  # input failed validation, nothing written

class PipelineStage(str, Enum):
    IDLE = "Idle"
    RESOLVING_COORDINATE = "ResolvingCoordinate"
    RESOLVING_PLACE = "ResolvingPlace"
    RESOLVING_CURRENCY = "ResolvingCurrency"
    RESOLVING_WEATHER = "ResolvingWeather"
    RESOLVING_DAILY_HOURLY = "ResolvingDailyHourly"
    COMPLETE = "Complete"
    FAILED = "Failed"

# --- Store results ---
class WriteOutcome(BaseModel, Generic[T]):
    """
    Result of a store write. `value` is the identity-assigned object when
    persisted, and the caller's input unchanged otherwise.
    """
    status: WriteStatus
    value: T
    reason: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.status == WriteStatus.PERSISTED

    @property
    def rejected(self) -> bool:
        return self.status == WriteStatus.REJECTED

# --- Pipeline ---
class StageStep(BaseModel):
    """Tracks the stages a load run went through, for debugging/UI"""
    stage: PipelineStage
    status: str  # "success", "failed"
    details: str

class PipelineState(BaseModel):
    stage: PipelineStage = PipelineStage.IDLE
    failed_stage: Optional[PipelineStage] = None
    cause: Optional[str] = None  # error kind, e.g. "GeocodeError"
    cause_message: Optional[str] = None
    message: str = ""  # advisory progress text
    generation: int = 0
    steps: List[StageStep] = []

    @property
    def is_terminal(self) -> bool:
        return self.stage in (PipelineStage.COMPLETE, PipelineStage.FAILED)

class SessionContext(BaseModel):
    """Everything one load run resolved; shared with the UI explicitly"""
    coordinate: Optional[Coordinate] = None
    place: Optional[PlaceRecord] = None
    currency_symbol: str = ""
    currency_rate: Optional[CurrencyRateSnapshot] = None
    rate_from_cache: bool = False
    weather: Optional[WeatherSnapshot] = None
    daily: List[DailyForecast] = []
    hourly: List[HourlyForecast] = []

# --- API Request/Response Models ---
class LoadRequest(BaseModel):
    latitude: Optional[float] = Field(None, description="Device-reported latitude")
    longitude: Optional[float] = Field(None, description="Device-reported longitude")

class LoadResponse(BaseModel):
    state: PipelineState
    session: SessionContext
