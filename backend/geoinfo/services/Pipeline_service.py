import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from geoinfo.core.config import settings
from geoinfo.core.errors import GeoInfoError, DuplicateRecordError, NotFoundError, ValidationError
from geoinfo.core.logger import logs
from geoinfo.core.providers import (
    BaseGeocoder,
    BaseLocationProvider,
    BaseRateProvider,
    BaseWeatherProvider,
    StaticLocationProvider,
)
from geoinfo.models.base_model import PipelineStage, PipelineState, SessionContext, StageStep
from geoinfo.models.places_model import PlaceRecord
from geoinfo.services.Coordinate_service import CoordinateService
from geoinfo.services.Currency_service import CurrencyRateService
from geoinfo.services.Places_service import PlacesService
from geoinfo.services.session_state import SessionStateManager

# Advisory text shown while a stage runs
PROGRESS_MESSAGES = {
    PipelineStage.RESOLVING_COORDINATE: "Loading last/current location!",
    PipelineStage.RESOLVING_PLACE: "App Coordinates set. Loading Geo Location info!",
    PipelineStage.RESOLVING_CURRENCY: "Currency Base set. Loading currency rates!",
    PipelineStage.RESOLVING_WEATHER: "Currency Rates set. Starting loading weather info!",
    PipelineStage.RESOLVING_DAILY_HOURLY: "Loading Daily and Hourly Weather!",
    PipelineStage.COMPLETE: "All info loaded!",
}

ProgressCallback = Callable[[PipelineStage, str], None]


class LoadPipeline:
    """
    Drives one app load through its stages, strictly in order:
    coordinate -> place -> currency -> weather -> daily/hourly.
    The first failing stage ends the run as Failed(stage, cause).
    Starting a new run supersedes any run still in flight; a superseded run
    stops at its next stage boundary and never publishes its results.
    """
    def __init__(
        self,
        coordinates: CoordinateService,
        places: PlacesService,
        rates: CurrencyRateService,
        geocoder: BaseGeocoder,
        weather: BaseWeatherProvider,
        rate_provider: BaseRateProvider,
        session_state: SessionStateManager,
        location: Optional[BaseLocationProvider] = None,
        session: Optional[SessionContext] = None,
        reference_currency: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.coordinates = coordinates
        self.places = places
        self.rates = rates
        self.geocoder = geocoder
        self.weather = weather
        self.rate_provider = rate_provider
        self.session_state = session_state
        self.location = location or StaticLocationProvider()
        self.session = session if session is not None else SessionContext()
        self.reference_currency = reference_currency or settings.REFERENCE_CURRENCY
        self.on_progress = on_progress
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.state = PipelineState()
        self.error: Optional[Exception] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def reset(self) -> PipelineState:
        """Back to Idle after a terminal state (the UI's retry)"""
        if self.state.is_terminal:
            self.state = PipelineState(generation=self._generation)
            self.error = None
        return self.state

    async def run(self, location: Optional[BaseLocationProvider] = None) -> PipelineState:
        self._generation += 1
        generation = self._generation
        state = PipelineState(generation=generation)
        self.state = state
        self.error = None

        logs.log(logging.INFO, f"Starting load run {generation}")

        working = SessionContext()
        stages = [
            (PipelineStage.RESOLVING_COORDINATE, lambda: self._resolve_coordinate(working, location or self.location)),
            (PipelineStage.RESOLVING_PLACE, lambda: self._resolve_place(working)),
            (PipelineStage.RESOLVING_CURRENCY, lambda: self._resolve_currency(working)),
            (PipelineStage.RESOLVING_WEATHER, lambda: self._resolve_weather(working)),
            (PipelineStage.RESOLVING_DAILY_HOURLY, lambda: self._resolve_daily_hourly(working)),
        ]

        for stage, handler in stages:
            if generation != self._generation:
                return self._superseded(state, stage)

            self._enter(state, stage)
            try:
                details = await handler()
            except Exception as e:
                return self._fail(state, stage, e, generation)

            state.steps.append(StageStep(stage=stage, status="success", details=details))

        if generation != self._generation:
            return self._superseded(state, PipelineStage.COMPLETE)

        # Publish field by field so holders of the session object see the update
        for field in SessionContext.model_fields:
            setattr(self.session, field, getattr(working, field))

        self._enter(state, PipelineStage.COMPLETE)
        logs.log(logging.INFO, f"Load run {generation} complete")
        return state

    # --- State transitions ---
    def _enter(self, state: PipelineState, stage: PipelineStage) -> None:
        state.stage = stage
        state.message = PROGRESS_MESSAGES.get(stage, "")
        if self.on_progress and state is self.state:
            self.on_progress(stage, state.message)

    def _fail(self, state: PipelineState, stage: PipelineStage, error: Exception, generation: int) -> PipelineState:
        state.stage = PipelineStage.FAILED
        state.failed_stage = stage
        state.cause = type(error).__name__
        state.cause_message = str(error)
        state.message = f"Loading failed while {stage.value}: {str(error)}"
        state.steps.append(StageStep(stage=stage, status="failed", details=str(error)))

        # Unexpected errors keep their traceback in the log
        logs.log(
            logging.ERROR,
            f"Load run {generation} failed at {stage.value}: {state.cause}: {str(error)}",
            exc_info=not isinstance(error, GeoInfoError)
        )

        if generation == self._generation:
            self.error = error
            if self.on_progress:
                self.on_progress(PipelineStage.FAILED, state.message)
        return state

    def _superseded(self, state: PipelineState, stage: PipelineStage) -> PipelineState:
        logs.log(logging.INFO, f"Load run {state.generation} superseded before {stage.value}")
        state.stage = PipelineStage.FAILED
        state.failed_stage = stage
        state.cause = "Superseded"
        state.cause_message = f"Run {state.generation} was replaced by run {self._generation}"
        return state

    # --- Stages ---
    async def _resolve_coordinate(self, working: SessionContext, location: BaseLocationProvider) -> str:
        coordinate = await location.current_coordinate()
        source = "device"

        if coordinate is None or not coordinate.has_position:
            coordinate = await self.session_state.get_last_coordinate()
            source = "last known"

        if coordinate is None:
            raise ValidationError("No device or last known coordinate available")

        if not coordinate.has_identity:
            existing = await self.coordinates.find_by_position(coordinate.latitude, coordinate.longitude)
            if existing is not None:
                coordinate = existing
            else:
                outcome = await self.coordinates.upsert_coordinate(coordinate.latitude, coordinate.longitude)
                if outcome.rejected:
                    raise ValidationError(outcome.reason or "Coordinate was rejected")
                coordinate = outcome.value

        await self.session_state.remember_coordinate(coordinate)
        working.coordinate = coordinate
        return f"Coordinate {coordinate.id} from {source} location"

    async def _resolve_place(self, working: SessionContext) -> str:
        coordinate = working.coordinate

        try:
            working.place = await self.places.get_by_coordinate_id(coordinate.id)
            working.currency_symbol = working.place.currency_symbol
            return f"Place record {working.place.id} loaded from cache"
        except NotFoundError as e:
            if e.ambiguous:
                raise

        result = await self.geocoder.reverse_geocode(coordinate)

        try:
            outcome = await self.places.create(PlaceRecord.from_geocode(coordinate.id, result))
            working.place = outcome.value
        except DuplicateRecordError:
            # Another run stored this coordinate's place first; use theirs
            logs.log(logging.INFO, f"Place record for coordinate {coordinate.id} stored concurrently, re-reading")
            working.place = await self.places.get_by_coordinate_id(coordinate.id)

        working.currency_symbol = working.place.currency_symbol
        return f"Place record {working.place.id} geocoded by {self.geocoder.get_provider_name()}"

    async def _resolve_currency(self, working: SessionContext) -> str:
        base = working.place.currency_code
        compare = self.reference_currency

        lookup = await self.rates.get_rate(base, compare, self.clock())
        if lookup.from_cache:
            working.currency_rate = lookup.snapshot
            working.rate_from_cache = True
            return f"Rate {base}/{compare} from cache"

        value = await self.rate_provider.fetch_rate(base.strip().upper(), compare.strip().upper())
        working.currency_rate = await self.rates.store(base, compare, value, self.clock())
        working.rate_from_cache = False
        return f"Rate {base}/{compare} fetched from {self.rate_provider.get_provider_name()}"

    async def _resolve_weather(self, working: SessionContext) -> str:
        working.weather = await self.weather.current_weather(working.coordinate)
        return f"Current weather {working.weather.id}"

    async def _resolve_daily_hourly(self, working: SessionContext) -> str:
        weather_id = working.weather.id
        working.daily = await self.weather.daily_forecast(weather_id, working.coordinate)
        working.hourly = await self.weather.hourly_forecast(weather_id, working.coordinate)
        return f"{len(working.daily)} daily and {len(working.hourly)} hourly forecasts"
