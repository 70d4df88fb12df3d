"""
Home Weather Service
===================

Current weather for the home screen location.

On start-up the last successfully fetched location is reused; without one
the device position is used, and if that is unavailable the default city.
Each successful fetch remembers its query as the last location.

Author: Route Weather Trip Planner Team
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..data_pipeline.data_models import WeatherObservation
from ..data_pipeline.weather_loader import WeatherDataLoader
from ..data_pipeline.location_service import LocationService
from ..data_pipeline.preferences_store import KeyValueStore, JsonFileStore, LAST_LOCATION_KEY
from ..utils import (
    ErrorHandler,
    TripPlannerError,
    celsius_to_fahrenheit,
    format_local_time,
)
from .severity_classifier import classify

# Import configuration
from config import config


@dataclass(frozen=True)
class HomeWeatherState:
    """
    What the home screen shows

    Attributes:
        query (str): Place name or "lat,lon" the weather belongs to
        observation (WeatherObservation): Latest successful observation
        error (str): Message from the latest failed fetch
        fallback_reason (str): Why the default city was used on start-up
    """
    query: Optional[str] = None
    observation: Optional[WeatherObservation] = None
    error: Optional[str] = None
    fallback_reason: Optional[str] = None

    def temperature_in(self, unit: str = "C") -> Optional[float]:
        """Temperature in "C" or "F"; stored data stays Celsius"""
        if self.observation is None or self.observation.temperature is None:
            return None
        if unit.upper() == "F":
            return celsius_to_fahrenheit(self.observation.temperature)
        return self.observation.temperature

    def temperature_display(self, unit: str = "C") -> str:
        value = self.temperature_in(unit)
        if value is None:
            return "--"
        return f"{round(value)}°{unit.upper()}"

    def local_time_text(self) -> str:
        """Observation time in the location's own time zone"""
        if self.observation is None:
            return format_local_time(None, None)
        return format_local_time(self.observation.observed_at, self.observation.timezone_offset)

    @property
    def severity(self):
        return classify(self.observation.description if self.observation else None)


class HomeWeatherService:
    """Loads and refreshes the home screen weather"""

    def __init__(self, weather_loader: Optional[WeatherDataLoader] = None,
                 store: Optional[KeyValueStore] = None,
                 location_service: Optional[LocationService] = None,
                 default_city: Optional[str] = None,
                 timeout: Optional[int] = None):
        """Initialize Home Weather Service"""
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler()

        self.weather_loader = weather_loader or WeatherDataLoader()
        self.store = store or JsonFileStore()
        self.location_service = location_service or LocationService()
        self.default_city = default_city or config.DEFAULT_CITY
        self.timeout = timeout or config.HOME_WEATHER_TIMEOUT

        self.current = HomeWeatherState()

    def initial_load(self) -> HomeWeatherState:
        """
        First load: saved location, else device location, else default city

        Returns:
            HomeWeatherState: State to display
        """
        try:
            saved = self.store.get_string(LAST_LOCATION_KEY)
            if saved:
                self.logger.info(f"Loading weather for saved location {saved}")
                return self.fetch_weather(saved)

            coordinate = self.location_service.get_current_location()
            query = coordinate.as_query()
            self.store.set_string(LAST_LOCATION_KEY, query)
            return self.fetch_weather(query)

        except TripPlannerError as e:
            self.logger.warning(f"Falling back to {self.default_city}: {e}")
            state = self.fetch_weather(self.default_city)
            self.current = replace(state, fallback_reason=str(e))
            return self.current

    def fetch_weather(self, query: str) -> HomeWeatherState:
        """
        Fetch weather for a place name or "lat,lon" and remember it on success

        A failed fetch keeps the previous observation and sets the error.
        """
        try:
            observation = self.weather_loader.fetch_current_by_query(query, timeout=self.timeout)

        except TripPlannerError as e:
            report = self.error_handler.handle_planner_error(
                e, "fetch_weather", user_input={"query": query}
            )
            self.current = replace(self.current, error=report.message)
            return self.current

        self.current = HomeWeatherState(query=query, observation=observation)
        self.store.set_string(LAST_LOCATION_KEY, query)
        return self.current
