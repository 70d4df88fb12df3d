"""
Data Models for Trip Planner
============================

Centralized data models to avoid circular imports.
Contains coordinates, weather observations, route samples, city stops and
the trip plan aggregate returned by the planning pipeline.

Author: Route Weather Trip Planner Team
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Optional, Dict, List, Tuple, Union

from ..utils.data_utils import format_coordinate_label
from ..utils.error_handler import ErrorCategory


@dataclass(frozen=True)
class Coordinate:
    """
    A (latitude, longitude) pair in decimal degrees

    Attributes:
        latitude (float): Latitude coordinate
        longitude (float): Longitude coordinate
    """
    latitude: float
    longitude: float

    def as_query(self) -> str:
        """Serialize as "lat,lon", the form stored as last location"""
        return f"{self.latitude},{self.longitude}"

    @classmethod
    def from_query(cls, text: str) -> "Coordinate":
        """Parse a "lat,lon" string; raises ValueError for anything else"""
        parts = text.split(",")
        if len(parts) != 2:
            raise ValueError(f"Not a coordinate pair: {text!r}")
        return cls(float(parts[0].strip()), float(parts[1].strip()))

    def label(self) -> str:
        return format_coordinate_label(self.latitude, self.longitude)


@dataclass(frozen=True)
class PlaceResolution:
    """
    A resolved trip endpoint

    Attributes:
        display_text (str): Text shown to the user for this endpoint
        coordinate (Coordinate): Resolved position
    """
    display_text: str
    coordinate: Coordinate


@dataclass(frozen=True)
class RouteSample:
    """
    One of N+1 points interpolated between origin (index 0) and destination (index N)
    """
    coordinate: Coordinate
    index: int


class SeverityLevel(IntEnum):
    """Ordered weather hazard level used to color a route"""
    GOOD = 0
    MODERATE = 1
    SEVERE = 2

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self]

    @property
    def hex_color(self) -> str:
        return SEVERITY_HEX_COLORS[self]


SEVERITY_COLORS = {
    SeverityLevel.GOOD: "green",
    SeverityLevel.MODERATE: "blue",
    SeverityLevel.SEVERE: "red",
}

# Accent shades used by map renderers
SEVERITY_HEX_COLORS = {
    SeverityLevel.GOOD: "#69F0AE",
    SeverityLevel.MODERATE: "#448AFF",
    SeverityLevel.SEVERE: "#FF5252",
}


@dataclass(frozen=True)
class WeatherObservation:
    """
    Current weather at one location from OpenWeatherMap (metric units)

    Attributes:
        description (str): Condition description, e.g. "light rain"
        main (str): Condition group, e.g. "Rain"
        temperature (float): Temperature in Celsius
        feels_like (float): Feels like temperature in Celsius
        temp_min (float): Minimum temperature in Celsius
        temp_max (float): Maximum temperature in Celsius
        humidity (float): Relative humidity percentage
        pressure (float): Atmospheric pressure in hPa
        wind_speed (float): Wind speed in m/s
        wind_direction (float): Wind direction in degrees
        cloud_cover (float): Cloud cover percentage
        country (str): Country code
        location_name (str): Provider's name for the location
        observed_at (int): Observation time, unix seconds UTC
        timezone_offset (int): Location offset from UTC in seconds
        latitude (float): Latitude reported by the provider
        longitude (float): Longitude reported by the provider
        icon (str): Provider icon code
    """
    description: str
    main: Optional[str] = None
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    cloud_cover: Optional[float] = None
    country: Optional[str] = None
    location_name: Optional[str] = None
    observed_at: Optional[int] = None
    timezone_offset: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    icon: Optional[str] = None
    raw: Optional[Dict] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CityStop:
    """
    A route sample enriched with a place label and weather severity

    Attributes:
        sample (RouteSample): The sampled point
        label (str): Reverse-geocoded label or "lat, lon" fallback
        weather_description (str): Weather text, "unknown" if the lookup failed
        severity (SeverityLevel): Classified severity
        observation (WeatherObservation): Full observation when available
    """
    sample: RouteSample
    label: str
    weather_description: str
    severity: SeverityLevel
    observation: Optional[WeatherObservation] = field(default=None, compare=False)

    @property
    def coordinate(self) -> Coordinate:
        return self.sample.coordinate


class PipelineState(Enum):
    """Stages of one planning run"""
    IDLE = "idle"
    RESOLVING = "resolving"
    SAMPLING = "sampling"
    ENRICHING = "enriching"
    AGGREGATING = "aggregating"
    REQUESTING_ADVICE = "requesting_advice"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UseDeviceLocation:
    """Origin comes from the device's current position"""


@dataclass(frozen=True)
class FromText:
    """Origin is a free-text place name to forward-geocode"""
    text: str


OriginSource = Union[UseDeviceLocation, FromText]


@dataclass(frozen=True)
class TripPlan:
    """
    Result of one successful planning run

    Attributes:
        origin (PlaceResolution): Resolved origin
        destination (PlaceResolution): Resolved destination
        stops (Tuple[CityStop, ...]): Enriched samples in route order
        worst_severity (SeverityLevel): Highest severity across stops
        ai_advice (str): Advice text from the AI assistant
        selected_date (date): Travel date chosen by the user, None if not chosen
        advice_date (date): Date actually sent with the advice request
    """
    origin: PlaceResolution
    destination: PlaceResolution
    stops: Tuple[CityStop, ...]
    worst_severity: SeverityLevel
    ai_advice: Optional[str] = None
    selected_date: Optional[date] = None
    advice_date: Optional[date] = None

    succeeded = True

    @property
    def route_points(self) -> List[Coordinate]:
        return [stop.coordinate for stop in self.stops]

    @property
    def route_color(self) -> str:
        return self.worst_severity.color


@dataclass(frozen=True)
class PlanFailure:
    """
    Result of a planning run that hit a fatal error

    Attributes:
        error (str): Human-readable message for the user
        category (ErrorCategory): Error category
        failed_stage (PipelineState): Stage that was running when it failed
    """
    error: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
    failed_stage: PipelineState = PipelineState.IDLE

    succeeded = False


PlanResult = Union[TripPlan, PlanFailure]


# Export classes for easy import
__all__ = [
    'Coordinate', 'PlaceResolution', 'RouteSample', 'SeverityLevel',
    'SEVERITY_COLORS', 'SEVERITY_HEX_COLORS', 'WeatherObservation', 'CityStop',
    'PipelineState', 'UseDeviceLocation', 'FromText', 'OriginSource',
    'TripPlan', 'PlanFailure', 'PlanResult'
]
