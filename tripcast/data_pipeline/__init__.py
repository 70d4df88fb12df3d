"""
Data Pipeline Module
===================

Adapters for every external collaborator of the trip planner, plus the
shared data models.

Author: Route Weather Trip Planner Team
"""

# Version info
__version__ = "1.0.0"
__module_name__ = "data_pipeline"

# Import main data loading classes
from .geocoding_loader import GeocodingLoader, build_place_label
from .weather_loader import WeatherDataLoader
from .location_service import (
    LocationService,
    LocationProvider,
    LocationPermission,
    ConfiguredLocationProvider,
)
from .preferences_store import (
    KeyValueStore,
    JsonFileStore,
    InMemoryStore,
    LAST_LOCATION_KEY,
)

# Import data models
from .data_models import (
    Coordinate,
    PlaceResolution,
    RouteSample,
    SeverityLevel,
    WeatherObservation,
    CityStop,
    PipelineState,
    UseDeviceLocation,
    FromText,
    OriginSource,
    TripPlan,
    PlanFailure,
    PlanResult,
)

# Define public API
__all__ = [
    # Main classes
    "GeocodingLoader",
    "WeatherDataLoader",
    "LocationService",
    "LocationProvider",
    "LocationPermission",
    "ConfiguredLocationProvider",
    "KeyValueStore",
    "JsonFileStore",
    "InMemoryStore",
    "LAST_LOCATION_KEY",
    "build_place_label",

    # Data models
    "Coordinate",
    "PlaceResolution",
    "RouteSample",
    "SeverityLevel",
    "WeatherObservation",
    "CityStop",
    "PipelineState",
    "UseDeviceLocation",
    "FromText",
    "OriginSource",
    "TripPlan",
    "PlanFailure",
    "PlanResult",
]

def get_supported_data_sources():
    """Return list of supported data sources"""
    return {
        "geocoding": "OpenStreetMap Nominatim forward and reverse geocoding",
        "weather": "OpenWeatherMap current weather",
        "location": "Device position via a LocationProvider",
        "preferences": "Last location kept in a local JSON file"
    }
