"""
Utilities Module
===============

Common utility functions and helpers used across all modules:
- Error types, categorization and structured error reports
- Geographic helpers (coordinate validation, distance, interpolation)
- Display formatting (distance, drive time, temperature, local time)
- Timing statistics per provider category

Classes:
    ErrorHandler: Standardized error handling and reporting
    PerformanceMonitor: Tracks execution time of provider calls

Functions:
    validate_coordinates(): Check if latitude/longitude are valid
    calculate_distance(): Calculate distance between coordinates
    lerp(): Linear interpolation
    measure_time(): Performance timing decorator
"""

# Version and module info
__version__ = "1.0.0"
__module_name__ = "utils"

from .error_handler import (
    ErrorHandler,
    ErrorCategory,
    ErrorSeverity,
    ErrorReport,
    LocationFailureReason,
    TripPlannerError,
    EmptyInputError,
    PlaceNotFoundError,
    LocationUnavailableError,
    ProviderError,
)
from .performance_monitor import (
    PerformanceMonitor,
    measure_time,
    get_performance_stats,
    get_performance_report,
)

from .data_utils import (
    validate_coordinates,
    calculate_distance,
    lerp,
    to_float,
    format_coordinate_label,
    format_distance_km,
    estimate_drive_time,
    celsius_to_fahrenheit,
    format_local_time,
)

# Define public API
__all__ = [
    # Error handling
    "ErrorHandler",
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorReport",
    "LocationFailureReason",
    "TripPlannerError",
    "EmptyInputError",
    "PlaceNotFoundError",
    "LocationUnavailableError",
    "ProviderError",

    # Performance
    "PerformanceMonitor",
    "measure_time",
    "get_performance_stats",
    "get_performance_report",

    # Data processing functions
    "validate_coordinates",
    "calculate_distance",
    "lerp",
    "to_float",
    "format_coordinate_label",
    "format_distance_km",
    "estimate_drive_time",
    "celsius_to_fahrenheit",
    "format_local_time",
]

def get_common_constants():
    """
    Return commonly used constants across the application
    """
    return {
        "EARTH_RADIUS_KM": 6371,
        "MAX_LATITUDE": 90.0,
        "MIN_LATITUDE": -90.0,
        "MAX_LONGITUDE": 180.0,
        "MIN_LONGITUDE": -180.0,
        "LAST_LOCATION_KEY": "last_location",
    }
