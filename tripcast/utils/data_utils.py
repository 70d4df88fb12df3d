"""
Data Validation and Processing Utilities
=======================================

Geographic and formatting helpers used across the application.

Key Features:
- Geographic coordinate validation and calculations
- Haversine distance formula for coordinate pairs
- Linear interpolation for straight-line route sampling
- Lenient numeric conversion for provider JSON
- Display formatting (distance, drive time, temperature units, local time)

Functions:
    validate_coordinates: Check if latitude/longitude are valid
    calculate_distance: Calculate distance between two coordinate pairs
    lerp: Linear interpolation between two values
    to_float: Lenient float conversion with a default
    format_coordinate_label: "lat, lon" label with three decimals
    format_distance_km: Human-readable straight-line distance
    estimate_drive_time: Human-readable drive time at an average speed
    celsius_to_fahrenheit: Display-only temperature conversion
    format_local_time: Provider timestamp in the location's local time

Author: Route Weather Trip Planner Team
"""

import math
import logging
from typing import Any, Optional
from datetime import datetime, timedelta, timezone


# Module logger
logger = logging.getLogger(__name__)

# Constants for geographic calculations
EARTH_RADIUS_KM = 6371.0  # Earth's radius in kilometers
MAX_LATITUDE = 90.0
MIN_LATITUDE = -90.0
MAX_LONGITUDE = 180.0
MIN_LONGITUDE = -180.0

LOCAL_TIME_FORMAT = "%A, %b %d  %I:%M %p"


def validate_coordinates(latitude: float, longitude: float) -> bool:
    """
    Validate if latitude and longitude coordinates are within valid ranges

    Args:
        latitude (float): Latitude coordinate
        longitude (float): Longitude coordinate

    Returns:
        bool: True if coordinates are valid, False otherwise

    Examples:
        >>> validate_coordinates(28.6139, 77.2090)  # New Delhi
        True
        >>> validate_coordinates(91.0, 181.0)  # Invalid
        False
    """
    try:
        lat = float(latitude)
        lon = float(longitude)

        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            return False

        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            return False

        return True

    except (ValueError, TypeError):
        return False


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> Optional[float]:
    """
    Calculate the great circle distance between two points on Earth using Haversine formula

    Args:
        lat1 (float): Latitude of first point
        lon1 (float): Longitude of first point
        lat2 (float): Latitude of second point
        lon2 (float): Longitude of second point

    Returns:
        float: Distance in kilometers, None if coordinates are invalid
    """
    try:
        if not (validate_coordinates(lat1, lon1) and validate_coordinates(lat2, lon2)):
            return None

        lat1_rad = math.radians(lat1)
        lon1_rad = math.radians(lon1)
        lat2_rad = math.radians(lat2)
        lon2_rad = math.radians(lon2)

        # Haversine formula
        dlat = lat2_rad - lat1_rad
        dlon = lon2_rad - lon1_rad

        a = (math.sin(dlat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
        c = 2 * math.asin(math.sqrt(a))

        distance = EARTH_RADIUS_KM * c

        return round(distance, 2)

    except (ValueError, TypeError, OverflowError):
        logger.warning(f"Error calculating distance between ({lat1}, {lon1}) and ({lat2}, {lon2})")
        return None


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation: a at t=0, b at t=1"""
    return a + (b - a) * t


def to_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Convert a provider value to float, returning default when it is not numeric

    Examples:
        >>> to_float(12)
        12.0
        >>> to_float("7.5")
        7.5
        >>> to_float("n/a", 0.0)
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return default


def format_coordinate_label(latitude: float, longitude: float) -> str:
    """Fallback place label: both coordinates with three decimals"""
    return f"{latitude:.3f}, {longitude:.3f}"


def format_distance_km(origin, destination) -> str:
    """
    Straight-line distance between two coordinates as "123.4 km"

    Args:
        origin (Coordinate): Start point
        destination (Coordinate): End point
    """
    distance = calculate_distance(origin.latitude, origin.longitude,
                                  destination.latitude, destination.longitude)
    if distance is None:
        return "unknown"
    return f"{distance:.1f} km"


def estimate_drive_time(origin, destination, avg_kmh: float = 60.0) -> str:
    """
    Rough drive time over the straight-line distance, e.g. "2h 5m" or "45m"

    Args:
        origin (Coordinate): Start point
        destination (Coordinate): End point
        avg_kmh (float): Assumed average speed
    """
    distance = calculate_distance(origin.latitude, origin.longitude,
                                  destination.latitude, destination.longitude)
    if distance is None or avg_kmh <= 0:
        return "unknown"

    total_minutes = round(distance / avg_kmh * 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def celsius_to_fahrenheit(celsius: Optional[float]) -> Optional[float]:
    """Convert Celsius to Fahrenheit for display only"""
    if celsius is None:
        return None
    return celsius * 9 / 5 + 32


def format_local_time(timestamp: Optional[int], timezone_offset: Optional[int],
                      format_string: str = LOCAL_TIME_FORMAT) -> str:
    """
    Format a UTC unix timestamp in the location's local time

    Falls back to the current machine time when the provider omitted
    either value.

    Args:
        timestamp (int): Unix seconds (provider "dt")
        timezone_offset (int): Offset from UTC in seconds (provider "timezone")
        format_string (str): strftime format
    """
    try:
        utc = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
        local = utc + timedelta(seconds=int(timezone_offset))
        return local.strftime(format_string)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        logger.debug(f"Local time formatting fell back to machine time: {e}")
        return datetime.now().strftime(format_string)
