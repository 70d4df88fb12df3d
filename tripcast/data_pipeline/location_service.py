"""
Device Location Service
======================

Reads the device's current position through a LocationProvider capability.

Before asking for a position the service checks, in order, that location
services are enabled and that permission is granted (requesting it once if
it was denied). Each failure raises LocationUnavailableError with its own
reason and message.

Author: Route Weather Trip Planner Team
"""

import logging
from enum import Enum
from typing import Optional, Protocol

from .data_models import Coordinate

# Import configuration
from config import config
from ..utils import LocationFailureReason, LocationUnavailableError, measure_time


class LocationPermission(Enum):
    """Permission state reported by the platform"""
    GRANTED = "granted"
    DENIED = "denied"
    DENIED_FOREVER = "denied_forever"


class LocationProvider(Protocol):
    """A platform capable of reporting the device position."""

    def is_service_enabled(self) -> bool:
        """Whether the platform location service is switched on."""
        ...

    def check_permission(self) -> LocationPermission:
        """Current permission state, without prompting."""
        ...

    def request_permission(self) -> LocationPermission:
        """Prompt for permission and return the resulting state."""
        ...

    def get_current_position(self) -> Coordinate:
        """Current device position."""
        ...


class ConfiguredLocationProvider:
    """
    Location provider backed by configuration

    Desktop and headless installs have no location hardware, so the device
    position and its permission state come from settings
    (DEVICE_LOCATION_ENABLED, DEVICE_LATITUDE, DEVICE_LONGITUDE,
    DEVICE_LOCATION_PERMISSION).
    """

    def __init__(self, enabled: Optional[bool] = None, latitude: Optional[float] = None,
                 longitude: Optional[float] = None, permission: Optional[str] = None):
        self.enabled = config.DEVICE_LOCATION_ENABLED if enabled is None else enabled
        self.latitude = config.DEVICE_LATITUDE if latitude is None else latitude
        self.longitude = config.DEVICE_LONGITUDE if longitude is None else longitude
        self.permission = LocationPermission(
            (permission or config.DEVICE_LOCATION_PERMISSION).lower()
        )

    def is_service_enabled(self) -> bool:
        return bool(self.enabled) and self.latitude is not None and self.longitude is not None

    def check_permission(self) -> LocationPermission:
        return self.permission

    def request_permission(self) -> LocationPermission:
        # No interactive prompt; the configured answer stands
        return self.permission

    def get_current_position(self) -> Coordinate:
        return Coordinate(float(self.latitude), float(self.longitude))


class LocationService:
    """Permission-aware access to the device position"""

    def __init__(self, provider: Optional[LocationProvider] = None):
        self.logger = logging.getLogger(__name__)
        self.provider = provider or ConfiguredLocationProvider()

    @measure_time(category="location")
    def get_current_location(self) -> Coordinate:
        """
        Check preconditions and return the current device position

        Returns:
            Coordinate: Device position

        Raises:
            LocationUnavailableError: Service disabled, permission denied,
                or permission permanently denied
        """
        if not self.provider.is_service_enabled():
            self.logger.warning("Location services are disabled")
            raise LocationUnavailableError(LocationFailureReason.SERVICE_DISABLED)

        permission = self.provider.check_permission()
        if permission == LocationPermission.DENIED:
            self.logger.info("Location permission denied, requesting it")
            permission = self.provider.request_permission()
            if permission == LocationPermission.DENIED:
                raise LocationUnavailableError(LocationFailureReason.PERMISSION_DENIED)

        if permission == LocationPermission.DENIED_FOREVER:
            self.logger.warning("Location permission permanently denied")
            raise LocationUnavailableError(LocationFailureReason.PERMISSION_DENIED_FOREVER)

        position = self.provider.get_current_position()
        self.logger.info(f"Device location: {position.as_query()}")
        return position
