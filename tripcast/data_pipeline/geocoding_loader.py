"""
Nominatim Geocoding Loader
=========================

Forward and reverse geocoding against the OpenStreetMap Nominatim API.

Forward lookups resolve a free-text place name to a coordinate and fail
loudly when nothing matches. Reverse lookups turn a coordinate into a short
"City, District, Country" label and never fail: the label is cosmetic, so
any problem falls back to the coordinate itself.

Author: Route Weather Trip Planner Team
"""

import logging
from typing import Dict, Optional

import requests

from .data_models import Coordinate

# Import configuration and utilities (only what we need)
from config import config
from ..utils import ErrorHandler, PlaceNotFoundError, measure_time, to_float


LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality")
SUB_ADMINISTRATIVE_KEYS = ("county", "state_district")


def build_place_label(locality: Optional[str], sub_administrative_area: Optional[str],
                      country: Optional[str]) -> Optional[str]:
    """
    Join the non-empty label parts with ", "

    The sub-administrative area is skipped when it repeats the locality.
    Returns None when every part is empty.

    Examples:
        >>> build_place_label("Pune", "Pune", "India")
        'Pune, India'
        >>> build_place_label("", "Haveli", "India")
        'Haveli, India'
    """
    parts = []
    if locality:
        parts.append(locality)
    if sub_administrative_area and sub_administrative_area not in parts:
        parts.append(sub_administrative_area)
    if country:
        parts.append(country)
    return ", ".join(parts) if parts else None


class GeocodingLoader:
    """Forward and reverse geocoding via Nominatim"""

    def __init__(self, base_url: str = None, timeout: int = None, user_agent: str = None):
        """Initialize Geocoding Loader with Nominatim configuration"""
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler()

        self.base_url = (base_url or config.NOMINATIM_URL).rstrip("/")
        self.timeout = timeout or config.GEOCODING_TIMEOUT
        self.headers = {
            "User-Agent": user_agent or config.GEOCODING_USER_AGENT,
            "Accept-Language": "en"
        }

        self.search_endpoint = f"{self.base_url}/search"
        self.reverse_endpoint = f"{self.base_url}/reverse"

        self.logger.info("Geocoding Loader initialized")

    @measure_time(category="geocoding")
    def resolve_forward(self, place_text: str) -> Coordinate:
        """
        Resolve a place name to the coordinate of its first match

        Args:
            place_text (str): Free-text place name

        Returns:
            Coordinate: Position of the first candidate

        Raises:
            PlaceNotFoundError: No candidates, or the provider could not be queried
        """
        params = {"q": place_text, "format": "json", "limit": 1}

        try:
            self.logger.info(f"Geocoding '{place_text}' via Nominatim...")
            response = requests.get(
                self.search_endpoint,
                params=params,
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()
            results = response.json()

        except requests.exceptions.RequestException as e:
            status_code = getattr(getattr(e, "response", None), "status_code", None)
            self.error_handler.handle_api_error("Nominatim", self.search_endpoint,
                                                status_code=status_code, exception=e)
            raise PlaceNotFoundError(place_text) from e
        except ValueError as e:
            self.error_handler.handle_data_error("geocoding", f"invalid JSON for '{place_text}'")
            raise PlaceNotFoundError(place_text) from e

        # Nominatim reports errors as an object instead of a list
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            self.logger.warning(f"No geocoding results found for '{place_text}'")
            raise PlaceNotFoundError(place_text)

        first = results[0]
        latitude = to_float(first.get("lat"))
        longitude = to_float(first.get("lon"))
        if latitude is None or longitude is None:
            self.logger.warning(f"Geocoding result for '{place_text}' has no coordinates")
            raise PlaceNotFoundError(place_text)

        coordinate = Coordinate(latitude, longitude)
        self.logger.debug(f"Geocoded '{place_text}' to {coordinate.as_query()}")
        return coordinate

    @measure_time(category="geocoding")
    def resolve_reverse(self, coordinate: Coordinate) -> str:
        """
        Best-effort human-readable label for a coordinate

        Args:
            coordinate (Coordinate): Position to describe

        Returns:
            str: "Locality, Sub-area, Country" or "lat, lon" fallback
        """
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "format": "json",
            "zoom": 10,
            "addressdetails": 1
        }

        try:
            response = requests.get(
                self.reverse_endpoint,
                params=params,
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()

            label = self._label_from_address(data.get("address") or {})
            if label:
                return label

            self.logger.debug(f"No address parts for {coordinate.as_query()}, using coordinates")

        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            self.logger.warning(f"Reverse geocoding failed for {coordinate.as_query()}: {e}")

        return coordinate.label()

    def _label_from_address(self, address: Dict) -> Optional[str]:
        """Build the label from a Nominatim address block"""
        locality = self._first_present(address, LOCALITY_KEYS)
        sub_area = self._first_present(address, SUB_ADMINISTRATIVE_KEYS)
        return build_place_label(locality, sub_area, self._first_present(address, ("country",)))

    @staticmethod
    def _first_present(address: Dict, keys) -> Optional[str]:
        for key in keys:
            value = address.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None
