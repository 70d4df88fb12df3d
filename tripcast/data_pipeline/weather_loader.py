"""
OpenWeatherMap Weather Data Loader
=================================

Fetches current weather from OpenWeatherMap for route samples and for the
home screen location.

Every call is a single request with a fixed timeout; any non-success status,
error payload, timeout or transport failure raises ProviderError and leaves
the decision to tolerate it to the caller.

Author: Route Weather Trip Planner Team
"""

import logging
from typing import Dict, Optional

import requests

from .data_models import Coordinate, WeatherObservation

# Import configuration
from config import config
from ..utils import ErrorHandler, ProviderError, measure_time, to_float


class WeatherDataLoader:
    """Main class for loading current weather from OpenWeatherMap"""

    def __init__(self, api_key: str = None, base_url: str = None, timeout: int = None):
        """Initialize Weather Data Loader with OpenWeatherMap configuration"""
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler()

        self.api_key = api_key or config.OPENWEATHER_API_KEY
        self.current_endpoint = base_url or config.OPENWEATHER_API_URL
        self.timeout = timeout or config.ROUTE_WEATHER_TIMEOUT
        self.units = "metric"  # Fahrenheit is a display concern only

        self.logger.info("OpenWeatherMap Data Loader initialized")

    @measure_time(category="weather")
    def fetch_current(self, coordinate: Coordinate, timeout: Optional[int] = None) -> WeatherObservation:
        """
        Get current weather at a coordinate

        Args:
            coordinate (Coordinate): Location to query
            timeout (int): Seconds to wait, defaults to the route sampling timeout

        Returns:
            WeatherObservation: Parsed current weather

        Raises:
            ProviderError: Non-200 status, error payload, timeout or transport failure
        """
        params = {"lat": coordinate.latitude, "lon": coordinate.longitude}
        return self._fetch(params, coordinate.as_query(), timeout)

    @measure_time(category="weather")
    def fetch_current_by_query(self, query: str, timeout: Optional[int] = None) -> WeatherObservation:
        """
        Get current weather for a place name or a serialized "lat,lon" pair

        Args:
            query (str): City name, or coordinates joined by a comma
            timeout (int): Seconds to wait, defaults to the route sampling timeout

        Returns:
            WeatherObservation: Parsed current weather
        """
        if "," in query:
            latitude, longitude = query.split(",", 1)
            params = {"lat": latitude.strip(), "lon": longitude.strip()}
        else:
            params = {"q": query.strip()}

        return self._fetch(params, query, timeout)

    def _fetch(self, params: Dict, location_desc: str, timeout: Optional[int]) -> WeatherObservation:
        """Run one request and parse the response"""
        request_params = dict(params, appid=self.api_key, units=self.units)

        try:
            response = requests.get(
                self.current_endpoint,
                params=request_params,
                timeout=timeout or self.timeout
            )
        except requests.exceptions.Timeout as e:
            self.error_handler.handle_api_error("OpenWeatherMap", self.current_endpoint, exception=e)
            raise ProviderError("weather", f"Weather API timed out for {location_desc}",
                                timed_out=True) from e
        except requests.exceptions.RequestException as e:
            self.error_handler.handle_api_error("OpenWeatherMap", self.current_endpoint, exception=e)
            raise ProviderError("weather", f"Weather API request failed: {e}") from e

        if response.status_code != 200:
            self.error_handler.handle_api_error("OpenWeatherMap", self.current_endpoint,
                                                status_code=response.status_code,
                                                response_text=response.text)
            raise ProviderError("weather", f"Weather API error: {response.status_code}",
                                status_code=response.status_code, body=response.text)

        try:
            data = response.json()
        except ValueError as e:
            self.error_handler.handle_data_error("weather", "response body is not JSON", response.text)
            raise ProviderError("weather", "Weather API returned an unreadable response",
                                status_code=response.status_code, body=response.text) from e

        if not isinstance(data, dict):
            self.error_handler.handle_data_error("weather", "response body is not an object", data)
            raise ProviderError("weather", "Weather API returned an unreadable response",
                                status_code=response.status_code, body=response.text)

        # The body carries its own status code; a string "200" is also success
        cod = data.get("cod", 200)
        if str(cod) != "200":
            message = data.get("message") or "Weather API error"
            self.logger.warning(f"Weather API reported {cod} for {location_desc}: {message}")
            status_code = to_float(cod)
            raise ProviderError("weather", message,
                                status_code=int(status_code) if status_code is not None else None,
                                body=response.text)

        try:
            observation = self._parse_current_weather_response(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self.error_handler.handle_data_error("weather", f"unexpected response shape: {e}", data)
            raise ProviderError("weather", "Weather API returned an unreadable response",
                                status_code=response.status_code, body=response.text) from e

        self.logger.debug(f"Weather at {location_desc}: {observation.description}")
        return observation

    def _parse_current_weather_response(self, data: Dict) -> WeatherObservation:
        """Parse a current weather response from OpenWeatherMap"""
        conditions = data.get("weather") or [{}]
        condition = conditions[0] if isinstance(conditions[0], dict) else {}
        main = data.get("main") or {}
        wind = data.get("wind") or {}
        clouds = data.get("clouds") or {}
        sys_data = data.get("sys") or {}
        coord = data.get("coord") or {}

        description = condition.get("description") or condition.get("main") or ""

        return WeatherObservation(
            description=str(description),
            main=condition.get("main"),
            temperature=to_float(main.get("temp")),
            feels_like=to_float(main.get("feels_like")),
            temp_min=to_float(main.get("temp_min")),
            temp_max=to_float(main.get("temp_max")),
            humidity=to_float(main.get("humidity")),
            pressure=to_float(main.get("pressure")),
            wind_speed=to_float(wind.get("speed")),
            wind_direction=to_float(wind.get("deg")),
            cloud_cover=to_float(clouds.get("all")),
            country=sys_data.get("country"),
            location_name=data.get("name"),
            observed_at=data.get("dt"),
            timezone_offset=data.get("timezone"),
            latitude=to_float(coord.get("lat")),
            longitude=to_float(coord.get("lon")),
            icon=condition.get("icon"),
            raw=data
        )
