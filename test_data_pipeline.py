#!/usr/bin/env python3
"""
Data Pipeline and Provider Tests
===============================

Geocoding, weather, AI advice, device location and preferences, with all
HTTP calls patched out.

Usage:
    pytest test_data_pipeline.py

Author: Route Weather Trip Planner Team
"""

import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from tripcast.data_pipeline import (
    Coordinate,
    GeocodingLoader,
    InMemoryStore,
    JsonFileStore,
    LocationPermission,
    LocationService,
    WeatherDataLoader,
    build_place_label,
)
from tripcast.data_pipeline.location_service import ConfiguredLocationProvider
from tripcast.genai_engine import AIAdviceClient
from tripcast.genai_engine.advice_client import build_messages, format_travel_date
from tripcast.utils import (
    ErrorCategory,
    LocationFailureReason,
    LocationUnavailableError,
    PlaceNotFoundError,
    ProviderError,
)

# Test configuration
PUNE = Coordinate(18.5204, 73.8567)

SAMPLE_WEATHER = {
    "coord": {"lon": 73.8567, "lat": 18.5204},
    "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
    "main": {"temp": 24.5, "feels_like": 25.1, "temp_min": 23.0, "temp_max": 26.0,
             "pressure": 1008, "humidity": 88},
    "wind": {"speed": 4.1, "deg": 250},
    "clouds": {"all": 75},
    "dt": 1760000000,
    "sys": {"country": "IN"},
    "timezone": 19800,
    "name": "Pune",
    "cod": 200,
}


def mock_response(status_code=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else json.dumps(payload)
    if payload is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=response
        )
    return response


# =============================================================================
# GEOCODING
# =============================================================================

class TestGeocodingLoader:

    def setup_method(self):
        self.loader = GeocodingLoader(base_url="https://geo.test")

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_forward_returns_first_candidate(self, mock_get):
        mock_get.return_value = mock_response(payload=[
            {"lat": "18.5204", "lon": "73.8567", "display_name": "Pune"},
            {"lat": "1.0", "lon": "2.0"},
        ])

        coordinate = self.loader.resolve_forward("Pune")

        assert coordinate == PUNE
        args, kwargs = mock_get.call_args
        assert args[0] == "https://geo.test/search"
        assert kwargs["params"]["q"] == "Pune"

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_forward_no_results(self, mock_get):
        mock_get.return_value = mock_response(payload=[])

        with pytest.raises(PlaceNotFoundError) as exc_info:
            self.loader.resolve_forward("Atlantis")

        assert "Atlantis" in str(exc_info.value)
        assert exc_info.value.category == ErrorCategory.PLACE_NOT_FOUND

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_forward_error_object_is_not_found(self, mock_get):
        mock_get.return_value = mock_response(payload={"error": "Unable to geocode"})

        with pytest.raises(PlaceNotFoundError):
            self.loader.resolve_forward("Pune")

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_forward_non_object_candidate_is_not_found(self, mock_get):
        mock_get.return_value = mock_response(payload=["Pune"])

        with pytest.raises(PlaceNotFoundError):
            self.loader.resolve_forward("Pune")

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_forward_transport_failure(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("offline")

        with pytest.raises(PlaceNotFoundError):
            self.loader.resolve_forward("Pune")

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_label(self, mock_get):
        mock_get.return_value = mock_response(payload={
            "address": {"city": "Pune", "state_district": "Pune District", "country": "India"}
        })

        assert self.loader.resolve_reverse(PUNE) == "Pune, Pune District, India"

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_skips_duplicate_sub_area(self, mock_get):
        mock_get.return_value = mock_response(payload={
            "address": {"city": "Pune", "county": "Pune", "country": "India"}
        })

        assert self.loader.resolve_reverse(PUNE) == "Pune, India"

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_empty_address_falls_back(self, mock_get):
        mock_get.return_value = mock_response(payload={"address": {}})

        assert self.loader.resolve_reverse(PUNE) == "18.520, 73.857"

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_ignores_non_text_parts(self, mock_get):
        mock_get.return_value = mock_response(payload={
            "address": {"city": 5, "county": ["Haveli"], "country": "India"}
        })

        assert self.loader.resolve_reverse(PUNE) == "India"

    @pytest.mark.parametrize("payload", [
        {"address": ["Pune", "India"]},
        ["not", "an", "object"],
        {"address": {"country": 91}},
    ])
    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_malformed_body_falls_back(self, mock_get, payload):
        mock_get.return_value = mock_response(payload=payload)

        assert self.loader.resolve_reverse(PUNE) == "18.520, 73.857"

    @patch("tripcast.data_pipeline.geocoding_loader.requests.get")
    def test_reverse_failure_falls_back(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()

        assert self.loader.resolve_reverse(PUNE) == "18.520, 73.857"

    def test_build_place_label(self):
        assert build_place_label("Pune", "Haveli", "India") == "Pune, Haveli, India"
        assert build_place_label(None, "Haveli", "") == "Haveli"
        assert build_place_label("", None, None) is None


# =============================================================================
# WEATHER
# =============================================================================

class TestWeatherDataLoader:

    def setup_method(self):
        self.loader = WeatherDataLoader(api_key="abc", base_url="https://weather.test")

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_fetch_current_parses_observation(self, mock_get):
        mock_get.return_value = mock_response(payload=SAMPLE_WEATHER)

        observation = self.loader.fetch_current(PUNE)

        assert observation.description == "light rain"
        assert observation.temperature == 24.5
        assert observation.humidity == 88
        assert observation.location_name == "Pune"
        assert observation.timezone_offset == 19800

        params = mock_get.call_args.kwargs["params"]
        assert params["lat"] == PUNE.latitude
        assert params["lon"] == PUNE.longitude
        assert params["units"] == "metric"
        assert params["appid"] == "abc"

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_query_with_comma_is_coordinates(self, mock_get):
        mock_get.return_value = mock_response(payload=SAMPLE_WEATHER)

        self.loader.fetch_current_by_query("18.5204, 73.8567", timeout=12)

        kwargs = mock_get.call_args.kwargs
        assert kwargs["params"]["lat"] == "18.5204"
        assert kwargs["params"]["lon"] == "73.8567"
        assert "q" not in kwargs["params"]
        assert kwargs["timeout"] == 12

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_query_by_city_name(self, mock_get):
        mock_get.return_value = mock_response(payload=SAMPLE_WEATHER)

        self.loader.fetch_current_by_query("Pune")

        assert mock_get.call_args.kwargs["params"]["q"] == "Pune"

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_non_200_raises(self, mock_get):
        mock_get.return_value = mock_response(status_code=401, payload={"cod": 401},
                                              text='{"cod": 401}')

        with pytest.raises(ProviderError) as exc_info:
            self.loader.fetch_current(PUNE)

        assert exc_info.value.status_code == 401
        assert exc_info.value.category == ErrorCategory.API_AUTHENTICATION

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_error_payload_with_200_status_raises(self, mock_get):
        mock_get.return_value = mock_response(payload={"cod": "404", "message": "city not found"})

        with pytest.raises(ProviderError) as exc_info:
            self.loader.fetch_current_by_query("Nowhere")

        assert "city not found" in str(exc_info.value)

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_timeout_raises(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(ProviderError) as exc_info:
            self.loader.fetch_current(PUNE)

        assert exc_info.value.timed_out
        assert exc_info.value.category == ErrorCategory.API_TIMEOUT

    @pytest.mark.parametrize("payload", [
        {"cod": 200, "weather": {"description": "rain"}},
        {"cod": 200, "weather": [{"description": "rain"}], "main": "hot"},
        {"cod": 200, "weather": [{"description": "rain"}], "wind": 5},
    ])
    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_unexpected_shape_raises_provider_error(self, mock_get, payload):
        mock_get.return_value = mock_response(payload=payload)

        with pytest.raises(ProviderError) as exc_info:
            self.loader.fetch_current(PUNE)

        assert str(exc_info.value) == "Weather API returned an unreadable response"

    @patch("tripcast.data_pipeline.weather_loader.requests.get")
    def test_invalid_json_raises(self, mock_get):
        mock_get.return_value = mock_response(payload=None, text="<html>")

        with pytest.raises(ProviderError):
            self.loader.fetch_current(PUNE)


# =============================================================================
# AI ADVICE
# =============================================================================

class TestAIAdviceClient:

    def setup_method(self):
        self.client = AIAdviceClient(api_key="sk-test", api_url="https://ai.test/chat",
                                     model="test-model")

    def test_prompt_contains_trip_details(self):
        messages = build_messages("Pune", "Goa", date(2026, 10, 16))

        assert messages[0]["role"] == "system"
        user_prompt = messages[1]["content"]
        assert "from Pune to Goa" in user_prompt
        assert format_travel_date(date(2026, 10, 16)) in user_prompt
        assert "Friday" in user_prompt

    @patch("tripcast.genai_engine.advice_client.requests.post")
    def test_returns_first_choice(self, mock_post):
        mock_post.return_value = mock_response(payload={
            "choices": [{"message": {"role": "assistant", "content": "Carry an umbrella."}}]
        })

        advice = self.client.get_advice("Pune", "Goa", date(2026, 10, 16))

        assert advice == "Carry an umbrella."
        kwargs = mock_post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["json"]["model"] == "test-model"

    @patch("tripcast.genai_engine.advice_client.requests.post")
    def test_non_200_carries_body(self, mock_post):
        mock_post.return_value = mock_response(status_code=429, payload={"error": "slow down"},
                                               text="slow down")

        with pytest.raises(ProviderError) as exc_info:
            self.client.get_advice("Pune", "Goa", date(2026, 10, 16))

        assert str(exc_info.value) == "AI API error: slow down"
        assert exc_info.value.category == ErrorCategory.API_RATE_LIMIT

    @patch("tripcast.genai_engine.advice_client.requests.post")
    def test_malformed_body(self, mock_post):
        mock_post.return_value = mock_response(payload={"choices": []})

        with pytest.raises(ProviderError) as exc_info:
            self.client.get_advice("Pune", "Goa", date(2026, 10, 16))

        assert exc_info.value.category == ErrorCategory.AI_GENERATION_FAILED

    @patch("tripcast.genai_engine.advice_client.requests.post")
    def test_unreachable_service_is_connection_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("offline")

        with pytest.raises(ProviderError) as exc_info:
            self.client.get_advice("Pune", "Goa", date(2026, 10, 16))

        assert exc_info.value.category == ErrorCategory.API_CONNECTION


# =============================================================================
# DEVICE LOCATION
# =============================================================================

class FakeProvider:

    def __init__(self, enabled=True, permission=LocationPermission.GRANTED,
                 after_request=None, position=PUNE):
        self.enabled = enabled
        self.permission = permission
        self.after_request = after_request or permission
        self.position = position
        self.requested = False

    def is_service_enabled(self):
        return self.enabled

    def check_permission(self):
        return self.permission

    def request_permission(self):
        self.requested = True
        return self.after_request

    def get_current_position(self):
        return self.position


class TestLocationService:

    def test_granted_returns_position(self):
        assert LocationService(FakeProvider()).get_current_location() == PUNE

    def test_service_disabled(self):
        with pytest.raises(LocationUnavailableError) as exc_info:
            LocationService(FakeProvider(enabled=False)).get_current_location()

        assert exc_info.value.reason == LocationFailureReason.SERVICE_DISABLED
        assert str(exc_info.value) == "Location services are disabled."

    def test_denied_then_granted_after_request(self):
        provider = FakeProvider(permission=LocationPermission.DENIED,
                                after_request=LocationPermission.GRANTED)

        assert LocationService(provider).get_current_location() == PUNE
        assert provider.requested

    def test_denied_after_request(self):
        provider = FakeProvider(permission=LocationPermission.DENIED)

        with pytest.raises(LocationUnavailableError) as exc_info:
            LocationService(provider).get_current_location()

        assert exc_info.value.reason == LocationFailureReason.PERMISSION_DENIED

    def test_denied_forever(self):
        provider = FakeProvider(permission=LocationPermission.DENIED_FOREVER)

        with pytest.raises(LocationUnavailableError) as exc_info:
            LocationService(provider).get_current_location()

        assert exc_info.value.reason == LocationFailureReason.PERMISSION_DENIED_FOREVER
        assert not provider.requested

    def test_configured_provider_needs_coordinates(self):
        provider = ConfiguredLocationProvider(enabled=True, latitude=None, longitude=None)
        assert not provider.is_service_enabled()

        provider = ConfiguredLocationProvider(enabled=True, latitude=18.5, longitude=73.8)
        assert provider.is_service_enabled()
        assert provider.get_current_position() == Coordinate(18.5, 73.8)


# =============================================================================
# PREFERENCES
# =============================================================================

class TestPreferencesStore:

    def test_in_memory(self):
        store = InMemoryStore()
        assert store.get_string("last_location") is None

        store.set_string("last_location", "Pune")
        assert store.get_string("last_location") == "Pune"

    def test_json_file_round_trip(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.json"
        JsonFileStore(str(path)).set_string("last_location", "18.5,73.8")

        assert JsonFileStore(str(path)).get_string("last_location") == "18.5,73.8"

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text("{not json", encoding="utf-8")

        assert JsonFileStore(str(path)).get_string("last_location") is None
