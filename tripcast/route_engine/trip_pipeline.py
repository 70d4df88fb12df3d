"""
Trip Planning Pipeline
=====================

Runs one "Plan" action end to end:
- Resolves the origin (device location or place name) and destination
- Samples points along the straight line between them
- Fetches weather and a place label for every sample, in route order
- Aggregates the worst severity to color the route
- Asks the AI assistant for advice about the trip

A weather failure at one sample only degrades that stop to "unknown"; a
failure to resolve either endpoint or to get advice ends the run. Every run
returns a new TripPlan or a PlanFailure; nothing from a previous run is
carried into the next.

Author: Route Weather Trip Planner Team
"""

import logging
from datetime import date
from typing import Dict, List, Optional

# Import from data pipeline and AI engine
from ..data_pipeline.data_models import (
    CityStop,
    FromText,
    OriginSource,
    PipelineState,
    PlaceResolution,
    PlanFailure,
    PlanResult,
    RouteSample,
    SeverityLevel,
    TripPlan,
    UseDeviceLocation,
)
from ..data_pipeline.geocoding_loader import GeocodingLoader
from ..data_pipeline.weather_loader import WeatherDataLoader
from ..data_pipeline.location_service import LocationService
from ..genai_engine.advice_client import AIAdviceClient
from ..utils import (
    EmptyInputError,
    ErrorCategory,
    ErrorHandler,
    PlaceNotFoundError,
    ProviderError,
    estimate_drive_time,
    format_distance_km,
    measure_time,
)
from . import route_sampler
from .severity_classifier import classify, worst_severity

# Import configuration
from config import config


UNKNOWN_WEATHER = "unknown"
PIPELINE_BUSY_MESSAGE = "A trip plan is already being prepared."


class TripPipeline:
    """
    Orchestrates one planning run at a time

    Attributes:
        state (PipelineState): Stage of the current or most recent run
        state_history (List[PipelineState]): Stages visited by the current or most recent run
        last_result (PlanResult): Result of the most recent finished run
    """

    def __init__(self, geocoder: Optional[GeocodingLoader] = None,
                 weather_loader: Optional[WeatherDataLoader] = None,
                 advice_client: Optional[AIAdviceClient] = None,
                 location_service: Optional[LocationService] = None,
                 sample_count: Optional[int] = None,
                 weather_timeout: Optional[int] = None):
        """Initialize Trip Pipeline with its adapters"""
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler()

        self.geocoder = geocoder or GeocodingLoader()
        self.weather_loader = weather_loader or WeatherDataLoader()
        self.advice_client = advice_client or AIAdviceClient()
        self.location_service = location_service or LocationService()

        self.sample_count = config.ROUTE_SAMPLE_COUNT if sample_count is None else sample_count
        self.weather_timeout = (config.ROUTE_WEATHER_TIMEOUT if weather_timeout is None
                                else weather_timeout)

        self.state = PipelineState.IDLE
        self.state_history: List[PipelineState] = []
        self.last_result: Optional[PlanResult] = None
        self._running = False

        self.logger.info(f"Trip Pipeline initialized with {self.sample_count} route segments")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_error(self) -> Optional[str]:
        if isinstance(self.last_result, PlanFailure):
            return self.last_result.error
        return None

    def plan_trip(self, origin_text: str, destination_text: str,
                  use_current_location: bool = False,
                  selected_date: Optional[date] = None) -> PlanResult:
        """Plan from the form fields: origin text or device location, destination text"""
        origin = UseDeviceLocation() if use_current_location else FromText(origin_text or "")
        return self.plan(origin, destination_text, selected_date)

    @measure_time(category="pipeline")
    def plan(self, origin: OriginSource, destination_text: str,
             selected_date: Optional[date] = None) -> PlanResult:
        """
        Run the whole pipeline once

        Args:
            origin (OriginSource): UseDeviceLocation() or FromText(place name)
            destination_text (str): Destination place name
            selected_date (date): Travel date; today if not chosen

        Returns:
            PlanResult: TripPlan on success, PlanFailure with a readable
                message otherwise. Never raises.
        """
        if self._running:
            self.logger.warning("Plan requested while another run is in flight")
            return PlanFailure(PIPELINE_BUSY_MESSAGE, ErrorCategory.PIPELINE_BUSY, self.state)

        self._running = True
        self.last_result = None
        self.state_history = []
        self._set_state(PipelineState.IDLE)

        try:
            result = self._run(origin, destination_text, selected_date)

        except Exception as e:
            failed_stage = self.state
            report = self.error_handler.handle_planner_error(
                e, "plan",
                user_input={
                    "origin": getattr(origin, "text", "current location"),
                    "destination": destination_text,
                    "stage": failed_stage.value
                }
            )
            self._set_state(PipelineState.FAILED)
            result = PlanFailure(report.message, report.category, failed_stage)

        finally:
            self._running = False

        self.last_result = result
        return result

    def _run(self, origin: OriginSource, destination_text: str,
             selected_date: Optional[date]) -> TripPlan:
        """Stages in order; any exception raised here is fatal to the run"""
        self._validate_input(origin, destination_text)

        self._set_state(PipelineState.RESOLVING)
        origin_place = self.resolve_origin(origin)
        destination_place = self._resolve_text(destination_text, "destination")

        self._set_state(PipelineState.SAMPLING)
        samples = route_sampler.sample(origin_place.coordinate,
                                       destination_place.coordinate,
                                       self.sample_count)

        self._set_state(PipelineState.ENRICHING)
        stops = tuple(self._enrich_sample(sample) for sample in samples)

        self._set_state(PipelineState.AGGREGATING)
        worst = worst_severity(stop.severity for stop in stops)
        self.logger.info(f"Worst weather along route: {worst.name} ({worst.color})")

        self._set_state(PipelineState.REQUESTING_ADVICE)
        advice_date = selected_date or date.today()
        advice = self.advice_client.get_advice(
            origin_place.display_text,
            destination_place.display_text,
            advice_date
        )

        plan = TripPlan(
            origin=origin_place,
            destination=destination_place,
            stops=stops,
            worst_severity=worst,
            ai_advice=advice,
            selected_date=selected_date,
            advice_date=advice_date
        )

        self._set_state(PipelineState.DONE)
        self.logger.info(
            f"Planned {origin_place.display_text} -> {destination_place.display_text}: "
            f"{len(stops)} stops, route {worst.color}"
        )
        return plan

    def _validate_input(self, origin: OriginSource, destination_text: str) -> None:
        """Reject blank fields before any provider is called"""
        if isinstance(origin, FromText) and not origin.text.strip():
            raise EmptyInputError("origin")
        if not isinstance(origin, (FromText, UseDeviceLocation)):
            raise ValueError(f"Unsupported origin source: {origin!r}")
        if not (destination_text or "").strip():
            raise EmptyInputError("destination")

    def resolve_origin(self, origin: OriginSource) -> PlaceResolution:
        """
        Resolve either origin variant to a place

        The device position is labelled by reverse geocoding; a typed origin
        keeps the text the user entered.
        """
        if isinstance(origin, UseDeviceLocation):
            coordinate = self.location_service.get_current_location()
            label = self.geocoder.resolve_reverse(coordinate)
            return PlaceResolution(display_text=label, coordinate=coordinate)

        return self._resolve_text(origin.text, "origin")

    def _resolve_text(self, text: str, role: str) -> PlaceResolution:
        """Forward-geocode a trimmed place name"""
        place_text = (text or "").strip()
        if not place_text:
            raise EmptyInputError(role)

        try:
            coordinate = self.geocoder.resolve_forward(place_text)
        except PlaceNotFoundError as e:
            raise PlaceNotFoundError(place_text, role) from e

        return PlaceResolution(display_text=place_text, coordinate=coordinate)

    def _enrich_sample(self, sample: RouteSample) -> CityStop:
        """Weather and label for one sample; weather failures are tolerated"""
        observation = None
        try:
            observation = self.weather_loader.fetch_current(sample.coordinate,
                                                            timeout=self.weather_timeout)
            description = observation.description
            severity = classify(description)

        except ProviderError as e:
            self.logger.warning(
                f"Weather unavailable for sample {sample.index} "
                f"({sample.coordinate.as_query()}): {e}"
            )
            description = UNKNOWN_WEATHER
            severity = SeverityLevel.GOOD

        label = self.geocoder.resolve_reverse(sample.coordinate)

        return CityStop(
            sample=sample,
            label=label,
            weather_description=description,
            severity=severity,
            observation=observation
        )

    def _set_state(self, state: PipelineState) -> None:
        self.state = state
        self.state_history.append(state)
        self.logger.debug(f"Pipeline state: {state.value}")


def summarize_plan(plan: TripPlan, avg_kmh: float = None) -> Dict:
    """
    Plain data for rendering a finished plan

    Args:
        plan (TripPlan): Successful plan
        avg_kmh (float): Average speed for the drive time estimate

    Returns:
        Dict: Endpoints, distance, drive time, route color and stops
    """
    speed = avg_kmh or config.AVERAGE_DRIVE_SPEED_KMH
    origin = plan.origin.coordinate
    destination = plan.destination.coordinate

    return {
        "origin": plan.origin.display_text,
        "destination": plan.destination.display_text,
        "distance": format_distance_km(origin, destination),
        "drive_time": estimate_drive_time(origin, destination, avg_kmh=speed),
        "route_color": plan.route_color,
        "route_hex_color": plan.worst_severity.hex_color,
        "worst_severity": plan.worst_severity.name,
        "travel_date": plan.advice_date.isoformat() if plan.advice_date else None,
        "stops": [
            {
                "index": stop.sample.index,
                "label": stop.label,
                "latitude": stop.coordinate.latitude,
                "longitude": stop.coordinate.longitude,
                "weather": stop.weather_description,
                "severity": stop.severity.name,
                "color": stop.severity.color
            }
            for stop in plan.stops
        ],
        "ai_advice": plan.ai_advice
    }
