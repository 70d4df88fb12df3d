"""
Route Engine Module
===================

Route sampling, weather severity and trip planning orchestration:
- Straight-line interpolation of sample points between two places
- Keyword-based weather severity with route colors
- The trip planning pipeline that ties geocoding, weather and AI advice together
- Home screen weather with last-location memory

Classes:
    TripPipeline: Runs one trip planning request end to end
    HomeWeatherService: Home screen weather loading and refresh

Functions:
    sample(): Interpolate route samples between two coordinates
    classify(): Weather description to severity level
    worst_severity(): Highest severity among stops
    summarize_plan(): Plain data for rendering a plan
"""

# Version and module info
__version__ = "1.0.0"
__module_name__ = "route_engine"

from .route_sampler import sample, DEFAULT_SAMPLE_COUNT
from .severity_classifier import classify, color_for, worst_severity
from .trip_pipeline import TripPipeline, summarize_plan, UNKNOWN_WEATHER
from .home_weather import HomeWeatherService, HomeWeatherState

# Define public API
__all__ = [
    "TripPipeline",
    "HomeWeatherService",
    "HomeWeatherState",
    "sample",
    "classify",
    "color_for",
    "worst_severity",
    "summarize_plan",
    "DEFAULT_SAMPLE_COUNT",
    "UNKNOWN_WEATHER",
]

def get_severity_keywords():
    """
    Return the keyword lists used by the severity classifier
    """
    from .severity_classifier import SEVERE_KEYWORDS, MODERATE_KEYWORDS

    return {
        "severe": list(SEVERE_KEYWORDS),
        "moderate": list(MODERATE_KEYWORDS),
    }
