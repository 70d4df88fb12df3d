"""
Weather Severity Classifier
==========================

Maps a free-text weather description to a severity level and a route color.

Severe keywords are checked before moderate ones, so "thunderstorm with fog"
is SEVERE even though "storm" and "fog" are moderate keywords.

Author: Route Weather Trip Planner Team
"""

from typing import Iterable, Optional

from ..data_pipeline.data_models import SeverityLevel


SEVERE_KEYWORDS = ("thunder", "tornado", "hurricane", "extreme")
MODERATE_KEYWORDS = ("rain", "snow", "sleet", "storm", "shower", "mist", "haze", "fog")


def classify(description: Optional[str]) -> SeverityLevel:
    """
    Classify a weather description

    Examples:
        >>> classify("thunderstorm with fog")
        <SeverityLevel.SEVERE: 2>
        >>> classify("light rain")
        <SeverityLevel.MODERATE: 1>
        >>> classify("clear sky")
        <SeverityLevel.GOOD: 0>
    """
    text = (description or "").lower()

    if any(keyword in text for keyword in SEVERE_KEYWORDS):
        return SeverityLevel.SEVERE
    if any(keyword in text for keyword in MODERATE_KEYWORDS):
        return SeverityLevel.MODERATE
    return SeverityLevel.GOOD


def color_for(severity: SeverityLevel) -> str:
    """GOOD -> green, MODERATE -> blue, SEVERE -> red"""
    return SeverityLevel(severity).color


def worst_severity(severities: Iterable[SeverityLevel]) -> SeverityLevel:
    """Highest severity in the iterable, GOOD when it is empty"""
    return max(severities, default=SeverityLevel.GOOD)
