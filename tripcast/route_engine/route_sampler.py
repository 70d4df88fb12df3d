"""
Straight-Line Route Sampler
==========================

Evenly spaced points between two coordinates by linear interpolation of
latitude and longitude. This is not road routing and not a great-circle
path: sample i sits at t = i / count along the straight line.

Author: Route Weather Trip Planner Team
"""

from typing import List

from ..data_pipeline.data_models import Coordinate, RouteSample
from ..utils.data_utils import lerp


DEFAULT_SAMPLE_COUNT = 5


def sample(origin: Coordinate, destination: Coordinate,
           count: int = DEFAULT_SAMPLE_COUNT) -> List[RouteSample]:
    """
    Interpolate count + 1 route samples from origin to destination

    Args:
        origin (Coordinate): Sample 0
        destination (Coordinate): Sample count
        count (int): Number of segments, at least 1

    Returns:
        List[RouteSample]: Samples in route order

    Raises:
        ValueError: count is less than 1
    """
    if count < 1:
        raise ValueError(f"Sample count must be at least 1, got {count}")

    samples = []
    for index in range(count + 1):
        if index == 0:
            coordinate = origin
        elif index == count:
            coordinate = destination
        else:
            t = index / count
            coordinate = Coordinate(
                lerp(origin.latitude, destination.latitude, t),
                lerp(origin.longitude, destination.longitude, t)
            )
        samples.append(RouteSample(coordinate=coordinate, index=index))

    return samples
