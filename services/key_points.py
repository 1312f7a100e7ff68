"""Key point detection on generated balance paths.

Flat runs are bridged: a rise, a plateau and then a fall is a maximum
flagged at the last point of the plateau, and a path that touches zero and
continues to the other side is a crossing flagged at the first point past
zero.
"""

from datetime import timedelta
from typing import List

from models.bounds import Bounds
from models.path import KeyPoint, KeyPoints, PathPoint


def _key_point(path: List[PathPoint], index: int, bounds: Bounds, kind: str) -> KeyPoint:
    point = path[index]
    return KeyPoint(
        count=index,
        x=point.x,
        date=bounds.start_date + timedelta(days=point.x),
        value=point.y,
        type=kind,
    )


def get_inflection_points(path: List[PathPoint], bounds: Bounds) -> List[KeyPoint]:
    """Find the local maxima and minima of a path."""
    points = []
    if len(path) < 3:
        return points

    # Most recent non-zero difference before the current one
    previous_delta = path[1].y - path[0].y
    for i in range(2, len(path)):
        delta = path[i].y - path[i - 1].y
        if delta < 0 and previous_delta > 0:
            points.append(_key_point(path, i - 1, bounds, "max"))
        elif delta > 0 and previous_delta < 0:
            points.append(_key_point(path, i - 1, bounds, "min"))
        if delta != 0:
            previous_delta = delta
    return points


def get_zero_points(path: List[PathPoint], bounds: Bounds) -> List[KeyPoint]:
    """Find the points immediately after the path crosses zero."""
    points = []
    if len(path) < 3:
        return points

    # Most recent non-zero value before the current one
    previous_value = path[1].y if path[1].y != 0 else path[0].y
    for i in range(2, len(path)):
        value = path[i].y
        if value > 0 and previous_value < 0:
            points.append(_key_point(path, i, bounds, "positive"))
        elif value < 0 and previous_value > 0:
            points.append(_key_point(path, i, bounds, "negative"))
        if value != 0:
            previous_value = value
    return points


def get_inflection_zero_points(path: List[PathPoint], bounds: Bounds) -> KeyPoints:
    """Find both the inflection points and the zero crossings of a path."""
    return KeyPoints(
        inflection_pts=get_inflection_points(path, bounds),
        zero_pts=get_zero_points(path, bounds),
    )
