import math
from enum import Enum
from typing import Dict, Mapping

from bubbleset.circle_intersection import Circle, distance
from bubbleset.sets import Region


class CircleRole(str, Enum):
    interior = "interior"
    overlapping = "overlapping"
    exterior = "exterior"


def classify_circle(region: Region, set_name: str, circles: Mapping[str, Circle]) -> CircleRole:
    """Role of a solved circle relative to a region: one of the region's own sets, a foreign set
    overlapping one of them, or a foreign set clear of all of them."""
    if set_name in region.member_sets:
        return CircleRole.interior

    circle = circles[set_name]
    for member in region.member_sets:
        own = circles.get(member)
        if own is not None and distance(own, circle) < own.radius:
            return CircleRole.overlapping
    return CircleRole.exterior


def inner_radius_candidates(region: Region, circles: Mapping[str, Circle]) -> Dict[str, float]:
    center = region.center
    candidates = {}
    for set_name, circle in circles.items():
        if circle is None:
            continue
        dist_to_center = distance(center, circle)
        role = classify_circle(region, set_name, circles)
        if role == CircleRole.interior:
            candidates[set_name] = circle.radius - dist_to_center
        elif role == CircleRole.overlapping:
            candidates[set_name] = dist_to_center - circle.radius
        else:
            candidates[set_name] = dist_to_center + circle.radius
    return candidates


def compute_inner_radius(
    region: Region, circles: Mapping[str, Circle], default: float = 0.0
) -> float:
    """Largest radius around the region's center within which a point stays inside the region's own
    circles and outside the foreign circles overlapping them.

    The value is the tightest bound over all circles and can be negative when the center already
    lies in an overlapping foreign circle. With no circles, or no center, `default` is returned.
    """
    if region.center is None:
        return default
    candidates = inner_radius_candidates(region, circles)
    if not candidates:
        return default
    radius = min(candidates.values())
    return radius if math.isfinite(radius) else default
