import math
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

import numpy as np
from scipy.optimize import minimize

from bubbleset.circle_intersection import (
    Circle,
    Point,
    distance,
    get_center,
    intersection_area,
)
from bubbleset.sets import Region

DISJOINT_CENTRE = Point(0.0, -1000.0)


def fixed_solution(solution: Mapping[str, Any]) -> Callable[[Sequence[Mapping[str, Any]]], Dict[str, Circle]]:
    """Wrap an already solved diagram, {set: {x, y, radius}}, as a layout function."""
    circles = {
        name: c if isinstance(c, Circle) else Circle(float(c["x"]), float(c["y"]), float(c["radius"]))
        for name, c in solution.items()
    }

    def layout_function(_descriptors):
        return dict(circles)

    return layout_function


def normalize_solution(circles: Mapping[str, Circle], orientation: float = math.pi / 2) -> Dict[str, Circle]:
    """Orient a solved diagram: the largest circle goes to the origin, the second one is rotated to
    `orientation` and the third is mirrored onto a fixed side of the line through the first two."""
    names = sorted(circles, key=lambda k: -circles[k].radius)
    if not names:
        return {}
    P = np.array([(circles[k].x, circles[k].y) for k in names], float)
    r = np.array([circles[k].radius for k in names], float)
    P -= P[0]

    if len(names) == 2 and np.linalg.norm(P[1] - P[0]) < abs(r[1] - r[0]):
        P[1] = [P[0, 0] + r[0] - r[1] - 1e-10, P[0, 1]]

    if len(names) > 1:
        rotation = math.atan2(P[1, 0], P[1, 1]) - orientation
        c, s = math.cos(rotation), math.sin(rotation)
        P = np.stack([c * P[:, 0] - s * P[:, 1], s * P[:, 0] + c * P[:, 1]], axis=1)

    if len(names) > 2:
        angle = (math.atan2(P[2, 0], P[2, 1]) - orientation) % (2 * math.pi)
        if angle > math.pi:
            slope = P[1, 1] / (1e-10 + P[1, 0])
            d = (P[:, 0] + slope * P[:, 1]) / (1 + slope * slope)
            P = np.stack([2 * d - P[:, 0], 2 * d * slope - P[:, 1]], axis=1)

    index = {k: i for i, k in enumerate(names)}
    return {k: Circle(float(P[index[k], 0]), float(P[index[k], 1]), float(r[index[k]])) for k in circles}


def scale_solution(
    circles: Mapping[str, Circle], width: float, height: float, padding: float = 0.0
) -> Dict[str, Circle]:
    """Uniformly scale and translate the diagram so that it fits centred in the padded canvas."""
    if not circles:
        return {}
    names = list(circles)
    C = np.array([(circles[k].x, circles[k].y, circles[k].radius) for k in names], float)
    width -= 2 * padding
    height -= 2 * padding

    x_min, x_max = np.min(C[:, 0] - C[:, 2]), np.max(C[:, 0] + C[:, 2])
    y_min, y_max = np.min(C[:, 1] - C[:, 2]), np.max(C[:, 1] + C[:, 2])
    if x_max == x_min or y_max == y_min:
        return dict(circles)

    scaling = min(width / (x_max - x_min), height / (y_max - y_min))
    x_offset = (width - (x_max - x_min) * scaling) / 2
    y_offset = (height - (y_max - y_min) * scaling) / 2

    return {
        k: Circle(
            float(padding + x_offset + (C[i, 0] - x_min) * scaling),
            float(padding + y_offset + (C[i, 1] - y_min) * scaling),
            float(scaling * C[i, 2]),
        )
        for i, k in enumerate(names)
    }


def get_overlapping_circles(circles: Mapping[str, Circle]) -> Dict[str, List[str]]:
    """For every set, the sets whose circle fully contains its circle."""
    ret = {k: [] for k in circles}
    names = list(circles)
    for i, a_name in enumerate(names):
        a = circles[a_name]
        for b_name in names[i + 1 :]:
            b = circles[b_name]
            d = distance(a, b)
            if d + b.radius <= a.radius + 1e-10:
                ret[b_name].append(a_name)
            elif d + a.radius <= b.radius + 1e-10:
                ret[a_name].append(b_name)
    return ret


def circle_margin(point, interior: Sequence[Circle], exterior: Sequence[Circle]) -> float:
    """Distance from the point to the nearest boundary it must not cross."""
    margins = [c.radius - distance(c, point) for c in interior]
    margins += [distance(c, point) - c.radius for c in exterior]
    return min(margins)


def compute_text_centre(interior: Sequence[Circle], exterior: Sequence[Circle]) -> Tuple[Point, bool]:
    """Point of maximal margin inside all interior circles and outside all exterior ones.

    Returns the point and whether the interior circles have no common area.
    """
    seeds = []
    for c in interior:
        h = c.radius / 2
        seeds += [Point(c.x, c.y), Point(c.x + h, c.y), Point(c.x - h, c.y), Point(c.x, c.y + h), Point(c.x, c.y - h)]

    initial, margin = seeds[0], circle_margin(seeds[0], interior, exterior)
    for p in seeds[1:]:
        m = circle_margin(p, interior, exterior)
        if m >= margin:
            initial, margin = p, m

    result = minimize(
        lambda p: -circle_margin(Point(p[0], p[1]), interior, exterior),
        np.array([initial.x, initial.y], float),
        method="Nelder-Mead",
        options={"maxiter": 500, "xatol": 1e-10, "fatol": 1e-10},
    )
    ret = Point(float(result.x[0]), float(result.x[1]))

    valid = all(distance(ret, c) <= c.radius for c in interior) and all(
        distance(ret, c) >= c.radius for c in exterior
    )
    if valid:
        return ret, False

    if len(interior) == 1:
        return Point(interior[0].x, interior[0].y), False

    arcs = intersection_area(interior).arcs
    if len(arcs) == 0:
        return DISJOINT_CENTRE, True
    if len(arcs) == 1:
        return Point(arcs[0].circle.x, arcs[0].circle.y), False
    if exterior:
        return compute_text_centre(interior, [])
    return get_center([a.p1 for a in arcs]), False


def compute_text_centres(
    circles: Mapping[str, Circle], regions: Mapping[str, Region], verbose: bool = False
) -> Dict[str, Point]:
    """Centre of every region: the deepest point of its intersection, away from the foreign circles
    that cut into it. Circles that contain one of the region's circles are not treated as foreign."""
    overlapped = get_overlapping_circles(circles)
    ret = {}
    for key, region in regions.items():
        exclude = set()
        for name in region.member_sets:
            exclude.update(overlapped.get(name, []))

        interior = [circles[name] for name in region.member_sets if name in circles]
        exterior = [
            c for name, c in circles.items() if name not in region.member_sets and name not in exclude
        ]
        if not interior:
            ret[key] = DISJOINT_CENTRE
            continue

        centre, disjoint = compute_text_centre(interior, exterior)
        ret[key] = centre
        if disjoint and region.count > 0 and verbose:
            print(f"Region {key} is not represented on screen.")
    return ret
