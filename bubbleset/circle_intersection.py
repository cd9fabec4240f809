import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

SMALL = 1e-10


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.radius], float)


@dataclass
class IntersectionPoint:
    x: float
    y: float
    parent_index: Tuple[int, int]
    angle: float = 0.0


@dataclass
class Arc:
    circle: Circle
    width: float
    p1: Point
    p2: Point


@dataclass
class IntersectionStats:
    area: float = 0.0
    arc_area: float = 0.0
    polygon_area: float = 0.0
    arcs: List[Arc] = field(default_factory=list)
    inner_points: List[IntersectionPoint] = field(default_factory=list)
    intersection_points: List[IntersectionPoint] = field(default_factory=list)


def distance(p1, p2) -> float:
    """Euclidean distance between two objects exposing `x` and `y`."""
    return math.hypot(p1.x - p2.x, p1.y - p2.y)


def _circles_to_array(circles: Sequence[Circle]) -> np.ndarray:
    if len(circles) == 0:
        return np.empty((0, 3), float)
    return np.array([(c.x, c.y, c.radius) for c in circles], float)


def contained_in_circles(point, circles: Sequence[Circle], tol: float = SMALL) -> bool:
    """True if the point lies inside every circle (boundary included up to `tol`)."""
    C = _circles_to_array(circles)
    if C.shape[0] == 0:
        return True
    d = np.hypot(point.x - C[:, 0], point.y - C[:, 1])
    return bool(np.all(d <= C[:, 2] + tol))


def out_of_circles(point, circles: Sequence[Circle], tol: float = SMALL) -> bool:
    """True if the point lies strictly outside all circles."""
    C = _circles_to_array(circles)
    if C.shape[0] == 0:
        return True
    d = np.hypot(point.x - C[:, 0], point.y - C[:, 1])
    return bool(np.all(d >= C[:, 2] + tol))


def circle_circle_intersection(c1: Circle, c2: Circle) -> List[Point]:
    """Returns the two intersection points of the circle boundaries, or an empty list when the
    circles are disjoint or one contains the other."""
    d = distance(c1, c2)
    r1, r2 = c1.radius, c2.radius

    if d >= r1 + r2 or d <= abs(r1 - r2):
        return []

    a = (r1 * r1 - r2 * r2 + d * d) / (2 * d)
    h = math.sqrt(max(0.0, r1 * r1 - a * a))
    x0 = c1.x + a * (c2.x - c1.x) / d
    y0 = c1.y + a * (c2.y - c1.y) / d
    rx = -(c2.y - c1.y) * (h / d)
    ry = -(c2.x - c1.x) * (h / d)

    return [Point(x0 + rx, y0 - ry), Point(x0 - rx, y0 + ry)]


def get_intersection_points(circles: Sequence[Circle]) -> List[IntersectionPoint]:
    ret = []
    for i in range(len(circles)):
        for j in range(i + 1, len(circles)):
            for p in circle_circle_intersection(circles[i], circles[j]):
                ret.append(IntersectionPoint(p.x, p.y, (i, j)))
    return ret


def get_center(points) -> Point:
    P = np.array([(p.x, p.y) for p in points], float)
    c = P.mean(axis=0)
    return Point(float(c[0]), float(c[1]))


def circle_area(radius: float, width: float) -> float:
    """Area of the circular segment of height `width` cut from a circle of the given radius."""
    return radius * radius * math.acos(1 - width / radius) - (radius - width) * math.sqrt(
        max(0.0, width * (2 * radius - width))
    )


def intersection_area(circles: Sequence[Circle]) -> IntersectionStats:
    """Area of the common intersection of all circles, together with the arcs bounding it.

    The outline is made of polygon edges between consecutive boundary intersection points that lie
    inside every circle, plus the arc of the circle each edge cuts off. If fewer than two such
    points exist, the intersection is either empty or the smallest circle itself.
    """
    stats = IntersectionStats()
    if len(circles) == 0:
        return stats

    intersection_points = get_intersection_points(circles)
    inner_points = [p for p in intersection_points if contained_in_circles(p, circles)]

    arc_area = 0.0
    polygon_area = 0.0
    arcs: List[Arc] = []

    if len(inner_points) > 1:
        center = get_center(inner_points)
        for p in inner_points:
            p.angle = math.atan2(p.x - center.x, p.y - center.y)
        inner_points.sort(key=lambda p: p.angle, reverse=True)

        p2 = inner_points[-1]
        for p1 in inner_points:
            polygon_area += (p2.x + p1.x) * (p1.y - p2.y)

            mid = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
            arc: Optional[Arc] = None

            for parent in p1.parent_index:
                if parent not in p2.parent_index:
                    continue
                circle = circles[parent]
                a1 = math.atan2(p1.x - circle.x, p1.y - circle.y)
                a2 = math.atan2(p2.x - circle.x, p2.y - circle.y)

                angle_diff = a2 - a1
                if angle_diff < 0:
                    angle_diff += 2 * math.pi

                # the arc's midpoint and its distance to the chord
                a = a2 - angle_diff / 2
                width = distance(
                    mid,
                    Point(circle.x + circle.radius * math.sin(a), circle.y + circle.radius * math.cos(a)),
                )
                width = min(width, circle.radius * 2)

                if arc is None or arc.width > width:
                    arc = Arc(circle, width, Point(p1.x, p1.y), Point(p2.x, p2.y))

            if arc is not None:
                arcs.append(arc)
                arc_area += circle_area(arc.circle.radius, arc.width)
                p2 = p1
    else:
        smallest = min(circles, key=lambda c: c.radius)
        disjoint = any(
            distance(c, smallest) > abs(smallest.radius - c.radius) for c in circles
        )
        if not disjoint:
            arc_area = smallest.radius * smallest.radius * math.pi
            arcs.append(
                Arc(
                    smallest,
                    smallest.radius * 2,
                    Point(smallest.x, smallest.y + smallest.radius),
                    Point(smallest.x - SMALL, smallest.y + smallest.radius),
                )
            )

    polygon_area /= 2

    stats.area = arc_area + polygon_area
    stats.arc_area = arc_area
    stats.polygon_area = polygon_area
    stats.arcs = arcs
    stats.inner_points = inner_points
    stats.intersection_points = intersection_points
    return stats


def circle_path(x: float, y: float, r: float) -> str:
    return " ".join(
        [
            "\nM", str(x - r), str(y),
            "\na", str(r), str(r), "0 1 0", str(2 * r), "0",
            "\na", str(r), str(r), "0 1 0", str(-2 * r), "0",
        ]
    )


def intersection_area_path(circles: Sequence[Circle]) -> str:
    """SVG path description of the outline of the intersection of all circles."""
    arcs = intersection_area(circles).arcs
    if len(arcs) == 0:
        return "M 0 0"
    if len(arcs) == 1:
        c = arcs[0].circle
        return circle_path(c.x, c.y, c.radius)

    ret = ["\nM", str(arcs[0].p2.x), str(arcs[0].p2.y)]
    for arc in arcs:
        r = arc.circle.radius
        wide = arc.width > r
        ret += ["\nA", str(r), str(r), "0", "1" if wide else "0", "1", str(arc.p1.x), str(arc.p1.y)]
    return " ".join(ret)
