from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from bubbleset.circle_intersection import Circle, intersection_area_path
from bubbleset.sets import Region


@dataclass
class TrackedCircle:
    """Solved circle of a set plus the geometry it is animated from."""

    current: Circle
    previous: Optional[Circle] = None

    def commit(self):
        self.previous = self.current

    def start(self, fallback: Circle) -> Circle:
        return self.previous if self.previous is not None else fallback

    def interpolate(self, t: float, fallback: Circle) -> Circle:
        return interpolate_circle(self.start(fallback), self.current, t)


def fallback_circle(size: Tuple[float, float]) -> Circle:
    return Circle(size[0] / 2, size[1] / 2, 1.0)


def carry_forward(
    new_circles: Mapping[str, Circle], old: Optional[Mapping[str, TrackedCircle]] = None
) -> Dict[str, TrackedCircle]:
    """Wrap freshly solved circles, starting each one from the geometry it had in the previous layout."""
    old = old or {}
    tracked = {}
    for name, circle in new_circles.items():
        previous = old[name].current if name in old else None
        tracked[name] = TrackedCircle(current=circle, previous=previous)
    return tracked


def interpolate_circle(start: Circle, end: Circle, t: float) -> Circle:
    return Circle(
        start.x * (1 - t) + end.x * t,
        start.y * (1 - t) + end.y * t,
        start.radius * (1 - t) + end.radius * t,
    )


def path_tween(
    region: Region,
    circles: Mapping[str, TrackedCircle],
    size: Tuple[float, float],
    outline: Callable[[Sequence[Circle]], Any] = intersection_area_path,
) -> Callable[[float], Any]:
    """Build tween(t) returning the region outline with every member circle interpolated from its
    previous to its current geometry. tween(1) also commits the current geometry as the new start."""
    fallback = fallback_circle(size)

    def tween(t: float):
        interpolated = []
        for set_name in region.member_sets:
            tracked = circles.get(set_name)
            if tracked is None:
                interpolated.append(fallback)
                continue
            interpolated.append(tracked.interpolate(t, fallback))
            if t == 1:
                tracked.commit()
        return outline(interpolated)

    return tween
