from typing import Dict, List

import numpy as np

from bubbleset.circle_intersection import Circle

# Two unit circles whose centers are one radius apart.
TWO_SETS_SOLUTION = {
    "A": {"x": 0.0, "y": 0.0, "radius": 1.0},
    "B": {"x": 1.0, "y": 0.0, "radius": 1.0},
}

THREE_SETS_SOLUTION = {
    "A": {"x": 0.0, "y": 0.0, "radius": 1.2},
    "B": {"x": 1.2, "y": 0.0, "radius": 1.0},
    "C": {"x": 0.6, "y": 1.0, "radius": 0.9},
}

COMBINATIONS = [["A"], ["B"], ["C"], ["A", "B"], ["A", "C"], ["B", "C"], ["A", "B", "C"]]


def generate_records(n: int, combinations: List[List[str]] = None, seed: int = 0) -> List[Dict]:
    """Records drawing their sets uniformly from the given combinations."""
    combinations = combinations or COMBINATIONS
    rng = np.random.default_rng(seed)
    choices = rng.integers(len(combinations), size=n)
    return [{"id": i, "set": list(combinations[c])} for i, c in enumerate(choices)]


def as_circles(solution) -> Dict[str, Circle]:
    return {name: Circle(c["x"], c["y"], c["radius"]) for name, c in solution.items()}


def inside(point, circle: Circle, tol: float = 1e-9) -> bool:
    return np.hypot(point[0] - circle.x, point[1] - circle.y) <= circle.radius + tol


def outside(point, circle: Circle, tol: float = 1e-9) -> bool:
    return np.hypot(point[0] - circle.x, point[1] - circle.y) >= circle.radius - tol
