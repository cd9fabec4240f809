import math
import unittest

import numpy as np

from bubbleset.circle_intersection import (
    Circle,
    Point,
    circle_circle_intersection,
    circle_path,
    contained_in_circles,
    distance,
    intersection_area,
    intersection_area_path,
    out_of_circles,
)


class TestCircleIntersection(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.a = Circle(0.0, 0.0, 1.0)
        cls.b = Circle(1.0, 0.0, 1.0)
        # Area of the lens of two unit circles one radius apart.
        cls.lens_area = 2 * math.pi / 3 - math.sqrt(3) / 2

    def test_distance(self):
        self.assertEqual(distance(Point(0, 0), Point(3, 4)), 5.0)

    def test_boundaries_cross_at_two_points(self):
        points = sorted(circle_circle_intersection(self.a, self.b), key=lambda p: p.y)
        np.testing.assert_allclose(points, [[0.5, -math.sqrt(3) / 2], [0.5, math.sqrt(3) / 2]], atol=1e-12)

    def test_no_boundary_crossing_for_disjoint_or_nested_circles(self):
        self.assertEqual(circle_circle_intersection(self.a, Circle(5.0, 0.0, 1.0)), [])
        self.assertEqual(circle_circle_intersection(Circle(0.0, 0.0, 3.0), self.a), [])

    def test_lens_area(self):
        stats = intersection_area([self.a, self.b])
        self.assertAlmostEqual(stats.area, self.lens_area, places=9)
        self.assertEqual(len(stats.arcs), 2)
        self.assertEqual(len(stats.inner_points), 2)

    def test_single_circle_area(self):
        stats = intersection_area([Circle(2.0, 3.0, 2.0)])
        self.assertAlmostEqual(stats.area, 4 * math.pi)

    def test_nested_circles_area_is_the_smallest(self):
        stats = intersection_area([Circle(0.0, 0.0, 2.0), Circle(0.5, 0.0, 0.5)])
        self.assertAlmostEqual(stats.area, math.pi / 4)

    def test_disjoint_circles_have_no_area(self):
        stats = intersection_area([self.a, Circle(5.0, 0.0, 1.0)])
        self.assertEqual(stats.area, 0)
        self.assertEqual(stats.arcs, [])

    def test_empty_input(self):
        self.assertEqual(intersection_area([]).area, 0)

    def test_containment_checks(self):
        self.assertTrue(contained_in_circles(Point(0.5, 0.0), [self.a, self.b]))
        self.assertFalse(contained_in_circles(Point(-0.5, 0.0), [self.a, self.b]))
        self.assertTrue(out_of_circles(Point(-0.5, 0.0), [self.b]))
        self.assertFalse(out_of_circles(Point(0.5, 0.0), [self.b]))

    def test_containment_of_no_circles_holds(self):
        self.assertTrue(contained_in_circles(Point(100.0, 100.0), []))
        self.assertTrue(out_of_circles(Point(100.0, 100.0), []))

    def test_boundary_counts_as_inside_and_not_outside(self):
        on_boundary = Point(1.0, 0.0)
        self.assertTrue(contained_in_circles(on_boundary, [self.a]))
        self.assertFalse(out_of_circles(on_boundary, [self.a]))


def test_outline_of_a_single_circle_is_the_circle():
    c = Circle(2.0, 3.0, 1.5)
    assert intersection_area_path([c]) == circle_path(c.x, c.y, c.radius)


def test_outline_of_a_lens_has_two_arcs():
    path = intersection_area_path([Circle(0.0, 0.0, 1.0), Circle(1.0, 0.0, 1.0)])
    assert path.strip().startswith("M")
    assert path.count("A") == 2


def test_outline_of_an_empty_intersection():
    assert intersection_area_path([Circle(0.0, 0.0, 1.0), Circle(5.0, 0.0, 1.0)]) == "M 0 0"
