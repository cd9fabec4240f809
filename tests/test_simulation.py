import unittest

import numpy as np

from bubbleset.circle_intersection import Point
from bubbleset.config import ForceConfig, apply_options
from bubbleset.sets import SET_KEY_FIELD, Region
from bubbleset.simulation import ForceSimulation, SimulationState


def make_scene(n=20, seed=0):
    rng = np.random.default_rng(seed)
    regions = {
        "A": Region(key="A", member_sets=["A"], center=Point(0.0, 0.0)),
        "B": Region(key="B", member_sets=["B"], center=Point(100.0, 50.0)),
    }
    records = []
    for i in range(n):
        key = "A" if i % 2 else "B"
        x, y = rng.uniform(-200, 200, size=2)
        record = {SET_KEY_FIELD: key, "x": float(x), "y": float(y)}
        regions[key].records.append(record)
        records.append(record)
    return regions, records


def distances_to_centers(records, regions):
    return np.array(
        [
            np.hypot(r["x"] - regions[r[SET_KEY_FIELD]].center.x, r["y"] - regions[r[SET_KEY_FIELD]].center.y)
            for r in records
        ]
    )


class TestForceSimulation(unittest.TestCase):
    def setUp(self):
        self.regions, self.records = make_scene()
        self.calls = {"start": 0, "tick": 0, "end": 0}
        self.config = ForceConfig(
            on_start=lambda layout: self._count("start"),
            on_tick=lambda layout: self._count("tick"),
            on_end=lambda layout: self._count("end"),
        )
        self.simulation = ForceSimulation(self.config, random_state=636).nodes(self.records).bind(None, self.regions)

    def _count(self, hook):
        self.calls[hook] += 1

    def test_starts_idle(self):
        self.assertEqual(self.simulation.state, SimulationState.idle)
        self.assertFalse(self.simulation.active)

    def test_pull_alone_never_moves_records_away(self):
        self.simulation.config.collider = False
        before = distances_to_centers(self.records, self.regions)
        for _ in range(50):
            self.simulation.step()
            after = distances_to_centers(self.records, self.regions)
            self.assertTrue(np.all(after <= before + 1e-9))
            self.assertTrue(np.all(after < before))
            before = after

    def test_runs_to_the_end(self):
        steps = self.simulation.run()

        self.assertEqual(self.simulation.state, SimulationState.ended)
        self.assertLess(self.simulation.alpha, self.config.alpha_min)
        self.assertTrue(299 <= self.simulation.tick_count <= 302)
        self.assertEqual(steps, self.simulation.tick_count - 1)
        self.assertEqual(self.calls, {"start": 1, "tick": self.simulation.tick_count, "end": 1})
        self.assertFalse(self.simulation.step())

    def test_passes_through_cooling(self):
        states = set()
        while self.simulation.step():
            states.add(self.simulation.state)
        self.assertEqual(states, {SimulationState.running, SimulationState.cooling})

    def test_stop_ends_without_on_end(self):
        for _ in range(5):
            self.simulation.step()
        self.simulation.stop()

        self.assertFalse(self.simulation.step())
        self.assertEqual(self.simulation.state, SimulationState.ended)
        self.assertEqual(self.calls["end"], 0)
        self.assertEqual(self.calls["tick"], 5)

    def test_reheat_resumes(self):
        self.simulation.run()
        self.simulation.reheat(0.5)

        self.assertEqual(self.simulation.state, SimulationState.running)
        self.assertTrue(self.simulation.step())

    def test_records_end_near_their_centers(self):
        self.simulation.run()
        for key, region in self.regions.items():
            P = np.array([(r["x"], r["y"]) for r in region.records])
            np.testing.assert_allclose(P.mean(axis=0), region.center, atol=20.0)

    def test_configuration_updates_apply_to_the_live_simulation(self):
        self.simulation.step()
        apply_options(self.simulation.config, {"padding": 6.0, "unknown": 1})

        self.assertEqual(self.simulation.config.padding, 6.0)
        self.assertFalse(hasattr(self.simulation.config, "unknown"))
        np.testing.assert_allclose(self.simulation.collision_radii(), 14.0)


def test_collision_separates_coincident_records():
    region = Region(key="A", member_sets=["A"], center=Point(0.0, 0.0))
    records = [{SET_KEY_FIELD: "A", "x": 0.0, "y": 0.0, "r": 5.0} for _ in range(2)]
    region.records = records

    simulation = ForceSimulation(random_state=0).nodes(records).bind(None, {"A": region})
    simulation.run()

    a, b = records
    assert np.hypot(a["x"] - b["x"], a["y"] - b["y"]) > 12.0


def test_records_of_unknown_regions_are_not_pulled():
    records = [{SET_KEY_FIELD: "Z", "x": 5.0, "y": 5.0}]
    simulation = ForceSimulation(ForceConfig(collider=False)).nodes(records).bind(None, {})
    simulation.step()

    assert (records[0]["x"], records[0]["y"]) == (5.0, 5.0)


def test_records_without_position_or_region_are_seeded():
    records = [{"x": None, "y": None}, {}]
    simulation = ForceSimulation().nodes(records).bind(None, {})
    simulation.initialize_positions()

    assert all(r["x"] is not None and r["y"] is not None for r in records)
    assert (records[0]["x"], records[0]["y"]) != (records[1]["x"], records[1]["y"])


def test_collision_radius_is_capped():
    records = [{"r": 2.0}, {"r": 20.0}, {}]
    simulation = ForceSimulation(ForceConfig(padding=1.0, max_radius=8.0)).nodes(records)

    np.testing.assert_allclose(simulation.collision_radii(), [3.0, 9.0, 9.0])
