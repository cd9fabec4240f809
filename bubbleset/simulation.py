import math
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from bubbleset.config import ForceConfig
from bubbleset.packer import GOLDEN_ANGLE, candidate_pairs
from bubbleset.sets import SET_KEY_FIELD, Region

INITIAL_RADIUS = 10.0


class SimulationState(str, Enum):
    idle = "idle"
    running = "running"
    cooling = "cooling"
    ended = "ended"


def _has_position(record) -> bool:
    return record.get("x") is not None and record.get("y") is not None


class ForceSimulation:
    """Relaxation of record positions towards the centers of their regions.

    The simulation is stepped from the outside: every call of `step` performs one tick, during which
    records are kept from overlapping (collision on radius `min(r, max_radius) + padding`) and each
    record is pulled towards its region center by `center_strength * alpha`. Alpha decays geometrically
    towards `alpha_target`; once it drops below `alpha_min` the simulation ends and calls `on_end`.
    `stop` requests cancellation, which takes effect at the next step without calling `on_end`.

    States: idle -> running -> cooling (alpha below `cooling_threshold`) -> ended.
    """

    def __init__(self, config: Optional[ForceConfig] = None, random_state: Optional[int] = None):
        self.config = config if config is not None else ForceConfig()
        self.state = SimulationState.idle
        self.alpha = 1.0
        self.layout: Any = None
        self.regions: Dict[str, Region] = {}
        self.records: List[Any] = []
        self.velocities = np.zeros((0, 2), float)
        self.tick_count = 0
        self._stop_requested = False
        self._rng = np.random.default_rng(random_state)

    # ---------------- setup ----------------

    def nodes(self, records: Sequence[Any]):
        self.records = list(records)
        self.velocities = np.zeros((len(self.records), 2), float)
        return self

    def bind(self, layout, regions: Dict[str, Region]):
        self.layout = layout
        self.regions = regions
        return self

    def initialize_positions(self):
        """Seed records without a position at their region's center; records without a region go on a
        small spiral around the origin."""
        unplaced = 0
        for record in self.records:
            if _has_position(record):
                continue
            region = self.regions.get(record.get(SET_KEY_FIELD))
            if region is not None and region.center is not None:
                record["x"], record["y"] = region.center.x, region.center.y
            else:
                rho = INITIAL_RADIUS * math.sqrt(0.5 + unplaced)
                theta = unplaced * GOLDEN_ANGLE
                record["x"], record["y"] = rho * math.cos(theta), rho * math.sin(theta)
                unplaced += 1

    def collision_radii(self) -> np.ndarray:
        cfg = self.config
        radii = []
        for record in self.records:
            r = record.get("r")
            radii.append(min(cfg.max_radius if r is None else r, cfg.max_radius) + cfg.padding)
        return np.array(radii, float)

    # ---------------- lifecycle ----------------

    def start(self):
        self._stop_requested = False
        self.state = SimulationState.running
        if self.config.on_start is not None:
            self.config.on_start(self.layout)

    def stop(self):
        self._stop_requested = True

    def reheat(self, alpha: float = 1.0):
        self.alpha = alpha
        self._stop_requested = False
        if self.state == SimulationState.ended:
            self.state = SimulationState.running

    @property
    def active(self) -> bool:
        return self.state in (SimulationState.running, SimulationState.cooling)

    def step(self) -> bool:
        """Perform one tick. Returns False once the simulation has ended."""
        if self._stop_requested:
            self.state = SimulationState.ended
            return False
        if self.state == SimulationState.ended:
            return False
        if self.state == SimulationState.idle:
            self.initialize_positions()
            self.start()

        cfg = self.config
        self.alpha += (cfg.alpha_target - self.alpha) * cfg.alpha_decay

        P = self._positions()
        if len(self.records) and len(self.velocities) != len(self.records):
            self.velocities = np.zeros((len(self.records), 2), float)
        if cfg.collider:
            self._collide(P)
        self.velocities *= 1 - cfg.velocity_decay
        P += self.velocities
        self._pull_to_centers(P)
        self._write_back(P)
        self.tick_count += 1

        if cfg.on_tick is not None:
            cfg.on_tick(self.layout)

        if self.alpha < cfg.alpha_min:
            self.state = SimulationState.ended
            if cfg.on_end is not None:
                cfg.on_end(self.layout)
            return False

        self.state = (
            SimulationState.cooling if self.alpha < cfg.cooling_threshold else SimulationState.running
        )
        return True

    def run(self, max_steps: Optional[int] = None, verbose: bool = False) -> int:
        """Pump `step` until the simulation ends, is stopped, or `max_steps` ticks were done."""
        cfg = self.config
        if max_steps is None:
            ratio = cfg.alpha_min / max(self.alpha, 1e-12)
            decay = 1 - cfg.alpha_decay
            max_steps = int(math.ceil(math.log(ratio) / math.log(decay))) + 1 if 0 < decay < 1 else 1
            max_steps = max(max_steps, 1)

        steps = 0
        for _ in tqdm(range(max_steps), disable=not verbose, desc="Relaxing"):
            if not self.step():
                break
            steps += 1
        return steps

    # ---------------- forces ----------------

    def _positions(self) -> np.ndarray:
        if not self.records:
            return np.zeros((0, 2), float)
        return np.array([(record["x"], record["y"]) for record in self.records], float)

    def _write_back(self, P: np.ndarray):
        for record, (x, y) in zip(self.records, P):
            record["x"], record["y"] = float(x), float(y)

    def _collide(self, P: np.ndarray):
        n = len(P)
        if n <= 1:
            return
        r = self.collision_radii()
        V = self.velocities
        Q = P + V
        I, J = candidate_pairs(Q, 2.0 * float(np.max(r)))
        if I.size == 0:
            return

        d = Q[I] - Q[J]
        length = np.linalg.norm(d, axis=1)
        reach = r[I] + r[J]
        mask = length < reach
        if not np.any(mask):
            return
        I, J, d, length, reach = I[mask], J[mask], d[mask], length[mask], reach[mask]

        # coincident records get a tiny random separation
        z = length < 1e-12
        if np.any(z):
            d[z] = (self._rng.random((int(np.count_nonzero(z)), 2)) - 0.5) * 1e-6
            length[z] = np.linalg.norm(d[z], axis=1)

        k = (reach - length) / length
        push = d * k[:, None]
        ri2, rj2 = r[I] ** 2, r[J] ** 2
        share = np.divide(rj2, ri2 + rj2, out=np.full_like(rj2, 0.5), where=(ri2 + rj2) > 0)

        np.add.at(V, I, push * share[:, None])
        np.add.at(V, J, -push * (1 - share)[:, None])

    def _pull_to_centers(self, P: np.ndarray):
        strength = self.config.center_strength * self.alpha
        for i, record in enumerate(self.records):
            region = self.regions.get(record.get(SET_KEY_FIELD))
            if region is None or region.center is None:
                continue
            P[i, 0] += (region.center.x - P[i, 0]) * strength
            P[i, 1] += (region.center.y - P[i, 1]) * strength
