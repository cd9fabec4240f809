import math
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import numpy as np

from bubbleset.circle_intersection import Circle, Point, contained_in_circles, out_of_circles
from bubbleset.config import DistributeConfig, ForceConfig, PackConfig, apply_options
from bubbleset.packer import pack_leaves
from bubbleset.sets import Region
from bubbleset.simulation import ForceSimulation, SimulationState

RandomState = Union[None, int, np.random.Generator]


class PackingStrategy(str, Enum):
    pack = "pack"
    distribute = "distribute"
    force = "force"


def _place(record, point):
    record["x"], record["y"] = float(point.x), float(point.y)


# ---------------- pack ----------------


def pack_regions(regions: Mapping[str, Region], config: Optional[PackConfig] = None):
    """Circle-pack the records of every region into the square of side 2 * inner_radius centred on the
    region's center. Records get the centers of their leaves."""
    config = config if config is not None else PackConfig()
    if config.weighting not in ("uniform", "value"):
        raise ValueError(f'Invalid weighting: {config.weighting}. Please select one of: "uniform", "value".')

    for region in regions.values():
        records = region.records
        if not records or region.center is None:
            continue

        inner_radius = max(region.inner_radius or 0.0, 0.0)
        if config.weighting == "uniform":
            weights = np.ones(len(records), float)
        else:
            weights = np.array([config.value(record) for record in records], float)

        positions, _ = pack_leaves(
            weights,
            2 * inner_radius,
            padding=config.padding,
            fill_frac=config.fill_frac,
            max_sweeps=config.max_sweeps,
        )

        # the packing's origin is the corner of the region's bounding square
        offset = np.array([region.center.x - inner_radius, region.center.y - inner_radius], float)
        for record, p in zip(records, positions + offset):
            _place(record, Point(p[0], p[1]))


# ---------------- distribute ----------------


def split_circles(region: Region, circles: Mapping[str, Circle]):
    in_circles, out_circles = [], []
    for name, circle in circles.items():
        if name in region.member_sets:
            in_circles.append(circle)
        else:
            out_circles.append(circle)
    return in_circles, out_circles


def distribute_regions(
    regions: Mapping[str, Region],
    circles: Mapping[str, Circle],
    config: Optional[DistributeConfig] = None,
    random_state: RandomState = None,
    verbose: bool = False,
) -> int:
    """Scatter the records of every region at random inside it.

    The first record of a region sits on its center. Every following record is sampled around a
    randomly chosen, already placed point, uniformly over a disc of radius
    sqrt(inner_radius^2 + sample_inflation), and accepted if it is inside all the region's circles and
    outside all others. After `max_attempts` rejections the record falls back to the center.

    Returns
    -------
        fallbacks: Number of records placed on their region's center after exhausting the attempts.
    """
    config = config if config is not None else DistributeConfig()
    rng = np.random.default_rng(random_state)
    fallbacks = 0

    for region in regions.values():
        records = region.records
        if not records or region.center is None:
            continue

        center = Point(region.center.x, region.center.y)
        in_circles, out_circles = split_circles(region, circles)
        inner_radius = region.inner_radius or 0.0
        spread = max(inner_radius * inner_radius + config.sample_inflation, 0.0)

        _place(records[0], center)
        queue = [center]

        for record in records[1:]:
            candidate = None
            for _ in range(config.max_attempts):
                anchor = queue[int(rng.integers(len(queue)))]
                a = 2 * math.pi * rng.random()
                r = math.sqrt(rng.random() * spread)
                p = Point(anchor.x + r * math.cos(a), anchor.y + r * math.sin(a))
                if contained_in_circles(p, in_circles, config.epsilon) and out_of_circles(
                    p, out_circles, config.epsilon
                ):
                    candidate = p
                    queue.append(p)
                    break

            if candidate is None:
                candidate = center
                fallbacks += 1
            _place(record, candidate)

    if fallbacks and verbose:
        print(f"{fallbacks} records could not be scattered and were placed on their region's center.")
    return fallbacks


# ---------------- force ----------------


def force_layout(
    layout,
    regions: Dict[str, Region],
    records: Sequence[Any],
    config: Optional[ForceConfig] = None,
    simulation: Optional[ForceSimulation] = None,
    random_state: RandomState = None,
) -> ForceSimulation:
    """Set up (or reuse) a force simulation over the records. The simulation is not stepped here.

    A reused simulation keeps its own configuration, alpha and state while it is still relaxing; it only
    gets the new records and regions. An ended simulation is reheated for the new records. `on_start` is
    called whenever the simulation (re)starts.
    """
    if simulation is None:
        simulation = ForceSimulation(config, random_state=random_state)

    simulation.nodes(records).bind(layout, regions)
    simulation.initialize_positions()
    if simulation.state == SimulationState.ended:
        simulation.reheat()
        simulation.start()
    elif simulation.state == SimulationState.idle:
        simulation.start()
    return simulation


# ---------------- layout adapters ----------------


def pack(layout, records):
    pack_regions(layout.regions, apply_options(PackConfig(), layout.packing_config))


def distribute(layout, records):
    distribute_regions(
        layout.regions,
        layout.current_circles(),
        apply_options(DistributeConfig(), layout.packing_config),
        random_state=layout.rng,
    )


def force(layout, records):
    simulation = layout.packer if isinstance(layout.packer, ForceSimulation) else None
    config = None
    if simulation is None:
        config = apply_options(ForceConfig(), layout.packing_config)
    return force_layout(
        layout,
        layout.regions,
        records,
        config=config,
        simulation=simulation,
        random_state=layout.rng,
    )


STRATEGIES = {
    PackingStrategy.pack: pack,
    PackingStrategy.distribute: distribute,
    PackingStrategy.force: force,
}
