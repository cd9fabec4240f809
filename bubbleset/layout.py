import math
import warnings
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bubbleset.circle_intersection import Circle, intersection_area_path
from bubbleset.config import apply_options
from bubbleset.diagram import compute_text_centres, normalize_solution, scale_solution
from bubbleset.region_geometry import compute_inner_radius
from bubbleset.sets import Region, default_sets_accessor, extract_sets, identity_size, solver_input
from bubbleset.simulation import ForceSimulation
from bubbleset.strategies import STRATEGIES, PackingStrategy
from bubbleset.transitions import TrackedCircle, carry_forward, path_tween

Strategy = Union[str, PackingStrategy, Callable[[Any, List[Any]], Any]]


def _as_circle(c) -> Circle:
    if isinstance(c, Circle):
        return c
    return Circle(float(c["x"]), float(c["y"]), float(c["radius"]))


def _resolve_strategy(strategy: Strategy):
    if isinstance(strategy, PackingStrategy):
        return STRATEGIES[strategy]
    if callable(strategy):
        return strategy
    try:
        return STRATEGIES[PackingStrategy[strategy]]
    except KeyError:
        raise ValueError(
            f"Invalid packing strategy: {strategy}. "
            f'Please select one from: {", ".join(s.value for s in PackingStrategy)}.'
        )


class BubbleSet:
    """Bubble set layout

    Places data records inside the regions of an area-proportional Euler diagram of the sets they
    belong to.

    Parameters
    ----------
    size: Tuple[float, float] (default (1, 1))
        Width and height of the canvas the diagram is scaled into.

    padding: float (default 0)
        Margin kept free on every side of the canvas.

    sets_accessor: Callable (default reads the record's `set` field)
        Returns the names of the sets a record belongs to.

    sets_size: Callable (default identity)
        Transform of each region's record count before it is handed to the circle solver.

    packing_strategy: {"pack", "distribute", "force"} or callable (default "pack")
        How records are placed inside their region. A callable receives the layout and the records
        and its return value is kept as `packer`.

    packing_config: Optional[dict] (default None)
        Options of the packing strategy, e.g. {"padding": 2} for pack or {"max_radius": 6} for force.
        Keys the strategy does not know are ignored.

    layout_function: Callable
        The circle solver: receives a list of {"key", "sets", "size"} descriptors and returns a mapping
        from set name to a circle ({"x", "y", "radius"} or `Circle`). See `diagram.fixed_solution`.

    orientation: float (default pi / 2)
        Angle of the second largest circle around the largest one after normalization.

    normalize: bool (default True)
        If true, orient the solved diagram before scaling it to the canvas.

    text_centres: Callable (default `diagram.compute_text_centres`)
        Computes the center of every region from the scaled circles.

    outline: Callable (default `circle_intersection.intersection_area_path`)
        Renders the boundary of a list of circles' common intersection for the region tweens.

    default_inner_radius: float (default 0)
        Inner radius of regions for which no bound can be computed.

    random_state: Optional[int] (default None)
        Seed of the random placements of the distribute and force strategies.

    Attributes
    ----------
    regions: Dict[str, Region]
        The regions of the last layout, keyed by membership signature.

    circles: Dict[str, TrackedCircle]
        The scaled circles of the last layout, along with the geometry they are animated from.

    centres: Dict[str, Point]
        Region centers of the last layout.

    packer: Any
        Whatever the packing strategy returned, the `ForceSimulation` for "force".
    """

    def __init__(
        self,
        size: Tuple[float, float] = (1.0, 1.0),
        padding: float = 0.0,
        sets_accessor: Callable[[Any], Sequence[str]] = default_sets_accessor,
        sets_size: Callable[[float], float] = identity_size,
        packing_strategy: Optional[Strategy] = None,
        packing_config: Optional[Mapping[str, Any]] = None,
        layout_function: Optional[Callable[[List[Dict[str, Any]]], Mapping[str, Any]]] = None,
        orientation: float = math.pi / 2,
        normalize: bool = True,
        text_centres: Callable = compute_text_centres,
        outline: Callable = intersection_area_path,
        default_inner_radius: float = 0.0,
        random_state: Optional[int] = None,
        packing_stragegy: Optional[Strategy] = None,
    ):
        if packing_stragegy is not None:
            warnings.warn(
                "The argument `packing_stragegy` is being deprecated in favor of `packing_strategy`.",
                DeprecationWarning,
            )
            if packing_strategy is not None and packing_strategy != packing_stragegy:
                raise ValueError(
                    f"Conflicting values: packing_strategy={packing_strategy}, packing_stragegy={packing_stragegy}."
                )
            packing_strategy = packing_stragegy

        if len(size) != 2 or size[0] <= 0 or size[1] <= 0:
            raise ValueError(f"Invalid canvas size: {size}. Width and height should be positive.")

        self.size = (float(size[0]), float(size[1]))
        self.padding = padding
        self.sets_accessor = sets_accessor
        self.sets_size = sets_size
        self.packing_strategy = _resolve_strategy(packing_strategy if packing_strategy is not None else "pack")
        self.packing_config: Dict[str, Any] = dict(packing_config or {})
        self.layout_function = layout_function
        self.orientation = orientation
        self.normalize = normalize
        self.text_centres = text_centres
        self.outline = outline
        self.default_inner_radius = default_inner_radius
        self.random_state = random_state
        self.rng = np.random.default_rng(random_state)

        self.regions: Dict[str, Region] = {}
        self.circles: Dict[str, TrackedCircle] = {}
        self.centres: Dict[str, Any] = {}
        self.packer: Any = None
        self.records: Optional[List[Any]] = None

    def fit(self, records: Sequence[Any], verbose: bool = False, relax: bool = False) -> List[Any]:
        """
        Lay out the regions of the records' sets and place each record inside its region.

        Parameters
        ----------
        records: sequence of dicts
            The data. Records get their position under "x" and "y" and their membership signature under
            `sets.SET_KEY_FIELD`. Records without sets are left out of every region.

        verbose: bool (default False)
            If true, print progress messages.

        relax: bool (default False)
            If true and the strategy is "force", run the relaxation to its end before returning.
            Otherwise the returned simulation in `packer` is left to be stepped by the caller.
        """
        if self.layout_function is None:
            raise ValueError(
                "Unable to lay out the sets as no circle solver is set. Please provide `layout_function`."
            )
        records = list(records)

        if verbose:
            print("Extracting sets...")
        regions = extract_sets(records, self.sets_accessor, self.sets_size)
        self.regions = regions

        if verbose:
            print(f"Solving the circles of {len(regions)} regions...")
        solution = {name: _as_circle(c) for name, c in self.layout_function(solver_input(regions)).items()}
        if self.normalize:
            solution = normalize_solution(solution, self.orientation)

        width, height = self.size
        scaled = scale_solution(solution, width, height, self.padding)
        self.circles = carry_forward(scaled, self.circles)
        current = self.current_circles()

        if verbose:
            print("Computing region centers...")
        self.centres = self.text_centres(current, regions)

        for key, region in regions.items():
            region.path = path_tween(region, self.circles, self.size, self.outline)
            region.center = self.centres.get(key)
            region.inner_radius = compute_inner_radius(region, current, self.default_inner_radius)

        if verbose:
            print("Placing records...")
        self.packer = self.packing_strategy(self, records)
        if relax and isinstance(self.packer, ForceSimulation):
            self.packer.run(verbose=verbose)

        self.records = records
        return records

    def fit_transform(self, records: Sequence[Any], verbose: bool = False, relax: bool = False) -> np.ndarray:
        """Same as `fit`, returning an (n, 2) array of the positions. Unplaced records get NaN rows."""
        records = self.fit(records, verbose=verbose, relax=relax)
        positions = np.full((len(records), 2), np.nan)
        for i, record in enumerate(records):
            if record.get("x") is not None and record.get("y") is not None:
                positions[i] = record["x"], record["y"]
        return positions

    def current_circles(self) -> Dict[str, Circle]:
        return {name: tracked.current for name, tracked in self.circles.items()}

    def tween(self, key: str):
        return self.regions[key].path

    def set_packing_config(self, verbose: bool = False, **options):
        """Merge options into the packing configuration; a live force simulation picks them up as well."""
        self.packing_config.update(options)
        if isinstance(self.packer, ForceSimulation):
            apply_options(self.packer.config, options, verbose=verbose)
        return self
