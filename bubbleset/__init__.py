from bubbleset.circle_intersection import Circle, Point, intersection_area, intersection_area_path
from bubbleset.config import DistributeConfig, ForceConfig, PackConfig
from bubbleset.diagram import compute_text_centres, fixed_solution, normalize_solution, scale_solution
from bubbleset.layout import BubbleSet
from bubbleset.region_geometry import compute_inner_radius
from bubbleset.sets import Region, extract_sets
from bubbleset.simulation import ForceSimulation, SimulationState
from bubbleset.strategies import (
    PackingStrategy,
    distribute,
    distribute_regions,
    force,
    force_layout,
    pack,
    pack_regions,
)
from bubbleset.transitions import TrackedCircle, path_tween
