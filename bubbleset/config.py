from dataclasses import dataclass, fields
from typing import Any, Callable, Literal, Mapping, Optional

from bubbleset.circle_intersection import SMALL

Weighting = Literal["uniform", "value"]


def default_value(record) -> float:
    return record.get("value", 1.0)


@dataclass
class PackConfig:
    """Options of the pack strategy.

    Attributes
    ----------
    padding: float (default 0.0)
        Gap kept between neighboring leaves, in canvas units.
    value: Callable (default reads the record's `value` field)
        Weight of a record when `weighting` is "value".
    weighting: {"uniform", "value"} (default "uniform")
        With "uniform" every record gets the same leaf size, regardless of `value`.
    fill_frac: float (default 1.0)
        Fraction of the region's inner radius that the packed leaves may occupy.
    max_sweeps: int (default 60)
        Upper bound on the overlap separation sweeps.
    """

    padding: float = 0.0
    value: Callable[[Any], float] = default_value
    weighting: Weighting = "uniform"
    fill_frac: float = 1.0
    max_sweeps: int = 60


@dataclass
class DistributeConfig:
    max_attempts: int = 500
    # Added to the squared inner radius when sampling, lets points land slightly past it.
    sample_inflation: float = 100.0
    epsilon: float = SMALL


@dataclass
class ForceConfig:
    padding: float = 3.0
    max_radius: float = 8.0
    collider: bool = True
    center_strength: float = 0.2
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    cooling_threshold: float = 0.1
    on_start: Optional[Callable[[Any], None]] = None
    on_tick: Optional[Callable[[Any], None]] = None
    on_end: Optional[Callable[[Any], None]] = None


def apply_options(config, options: Optional[Mapping[str, Any]], verbose: bool = False):
    """Copy every option whose key names a field of the config dataclass. Other keys are ignored.

    Returns the config.
    """
    if not options:
        return config
    known = {f.name for f in fields(config)}
    ignored = []
    for key, value in options.items():
        if key in known:
            setattr(config, key, value)
        else:
            ignored.append(key)
    if ignored and verbose:
        print(f"Ignoring unknown {type(config).__name__} options: {', '.join(ignored)}.")
    return config
