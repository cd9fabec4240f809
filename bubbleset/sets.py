from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from bubbleset.circle_intersection import Point

SET_KEY_FIELD = "_set_key"


@dataclass
class Region:
    """One exact combination of set memberships and the records that carry it."""

    key: str
    member_sets: List[str]
    count: float = 0
    records: List[Any] = field(default_factory=list)
    center: Optional[Point] = None
    inner_radius: Optional[float] = None
    path: Optional[Callable[[float], Any]] = None

    def solver_descriptor(self) -> Dict[str, Any]:
        return {"key": self.key, "sets": list(self.member_sets), "size": self.count}


def default_sets_accessor(record) -> Sequence[str]:
    return record.get("set") or []


def identity_size(size):
    return size


def membership_key(sets: Iterable[str]) -> str:
    return ",".join(sorted(sets))


def extract_sets(
    records: Iterable[Any],
    sets_accessor: Callable[[Any], Sequence[str]] = default_sets_accessor,
    sets_size: Callable[[float], float] = identity_size,
) -> Dict[str, Region]:
    """Group records by their exact set-membership signature.

    Parameters
    ----------
        records: Mutable mappings. Each one aggregated receives its signature under `SET_KEY_FIELD`.
        sets_accessor: Returns the list of set names a record belongs to. Records with an empty list are
            left out of every region.
        sets_size: Transform applied to every region's count once aggregation is done.

    Returns
    -------
        regions: Regions keyed by signature, exact combinations in order of first appearance followed by
            the single-set regions that no record hits exactly. The single-set counts are the number of
            records in each set.
    """
    regions: Dict[str, Region] = {}
    individual_sets: Dict[str, Region] = {}

    for record in records:
        sets = list(sets_accessor(record) or [])
        if not sets:
            continue

        for name in sets:
            if name in individual_sets:
                individual_sets[name].count += 1
            else:
                individual_sets[name] = Region(key=name, member_sets=[name], count=1)

        key = membership_key(sets)
        record[SET_KEY_FIELD] = key
        if key in regions:
            regions[key].count += 1
            regions[key].records.append(record)
        else:
            regions[key] = Region(key=key, member_sets=sorted(sets), count=1, records=[record])

    for name, region in individual_sets.items():
        if name not in regions:
            regions[name] = region

    for region in regions.values():
        region.count = sets_size(region.count)

    return regions


def solver_input(regions: Dict[str, Region]) -> List[Dict[str, Any]]:
    return [region.solver_descriptor() for region in regions.values()]
