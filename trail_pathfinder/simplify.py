# region Imports
from typing import List, Optional, Sequence
import math
from trail_pathfinder.config import TURN_THRESHOLD_DEG
from trail_pathfinder.geometry import Projection, turn_angle
from trail_pathfinder.models import GeoPoint
# endregion

TURN_THRESHOLD_RAD = math.radians(TURN_THRESHOLD_DEG)

# region Path Simplifier
def simplify_path(
    path: Sequence[GeoPoint],
    min_distance_m: float,
    projection: Optional[Projection] = None,
) -> List[GeoPoint]:
    """
    One-pass waypoint reduction for a dense cell path.

    A point is kept when it is farther than ``min_distance_m`` from the last
    kept point, or when it is closer but the path turns by more than 15 degrees
    there. First and last points are always kept; order never changes.
    """
    if len(path) <= 2:
        return list(path)

    if projection is None:
        projection = Projection.at_latitude(sum(p.lat for p in path) / len(path))

    kept = [path[0]]
    for i in range(1, len(path) - 1):
        ref, cand, nxt = kept[-1], path[i], path[i + 1]
        if projection.distance_m(ref, cand) > min_distance_m:
            kept.append(cand)
        elif turn_angle(ref, cand, nxt, projection) > TURN_THRESHOLD_RAD:
            kept.append(cand)
    kept.append(path[-1])
    return kept
# endregion
