# region Imports
from typing import Iterable, Tuple
import math
import numpy as np
from trail_pathfinder.costs import hazard_scale, falloff
from trail_pathfinder.geometry import Projection
from trail_pathfinder.logging_utils import get_logger
from trail_pathfinder.models import BoundingBox, CostGrid, GeoPoint, Hazard
# endregion

logger = get_logger(__name__)

# region Index Helpers
def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def latlng_to_rc(grid: CostGrid, p: GeoPoint) -> Tuple[int, int]:
    """Snap a point to the nearest in-bounds cell (row, col)."""
    proj = grid.projection
    c = int(round((p.lng - grid.bbox.min_lng) * proj.m_per_lng / grid.resolution_m))
    r = int(round((p.lat - grid.bbox.min_lat) * proj.m_per_lat / grid.resolution_m))
    return _clamp(r, 0, grid.rows - 1), _clamp(c, 0, grid.cols - 1)


def rc_to_latlng(grid: CostGrid, r: int, c: int) -> GeoPoint:
    proj = grid.projection
    lat = grid.bbox.min_lat + (r * grid.resolution_m) / proj.m_per_lat
    lng = grid.bbox.min_lng + (c * grid.resolution_m) / proj.m_per_lng
    return GeoPoint(lat=lat, lng=lng)
# endregion

# region Grid Construction
def grid_shape(bbox: BoundingBox, resolution_m: float, proj: Projection) -> Tuple[int, int]:
    width_m = (bbox.max_lng - bbox.min_lng) * proj.m_per_lng
    height_m = (bbox.max_lat - bbox.min_lat) * proj.m_per_lat
    cols = max(2, math.ceil(width_m / resolution_m))
    rows = max(2, math.ceil(height_m / resolution_m))
    return rows, cols


def empty_grid(bbox: BoundingBox, resolution_m: float) -> CostGrid:
    bbox.validate()
    proj = Projection.for_bbox(bbox)
    rows, cols = grid_shape(bbox, resolution_m, proj)
    cost = np.ones((rows, cols), dtype=np.float32)  # base traversal cost
    return CostGrid(rows=rows, cols=cols, resolution_m=float(resolution_m),
                    bbox=bbox, projection=proj, cost=cost)


def smear_hazard(grid: CostGrid, h: Hazard) -> None:
    """Add ``weight * falloff(d) * confidence`` to every cell within the hazard radius."""
    radius = h.kind.radius_m
    res = grid.resolution_m
    r_cells = math.ceil(radius / res)
    r, c = latlng_to_rc(grid, h.position)

    r0, r1 = max(0, r - r_cells), min(grid.rows - 1, r + r_cells)
    c0, c1 = max(0, c - r_cells), min(grid.cols - 1, c + r_cells)

    dr = np.arange(r0, r1 + 1)[:, None] - r
    dc = np.arange(c0, c1 + 1)[None, :] - c
    d_m = np.hypot(dr, dc) * res
    inside = d_m <= radius

    penalty = h.kind.weight * falloff(d_m) * hazard_scale(h)
    window = grid.cost[r0:r1 + 1, c0:c1 + 1]
    window += np.where(inside, penalty, 0.0).astype(np.float32)


def build_cost_grid(bbox: BoundingBox, resolution_m: float, hazards: Iterable[Hazard]) -> CostGrid:
    grid = empty_grid(bbox, resolution_m)
    n = 0
    for h in hazards:
        smear_hazard(grid, h)
        n += 1
    logger.debug("cost grid built", extra={"rows": grid.rows, "cols": grid.cols,
                                           "resolution_m": grid.resolution_m, "hazards": n})
    return grid
# endregion
