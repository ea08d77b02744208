# region Imports
from __future__ import annotations
from typing import Any, Dict, List, Sequence
from trail_pathfinder.astar_core import cells_to_points, search_grid
from trail_pathfinder.config import BBOX_MARGIN, SIMPLIFY_RES_FACTOR
from trail_pathfinder.errors import NoRouteError
from trail_pathfinder.export import route_feature
from trail_pathfinder.geometry import expand_bbox
from trail_pathfinder.grid import build_cost_grid, latlng_to_rc
from trail_pathfinder.logging_utils import get_logger
from trail_pathfinder.models import BoundingBox, Hazard
from trail_pathfinder.simplify import simplify_path
from trail_pathfinder.validation import RouteRequest
# endregion

logger = get_logger(__name__)

# region Hazard Selection
def hazards_for_bbox(hazards: Sequence[Hazard], bbox: BoundingBox,
                     margin: float = BBOX_MARGIN) -> List[Hazard]:
    """Hazards inside ``bbox`` grown by ``margin`` of each axis span."""
    area = expand_bbox(bbox, margin)
    return [h for h in hazards if area.contains(h.position)]
# endregion

# region Route Planning
def plan_route(req: RouteRequest, hazards: Sequence[Hazard]) -> Dict[str, Any]:
    """
    Cost grid -> A* -> simplifier. Returns a GeoJSON LineString Feature.

    Raises NoRouteError (with grid context) when the search fails.
    """
    grid = build_cost_grid(req.bbox, req.resolution_m, hazards)
    s_rc = latlng_to_rc(grid, req.start)
    t_rc = latlng_to_rc(grid, req.end)

    result = search_grid(grid, s_rc, t_rc)
    if not result.found:
        raise NoRouteError(result.status, bbox=req.bbox.to_list(), hazard_count=len(hazards),
                           rows=grid.rows, cols=grid.cols)

    dense = cells_to_points(grid, result.path)
    path = simplify_path(dense, SIMPLIFY_RES_FACTOR * grid.resolution_m, grid.projection)

    logger.info("route planned", extra={"raw_nodes": len(dense), "nodes": len(path),
                                        "hazard_count": len(hazards), "iterations": result.iterations})

    return route_feature(path, {
        "resolutionMeters": grid.resolution_m,
        "nodes": len(path),
        "rawNodes": len(dense),
        "hazardCount": len(hazards),
        "grid": {"rows": grid.rows, "cols": grid.cols},
        "cost": float(result.cost),
        "iterations": result.iterations,
    })
# endregion
