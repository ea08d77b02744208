# region Imports
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional
import math
from trail_pathfinder.config import DEFAULT_RES_M, DEFAULT_RISK_RADIUS_M, MAX_GRID_CELLS, MAX_RES_M, MIN_RES_M
from trail_pathfinder.errors import InvalidRequestError
from trail_pathfinder.geometry import Projection
from trail_pathfinder.grid import grid_shape
from trail_pathfinder.models import BoundingBox, GeoPoint, Hazard, HazardKind
# endregion

# region Request Types
@dataclass
class RouteRequest:
    bbox: BoundingBox
    start: GeoPoint
    end: GeoPoint
    resolution_m: float = DEFAULT_RES_M
    hazards: Optional[List[Hazard]] = None


@dataclass
class RiskRequest:
    hazards: Optional[List[Hazard]]
    radius_m: float = DEFAULT_RISK_RADIUS_M
# endregion

# region Field Helpers
def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    v = float(v)
    return v if math.isfinite(v) else None


def parse_point(obj: Any, field: str) -> GeoPoint:
    if not isinstance(obj, dict):
        raise InvalidRequestError(f"{field} must be an object with lat and lng")
    lat, lng = _number(obj.get("lat")), _number(obj.get("lng"))
    if lat is None or lng is None:
        raise InvalidRequestError(f"{field}.lat and {field}.lng must be finite numbers")
    return GeoPoint(lat=lat, lng=lng)


def clamp_resolution(value: Any) -> float:
    res = _number(value)
    if res is None:
        return DEFAULT_RES_M
    return max(MIN_RES_M, min(MAX_RES_M, res))


def ensure_grid_size(bbox: BoundingBox, resolution_m: float, max_cells: int = MAX_GRID_CELLS) -> None:
    rows, cols = grid_shape(bbox, resolution_m, Projection.for_bbox(bbox))
    if rows * cols > max_cells:
        raise InvalidRequestError(
            f"bbox too large for resolution: {rows}x{cols} cells exceeds {max_cells}")
# endregion

# region Hazards
def parse_hazard(item: Any) -> Optional[Hazard]:
    """One hazard record, or None when its coordinates are unusable."""
    if not isinstance(item, dict):
        return None
    pos = item.get("position")
    if isinstance(pos, dict):
        lat, lng = _number(pos.get("lat")), _number(pos.get("lng"))
    else:
        lat, lng = _number(item.get("latitude")), _number(item.get("longitude"))
    if lat is None or lng is None:
        return None

    hid = item.get("id")
    raw_type = item.get("type")
    return Hazard(
        kind=HazardKind.parse(raw_type),
        position=GeoPoint(lat=lat, lng=lng),
        confidence=_number(item.get("confidence")),
        id=None if hid is None else str(hid),
        type_name=raw_type if isinstance(raw_type, str) else None,
    )


def parse_hazards(items: Any) -> List[Hazard]:
    if not isinstance(items, list):
        raise InvalidRequestError("hazards must be a list")
    out = []
    for item in items:
        h = parse_hazard(item)
        if h is not None:
            out.append(h)
    return out
# endregion

# region Requests
def parse_route_request(payload: Any) -> RouteRequest:
    if not isinstance(payload, dict):
        raise InvalidRequestError("request body must be a JSON object")
    if payload.get("bbox") is None or payload.get("start") is None or payload.get("end") is None:
        raise InvalidRequestError("bbox, start, end required")

    bbox = BoundingBox.from_list(payload["bbox"])
    start = parse_point(payload["start"], "start")
    end = parse_point(payload["end"], "end")
    res = clamp_resolution(payload.get("resolutionMeters"))
    ensure_grid_size(bbox, res)

    hazards = None
    if payload.get("hazards") is not None:
        hazards = parse_hazards(payload["hazards"])
    return RouteRequest(bbox=bbox, start=start, end=end, resolution_m=res, hazards=hazards)


def parse_risk_request(payload: Any) -> RiskRequest:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidRequestError("request body must be a JSON object")

    radius = _number(payload.get("radiusMeters"))
    if radius is None or radius <= 0:
        radius = DEFAULT_RISK_RADIUS_M

    hazards = None
    if isinstance(payload.get("hazards"), list):
        hazards = parse_hazards(payload["hazards"])
    return RiskRequest(hazards=hazards, radius_m=radius)
# endregion
