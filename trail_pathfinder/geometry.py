# region Imports
from __future__ import annotations
from dataclasses import dataclass
import math
from trail_pathfinder.config import METERS_PER_DEG_LAT
from trail_pathfinder.models import BoundingBox, GeoPoint
# endregion

# region Meters per Degree
def meters_per_deg_lat() -> float:
    return METERS_PER_DEG_LAT


def meters_per_deg_lng(lat: float) -> float:
    return METERS_PER_DEG_LAT * math.cos(math.radians(lat))
# endregion

# region Local Planar Projection
@dataclass(frozen=True)
class Projection:
    """Flat-earth factors at one reference latitude.

    Valid for boxes a few kilometers across; not geodesically exact.
    """
    ref_lat: float
    m_per_lat: float
    m_per_lng: float

    @classmethod
    def at_latitude(cls, lat: float) -> "Projection":
        return cls(lat, meters_per_deg_lat(), meters_per_deg_lng(lat))

    @classmethod
    def for_bbox(cls, bbox: BoundingBox) -> "Projection":
        return cls.at_latitude(bbox.mid_lat)

    def delta_m(self, a: GeoPoint, b: GeoPoint):
        """(dx, dy) in meters from a to b."""
        return (b.lng - a.lng) * self.m_per_lng, (b.lat - a.lat) * self.m_per_lat

    def distance_m(self, a: GeoPoint, b: GeoPoint) -> float:
        dx, dy = self.delta_m(a, b)
        return math.hypot(dx, dy)

    def offset(self, p: GeoPoint, dx_m: float, dy_m: float) -> GeoPoint:
        return GeoPoint(lat=p.lat + dy_m / self.m_per_lat, lng=p.lng + dx_m / self.m_per_lng)
# endregion

# region Turn Angle
def turn_angle(a: GeoPoint, b: GeoPoint, c: GeoPoint, projection: Projection) -> float:
    """Heading change at b in radians, in [0, pi]. 0 = straight on."""
    ax, ay = projection.delta_m(a, b)
    bx, by = projection.delta_m(b, c)
    na, nb = math.hypot(ax, ay), math.hypot(bx, by)
    if na <= 1e-9 or nb <= 1e-9:
        return 0.0
    cos_t = (ax * bx + ay * by) / (na * nb)
    return math.acos(max(-1.0, min(1.0, cos_t)))
# endregion

# region BBox Margin
def expand_bbox(bbox: BoundingBox, fraction: float) -> BoundingBox:
    dlng = (bbox.max_lng - bbox.min_lng) * fraction
    dlat = (bbox.max_lat - bbox.min_lat) * fraction
    return BoundingBox(
        bbox.min_lng - dlng,
        bbox.min_lat - dlat,
        bbox.max_lng + dlng,
        bbox.max_lat + dlat,
    )
# endregion
