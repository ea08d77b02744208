# models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple
import math
import numpy as np

from trail_pathfinder.errors import InvalidRequestError

Cell = Tuple[int, int]


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def is_finite(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)


@dataclass(frozen=True)
class BoundingBox:
    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def from_list(cls, values: Sequence[Any]) -> "BoundingBox":
        """Build from ``[minLng, minLat, maxLng, maxLat]`` and validate."""
        if not isinstance(values, (list, tuple)) or len(values) != 4:
            raise InvalidRequestError("bbox must be [minLng, minLat, maxLng, maxLat]")
        nums = []
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise InvalidRequestError("bbox values must be numbers")
            nums.append(float(v))
        bbox = cls(*nums)
        bbox.validate()
        return bbox

    def validate(self) -> None:
        vals = (self.min_lng, self.min_lat, self.max_lng, self.max_lat)
        if not all(math.isfinite(v) for v in vals):
            raise InvalidRequestError("bbox values must be finite")
        if not self.min_lng < self.max_lng:
            raise InvalidRequestError("bbox minLng must be less than maxLng")
        if not self.min_lat < self.max_lat:
            raise InvalidRequestError("bbox minLat must be less than maxLat")

    @property
    def mid_lat(self) -> float:
        return 0.5 * (self.min_lat + self.max_lat)

    def contains(self, p: GeoPoint) -> bool:
        return self.min_lng <= p.lng <= self.max_lng and self.min_lat <= p.lat <= self.max_lat

    def to_list(self) -> List[float]:
        return [self.min_lng, self.min_lat, self.max_lng, self.max_lat]


class HazardKind(Enum):
    # value: (name, radius_m, weight)
    DEBRIS = ("debris", 10.0, 4.0)
    BLOCKAGE = ("blockage", 25.0, 20.0)
    WATER = ("water", 30.0, 30.0)
    BRANCH = ("branch", 8.0, 2.0)
    OTHER = ("other", 8.0, 2.0)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def radius_m(self) -> float:
        return self.value[1]

    @property
    def weight(self) -> float:
        return self.value[2]

    @classmethod
    def parse(cls, name: Optional[str]) -> "HazardKind":
        if not isinstance(name, str):
            return cls.OTHER
        key = name.strip().lower()
        if key == "blocked":
            return cls.BLOCKAGE
        for kind in cls:
            if kind.label == key:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class Hazard:
    kind: HazardKind
    position: GeoPoint
    confidence: Optional[float] = None
    id: Optional[str] = None
    type_name: Optional[str] = None   # caller's type string, as submitted


@dataclass
class CostGrid:
    rows: int
    cols: int
    resolution_m: float
    bbox: BoundingBox
    projection: Any               # geometry.Projection
    cost: np.ndarray              # (rows, cols) float32, row 0 at min_lat


@dataclass
class SearchResult:
    path: Optional[List[Cell]]
    cost: float
    iterations: int
    expanded_order: List[Cell] = field(default_factory=list)
    status: str = "found"         # found | exhausted | iteration_limit

    @property
    def found(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class RiskResult:
    id: Optional[str]
    position: GeoPoint
    risk_score: float

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.id is not None:
            out["id"] = self.id
        out.update({
            "latitude": self.position.lat,
            "longitude": self.position.lng,
            "riskScore": self.risk_score,
        })
        return out
