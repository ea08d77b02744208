# region Imports
from __future__ import annotations
import json
from typing import Any, Dict, Iterable, Optional, Sequence
from trail_pathfinder.models import GeoPoint, Hazard, RiskResult
# endregion

# region Route Feature
def route_feature(path: Sequence[GeoPoint], properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """GeoJSON LineString Feature; coordinates are [lng, lat]."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [[p.lng, p.lat] for p in path],
        },
        "properties": dict(properties or {}),
    }
# endregion

# region Hazard Features
def hazard_feature(h: Hazard, risk: Optional[RiskResult] = None) -> Dict[str, Any]:
    props: Dict[str, Any] = {"type": h.kind.label}
    if h.id is not None:
        props["id"] = h.id
    if h.confidence is not None:
        props["confidence"] = h.confidence
    if risk is not None:
        props["riskScore"] = risk.risk_score
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [h.position.lng, h.position.lat]},
        "properties": props,
    }


def feature_collection(features: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}
# endregion

# region File Output
def write_geojson(doc: Dict[str, Any], out_path: str = "route.geojson") -> str:
    with open(out_path, "w") as f:
        json.dump(doc, f, indent=2)
    return out_path
# endregion
