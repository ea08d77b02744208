# region Imports
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
import math
import requests
from trail_pathfinder.config import (
    BASE_RISK_POINTS, DEFAULT_RISK_CONFIDENCE, DEFAULT_RISK_RADIUS_M,
    MAX_NEIGHBOR_BONUS, MAX_RISK_SCORE, RISK_SERVICE_KEY, RISK_SERVICE_TIMEOUT_S,
    RISK_SERVICE_URL,
)
from trail_pathfinder.geometry import Projection
from trail_pathfinder.logging_utils import get_logger
from trail_pathfinder.models import GeoPoint, Hazard, RiskResult
# endregion

logger = get_logger(__name__)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))

# region Local Scorer
def score_risks(hazards: Sequence[Hazard], radius_m: float = DEFAULT_RISK_RADIUS_M) -> List[RiskResult]:
    """0-10 risk per hazard: confidence (up to 6) plus nearby-hazard density (up to 5)."""
    if not hazards:
        return []

    mid_lat = sum(h.position.lat for h in hazards) / len(hazards)
    proj = Projection.at_latitude(mid_lat)

    results = []
    for i, h in enumerate(hazards):
        conf = DEFAULT_RISK_CONFIDENCE if h.confidence is None else _clamp(float(h.confidence), 0.0, 1.0)
        base = conf * BASE_RISK_POINTS

        bonus = 0.0
        if radius_m > 0:
            for j, other in enumerate(hazards):
                if j == i:
                    continue
                d = proj.distance_m(h.position, other.position)
                if d <= radius_m:
                    bonus += (radius_m - d) / radius_m
        bonus = _clamp(bonus, 0.0, MAX_NEIGHBOR_BONUS)

        score = _clamp(base + bonus, 0.0, MAX_RISK_SCORE)
        results.append(RiskResult(id=h.id, position=h.position, risk_score=score))
    return results
# endregion

# region Wire Format
def hazard_to_wire(h: Hazard) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "latitude": h.position.lat,
        "longitude": h.position.lng,
        "type": h.kind.label if h.type_name is None else h.type_name,
    }
    if h.id is not None:
        out["id"] = h.id
    if h.confidence is not None:
        out["confidence"] = h.confidence
    return out


def _finite_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def parse_service_risks(body: Any, hazards: Sequence[Hazard]) -> Optional[List[RiskResult]]:
    """Turn an external response into results, or None when it can't be trusted.

    Trusted means: a ``risks`` list with one entry per submitted hazard, in
    submission order, each with finite ``latitude``, ``longitude`` and
    ``riskScore``. An entry id must match its hazard's id when both are set.
    """
    if not isinstance(body, dict):
        return None
    risks = body.get("risks")
    if not isinstance(risks, list) or len(risks) != len(hazards):
        return None

    out = []
    for entry, h in zip(risks, hazards):
        if not isinstance(entry, dict):
            return None
        lat, lng, score = entry.get("latitude"), entry.get("longitude"), entry.get("riskScore")
        if not (_finite_number(lat) and _finite_number(lng) and _finite_number(score)):
            return None
        rid = entry.get("id")
        if rid is None:
            rid = h.id
        elif h.id is None or str(rid) != str(h.id):
            return None
        out.append(RiskResult(
            id=None if rid is None else str(rid),
            position=GeoPoint(lat=float(lat), lng=float(lng)),
            risk_score=_clamp(float(score), 0.0, MAX_RISK_SCORE),
        ))
    return out
# endregion

# region External Service Client
class RiskClient:
    """Delegates scoring to an external service, falling back to ``score_risks``."""

    def __init__(self, endpoint: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: float = RISK_SERVICE_TIMEOUT_S):
        self.endpoint = RISK_SERVICE_URL if endpoint is None else endpoint
        self.api_key = RISK_SERVICE_KEY if api_key is None else api_key
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint and self.api_key)

    def _remote(self, hazards: Sequence[Hazard], radius_m: float) -> Optional[List[RiskResult]]:
        try:
            r = requests.post(
                self.endpoint,
                json={"hazards": [hazard_to_wire(h) for h in hazards], "radiusMeters": radius_m},
                headers={"Ocp-Apim-Subscription-Key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("risk service call failed, scoring locally", extra={"error": str(e)})
            return None

        if not r.ok:
            logger.warning("risk service returned error, scoring locally",
                           extra={"status": r.status_code, "body": r.text[:500]})
            return None

        try:
            body = r.json()
        except ValueError:
            logger.warning("risk service returned invalid JSON, scoring locally")
            return None

        risks = parse_service_risks(body, hazards)
        if risks is None:
            logger.warning("risk service response rejected, scoring locally",
                           extra={"hazards": len(hazards)})
        return risks

    def score(self, hazards: Sequence[Hazard], radius_m: float = DEFAULT_RISK_RADIUS_M) -> List[RiskResult]:
        if not hazards:
            return []
        if self.enabled:
            risks = self._remote(hazards, radius_m)
            if risks is not None:
                return risks
        return score_risks(hazards, radius_m)
# endregion
