# errors.py
from __future__ import annotations
from typing import Any, Dict, List, Optional


class TrailRoutingError(Exception):
    """Base class for engine errors."""


class InvalidRequestError(TrailRoutingError, ValueError):
    """Malformed input, rejected before any grid work."""


class NoRouteError(TrailRoutingError):
    """The search finished without reaching the goal cell.

    ``reason`` is ``"exhausted"`` when the frontier emptied and
    ``"iteration_limit"`` when the runaway guard stopped the search.
    """

    def __init__(
        self,
        reason: str,
        *,
        bbox: Optional[List[float]] = None,
        hazard_count: int = 0,
        rows: int = 0,
        cols: int = 0,
    ):
        super().__init__(f"no route ({reason})")
        self.reason = reason
        self.bbox = bbox
        self.hazard_count = hazard_count
        self.rows = rows
        self.cols = cols

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "no-route",
            "reason": self.reason,
            "bbox": self.bbox,
            "hazardCount": self.hazard_count,
            "grid": {"rows": self.rows, "cols": self.cols},
        }
