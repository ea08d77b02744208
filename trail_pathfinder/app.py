# app.py — Flask API over the hazard-aware routing and risk engine
# deps: pip install flask numpy pillow matplotlib requests python-json-logger

from __future__ import annotations
from typing import List, Optional
from flask import Flask, request, jsonify, make_response

from trail_pathfinder.config import BBOX_MARGIN, MAX_RISK_HAZARDS
from trail_pathfinder.errors import InvalidRequestError, NoRouteError
from trail_pathfinder.geometry import expand_bbox
from trail_pathfinder.grid import build_cost_grid
from trail_pathfinder.logging_utils import get_logger
from trail_pathfinder.models import BoundingBox, Hazard
from trail_pathfinder.risk import RiskClient
from trail_pathfinder.router import hazards_for_bbox, plan_route
from trail_pathfinder.validation import (
    clamp_resolution, ensure_grid_size, parse_risk_request, parse_route_request,
)
from trail_pathfinder.viz import cost_grid_png

app = Flask(__name__)
# HAZARD_SOURCE: callable(Optional[BoundingBox]) -> list[Hazard], supplied by the hazard store
app.config.setdefault("HAZARD_SOURCE", None)
app.config.setdefault("RISK_CLIENT", None)

logger = get_logger(__name__)

# ======= CORS =======
@app.after_request
def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"]  = "*"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    return resp

# ======= helpers =======
def _load_hazards(bbox: Optional[BoundingBox]) -> List[Hazard]:
    source = app.config.get("HAZARD_SOURCE")
    if source is None:
        return []
    return list(source(bbox))


def _risk_client() -> RiskClient:
    client = app.config.get("RISK_CLIENT")
    return client if client is not None else RiskClient()

# ======= endpoints =======
@app.route("/", methods=["GET"])
def root():
    return {"ok": True, "routes": "/routes (POST JSON)", "risk": "/hazard-risk (POST JSON)",
            "preview": "/grid/preview?bbox=minLng,minLat,maxLng,maxLat&resolution=8"}

@app.route("/routes", methods=["POST"])
def routes():
    """
    JSON body:
    {
      "bbox": [minLng, minLat, maxLng, maxLat],
      "start": {"lat":..,"lng":..},
      "end":   {"lat":..,"lng":..},
      "resolutionMeters": 8,               // clamped to [3, 50]
      "hazards": [{"type":..,"latitude":..,"longitude":..,"confidence":..}]  // optional
    }
    """
    data = request.get_json(force=True, silent=True)
    try:
        req = parse_route_request(data)
        if req.hazards is not None:
            snapshot = req.hazards
        else:
            snapshot = _load_hazards(expand_bbox(req.bbox, BBOX_MARGIN))
        hazards = hazards_for_bbox(snapshot, req.bbox, BBOX_MARGIN)
        return jsonify(plan_route(req, hazards))
    except InvalidRequestError as e:
        return jsonify({"error": str(e)}), 400
    except NoRouteError as e:
        return jsonify(e.to_dict()), 422
    except Exception as e:
        logger.exception("route planning failed")
        return jsonify({"error": str(e) or "server error"}), 500

@app.route("/hazard-risk", methods=["POST"])
def hazard_risk():
    """JSON body: {"hazards": [{id?, latitude, longitude, confidence?, type?}], "radiusMeters": 250}"""
    data = request.get_json(force=True, silent=True)
    try:
        req = parse_risk_request(data)
        hazards = req.hazards
        if hazards is None:
            hazards = _load_hazards(None)[:MAX_RISK_HAZARDS]
        hazards = [h for h in hazards if h.position.is_finite()]
        if not hazards:
            return jsonify({"risks": []})
        risks = _risk_client().score(hazards, req.radius_m)
        return jsonify({"risks": [r.to_dict() for r in risks]})
    except InvalidRequestError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("hazard risk scoring failed")
        return jsonify({"error": str(e) or "Failed to compute hazard risk"}), 500

@app.route("/grid/preview", methods=["GET"])
def grid_preview():
    bbox_arg = request.args.get("bbox", "")
    try:
        bbox = BoundingBox.from_list([float(x) for x in bbox_arg.split(",")])
    except (ValueError, InvalidRequestError):
        return jsonify({"error": "bbox=minLng,minLat,maxLng,maxLat required"}), 400

    try:
        res = clamp_resolution(float(request.args.get("resolution", "8")))
    except ValueError:
        return jsonify({"error": "resolution must be a number"}), 400

    try:
        ensure_grid_size(bbox, res)
        hazards = hazards_for_bbox(_load_hazards(expand_bbox(bbox, BBOX_MARGIN)), bbox, BBOX_MARGIN)
        png = cost_grid_png(build_cost_grid(bbox, res, hazards))
    except InvalidRequestError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("grid preview failed")
        return jsonify({"error": str(e) or "server error"}), 500

    resp = make_response(png)
    resp.headers["Content-Type"] = "image/png"
    return resp


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8081, threaded=True)
