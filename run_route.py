# region Header
"""
run_route.py — plan a hazard-aware route from a JSON request file.

Requires:
  pip install -e .

Usage:
  python run_route.py request.json --out route.geojson --heatmap search.png
"""
# endregion

# region Imports
import argparse
import json
import sys

from trail_pathfinder.astar_core import search_grid
from trail_pathfinder.errors import InvalidRequestError, NoRouteError
from trail_pathfinder.export import feature_collection, hazard_feature, write_geojson
from trail_pathfinder.grid import build_cost_grid, latlng_to_rc
from trail_pathfinder.risk import score_risks
from trail_pathfinder.router import hazards_for_bbox, plan_route
from trail_pathfinder.validation import parse_route_request
from trail_pathfinder.viz import show_search_heatmap
# endregion

# region Main
def main(argv=None):
    ap = argparse.ArgumentParser(description="Hazard-aware trail routing")
    ap.add_argument("request", help="JSON file with bbox, start, end, hazards")
    ap.add_argument("--out", default="route.geojson")
    ap.add_argument("--heatmap", default=None, help="save an A* search heatmap PNG here")
    args = ap.parse_args(argv)

    with open(args.request) as f:
        payload = json.load(f)

    try:
        req = parse_route_request(payload)
    except InvalidRequestError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        return 2

    hazards = hazards_for_bbox(req.hazards or [], req.bbox)
    try:
        route = plan_route(req, hazards)
    except NoRouteError as e:
        print(f"No route: {json.dumps(e.to_dict())}", file=sys.stderr)
        return 1

    risks = score_risks(hazards)
    features = [route] + [hazard_feature(h, r) for h, r in zip(hazards, risks)]
    write_geojson(feature_collection(features), args.out)
    print(f"Wrote route with {route['properties']['nodes']} nodes to {args.out}")

    if args.heatmap:
        grid = build_cost_grid(req.bbox, req.resolution_m, hazards)
        s_rc, t_rc = latlng_to_rc(grid, req.start), latlng_to_rc(grid, req.end)
        result = search_grid(grid, s_rc, t_rc)
        show_search_heatmap(grid, result, s_rc, t_rc, out_path=args.heatmap)
        print(f"Wrote heatmap to {args.heatmap}")
    return 0
# endregion


if __name__ == "__main__":
    sys.exit(main())
