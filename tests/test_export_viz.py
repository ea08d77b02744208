import json

from trail_pathfinder.astar_core import search_grid
from trail_pathfinder.export import feature_collection, hazard_feature, route_feature, write_geojson
from trail_pathfinder.grid import build_cost_grid
from trail_pathfinder.models import Hazard, HazardKind
from trail_pathfinder.risk import score_risks
from trail_pathfinder.viz import cost_grid_png, show_search_heatmap

import run_route

from tests.conftest import bbox_around, point_at


def test_route_feature_uses_lng_lat_order():
    p, q = point_at(0, 0), point_at(10, 5)
    feat = route_feature([p, q], {"nodes": 2})
    assert feat["geometry"]["coordinates"] == [[p.lng, p.lat], [q.lng, q.lat]]
    assert feat["properties"] == {"nodes": 2}


def test_hazard_feature_carries_risk():
    h = Hazard(HazardKind.WATER, point_at(0, 0), confidence=0.9, id="w1")
    [risk] = score_risks([h])
    feat = hazard_feature(h, risk)
    assert feat["geometry"] == {"type": "Point", "coordinates": [h.position.lng, h.position.lat]}
    assert feat["properties"]["type"] == "water"
    assert feat["properties"]["riskScore"] == risk.risk_score


def test_write_geojson(tmp_path):
    out = tmp_path / "route.geojson"
    doc = feature_collection([route_feature([point_at(0, 0)])])
    write_geojson(doc, str(out))
    assert json.loads(out.read_text())["type"] == "FeatureCollection"


def test_cost_grid_png_handles_uniform_and_hazard_grids():
    bbox = bbox_around(96.0, 80.0)
    for hazards in ([], [Hazard(HazardKind.BLOCKAGE, point_at(0, 0))]):
        grid = build_cost_grid(bbox, 8.0, hazards)
        png = cost_grid_png(grid, [(0, 0), (1, 1)])
        assert png[:4] == b"\x89PNG"


def test_search_heatmap_saved(tmp_path):
    grid = build_cost_grid(bbox_around(96.0, 80.0), 8.0, [Hazard(HazardKind.WATER, point_at(0, 0))])
    result = search_grid(grid, (10, 6), (10, 18))
    out = tmp_path / "heat.png"
    assert show_search_heatmap(grid, result, (10, 6), (10, 18), out_path=str(out)) == str(out)
    assert out.stat().st_size > 0


def test_cli_writes_route_and_heatmap(tmp_path):
    req = {
        "bbox": bbox_around(96.0, 80.0).to_list(),
        "start": {"lat": point_at(-48, 0).lat, "lng": point_at(-48, 0).lng},
        "end": {"lat": point_at(48, 0).lat, "lng": point_at(48, 0).lng},
        "hazards": [{"id": "w", "type": "water", "latitude": 40.0, "longitude": -105.0}],
    }
    req_path = tmp_path / "req.json"
    req_path.write_text(json.dumps(req))
    out = tmp_path / "out.geojson"
    heat = tmp_path / "heat.png"

    assert run_route.main([str(req_path), "--out", str(out), "--heatmap", str(heat)]) == 0
    doc = json.loads(out.read_text())
    kinds = [f["geometry"]["type"] for f in doc["features"]]
    assert kinds == ["LineString", "Point"]
    assert heat.exists()


def test_cli_rejects_bad_request(tmp_path):
    req_path = tmp_path / "req.json"
    req_path.write_text(json.dumps({"bbox": [0, 0, 0, 1], "start": {}, "end": {}}))
    assert run_route.main([str(req_path)]) == 2
