import math

import pytest

from trail_pathfinder.errors import InvalidRequestError
from trail_pathfinder.models import BoundingBox, HazardKind
from trail_pathfinder.validation import (
    clamp_resolution, ensure_grid_size, parse_hazards, parse_risk_request, parse_route_request,
)

BODY = {
    "bbox": [-105.001, 39.999, -104.999, 40.001],
    "start": {"lat": 40.0, "lng": -105.0005},
    "end": {"lat": 40.0, "lng": -104.9995},
}


def test_route_request_defaults():
    req = parse_route_request(dict(BODY))
    assert req.resolution_m == 8.0
    assert req.hazards is None
    assert req.bbox.to_list() == BODY["bbox"]


@pytest.mark.parametrize("value,expected", [
    (1, 3.0), (3, 3.0), (12.5, 12.5), (500, 50.0), (None, 8.0), ("10", 8.0), (float("nan"), 8.0),
])
def test_resolution_clamp(value, expected):
    assert clamp_resolution(value) == expected


@pytest.mark.parametrize("bbox", [
    [-105.0, 39.999, -105.0, 40.001],     # min_lng == max_lng
    [-104.9, 39.999, -105.0, 40.001],
    [-105.001, 40.0, -104.999, 40.0],
    [-105.001, 39.999, -104.999],
    [-105.001, 39.999, -104.999, "40"],
    "not-a-list",
])
def test_bad_bbox_rejected(bbox):
    with pytest.raises(InvalidRequestError):
        parse_route_request(dict(BODY, bbox=bbox))


@pytest.mark.parametrize("field", ["bbox", "start", "end"])
def test_missing_fields_rejected(field):
    body = dict(BODY)
    del body[field]
    with pytest.raises(InvalidRequestError, match="required"):
        parse_route_request(body)


@pytest.mark.parametrize("start", [{"lat": 40.0}, {"lat": "40", "lng": -105.0},
                                   {"lat": math.inf, "lng": -105.0}, [40.0, -105.0]])
def test_bad_points_rejected(start):
    with pytest.raises(InvalidRequestError):
        parse_route_request(dict(BODY, start=start))


def test_non_object_body_rejected():
    with pytest.raises(InvalidRequestError):
        parse_route_request(None)


def test_hazards_parsed_and_non_finite_dropped():
    hazards = parse_hazards([
        {"id": 7, "type": "blocked", "latitude": 40.0, "longitude": -105.0, "confidence": 0.8},
        {"type": "water", "position": {"lat": 40.0001, "lng": -105.0001}},
        {"type": "debris", "latitude": float("nan"), "longitude": -105.0},
        {"type": "debris", "latitude": 40.0},
        "junk",
    ])
    assert len(hazards) == 2
    assert hazards[0].kind is HazardKind.BLOCKAGE
    assert hazards[0].id == "7"
    assert hazards[0].confidence == 0.8
    assert hazards[1].kind is HazardKind.WATER
    assert hazards[1].confidence is None


def test_hazards_must_be_a_list():
    with pytest.raises(InvalidRequestError):
        parse_route_request(dict(BODY, hazards={"type": "water"}))


def test_risk_request():
    req = parse_risk_request({"radiusMeters": 100, "hazards": [{"latitude": 1, "longitude": 2}]})
    assert req.radius_m == 100.0
    assert len(req.hazards) == 1
    assert parse_risk_request(None).hazards is None
    assert parse_risk_request({"radiusMeters": -5}).radius_m == 250.0
    assert parse_risk_request({"radiusMeters": "big"}).radius_m == 250.0


def test_grid_size_limit():
    small = BoundingBox.from_list(BODY["bbox"])
    ensure_grid_size(small, 3.0)
    with pytest.raises(InvalidRequestError, match="too large"):
        ensure_grid_size(small, 3.0, max_cells=100)
    big = BoundingBox(-105.25, 39.75, -104.75, 40.25)
    with pytest.raises(InvalidRequestError):
        parse_route_request(dict(BODY, bbox=big.to_list(), resolutionMeters=3))


def test_hazard_keeps_submitted_type_string():
    [h, anon] = parse_hazards([
        {"type": "Blocked", "latitude": 40.0, "longitude": -105.0},
        {"type": 7, "latitude": 40.0, "longitude": -105.0},
    ])
    assert h.kind is HazardKind.BLOCKAGE
    assert h.type_name == "Blocked"
    assert anon.kind is HazardKind.OTHER
    assert anon.type_name is None
