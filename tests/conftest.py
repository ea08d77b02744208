import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from trail_pathfinder.geometry import Projection
from trail_pathfinder.models import BoundingBox, CostGrid, GeoPoint

LAT0, LNG0 = 40.0, -105.0


def bbox_around(half_w_m: float, half_h_m: float, lat0: float = LAT0, lng0: float = LNG0) -> BoundingBox:
    proj = Projection.at_latitude(lat0)
    dlng = half_w_m / proj.m_per_lng
    dlat = half_h_m / proj.m_per_lat
    return BoundingBox(lng0 - dlng, lat0 - dlat, lng0 + dlng, lat0 + dlat)


def point_at(dx_m: float, dy_m: float, lat0: float = LAT0, lng0: float = LNG0) -> GeoPoint:
    return Projection.at_latitude(lat0).offset(GeoPoint(lat0, lng0), dx_m, dy_m)


def grid_from_costs(costs) -> CostGrid:
    """CostGrid with hand-written cell costs, for search tests."""
    arr = np.asarray(costs, dtype=np.float32)
    rows, cols = arr.shape
    bbox = bbox_around(cols * 4.0, rows * 4.0)
    return CostGrid(rows=rows, cols=cols, resolution_m=8.0, bbox=bbox,
                    projection=Projection.for_bbox(bbox), cost=arr)


@pytest.fixture
def scenario_bbox():
    # 192 m x 160 m box; center sits exactly on cell (10, 12) at 8 m
    return bbox_around(96.0, 80.0)
