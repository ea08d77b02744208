# config.py
import os

# Flat-earth projection: meters per degree of latitude
METERS_PER_DEG_LAT = 111_320.0

# Grid resolution (meters per cell), clamped at the request boundary
DEFAULT_RES_M = 8.0
MIN_RES_M = 3.0
MAX_RES_M = 50.0

# A* runaway guard: iterations allowed per grid cell
ITERATION_FACTOR = 10

# Path simplifier
TURN_THRESHOLD_DEG = 15.0
SIMPLIFY_RES_FACTOR = 2.0

# Local risk scoring
DEFAULT_RISK_RADIUS_M = 250.0
BASE_RISK_POINTS = 6.0
DEFAULT_RISK_CONFIDENCE = 0.5
MAX_NEIGHBOR_BONUS = 5.0
MAX_RISK_SCORE = 10.0

# Hazard fetch margin around a routing bbox (fraction of each axis span)
BBOX_MARGIN = 0.10
MAX_RISK_HAZARDS = 5000

# Largest cost grid a single request may build (rows * cols)
MAX_GRID_CELLS = 1_000_000

# Optional external risk scoring service
RISK_SERVICE_URL = os.environ.get("RISK_SERVICE_URL", "")
RISK_SERVICE_KEY = os.environ.get("RISK_SERVICE_KEY", "")
RISK_SERVICE_TIMEOUT_S = float(os.environ.get("RISK_SERVICE_TIMEOUT_S", "5"))

LOG_LEVEL = os.environ.get("TRAIL_LOG_LEVEL", "INFO")
