# region Imports
from typing import Callable, Tuple
import math
from trail_pathfinder.models import CostGrid, Hazard
# endregion

DIAG_STEP = math.sqrt(2.0)

# region Hazard Penalty
def falloff(d_m: float) -> float:
    return 1.0 / (1.0 + d_m)


def hazard_scale(h: Hazard) -> float:
    # no confidence -> full weight
    if h.confidence is None:
        return 1.0
    return max(0.0, min(1.0, float(h.confidence)))
# endregion

# region Edge Cost Factory
def edge_cost_factory(grid: CostGrid) -> Callable[[Tuple[int, int], Tuple[int, int]], float]:
    cost = grid.cost

    # region Edge‑cost Function
    def edge_cost(u: Tuple[int, int], v: Tuple[int, int]) -> float:
        r0, c0 = u
        r1, c1 = v
        step = DIAG_STEP if (r0 != r1 and c0 != c1) else 1.0
        return step * float(cost[r1, c1])
    # endregion

    return edge_cost
# endregion
