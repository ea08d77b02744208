# region Imports and Typing
from typing import Tuple, Optional, Callable, Iterable, List, Sequence
import math, heapq
from trail_pathfinder.config import ITERATION_FACTOR
from trail_pathfinder.costs import edge_cost_factory
from trail_pathfinder.grid import latlng_to_rc, rc_to_latlng
from trail_pathfinder.logging_utils import get_logger
from trail_pathfinder.models import Cell, CostGrid, GeoPoint, SearchResult
# endregion

logger = get_logger(__name__)

# region Neighbor Generation
def neighbors_8(u, H, W):
    r, c = u
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            rr, cc = r + dr, c + dc
            if 0 <= rr < H and 0 <= cc < W:
                yield (rr, cc)


def cell_heuristic(a: Cell, b: Cell) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])
# endregion

# region Path Reconstruction
def reconstruct(parent, goal):
    path = []
    v = goal
    while v is not None:
        path.append(v)
        v = parent.get(v)
    path.reverse()
    return path
# endregion

# region A* Algorithm
def astar(
    start: Cell,
    goal: Cell,
    neighbors_fn: Callable[[Cell], Iterable[Cell]],
    edge_cost_fn: Callable[[Cell, Cell], float],
    heuristic_fn: Callable[[Cell, Cell], float],
    *,
    max_iterations: Optional[int] = None,
) -> SearchResult:
    if start == goal:
        return SearchResult(path=[start], cost=0.0, iterations=0, expanded_order=[start])

    counter = 0  # stable tie-breaker
    openh: List[Tuple[float, float, int, Cell]] = []
    h0 = heuristic_fn(start, goal)
    heapq.heappush(openh, (h0, h0, counter, start))
    g = {start: 0.0}
    parent = {start: None}
    closed = set()
    iterations = 0
    expanded_order = []

    while openh:
        # region Iteration Ceiling
        if max_iterations is not None and iterations >= max_iterations:
            logger.warning("A* iteration ceiling reached",
                           extra={"iterations": iterations, "max_iterations": max_iterations,
                                  "start": start, "goal": goal})
            return SearchResult(None, float("inf"), iterations, expanded_order, "iteration_limit")
        # endregion

        f, h, _, u = heapq.heappop(openh)
        iterations += 1

        if u in closed:
            continue
        closed.add(u)
        expanded_order.append(u)

        if u == goal:
            return SearchResult(reconstruct(parent, u), g[u], iterations, expanded_order, "found")

        gu = g[u]
        # region Neighbor Loop
        for v in neighbors_fn(u):
            if v in closed:
                continue
            alt = gu + edge_cost_fn(u, v)
            old = g.get(v)
            if old is None or alt < old - 1e-12:
                g[v] = alt
                parent[v] = u
                hv = heuristic_fn(v, goal)
                counter += 1
                heapq.heappush(openh, (alt + hv, hv, counter, v))
        # endregion

    logger.warning("A* frontier exhausted before reaching goal",
                   extra={"iterations": iterations, "start": start, "goal": goal})
    return SearchResult(None, float("inf"), iterations, expanded_order, "exhausted")
# endregion

# region Grid Search
def search_grid(grid: CostGrid, start_rc: Cell, goal_rc: Cell,
                max_iterations: Optional[int] = None) -> SearchResult:
    H, W = grid.rows, grid.cols
    if max_iterations is None:
        max_iterations = H * W * ITERATION_FACTOR

    def neigh(u):
        return neighbors_8(u, H, W)

    return astar(start_rc, goal_rc, neigh, edge_cost_factory(grid), cell_heuristic,
                 max_iterations=max_iterations)


def path_cost(grid: CostGrid, cells: Sequence[Cell]) -> float:
    """Total cost of a connected cell path under the A* edge model."""
    edge_cost = edge_cost_factory(grid)
    return sum(edge_cost(u, v) for u, v in zip(cells, cells[1:]))


def cells_to_points(grid: CostGrid, cells: Sequence[Cell]) -> List[GeoPoint]:
    return [rc_to_latlng(grid, r, c) for r, c in cells]


def find_path(grid: CostGrid, start: GeoPoint, goal: GeoPoint) -> Optional[List[GeoPoint]]:
    """Snap both points to the grid and return the dense cell path as GeoPoints."""
    result = search_grid(grid, latlng_to_rc(grid, start), latlng_to_rc(grid, goal))
    if not result.found:
        return None
    return cells_to_points(grid, result.path)
# endregion
