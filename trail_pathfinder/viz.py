# region Imports
import io
from typing import Optional, Sequence, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from PIL import Image
from trail_pathfinder.models import CostGrid, SearchResult
# endregion

# region Cost Grid PNG
def cost_grid_png(grid: CostGrid, path: Optional[Sequence[Tuple[int, int]]] = None) -> bytes:
    """Grayscale PNG of the cost grid, north up; path cells drawn white."""
    arr = grid.cost.astype("float64")
    lo, hi = np.percentile(arr, [2, 98])
    if not np.isfinite(lo) or not np.isfinite(hi) or hi <= lo:
        lo, hi = float(arr.min()), float(arr.max())
        if hi <= lo:
            lo, hi = lo - 1.0, lo

    scaled = np.clip((arr - lo) / max(hi - lo, 1e-6), 0, 1)
    png = ((1.0 - scaled) * 200).astype("uint8")  # expensive = dark
    if path:
        for r, c in path:
            png[r, c] = 255

    buf = io.BytesIO()
    Image.fromarray(np.flipud(png), "L").save(buf, "PNG")
    return buf.getvalue()
# endregion

# region Search Heatmap
def show_search_heatmap(
    grid: CostGrid,
    result: SearchResult,
    start: Tuple[int, int],
    goal: Tuple[int, int],
    title: str = "A* exploration",
    out_path: Optional[str] = None,
):
    """
    Render the cost grid with the A* expansion order and path overlaid.
    Saves to ``out_path`` when given, otherwise shows the figure.
    """
    H, W = grid.rows, grid.cols
    fig, ax = plt.subplots(figsize=(8, 8))
    ax.imshow(np.log1p(grid.cost), origin="lower", cmap="magma_r", alpha=0.9)

    # region Expansion Heat Overlay
    if result.expanded_order:
        order_map = np.zeros((H, W), dtype=np.float32)
        for i, (r, c) in enumerate(result.expanded_order):
            order_map[r, c] = i + 1
        order_map /= max(1.0, order_map.max())
        masked = np.ma.masked_where(order_map == 0, order_map)
        heat = ax.imshow(masked, origin="lower", cmap="viridis", alpha=0.5)
        cbar = fig.colorbar(heat, ax=ax, fraction=0.046, pad=0.04)
        cbar.set_label("A* expansion (early → late)")
    # endregion

    # region Path Overlay
    if result.path:
        ys, xs = zip(*result.path)
        ax.plot(xs, ys, color="cyan", linewidth=2.5)
    ax.scatter(start[1], start[0], s=100, edgecolors="black", facecolors="white", zorder=3)
    ax.scatter(goal[1], goal[0], s=100, edgecolors="black", facecolors="yellow", zorder=3)
    # endregion

    legend_elements = [
        Line2D([0], [0], color="cyan", lw=2, label="A* path"),
        Line2D([0], [0], marker="o", color="w", label="Start",
               markerfacecolor="white", markeredgecolor="black", markersize=9),
        Line2D([0], [0], marker="o", color="w", label="Goal",
               markerfacecolor="yellow", markeredgecolor="black", markersize=9),
    ]
    ax.legend(handles=legend_elements, loc="lower right", fontsize=8, framealpha=0.85)
    ax.set_title(title)
    ax.set_axis_off()
    fig.tight_layout()

    if out_path:
        fig.savefig(out_path, dpi=100)
        plt.close(fig)
        return out_path
    plt.show()
    return None
# endregion
