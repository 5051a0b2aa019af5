import os
from typing import Optional

import numpy as np

from .types import BLOCKED, HIDDEN_MIN


def _prepare_matplotlib_env():
    if "MPLCONFIGDIR" not in os.environ:
        mpl_cache = os.path.join("/tmp", "matplotlib")
        os.makedirs(mpl_cache, exist_ok=True)
        os.environ["MPLCONFIGDIR"] = mpl_cache
    if "XDG_CACHE_HOME" not in os.environ:
        os.environ["XDG_CACHE_HOME"] = "/tmp"


def terrain_image(baseline: np.ndarray) -> np.ndarray:
    # 0 free, 1 blocked, 2 still gated
    img = np.zeros_like(baseline, dtype=int)
    img[baseline == BLOCKED] = 1
    img[baseline >= HIDDEN_MIN] = 2
    return img


def show_path_plot(runner, save_path: Optional[str] = None, show: bool = True):
    _prepare_matplotlib_env()

    import matplotlib

    if not show:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection
    from matplotlib.colors import ListedColormap

    if not runner.path:
        return None

    graph = runner.graph
    fig, ax = plt.subplots(figsize=(8, 8))
    cmap = ListedColormap(["white", "black", "tab:purple"])
    ax.imshow(terrain_image(graph.baseline_grid()), cmap=cmap, vmin=0, vmax=2, origin="upper")

    unrevealed = ~graph.revealed_mask()
    if unrevealed.any():
        ax.imshow(np.where(unrevealed, 1.0, np.nan), cmap="Greys", alpha=0.15, origin="upper")

    # path entries are (x, y) which is already (column, row) for imshow
    points = np.array(runner.path, dtype=float)
    if len(points) >= 2:
        segments = np.stack([points[:-1], points[1:]], axis=1)
        progress = np.arange(len(segments), dtype=float)
        line = LineCollection(segments, cmap="turbo", linewidths=2.0, alpha=0.95, zorder=3)
        line.set_array(progress)
        line.set_clim(0.0, max(1.0, float(len(segments) - 1)))
        ax.add_collection(line)
        cbar = fig.colorbar(line, ax=ax, fraction=0.046, pad=0.04)
        cbar.set_label("Path Progress")

    ax.scatter(points[0, 0], points[0, 1], color="tab:blue", s=40, label="Start", zorder=4)
    targets = np.array([m.target for m in runner.objectives], dtype=float).reshape(-1, 2)
    if len(targets):
        ax.scatter(targets[:, 0], targets[:, 1], color="tab:red", marker="*", s=90, label="Objective", zorder=5)
        for i, (tx, ty) in enumerate(targets, start=1):
            ax.annotate(str(i), (tx, ty), textcoords="offset points", xytext=(4, 4), fontsize=8)
    ax.scatter(points[-1, 0], points[-1, 1], color="tab:green", s=40, label="End", zorder=4)

    ax.set_title("Mission Trajectory")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_xlim(-0.5, graph.width - 0.5)
    ax.set_ylim(graph.height - 0.5, -0.5)
    ax.grid(which="major", color="lightgray", linestyle=":", linewidth=0.4)
    ax.legend(loc="upper right")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=120)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return save_path
