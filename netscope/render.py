"""Static image export of the monitor view."""

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from netscope.config.schema import CanvasConfig
from netscope.core.animation import AnimationState
from netscope.core.model import TopologyModel
from netscope.core.types import EDGE_COLOR

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "#1b1b1b"
LABEL_COLOR = "#000000"


def render_snapshot(
    model: TopologyModel,
    animation: AnimationState,
    path: Union[str, Path],
    now: float,
    canvas: Optional[CanvasConfig] = None,
    dpi: int = 100
) -> Path:
    """Draw the current topology with live marker colors.

    Args:
        model: Topology to draw
        animation: Active markers; expired ones are ignored
        path: Output image file (format from the extension)
        now: Current time on the animation clock
        canvas: Drawing area, defaults to the standard canvas
        dpi: Output resolution

    Returns:
        Path of the written file
    """
    canvas = canvas or CanvasConfig()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(canvas.width / dpi, canvas.height / dpi), dpi=dpi)
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)

    for a, b in model.edges():
        start, end = model.nodes[a].position, model.nodes[b].position
        color = _live_edge_color(model, animation, a, b, now)
        ax.plot([start[0], end[0]], [start[1], end[1]], color=color, linewidth=1.5, zorder=1)

    radius_points = (canvas.node_radius * 2 * 72.0 / dpi) ** 2
    for node_id in model.node_ids():
        node = model.nodes[node_id]
        marker = animation.marker(node_id)
        live = marker is not None and now - marker.started_at <= animation.decay_seconds
        color = marker.color if live else node.color
        ax.scatter([node.position[0]], [node.position[1]], s=radius_points, c=color, zorder=2)
        ax.annotate(
            str(node_id), node.position, ha="center", va="center",
            fontsize=7, color=LABEL_COLOR, zorder=3,
        )

    ax.set_xlim(0, canvas.width)
    # Screen coordinates: y grows downward
    ax.set_ylim(canvas.height, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    fig.savefig(path, facecolor=fig.get_facecolor(), bbox_inches="tight")
    plt.close(fig)
    logger.info("Wrote snapshot of %d nodes to %s", len(model), path)
    return path


def _live_edge_color(model, animation, a, b, now):
    for key in ((a, b), (b, a)):
        marker = animation.edge_markers.get(key)
        if marker is not None and now - marker.started_at <= animation.decay_seconds:
            return marker.color
    return model.edge_colors.get(a, EDGE_COLOR)
