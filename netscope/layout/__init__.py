"""Graph layout algorithms."""

from typing import Dict

import numpy as np

from netscope.config.schema import CanvasConfig, LayoutConfig
from netscope.core.types import NodeId, Position
from netscope.layout.circular import circular_layout
from netscope.layout.force_directed import fruchterman_reingold
from netscope.topology.base import TopologyDescription


def compute_layout(
    description: TopologyDescription,
    layout: LayoutConfig,
    canvas: CanvasConfig
) -> Dict[NodeId, Position]:
    """Lay out a whole bootstrap topology on the configured canvas.

    Args:
        description: Bootstrap snapshot
        layout: Algorithm and tuning parameters
        canvas: Drawing area

    Returns:
        Position for every node in the description
    """
    width, height = canvas.extent
    if layout.algorithm == "circular":
        return circular_layout(description.node_ids(), width, height, margin=canvas.margin)

    return fruchterman_reingold(
        description.node_ids(),
        description.edges(),
        width,
        height,
        iterations=layout.iterations,
        repulsion=layout.repulsion,
        attraction=layout.attraction,
        temperature=layout.temperature,
        cooling=layout.cooling,
        margin=canvas.margin,
        rng=np.random.default_rng(layout.seed),
    )


__all__ = ["compute_layout", "fruchterman_reingold", "circular_layout"]
