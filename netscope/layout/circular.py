"""Circular layout: nodes evenly spaced on a circle."""

import math
from typing import Dict, Sequence, Tuple

from netscope.core.types import NodeId, Position


def circular_layout(
    node_ids: Sequence[NodeId],
    width: float,
    height: float,
    margin: Tuple[float, float] = (0.0, 0.0)
) -> Dict[NodeId, Position]:
    """Place nodes on the largest circle fitting the layout rectangle.

    The first node sits at the top and the rest follow clockwise in the
    given order.
    """
    ids = list(dict.fromkeys(node_ids))
    if not ids:
        return {}

    min_x, min_y = margin
    center_x = (min_x + width) / 2
    center_y = (min_y + height) / 2
    radius = min(width - min_x, height - min_y) / 2

    if len(ids) == 1:
        return {ids[0]: (center_x, center_y)}

    positions = {}
    for i, node_id in enumerate(ids):
        angle = 2 * math.pi * i / len(ids) - math.pi / 2
        positions[node_id] = (
            center_x + radius * math.cos(angle),
            center_y + radius * math.sin(angle),
        )
    return positions
