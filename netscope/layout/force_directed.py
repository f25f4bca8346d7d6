"""Force-directed (Fruchterman-Reingold) graph layout.

The layout is a small physical simulation: every pair of nodes repels,
every edge pulls its endpoints together, and a cooling temperature caps how
far a node may move per round. Early rounds make large corrective moves and
later ones only fine-tune, so the result settles instead of oscillating.

Each round builds the full N x N distance matrix, so the cost is O(N^2) per
round. That is fine for the tens of nodes a monitored network has; it is
not meant for graphs with thousands of nodes.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from netscope.core.types import Edge, NodeId, Position


def fruchterman_reingold(
    node_ids: Sequence[NodeId],
    edges: Iterable[Edge],
    width: float,
    height: float,
    *,
    iterations: int = 500,
    repulsion: float = 100.0,
    attraction: float = 0.05,
    temperature: float = 4.0,
    cooling: float = 0.99,
    margin: Tuple[float, float] = (0.0, 0.0),
    rng: Optional[np.random.Generator] = None
) -> Dict[NodeId, Position]:
    """Compute 2D positions for an undirected graph.

    Args:
        node_ids: Nodes to place
        edges: Undirected edges; self-loops, duplicates and edges touching
            unknown nodes are ignored
        width: Right bound of the drawing rectangle
        height: Bottom bound of the drawing rectangle
        iterations: Number of simulation rounds
        repulsion: Repulsion constant k, force is k / distance
        attraction: Attraction multiplier applied to the edge vector
        temperature: Initial temperature; displacement per round is capped
            at temperature * min(width, height)
        cooling: Factor applied to the temperature after each round
        margin: Left and top bounds (e.g. node radius, header offset)
        rng: Random generator for the initial placement

    Returns:
        Mapping from node id to (x, y), every point inside
        [margin_x, width] x [margin_y, height]

    Raises:
        ValueError: If the rectangle is empty or iterations is negative
    """
    min_x, min_y = margin
    if width <= min_x or height <= min_y:
        raise ValueError(
            f"Empty layout rectangle: x in [{min_x}, {width}], y in [{min_y}, {height}]"
        )
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")

    rng = rng if rng is not None else np.random.default_rng()
    ids = list(dict.fromkeys(node_ids))
    n = len(ids)
    if n == 0:
        return {}

    # 1. Random initial placement inside the rectangle
    positions = np.column_stack([
        rng.uniform(min_x, width, size=n),
        rng.uniform(min_y, height, size=n),
    ])
    if n == 1:
        return {ids[0]: (float(positions[0, 0]), float(positions[0, 1]))}

    u, v = _edge_index(ids, edges)
    lower = np.array([min_x, min_y])
    upper = np.array([width, height])
    scale_limit = min(width, height)

    for _ in range(iterations):
        # delta[i, j] points from i to j
        delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        distance = np.sqrt((delta ** 2).sum(axis=2))

        # 2. Repulsion: k / d along the unit vector, coincident pairs skipped
        with np.errstate(divide="ignore", invalid="ignore"):
            magnitude = np.where(distance > 0.0, repulsion / distance ** 2, 0.0)
        displacement = -(delta * magnitude[:, :, np.newaxis]).sum(axis=1)

        # 3. Attraction: linear in the edge vector
        if len(u):
            pull = attraction * (positions[v] - positions[u])
            np.add.at(displacement, u, pull)
            np.add.at(displacement, v, -pull)

        # 4. Temperature-limited move, then clamp into the rectangle
        length = np.sqrt((displacement ** 2).sum(axis=1))
        max_displacement = temperature * scale_limit
        with np.errstate(divide="ignore", invalid="ignore"):
            factor = np.where(length > 0.0, np.minimum(1.0, max_displacement / length), 0.0)
        positions = np.clip(positions + displacement * factor[:, np.newaxis], lower, upper)

        temperature *= cooling

    return {node_id: (float(x), float(y)) for node_id, (x, y) in zip(ids, positions)}


def _edge_index(ids: List[NodeId], edges: Iterable[Edge]) -> Tuple[np.ndarray, np.ndarray]:
    """Map edges onto row indices, dropping invalid and repeated ones."""
    index = {node_id: i for i, node_id in enumerate(ids)}
    seen = set()
    for a, b in edges:
        if a == b or a not in index or b not in index:
            continue
        seen.add((min(index[a], index[b]), max(index[a], index[b])))

    pairs = sorted(seen)
    u = np.array([p[0] for p in pairs], dtype=int)
    v = np.array([p[1] for p in pairs], dtype=int)
    return u, v
