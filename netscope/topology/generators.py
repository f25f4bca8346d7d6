"""Sample topology generators."""

import logging
import random
from typing import List, Literal, Set, Tuple

from netscope.core.types import MAX_NODE_ID
from netscope.topology.base import ClientSpec, RelaySpec, ServerSpec, TopologyDescription

logger = logging.getLogger(__name__)


TopologyType = Literal["ring", "fully", "erdos", "k-regular", "line"]


def create_topology(
    topology_type: TopologyType,
    num_relays: int,
    num_clients: int = 0,
    num_servers: int = 0,
    **kwargs
) -> TopologyDescription:
    """Create a bootstrap topology with a relay backbone and leaf nodes.

    Relays get ids starting at 1, followed by clients and then servers.
    Every client is attached to one or two relays and every server to two,
    so the generated snapshot satisfies the connectivity rules.

    Args:
        topology_type: Relay backbone shape ('ring', 'fully', 'erdos', 'k-regular', 'line')
        num_relays: Number of relays in the backbone
        num_clients: Number of clients to attach
        num_servers: Number of servers to attach
        **kwargs: Additional parameters specific to topology type:
            - p (float): Edge probability for 'erdos' (default: 0.3)
            - k (int): Degree for 'k-regular' (default: 4, must be even)
            - pdr (float): Packet drop rate given to every relay (default: 0.0)
            - seed (int): Random seed for reproducibility (default: 12345)

    Returns:
        TopologyDescription object

    Raises:
        ValueError: If topology_type is unknown or parameters are invalid
    """
    topology_type = topology_type.lower()
    total = num_relays + num_clients + num_servers
    if num_relays < 1:
        raise ValueError(f"At least one relay is required, got {num_relays}")
    if total > MAX_NODE_ID:
        raise ValueError(f"Too many nodes ({total}), ids are limited to {MAX_NODE_ID}")
    if num_servers and num_relays < 2:
        raise ValueError("Servers need at least two relays to attach to")

    seed = kwargs.get("seed") if kwargs.get("seed") is not None else 12345
    rng = random.Random(seed)

    if topology_type == "ring":
        edges = _ring_edges(num_relays)
    elif topology_type == "line":
        edges = _line_edges(num_relays)
    elif topology_type in ("fully", "full"):
        edges = _fully_connected_edges(num_relays)
    elif topology_type in ("erdos", "er", "erdos-renyi"):
        p = kwargs.get("p") if kwargs.get("p") is not None else 0.3
        edges = _erdos_renyi_edges(num_relays, p, rng)
    elif topology_type in ("k-regular", "kregular"):
        k = kwargs.get("k") if kwargs.get("k") is not None else 4
        edges = _k_regular_edges(num_relays, k)
    else:
        raise ValueError(f"Unknown topology type: {topology_type}")

    relay_ids = list(range(1, num_relays + 1))
    neighbors = {relay_id: [] for relay_id in relay_ids}
    for i, j in edges:
        # Backbone edges are listed on the lower-id relay only
        neighbors[relay_ids[i]].append(relay_ids[j])

    pdr = kwargs.get("pdr", 0.0)
    drones = [
        RelaySpec(id=relay_id, connected_node_ids=sorted(neighbors[relay_id]), pdr=pdr)
        for relay_id in relay_ids
    ]

    next_id = num_relays + 1
    clients = []
    for _ in range(num_clients):
        count = min(num_relays, rng.choice([1, 2]))
        clients.append(
            ClientSpec(id=next_id, connected_drone_ids=sorted(rng.sample(relay_ids, count)))
        )
        next_id += 1

    servers = []
    for _ in range(num_servers):
        servers.append(
            ServerSpec(id=next_id, connected_drone_ids=sorted(rng.sample(relay_ids, 2)))
        )
        next_id += 1

    return TopologyDescription(drones=drones, clients=clients, servers=servers)


def _ring_edges(n: int) -> List[Tuple[int, int]]:
    """Each relay connects to its immediate neighbors."""
    if n < 3:
        return _line_edges(n)
    edges: Set[Tuple[int, int]] = set()
    for i in range(n):
        j = (i + 1) % n
        edges.add((min(i, j), max(i, j)))
    return sorted(edges)


def _line_edges(n: int) -> List[Tuple[int, int]]:
    return [(i, i + 1) for i in range(n - 1)]


def _fully_connected_edges(n: int) -> List[Tuple[int, int]]:
    return [(i, j) for i in range(n) for j in range(i + 1, n)]


def _erdos_renyi_edges(n: int, p: float, rng: random.Random) -> List[Tuple[int, int]]:
    """Erdős-Rényi random graph with edge probability p."""
    if not 0 <= p <= 1:
        raise ValueError(f"Edge probability p must be in [0, 1], got {p}")

    edges: Set[Tuple[int, int]] = set()
    degree = [0] * n

    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                edges.add((i, j))
                degree[i] += 1
                degree[j] += 1

    # Ensure no isolated relay: connect it to the next one
    if n > 1:
        for i in range(n):
            if degree[i] == 0:
                j = (i + 1) % n
                edges.add((min(i, j), max(i, j)))
                degree[i] += 1
                degree[j] += 1

    return sorted(edges)


def _k_regular_edges(n: int, k: int) -> List[Tuple[int, int]]:
    """k-regular ring lattice (circulant graph).

    Each relay connects to k/2 predecessors and k/2 successors.
    """
    if k % 2 != 0:
        logger.warning("k=%d is odd, using k=%d for regular ring lattice", k, k + 1)
        k = k + 1

    if k >= n:
        logger.warning("k=%d >= n=%d, creating fully connected backbone", k, n)
        return _fully_connected_edges(n)

    edges: Set[Tuple[int, int]] = set()
    half_k = k // 2

    for i in range(n):
        for offset in range(1, half_k + 1):
            j = (i + offset) % n
            edges.add((min(i, j), max(i, j)))

    return sorted(edges)
