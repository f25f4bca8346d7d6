"""Local topology model mirrored from the simulation backend."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set

from netscope.core.node import Node
from netscope.core.types import (
    EDGE_COLOR,
    Edge,
    NodeClass,
    NodeId,
    Position,
    normalize_edge,
)

if TYPE_CHECKING:
    from netscope.topology.base import TopologyDescription

logger = logging.getLogger(__name__)


class TopologyModel:
    """Owns the live nodes, their connectivity and the edge color cache.

    Every structural mutation updates both endpoints of an edge before
    returning, so readers never see a one-sided link. The ``apply_*``
    methods are idempotent: re-applying a change that is already in effect
    is a no-op and returns False. They never raise on unknown ids; stale
    references are logged and ignored.

    The model does not check connectivity rules itself; that is the job of
    the CommandGate, which consults the read API below before a request is
    sent.
    """

    def __init__(self):
        self.nodes: Dict[NodeId, Node] = {}
        # Rendering cache keyed by source node id; keys always match self.nodes
        self.edge_colors: Dict[NodeId, str] = {}
        self.ready = False

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: NodeId) -> Optional[Node]:
        return self.nodes.get(node_id)

    def node_ids(self) -> List[NodeId]:
        return sorted(self.nodes)

    def neighbors(self, node_id: NodeId) -> Set[NodeId]:
        """Copy of a node's neighbor set (empty for unknown ids)."""
        node = self.nodes.get(node_id)
        return set(node.neighbors) if node else set()

    def edges(self) -> List[Edge]:
        """All undirected edges, each listed once, sorted."""
        edges = set()
        for node in self.nodes.values():
            for neighbor in node.neighbors:
                edges.add(normalize_edge(node.node_id, neighbor))
        return sorted(edges)

    def are_linked(self, a: NodeId, b: NodeId) -> bool:
        node = self.nodes.get(a)
        return node is not None and b in node.neighbors

    def relay_degree(self, node_id: NodeId) -> int:
        """Number of relays a node is directly linked to."""
        node = self.nodes.get(node_id)
        if node is None:
            return 0
        return sum(
            1 for neighbor in node.neighbors
            if self.nodes[neighbor].node_class == NodeClass.RELAY
        )

    def nodes_of_class(self, node_class: NodeClass) -> List[NodeId]:
        return sorted(n.node_id for n in self.nodes.values() if n.node_class == node_class)

    def resting_color(self, node_id: NodeId) -> Optional[str]:
        node = self.nodes.get(node_id)
        return node.color if node else None

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the model for renderers.

        Returns:
            Dictionary with 'ready', 'nodes' (per-node dicts) and 'edges'
        """
        return {
            "ready": self.ready,
            "nodes": [
                {
                    "id": node.node_id,
                    "class": node.node_class.value,
                    "kind": node.kind,
                    "x": node.position[0],
                    "y": node.position[1],
                    "neighbors": sorted(node.neighbors),
                    "reliability": node.reliability,
                    "color": node.color,
                    "edge_color": self.edge_colors.get(node.node_id, EDGE_COLOR),
                }
                for node in (self.nodes[i] for i in self.node_ids())
            ],
            "edges": self.edges(),
        }

    # ------------------------------------------------------------------
    # Structural mutations
    # ------------------------------------------------------------------

    def bootstrap(
        self,
        description: "TopologyDescription",
        positions: Dict[NodeId, Position]
    ) -> None:
        """Replace all state with a full snapshot.

        Args:
            description: Bootstrap topology from the backend
            positions: Layout position for every node in the description

        Raises:
            ValueError: If a node has no position
        """
        missing = [i for i in description.node_ids() if i not in positions]
        if missing:
            raise ValueError(f"No layout position for nodes {missing}")

        self.nodes.clear()
        self.edge_colors.clear()
        self.ready = False

        classes = description.node_classes()
        client_kinds = description.client_kinds()
        server_kinds = description.server_kinds()
        reliabilities = description.reliabilities()

        for node_id, neighbors in description.adjacency().items():
            self.nodes[node_id] = Node(
                node_id=node_id,
                node_class=classes[node_id],
                position=positions[node_id],
                neighbors=set(neighbors),
                reliability=reliabilities.get(node_id, 0.0),
                client_kind=client_kinds.get(node_id),
                server_kind=server_kinds.get(node_id),
            )
            self.edge_colors[node_id] = EDGE_COLOR

        self.ready = True
        logger.info(
            "Composed topology: %d nodes, %d edges", len(self.nodes), len(self.edges())
        )

    def apply_crash(self, node_id: NodeId) -> bool:
        """Remove a node and every edge touching it."""
        node = self.nodes.get(node_id)
        if node is None:
            logger.info("Ignoring crash of unknown node %d", node_id)
            return False

        for neighbor in node.neighbors:
            other = self.nodes.get(neighbor)
            if other is not None:
                other.neighbors.discard(node_id)

        del self.nodes[node_id]
        self.edge_colors.pop(node_id, None)
        return True

    def apply_add_link(self, a: NodeId, b: NodeId) -> bool:
        if a == b:
            logger.info("Ignoring self-loop on node %d", a)
            return False
        if not self._known(a, b):
            return False
        if self.are_linked(a, b):
            return False

        self.nodes[a].neighbors.add(b)
        self.nodes[b].neighbors.add(a)
        return True

    def apply_remove_link(self, a: NodeId, b: NodeId) -> bool:
        if not self._known(a, b):
            return False
        if not self.are_linked(a, b):
            return False

        self.nodes[a].neighbors.discard(b)
        self.nodes[b].neighbors.discard(a)
        return True

    def apply_set_reliability(self, node_id: NodeId, value: float) -> bool:
        if not self._known(node_id):
            return False
        node = self.nodes[node_id]
        if node.reliability == value:
            return False
        node.reliability = value
        return True

    def apply_spawn(
        self,
        node_id: NodeId,
        neighbors: Iterable[NodeId],
        reliability: float,
        position: Position
    ) -> bool:
        """Insert a new relay linked to the given nodes.

        If the relay already exists (e.g. the backend echo of an optimistic
        spawn) its missing links are restored but it is never moved.

        Args:
            node_id: Id of the new relay
            neighbors: Nodes to link it to; unknown ids are skipped
            reliability: Packet drop rate of the relay
            position: Canvas position for a newly inserted relay

        Returns:
            True if the node or any link was added
        """
        changed = False
        if node_id not in self.nodes:
            self.nodes[node_id] = Node(
                node_id=node_id,
                node_class=NodeClass.RELAY,
                position=position,
                reliability=reliability,
            )
            self.edge_colors[node_id] = EDGE_COLOR
            changed = True

        for neighbor in neighbors:
            if neighbor not in self.nodes:
                logger.info("Spawned relay %d: skipping unknown neighbor %d", node_id, neighbor)
                continue
            changed = self.apply_add_link(node_id, neighbor) or changed

        return changed

    def _known(self, *node_ids: NodeId) -> bool:
        unknown = [i for i in node_ids if i not in self.nodes]
        if unknown:
            logger.info("Ignoring change referencing unknown nodes %s", unknown)
            return False
        return True
