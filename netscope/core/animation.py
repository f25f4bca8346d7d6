"""Transient traffic markers with time-based decay."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from netscope.core.types import NodeId

DirectedEdge = Tuple[NodeId, NodeId]


@dataclass
class Marker:
    """A temporary color override and the time it was (re)started."""
    color: str
    started_at: float


class AnimationState:
    """Per-node and per-edge activity markers.

    Markers are purely cosmetic. Decay is polled: the host calls
    ``decay(now)`` once per tick and every marker older than the threshold
    is dropped, so the node falls back to its resting color. Re-marking a
    node restarts its timer.
    """

    def __init__(self, decay_seconds: float = 0.25):
        """Initialize animation state.

        Args:
            decay_seconds: Marker lifetime
        """
        if decay_seconds < 0:
            raise ValueError(f"decay_seconds must be >= 0, got {decay_seconds}")
        self.decay_seconds = decay_seconds
        self.node_markers: Dict[NodeId, Marker] = {}
        self.edge_markers: Dict[DirectedEdge, Marker] = {}

    def mark_node(self, node_id: NodeId, color: str, now: float) -> None:
        self.node_markers[node_id] = Marker(color=color, started_at=now)

    def mark_edge(self, src: NodeId, dst: NodeId, color: str, now: float) -> None:
        self.edge_markers[(src, dst)] = Marker(color=color, started_at=now)

    def decay(self, now: float) -> List[NodeId]:
        """Drop every marker older than the threshold.

        Args:
            now: Current time on the same clock used for marking

        Returns:
            Ids of nodes whose marker expired in this call
        """
        expired = [
            node_id for node_id, marker in self.node_markers.items()
            if now - marker.started_at > self.decay_seconds
        ]
        for node_id in expired:
            del self.node_markers[node_id]

        stale_edges = [
            edge for edge, marker in self.edge_markers.items()
            if now - marker.started_at > self.decay_seconds
        ]
        for edge in stale_edges:
            del self.edge_markers[edge]

        return sorted(expired)

    def color_of(self, node_id: NodeId, resting: str) -> str:
        """Current display color of a node."""
        marker = self.node_markers.get(node_id)
        return marker.color if marker else resting

    def edge_color_of(self, src: NodeId, dst: NodeId, resting: str) -> str:
        """Current display color of an edge, in either direction."""
        marker = self.edge_markers.get((src, dst)) or self.edge_markers.get((dst, src))
        return marker.color if marker else resting

    def marker(self, node_id: NodeId) -> Optional[Marker]:
        return self.node_markers.get(node_id)

    def active_nodes(self) -> List[NodeId]:
        return sorted(self.node_markers)

    def purge(self, node_id: NodeId) -> None:
        """Forget every marker touching a node."""
        self.node_markers.pop(node_id, None)
        for edge in [e for e in self.edge_markers if node_id in e]:
            del self.edge_markers[edge]

    def clear(self) -> None:
        self.node_markers.clear()
        self.edge_markers.clear()
