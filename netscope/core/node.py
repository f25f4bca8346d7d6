"""Individual node of the monitored network."""

from dataclasses import dataclass, field
from typing import Optional, Set

from netscope.core.types import (
    ClientKind,
    NodeClass,
    NodeId,
    Position,
    ServerKind,
    resting_color,
)


@dataclass
class Node:
    """Local mirror of one backend node.

    Nodes are owned by the TopologyModel; everything else refers to them by
    id. Neighbor sets are kept symmetric by the model.

    Attributes:
        node_id: Backend identifier
        node_class: Relay, client or server
        position: Canvas coordinates, assigned once and kept until removal
        neighbors: Ids of directly linked nodes
        reliability: Packet drop rate in [0, 1], meaningful for relays only
        client_kind: Subtype for clients
        server_kind: Subtype for servers
    """

    node_id: NodeId
    node_class: NodeClass
    position: Position
    neighbors: Set[NodeId] = field(default_factory=set)
    reliability: float = 0.0
    client_kind: Optional[ClientKind] = None
    server_kind: Optional[ServerKind] = None

    @property
    def is_relay(self) -> bool:
        return self.node_class == NodeClass.RELAY

    @property
    def is_client(self) -> bool:
        return self.node_class == NodeClass.CLIENT

    @property
    def is_server(self) -> bool:
        return self.node_class == NodeClass.SERVER

    @property
    def is_leaf(self) -> bool:
        """Clients and servers only ever link to relays."""
        return self.node_class != NodeClass.RELAY

    @property
    def kind(self) -> Optional[str]:
        """Subtype name for leaf nodes, None for relays."""
        subtype = self.client_kind or self.server_kind
        return subtype.value if subtype is not None else None

    @property
    def color(self) -> str:
        """Resting color derived from class and subtype."""
        return resting_color(self.node_class, self.client_kind, self.server_kind)

    def label(self) -> str:
        return f"{self.node_class.value.title()} {self.node_id}"
