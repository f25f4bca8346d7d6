"""Bootstrap topology description and utilities."""

from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field, model_validator

from netscope.core.types import (
    MAX_NODE_ID,
    MIN_NODE_ID,
    ClientKind,
    Edge,
    NodeClass,
    NodeId,
    ServerKind,
    normalize_edge,
)


class RelaySpec(BaseModel):
    """A forwarding node (drone) in the bootstrap snapshot."""
    id: int = Field(ge=MIN_NODE_ID, le=MAX_NODE_ID, description="Node id")
    connected_node_ids: List[int] = Field(default_factory=list, description="Linked node ids")
    pdr: float = Field(default=0.0, ge=0.0, le=1.0, description="Packet drop rate")


class ClientSpec(BaseModel):
    """A client leaf node in the bootstrap snapshot."""
    id: int = Field(ge=MIN_NODE_ID, le=MAX_NODE_ID, description="Node id")
    connected_drone_ids: List[int] = Field(default_factory=list, description="Linked relay ids")
    kind: Optional[ClientKind] = Field(default=None, description="Client subtype")


class ServerSpec(BaseModel):
    """A server leaf node in the bootstrap snapshot."""
    id: int = Field(ge=MIN_NODE_ID, le=MAX_NODE_ID, description="Node id")
    connected_drone_ids: List[int] = Field(default_factory=list, description="Linked relay ids")
    kind: Optional[ServerKind] = Field(default=None, description="Server subtype")


class TopologyDescription(BaseModel):
    """Full network snapshot sent by the backend to start a session.

    Edges are implied by the neighbor lists of every node; a link only
    needs to be listed on one side.
    """
    drones: List[RelaySpec] = Field(default_factory=list)
    clients: List[ClientSpec] = Field(default_factory=list)
    servers: List[ServerSpec] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _check_references(self) -> "TopologyDescription":
        ids = self.node_ids()
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate node ids in topology: {sorted(ids)}")

        known = set(ids)
        for node_id, neighbors in self._listed_neighbors():
            for neighbor in neighbors:
                if neighbor == node_id:
                    raise ValueError(f"Node {node_id} lists itself as a neighbor")
                if neighbor not in known:
                    raise ValueError(f"Node {node_id} references unknown node {neighbor}")
        return self

    def _listed_neighbors(self):
        for drone in self.drones:
            yield drone.id, drone.connected_node_ids
        for client in self.clients:
            yield client.id, client.connected_drone_ids
        for server in self.servers:
            yield server.id, server.connected_drone_ids

    @property
    def num_nodes(self) -> int:
        return len(self.drones) + len(self.clients) + len(self.servers)

    def node_ids(self) -> List[NodeId]:
        """All node ids in description order (relays, clients, servers)."""
        return (
            [d.id for d in self.drones]
            + [c.id for c in self.clients]
            + [s.id for s in self.servers]
        )

    def node_classes(self) -> Dict[NodeId, NodeClass]:
        classes = {d.id: NodeClass.RELAY for d in self.drones}
        classes.update({c.id: NodeClass.CLIENT for c in self.clients})
        classes.update({s.id: NodeClass.SERVER for s in self.servers})
        return classes

    def edges(self) -> List[Edge]:
        """Unique undirected edges, sorted."""
        edges: Set[Edge] = set()
        for node_id, neighbors in self._listed_neighbors():
            for neighbor in neighbors:
                edges.add(normalize_edge(node_id, neighbor))
        return sorted(edges)

    def adjacency(self) -> Dict[NodeId, Set[NodeId]]:
        """Symmetric neighbor sets for every node."""
        adjacency: Dict[NodeId, Set[NodeId]] = {node_id: set() for node_id in self.node_ids()}
        for a, b in self.edges():
            adjacency[a].add(b)
            adjacency[b].add(a)
        return adjacency

    def client_kinds(self) -> Dict[NodeId, ClientKind]:
        """Resolve client subtypes.

        Explicit kinds win. Otherwise the first half of the clients are chat
        clients and the rest media clients.
        """
        half = len(self.clients) // 2
        kinds = {}
        for index, client in enumerate(self.clients):
            if client.kind is not None:
                kinds[client.id] = client.kind
            else:
                kinds[client.id] = ClientKind.CHAT if index < half else ClientKind.MEDIA
        return kinds

    def server_kinds(self) -> Dict[NodeId, ServerKind]:
        """Resolve server subtypes.

        Explicit kinds win. Otherwise servers are split in thirds: text,
        then media, then communication.
        """
        third = len(self.servers) // 3
        remaining = len(self.servers)
        kinds = {}
        for server in self.servers:
            if server.kind is not None:
                kinds[server.id] = server.kind
            elif remaining > third * 2:
                kinds[server.id] = ServerKind.TEXT
            elif remaining > third:
                kinds[server.id] = ServerKind.MEDIA
            else:
                kinds[server.id] = ServerKind.COMMUNICATION
            remaining -= 1
        return kinds

    def reliabilities(self) -> Dict[NodeId, float]:
        return {d.id: d.pdr for d in self.drones}

    def is_connected(self) -> bool:
        """Check if the topology is connected using BFS.

        Returns:
            True if every node is reachable from the first one
        """
        ids = self.node_ids()
        if not ids:
            return True

        adjacency = self.adjacency()
        visited = {ids[0]}
        queue = [ids[0]]

        while queue:
            current = queue.pop(0)
            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return len(visited) == len(ids)
