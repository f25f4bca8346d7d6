"""Tests for topology descriptions and generators."""

import pytest
from pydantic import ValidationError

from netscope.core.types import ClientKind, NodeClass, ServerKind
from netscope.topology import (
    ClientSpec,
    RelaySpec,
    ServerSpec,
    TopologyDescription,
    create_topology,
)


class TestTopologyDescription:

    def test_adjacency_is_symmetric(self, mixed_topology):
        adjacency = mixed_topology.adjacency()
        for node_id, neighbors in adjacency.items():
            for neighbor in neighbors:
                assert node_id in adjacency[neighbor]

    def test_node_classes(self, mixed_topology):
        classes = mixed_topology.node_classes()
        assert classes[1] == NodeClass.RELAY
        assert classes[5] == NodeClass.CLIENT
        assert classes[7] == NodeClass.SERVER

    def test_default_kinds(self):
        """Clients split in halves, servers in thirds."""
        topology = TopologyDescription(
            drones=[RelaySpec(id=1), RelaySpec(id=2)],
            clients=[ClientSpec(id=i, connected_drone_ids=[1]) for i in (3, 4)],
            servers=[ServerSpec(id=i, connected_drone_ids=[1, 2]) for i in (5, 6, 7)],
        )

        assert topology.client_kinds() == {3: ClientKind.CHAT, 4: ClientKind.MEDIA}
        assert topology.server_kinds() == {
            5: ServerKind.TEXT,
            6: ServerKind.MEDIA,
            7: ServerKind.COMMUNICATION,
        }

    def test_explicit_kind_wins(self):
        topology = TopologyDescription(
            drones=[RelaySpec(id=1)],
            clients=[ClientSpec(id=2, connected_drone_ids=[1], kind=ClientKind.MEDIA)],
        )
        assert topology.client_kinds() == {2: ClientKind.MEDIA}

    @pytest.mark.parametrize("payload", [
        {"drones": [{"id": 1}, {"id": 1}]},
        {"drones": [{"id": 1, "connected_node_ids": [1]}]},
        {"drones": [{"id": 1, "connected_node_ids": [2]}]},
        {"drones": [{"id": 1, "pdr": 1.5}]},
        {"drones": [{"id": 256}]},
        {"drones": [], "routers": []},
    ])
    def test_invalid_descriptions(self, payload):
        with pytest.raises(ValidationError):
            TopologyDescription(**payload)

    def test_is_connected(self, line_topology):
        assert line_topology.is_connected()
        split = TopologyDescription(drones=[RelaySpec(id=1), RelaySpec(id=2)])
        assert not split.is_connected()


class TestCreateTopology:

    @pytest.mark.parametrize("kind, expected_edges", [
        ("ring", 5),
        ("line", 4),
        ("fully", 10),
        ("k-regular", 10),
    ])
    def test_backbone_shapes(self, kind, expected_edges):
        topology = create_topology(kind, 5, k=4)
        assert len(topology.edges()) == expected_edges

    def test_erdos_has_no_isolated_relay(self):
        topology = create_topology("erdos", 10, p=0.0, seed=3)
        assert all(topology.adjacency()[node_id] for node_id in topology.node_ids())

    def test_leaf_nodes_respect_connectivity_rules(self):
        topology = create_topology("ring", 6, num_clients=4, num_servers=2, seed=7)
        adjacency = topology.adjacency()

        assert topology.node_ids() == list(range(1, 13))
        for client in topology.clients:
            assert 1 <= len(adjacency[client.id]) <= 2
        for server in topology.servers:
            assert len(adjacency[server.id]) == 2

    def test_pdr_applied_to_relays(self):
        topology = create_topology("line", 3, pdr=0.2)
        assert set(topology.reliabilities().values()) == {0.2}

    def test_same_seed_same_topology(self):
        first = create_topology("erdos", 8, num_clients=3, p=0.4, seed=11)
        second = create_topology("erdos", 8, num_clients=3, p=0.4, seed=11)
        assert first == second

    @pytest.mark.parametrize("args, kwargs", [
        (("ring", 0), {}),
        (("mesh", 4), {}),
        (("ring", 200, 100), {}),
        (("ring", 1, 0, 1), {}),
        (("erdos", 4), {"p": 1.5}),
    ])
    def test_invalid_parameters(self, args, kwargs):
        with pytest.raises(ValueError):
            create_topology(*args, **kwargs)
