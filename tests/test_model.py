"""Tests for the topology model and nodes."""

import pytest

from netscope.core import TopologyModel
from netscope.core.types import (
    CHAT_CLIENT_COLOR,
    EDGE_COLOR,
    MEDIA_CLIENT_COLOR,
    RELAY_COLOR,
    TEXT_SERVER_COLOR,
    NodeClass,
)


def _assert_symmetric(model):
    for node in model.nodes.values():
        for neighbor in node.neighbors:
            assert node.node_id in model.nodes[neighbor].neighbors


class TestBootstrap:

    def test_builds_nodes_and_edges(self, mixed_model):
        """Links listed on one side become symmetric neighbor sets."""
        assert mixed_model.ready
        assert mixed_model.node_ids() == [1, 2, 3, 4, 5, 6, 7]
        assert mixed_model.neighbors(2) == {1, 3, 5, 7}
        assert (2, 7) in mixed_model.edges()
        _assert_symmetric(mixed_model)

    def test_edge_color_cache_matches_nodes(self, mixed_model):
        assert set(mixed_model.edge_colors) == set(mixed_model.nodes)
        assert all(color == EDGE_COLOR for color in mixed_model.edge_colors.values())

    def test_resting_colors_from_class(self, mixed_model):
        """First half of clients are chat clients, the rest media."""
        assert mixed_model.resting_color(1) == RELAY_COLOR
        assert mixed_model.resting_color(5) == CHAT_CLIENT_COLOR
        assert mixed_model.resting_color(6) == MEDIA_CLIENT_COLOR
        assert mixed_model.resting_color(7) == TEXT_SERVER_COLOR

    def test_relay_degree_counts_relays_only(self, mixed_model):
        assert mixed_model.relay_degree(5) == 2
        assert mixed_model.relay_degree(7) == 2
        assert mixed_model.relay_degree(2) == 2

    def test_missing_position_rejected(self, mixed_topology, line_model):
        """A bootstrap without a position for every node leaves state untouched."""
        before = line_model.snapshot()
        with pytest.raises(ValueError):
            line_model.bootstrap(mixed_topology, {1: (100.0, 200.0)})
        assert line_model.snapshot() == before

    def test_bootstrap_replaces_state(self, line_topology, mixed_model):
        mixed_model.bootstrap(line_topology, {1: (50, 150), 2: (60, 160), 3: (70, 170)})
        assert mixed_model.node_ids() == [1, 2, 3]
        assert mixed_model.get(2).position == (60, 160)


class TestMutations:

    def test_add_link_is_idempotent(self, line_model):
        assert line_model.apply_add_link(1, 3)
        assert not line_model.apply_add_link(3, 1)
        assert line_model.neighbors(1) == {2, 3}
        assert line_model.neighbors(3) == {1, 2}

    def test_self_loop_ignored(self, line_model):
        assert not line_model.apply_add_link(2, 2)
        assert 2 not in line_model.neighbors(2)

    def test_unknown_ids_ignored(self, line_model):
        """Stale references are dropped instead of raising."""
        assert not line_model.apply_add_link(1, 42)
        assert not line_model.apply_remove_link(42, 1)
        assert not line_model.apply_crash(42)
        assert not line_model.apply_set_reliability(42, 0.5)

    def test_remove_link(self, line_model):
        assert line_model.apply_remove_link(2, 1)
        assert line_model.neighbors(1) == set()
        assert line_model.neighbors(2) == {3}
        assert not line_model.apply_remove_link(1, 2)

    def test_crash_cascades(self, mixed_model):
        """Crashing a relay removes it from each neighbor, nothing else."""
        assert mixed_model.apply_crash(1)

        assert 1 not in mixed_model
        assert 1 not in mixed_model.edge_colors
        assert mixed_model.neighbors(2) == {3, 5, 7}
        assert mixed_model.neighbors(4) == {3, 7}
        assert mixed_model.neighbors(5) == {2}
        _assert_symmetric(mixed_model)

    def test_set_reliability(self, mixed_model):
        assert mixed_model.apply_set_reliability(1, 0.4)
        assert not mixed_model.apply_set_reliability(1, 0.4)
        assert mixed_model.get(1).reliability == 0.4

    def test_spawn_inserts_relay(self, mixed_model):
        assert mixed_model.apply_spawn(10, [1, 6], 0.2, (300.0, 400.0))

        node = mixed_model.get(10)
        assert node.node_class == NodeClass.RELAY
        assert node.reliability == 0.2
        assert node.neighbors == {1, 6}
        assert 10 in mixed_model.neighbors(6)
        assert 10 in mixed_model.edge_colors

    def test_spawn_existing_never_moves(self, mixed_model):
        """Re-spawning restores links but keeps the original position."""
        mixed_model.apply_spawn(10, [1], 0.2, (300.0, 400.0))
        assert not mixed_model.apply_spawn(10, [1], 0.2, (800.0, 800.0))
        assert mixed_model.get(10).position == (300.0, 400.0)

    def test_spawn_skips_unknown_neighbors(self, mixed_model):
        mixed_model.apply_spawn(10, [1, 99], 0.0, (300.0, 400.0))
        assert mixed_model.neighbors(10) == {1}


class TestSnapshot:

    def test_snapshot_shape(self, line_model):
        snapshot = line_model.snapshot()

        assert snapshot["ready"] is True
        assert [n["id"] for n in snapshot["nodes"]] == [1, 2, 3]
        assert snapshot["edges"] == [(1, 2), (2, 3)]
        first = snapshot["nodes"][0]
        assert first["class"] == "relay"
        assert first["kind"] is None
        assert first["neighbors"] == [2]
        assert first["color"] == RELAY_COLOR

    def test_empty_model_not_ready(self):
        model = TopologyModel()
        assert not model.ready
        assert model.snapshot() == {"ready": False, "nodes": [], "edges": []}
