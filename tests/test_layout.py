"""Tests for graph layout algorithms."""

import itertools
import math

import numpy as np
import pytest

from netscope.config import CanvasConfig, LayoutConfig
from netscope.layout import circular_layout, compute_layout, fruchterman_reingold

WIDTH, HEIGHT = 875.0, 875.0
MARGIN = (25.0, 125.0)


def _distance(p, q):
    return math.hypot(p[0] - q[0], p[1] - q[1])


def _inside(position, margin=MARGIN, width=WIDTH, height=HEIGHT):
    x, y = position
    return margin[0] <= x <= width and margin[1] <= y <= height


class TestFruchtermanReingold:

    def test_empty_graph(self):
        """No nodes means no positions and no work."""
        assert fruchterman_reingold([], [], WIDTH, HEIGHT) == {}

    def test_single_node_inside_rectangle(self):
        """A lone node is placed without running any forces."""
        positions = fruchterman_reingold(
            [7], [], WIDTH, HEIGHT, margin=MARGIN, rng=np.random.default_rng(3)
        )
        assert list(positions) == [7]
        assert _inside(positions[7])

    @pytest.mark.parametrize("seed", range(5))
    def test_disconnected_nodes_separate(self, seed):
        """Repulsion alone keeps every pair of nodes apart."""
        node_ids = list(range(8))
        positions = fruchterman_reingold(
            node_ids, [], WIDTH, HEIGHT, margin=MARGIN, rng=np.random.default_rng(seed)
        )

        for a, b in itertools.combinations(node_ids, 2):
            assert _distance(positions[a], positions[b]) > 1.0

    @pytest.mark.parametrize("iterations", [0, 1, 5, 50, 500])
    def test_positions_stay_in_bounds(self, iterations):
        """Clamping keeps every node inside the rectangle for any round count."""
        node_ids = list(range(1, 16))
        edges = [(i, i + 1) for i in range(1, 15)] + [(1, 8), (3, 12)]
        positions = fruchterman_reingold(
            node_ids, edges, WIDTH, HEIGHT,
            iterations=iterations, margin=MARGIN, rng=np.random.default_rng(11),
        )

        assert set(positions) == set(node_ids)
        assert all(_inside(p) for p in positions.values())

    @pytest.mark.parametrize("seed", range(5))
    def test_connected_pair_closer_than_average(self, seed):
        """The endpoints of the only edge end up closer than a typical pair."""
        node_ids = list(range(12))
        positions = fruchterman_reingold(
            node_ids, [(0, 1)], WIDTH, HEIGHT, margin=MARGIN, rng=np.random.default_rng(seed)
        )

        other_pairs = [
            (a, b) for a, b in itertools.combinations(node_ids, 2) if (a, b) != (0, 1)
        ]
        mean_distance = sum(_distance(positions[a], positions[b]) for a, b in other_pairs) \
            / len(other_pairs)

        assert _distance(positions[0], positions[1]) < mean_distance

    def test_same_seed_same_layout(self):
        """The layout is reproducible given the same seed."""
        node_ids = [1, 2, 3, 4]
        edges = [(1, 2), (2, 3), (3, 4)]
        first = fruchterman_reingold(node_ids, edges, WIDTH, HEIGHT, rng=np.random.default_rng(42))
        second = fruchterman_reingold(node_ids, edges, WIDTH, HEIGHT, rng=np.random.default_rng(42))
        assert first == second

    def test_ignores_invalid_edges(self):
        """Self-loops, duplicates and unknown endpoints don't break the layout."""
        positions = fruchterman_reingold(
            [1, 2], [(1, 1), (1, 2), (2, 1), (1, 9)], WIDTH, HEIGHT,
            iterations=20, rng=np.random.default_rng(0),
        )
        assert set(positions) == {1, 2}
        assert all(not math.isnan(c) for p in positions.values() for c in p)

    def test_empty_rectangle_rejected(self):
        with pytest.raises(ValueError):
            fruchterman_reingold([1, 2], [], 100.0, 100.0, margin=(100.0, 0.0))

    def test_negative_iterations_rejected(self):
        with pytest.raises(ValueError):
            fruchterman_reingold([1, 2], [], WIDTH, HEIGHT, iterations=-1)


class TestCircularLayout:

    def test_nodes_on_circle(self):
        """All nodes share the same distance from the center."""
        positions = circular_layout([1, 2, 3, 4, 5], WIDTH, HEIGHT, margin=MARGIN)
        center = ((MARGIN[0] + WIDTH) / 2, (MARGIN[1] + HEIGHT) / 2)
        radii = {round(_distance(p, center), 6) for p in positions.values()}

        assert len(radii) == 1
        assert all(_inside(p) for p in positions.values())

    def test_first_node_on_top(self):
        positions = circular_layout([1, 2, 3], WIDTH, HEIGHT, margin=MARGIN)
        assert positions[1][1] == pytest.approx(MARGIN[1])


class TestComputeLayout:

    def test_positions_for_every_node(self, mixed_topology):
        """The whole bootstrap topology is laid out within the canvas."""
        canvas = CanvasConfig()
        positions = compute_layout(mixed_topology, LayoutConfig(seed=5, iterations=100), canvas)

        assert set(positions) == set(mixed_topology.node_ids())
        assert all(
            _inside(p, margin=canvas.margin, width=canvas.extent[0], height=canvas.extent[1])
            for p in positions.values()
        )

    def test_circular_algorithm(self, line_topology):
        layout = LayoutConfig(algorithm="circular")
        positions = compute_layout(line_topology, layout, CanvasConfig())
        assert len(positions) == 3
