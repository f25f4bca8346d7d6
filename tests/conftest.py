"""Shared fixtures for netscope tests."""

import pytest
import numpy as np

from netscope.channel import channel_pair
from netscope.config import CanvasConfig, LayoutConfig
from netscope.core import AnimationState, Inbox, TopologyModel
from netscope.layout import circular_layout
from netscope.sync import CommandGate, Reconciler
from netscope.topology import ClientSpec, RelaySpec, ServerSpec, TopologyDescription


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_model(topology: TopologyDescription) -> TopologyModel:
    """Bootstrap a model with deterministic circular positions."""
    canvas = CanvasConfig()
    positions = circular_layout(topology.node_ids(), *canvas.extent, margin=canvas.margin)
    model = TopologyModel()
    model.bootstrap(topology, positions)
    return model


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def line_topology():
    """Three relays in a line: 1 - 2 - 3."""
    return TopologyDescription(
        drones=[
            RelaySpec(id=1, connected_node_ids=[2]),
            RelaySpec(id=2, connected_node_ids=[3]),
            RelaySpec(id=3),
        ]
    )


@pytest.fixture
def mixed_topology():
    """Relay ring 1-2-3-4 with two clients and one server.

    Client 5 sits at its ceiling (relays 1 and 2), client 6 at its floor
    (relay 3) and server 7 at its floor (relays 2 and 4).
    """
    return TopologyDescription(
        drones=[
            RelaySpec(id=1, connected_node_ids=[2], pdr=0.1),
            RelaySpec(id=2, connected_node_ids=[3], pdr=0.1),
            RelaySpec(id=3, connected_node_ids=[4], pdr=0.1),
            RelaySpec(id=4, connected_node_ids=[1], pdr=0.1),
        ],
        clients=[
            ClientSpec(id=5, connected_drone_ids=[1, 2]),
            ClientSpec(id=6, connected_drone_ids=[3]),
        ],
        servers=[
            ServerSpec(id=7, connected_drone_ids=[2, 4]),
        ],
    )


@pytest.fixture
def line_model(line_topology):
    return build_model(line_topology)


@pytest.fixture
def mixed_model(mixed_topology):
    return build_model(mixed_topology)


@pytest.fixture
def channels():
    """Connected (monitor, backend) channel ends."""
    return channel_pair()


@pytest.fixture
def make_gate(channels):
    """Build a gate over a model, sending on the monitor channel end."""
    monitor, _ = channels

    def factory(model):
        canvas = CanvasConfig()
        return CommandGate(
            model, monitor,
            spawn_area=(canvas.margin, canvas.extent),
            rng=np.random.default_rng(0),
        )

    return factory


@pytest.fixture
def make_reconciler(clock):
    """Build a reconciler with fresh animation and inbox over a model."""

    def factory(model=None, animation_enabled=True):
        return Reconciler(
            model if model is not None else TopologyModel(),
            AnimationState(decay_seconds=0.25),
            Inbox(),
            layout=LayoutConfig(iterations=50, seed=1),
            canvas=CanvasConfig(),
            clock=clock,
            animation_enabled=animation_enabled,
            rng=np.random.default_rng(0),
        )

    return factory


@pytest.fixture
def model_from():
    """Bootstrap a model from an ad-hoc topology."""
    return build_model
