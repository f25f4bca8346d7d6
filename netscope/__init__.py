"""
netscope: a live monitor for simulated relay networks.

netscope mirrors a simulation backend's topology locally, lays it out with a
force-directed algorithm, checks operator requests against connectivity
rules before sending them, and reconciles the backend's events into the
local model and traffic animation.
"""

__version__ = "0.1.0"

from netscope.channel import QueueChannel, SocketChannel, SyncChannel, channel_pair
from netscope.config import MonitorConfig, load_config
from netscope.core import AnimationState, Inbox, TopologyModel
from netscope.layout import compute_layout, fruchterman_reingold
from netscope.sync import CommandGate, GateDecision, MonitorSession, Reconciler, SpawnForm
from netscope.topology import TopologyDescription, create_topology

__all__ = [
    "__version__",
    "MonitorConfig",
    "load_config",
    "TopologyModel",
    "AnimationState",
    "Inbox",
    "compute_layout",
    "fruchterman_reingold",
    "TopologyDescription",
    "create_topology",
    "SyncChannel",
    "QueueChannel",
    "SocketChannel",
    "channel_pair",
    "CommandGate",
    "GateDecision",
    "Reconciler",
    "MonitorSession",
    "SpawnForm",
]
