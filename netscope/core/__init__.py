"""Core state for netscope: nodes, topology model and traffic markers."""

from netscope.core.animation import AnimationState
from netscope.core.inbox import Inbox
from netscope.core.model import TopologyModel
from netscope.core.node import Node
from netscope.core.types import ClientKind, NodeClass, NodeId, PacketKind, ServerKind

__all__ = [
    "AnimationState",
    "Inbox",
    "TopologyModel",
    "Node",
    "NodeClass",
    "NodeId",
    "ClientKind",
    "ServerKind",
    "PacketKind",
]
