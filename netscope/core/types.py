"""Core type definitions for netscope."""

from enum import Enum
from typing import Dict, Optional, Tuple


# Type aliases
NodeId = int
"""Backend node identifier (unsigned byte)"""

Position = Tuple[float, float]
"""Canvas coordinates (x, y)"""

Edge = Tuple[NodeId, NodeId]
"""Undirected edge stored as (smaller id, larger id)"""

MIN_NODE_ID = 0
MAX_NODE_ID = 255


class NodeClass(str, Enum):
    """Role of a node in the simulated network."""
    RELAY = "relay"
    CLIENT = "client"
    SERVER = "server"


class ClientKind(str, Enum):
    CHAT = "chat"
    MEDIA = "media"


class ServerKind(str, Enum):
    COMMUNICATION = "communication"
    TEXT = "text"
    MEDIA = "media"


class PacketKind(str, Enum):
    """Traffic classes reported by the backend for sent packets."""
    FRAGMENT = "fragment"
    ACK = "ack"
    NACK = "nack"
    FLOOD_REQUEST = "flood_request"
    FLOOD_RESPONSE = "flood_response"


# Connectivity rules, counted in relay connections
CLIENT_MIN_RELAYS = 1
CLIENT_MAX_RELAYS = 2
SERVER_MIN_RELAYS = 2


# Resting palette
RELAY_COLOR = "#add8e6"
CHAT_CLIENT_COLOR = "#ffff00"
MEDIA_CLIENT_COLOR = "#ffa500"
COMMUNICATION_SERVER_COLOR = "#00ff00"
TEXT_SERVER_COLOR = "#a020f0"
MEDIA_SERVER_COLOR = "#ff0000"
UNKNOWN_COLOR = "#a0a0a0"

EDGE_COLOR = "#a0a0a0"
ACTIVE_EDGE_COLOR = "#ffffff"
DROPPED_COLOR = "#ff0000"

PACKET_COLORS: Dict[PacketKind, str] = {
    PacketKind.FRAGMENT: "#0000ff",
    PacketKind.ACK: "#006400",
    PacketKind.NACK: "#8b0000",
    PacketKind.FLOOD_REQUEST: "#ffffff",
    PacketKind.FLOOD_RESPONSE: "#404040",
}

_CLIENT_COLORS = {
    ClientKind.CHAT: CHAT_CLIENT_COLOR,
    ClientKind.MEDIA: MEDIA_CLIENT_COLOR,
}

_SERVER_COLORS = {
    ServerKind.COMMUNICATION: COMMUNICATION_SERVER_COLOR,
    ServerKind.TEXT: TEXT_SERVER_COLOR,
    ServerKind.MEDIA: MEDIA_SERVER_COLOR,
}


def resting_color(
    node_class: NodeClass,
    client_kind: Optional[ClientKind] = None,
    server_kind: Optional[ServerKind] = None
) -> str:
    """Get the idle display color for a node.

    Args:
        node_class: Class of the node
        client_kind: Subtype, for clients
        server_kind: Subtype, for servers

    Returns:
        Hex color string
    """
    if node_class == NodeClass.RELAY:
        return RELAY_COLOR
    if node_class == NodeClass.CLIENT:
        return _CLIENT_COLORS.get(client_kind, UNKNOWN_COLOR)
    return _SERVER_COLORS.get(server_kind, UNKNOWN_COLOR)


def normalize_edge(a: NodeId, b: NodeId) -> Edge:
    """Order an undirected edge's endpoints."""
    return (a, b) if a <= b else (b, a)


def is_valid_node_id(value: int) -> bool:
    return MIN_NODE_ID <= value <= MAX_NODE_ID
