"""Events reported by the simulation backend.

Events are authoritative. The first event of every session must be a
Bootstrap carrying the full topology.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from netscope.core.types import PacketKind
from netscope.protocol.fields import WireFloat, WireId, WireText
from netscope.topology.base import TopologyDescription


@dataclass(frozen=True)
class Bootstrap:
    topology: TopologyDescription


@dataclass(frozen=True)
class TrafficSent:
    """A node forwarded a packet to a neighbor."""
    src: WireId
    dest: WireId
    kind: PacketKind = PacketKind.FRAGMENT


@dataclass(frozen=True)
class TrafficDropped:
    """A relay dropped a packet."""
    at: WireId


# Confirmations of structural commands


@dataclass(frozen=True)
class Spawned:
    node_id: WireId
    neighbors: Tuple[WireId, ...] = field(default_factory=tuple)
    reliability: WireFloat = 0.0


@dataclass(frozen=True)
class Crashed:
    node_id: WireId


@dataclass(frozen=True)
class LinkAdded:
    a: WireId
    b: WireId


@dataclass(frozen=True)
class LinkRemoved:
    a: WireId
    b: WireId


@dataclass(frozen=True)
class ReliabilitySet:
    node_id: WireId
    value: WireFloat


# Domain responses


@dataclass(frozen=True)
class FileList:
    server: WireId
    client: WireId
    titles: Tuple[WireText, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ClientList:
    client: WireId
    clients: Tuple[WireId, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MessageReceived:
    src: WireId
    dest: WireId
    text: WireText


EVENT_TYPES: List[type] = [
    Bootstrap, TrafficSent, TrafficDropped,
    Spawned, Crashed, LinkAdded, LinkRemoved, ReliabilitySet,
    FileList, ClientList, MessageReceived,
]

Event = Union[
    Bootstrap, TrafficSent, TrafficDropped,
    Spawned, Crashed, LinkAdded, LinkRemoved, ReliabilitySet,
    FileList, ClientList, MessageReceived,
]
