"""Commands sent from the monitor to the simulation backend.

Commands are requests, not facts: the backend decides whether they take
effect and answers with the matching event.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from netscope.protocol.fields import WireFloat, WireId, WireText


@dataclass(frozen=True)
class Spawn:
    """Create a new relay linked to the given nodes."""
    node_id: WireId
    neighbors: Tuple[WireId, ...] = field(default_factory=tuple)
    reliability: WireFloat = 0.0


@dataclass(frozen=True)
class Crash:
    node_id: WireId


@dataclass(frozen=True)
class AddLink:
    a: WireId
    b: WireId


@dataclass(frozen=True)
class RemoveLink:
    a: WireId
    b: WireId


@dataclass(frozen=True)
class SetReliability:
    node_id: WireId
    value: WireFloat


# Domain requests, forwarded as-is


@dataclass(frozen=True)
class SendMessage:
    src: WireId
    dest: WireId
    text: WireText


@dataclass(frozen=True)
class RegisterTo:
    client: WireId
    server: WireId


@dataclass(frozen=True)
class GetClientList:
    client: WireId
    server: WireId


@dataclass(frozen=True)
class Logout:
    client: WireId
    server: WireId


@dataclass(frozen=True)
class AskForFileList:
    client: WireId
    server: WireId


@dataclass(frozen=True)
class GetFile:
    client: WireId
    server: WireId
    title: WireText


STRUCTURAL_COMMANDS = (Spawn, Crash, AddLink, RemoveLink, SetReliability)
DOMAIN_COMMANDS = (SendMessage, RegisterTo, GetClientList, Logout, AskForFileList, GetFile)
COMMAND_TYPES: List[type] = list(STRUCTURAL_COMMANDS + DOMAIN_COMMANDS)

Command = Union[
    Spawn, Crash, AddLink, RemoveLink, SetReliability,
    SendMessage, RegisterTo, GetClientList, Logout, AskForFileList, GetFile,
]
