"""Scripted in-process backend for demos and integration tests."""

import logging
import random
from typing import Callable, Dict, List, Optional, Set

from netscope.channel.base import SyncChannel
from netscope.core.types import NodeClass, NodeId, PacketKind, ServerKind
from netscope.protocol import commands, events
from netscope.protocol.commands import Command
from netscope.protocol.events import Event
from netscope.topology.base import TopologyDescription

logger = logging.getLogger(__name__)

DEFAULT_FILES: Dict[ServerKind, List[str]] = {
    ServerKind.TEXT: ["README.txt", "notes.md", "changelog.txt"],
    ServerKind.MEDIA: ["cat.png", "intro.mp4"],
}


class LoopbackSimulator:
    """Minimal backend that confirms every structural command it receives.

    It holds the backend end of a channel pair. ``start()`` sends the
    bootstrap, ``process_commands()`` answers whatever the monitor has sent,
    and ``step()`` emits one random traffic event along a live link. A relay
    drops a packet with probability equal to its packet drop rate.

    Example:
        >>> monitor, backend = channel_pair()
        >>> sim = LoopbackSimulator(backend, create_topology("ring", 5, 2, 1))
        >>> sim.start()
        >>> sim.step()
    """

    def __init__(
        self,
        channel: SyncChannel,
        topology: TopologyDescription,
        seed: Optional[int] = None,
        files: Optional[Dict[ServerKind, List[str]]] = None
    ):
        """Initialize simulator.

        Args:
            channel: Backend end of the sync channel
            topology: Initial topology, sent as the bootstrap
            seed: Random seed for traffic generation
            files: Titles served per server kind
        """
        self.channel = channel
        self.topology = topology
        self.rng = random.Random(seed)

        self.adjacency: Dict[NodeId, Set[NodeId]] = topology.adjacency()
        self.classes: Dict[NodeId, NodeClass] = topology.node_classes()
        self.pdr: Dict[NodeId, float] = topology.reliabilities()
        self.registrations: Dict[NodeId, Set[NodeId]] = {}

        catalog = files if files is not None else DEFAULT_FILES
        self.files: Dict[NodeId, List[str]] = {
            server_id: list(catalog.get(kind, []))
            for server_id, kind in topology.server_kinds().items()
        }

        self._handlers: Dict[type, Callable[[Command], List[Event]]] = {
            commands.Spawn: self._spawn,
            commands.Crash: self._crash,
            commands.AddLink: self._add_link,
            commands.RemoveLink: self._remove_link,
            commands.SetReliability: self._set_reliability,
            commands.SendMessage: self._send_message,
            commands.RegisterTo: self._register,
            commands.GetClientList: self._client_list,
            commands.Logout: self._logout,
            commands.AskForFileList: self._file_list,
            commands.GetFile: self._get_file,
        }

    def start(self) -> None:
        """Send the bootstrap topology."""
        self.channel.try_send(events.Bootstrap(topology=self.topology))
        logger.info("Simulator started with %d nodes", self.topology.num_nodes)

    def process_commands(self) -> int:
        """Answer every command waiting on the channel.

        Returns:
            Number of commands handled
        """
        handled = 0
        while True:
            command = self.channel.try_receive()
            if command is None:
                return handled
            for event in self.handle(command):
                self.channel.try_send(event)
            handled += 1

    def handle(self, command: Command) -> List[Event]:
        """Apply one command and return the events it produces."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"No handler for {type(command).__name__}")
        return handler(command)

    def step(self) -> Optional[Event]:
        """Emit one random traffic event.

        Returns:
            The event sent, or None when the network has no links
        """
        sources = sorted(node_id for node_id, nbrs in self.adjacency.items() if nbrs)
        if not sources:
            return None

        src = self.rng.choice(sources)
        dest = self.rng.choice(sorted(self.adjacency[src]))

        if self.classes[src] == NodeClass.RELAY and self.rng.random() < self.pdr.get(src, 0.0):
            event: Event = events.TrafficDropped(at=src)
        else:
            event = events.TrafficSent(src=src, dest=dest, kind=self.rng.choice(list(PacketKind)))

        self.channel.try_send(event)
        return event

    # ------------------------------------------------------------------
    # Structural commands
    # ------------------------------------------------------------------

    def _spawn(self, command: commands.Spawn) -> List[Event]:
        if command.node_id in self.adjacency:
            logger.warning("Refusing spawn of existing node %d", command.node_id)
            return []

        neighbors = [n for n in command.neighbors if n in self.adjacency]
        self.adjacency[command.node_id] = set(neighbors)
        self.classes[command.node_id] = NodeClass.RELAY
        self.pdr[command.node_id] = command.reliability
        for neighbor in neighbors:
            self.adjacency[neighbor].add(command.node_id)

        return [events.Spawned(command.node_id, tuple(neighbors), command.reliability)]

    def _crash(self, command: commands.Crash) -> List[Event]:
        neighbors = self.adjacency.pop(command.node_id, None)
        if neighbors is None:
            return []

        for neighbor in neighbors:
            self.adjacency[neighbor].discard(command.node_id)
        self.classes.pop(command.node_id, None)
        self.pdr.pop(command.node_id, None)
        return [events.Crashed(command.node_id)]

    def _add_link(self, command: commands.AddLink) -> List[Event]:
        a, b = command.a, command.b
        if a == b or a not in self.adjacency or b not in self.adjacency:
            return []
        self.adjacency[a].add(b)
        self.adjacency[b].add(a)
        return [events.LinkAdded(a, b)]

    def _remove_link(self, command: commands.RemoveLink) -> List[Event]:
        a, b = command.a, command.b
        if b not in self.adjacency.get(a, set()):
            return []
        self.adjacency[a].discard(b)
        self.adjacency[b].discard(a)
        return [events.LinkRemoved(a, b)]

    def _set_reliability(self, command: commands.SetReliability) -> List[Event]:
        if command.node_id not in self.pdr:
            return []
        self.pdr[command.node_id] = command.value
        return [events.ReliabilitySet(command.node_id, command.value)]

    # ------------------------------------------------------------------
    # Domain requests
    # ------------------------------------------------------------------

    def _send_message(self, command: commands.SendMessage) -> List[Event]:
        if command.dest not in self.adjacency:
            return []
        return [events.MessageReceived(command.src, command.dest, command.text)]

    def _register(self, command: commands.RegisterTo) -> List[Event]:
        self.registrations.setdefault(command.server, set()).add(command.client)
        return []

    def _client_list(self, command: commands.GetClientList) -> List[Event]:
        clients = sorted(self.registrations.get(command.server, set()))
        return [events.ClientList(command.client, tuple(clients))]

    def _logout(self, command: commands.Logout) -> List[Event]:
        self.registrations.get(command.server, set()).discard(command.client)
        return []

    def _file_list(self, command: commands.AskForFileList) -> List[Event]:
        titles = self.files.get(command.server, [])
        return [events.FileList(command.server, command.client, tuple(titles))]

    def _get_file(self, command: commands.GetFile) -> List[Event]:
        if command.title in self.files.get(command.server, []):
            text = f"Downloaded {command.title}"
        else:
            text = f"File {command.title} not found"
        return [events.MessageReceived(command.server, command.client, text)]
