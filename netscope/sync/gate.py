"""Local validation of operator requests before they reach the backend."""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

import numpy as np

from netscope.channel.base import SyncChannel
from netscope.config.schema import CanvasConfig
from netscope.core.model import TopologyModel
from netscope.core.node import Node
from netscope.core.types import (
    CLIENT_MAX_RELAYS,
    CLIENT_MIN_RELAYS,
    SERVER_MIN_RELAYS,
    NodeClass,
    NodeId,
    Position,
    is_valid_node_id,
)
from netscope.errors import RejectedRequest
from netscope.protocol import commands
from netscope.protocol.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a request.

    Attributes:
        accepted: True if the command was sent
        command: The command that was sent, None when rejected
        reason: Why the request was rejected, empty when accepted
    """
    accepted: bool
    command: Optional[Command] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.accepted


class CommandGate:
    """Checks topology invariants, sends accepted commands, applies them locally.

    Rejections never touch the network. Accepted structural commands are
    applied to the model as soon as the send succeeds; the backend's echo is
    later re-applied by the Reconciler as an idempotent confirmation.

    PeerGone from the channel is not caught here: losing the backend is
    fatal for the session and is handled by its owner.
    """

    def __init__(
        self,
        model: TopologyModel,
        channel: SyncChannel,
        spawn_area: Optional[Tuple[Position, Position]] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """Initialize command gate.

        Args:
            model: Local topology model to validate against and update
            channel: Channel to the backend
            spawn_area: ((min_x, min_y), (max_x, max_y)) for spawned relays;
                defaults to the bounds of the default canvas
            rng: Random generator for spawn positions
        """
        self.model = model
        self.channel = channel
        if spawn_area is None:
            canvas = CanvasConfig()
            spawn_area = (canvas.margin, canvas.extent)
        self.spawn_area = spawn_area
        self.rng = rng if rng is not None else np.random.default_rng()

    # ------------------------------------------------------------------
    # Structural requests
    # ------------------------------------------------------------------

    def request_crash(self, node_id: NodeId) -> GateDecision:
        def validate():
            node = self._require_relay(node_id)
            for neighbor_id in node.neighbors:
                self._check_floor(self.model.nodes[neighbor_id], losing=node)

        return self._forward(
            commands.Crash(node_id), validate,
            lambda: self.model.apply_crash(node_id),
        )

    def request_remove_link(self, a: NodeId, b: NodeId) -> GateDecision:
        def validate():
            node_a, node_b = self._require_node(a), self._require_node(b)
            if not self.model.are_linked(a, b):
                raise RejectedRequest(f"Nodes {a} and {b} are not connected")
            self._check_floor(node_a, losing=node_b)
            self._check_floor(node_b, losing=node_a)

        return self._forward(
            commands.RemoveLink(a, b), validate,
            lambda: self.model.apply_remove_link(a, b),
        )

    def request_add_link(self, a: NodeId, b: NodeId) -> GateDecision:
        def validate():
            node_a, node_b = self._require_node(a), self._require_node(b)
            if a == b:
                raise RejectedRequest(f"Node {a} cannot be connected to itself")
            if self.model.are_linked(a, b):
                raise RejectedRequest(f"Nodes {a} and {b} are already connected")
            if node_a.is_client and node_b.is_client:
                raise RejectedRequest("Two clients cannot be connected to each other")
            for node, other in ((node_a, node_b), (node_b, node_a)):
                if node.is_leaf and not other.is_relay:
                    raise RejectedRequest(
                        f"{node.label()} can only be connected to relays"
                    )
                self._check_ceiling(node)

        return self._forward(
            commands.AddLink(a, b), validate,
            lambda: self.model.apply_add_link(a, b),
        )

    def request_set_reliability(self, node_id: NodeId, value: float) -> GateDecision:
        def validate():
            self._require_relay(node_id)
            self._check_reliability(value)

        return self._forward(
            commands.SetReliability(node_id, value), validate,
            lambda: self.model.apply_set_reliability(node_id, value),
        )

    def request_spawn(
        self,
        node_id: NodeId,
        neighbors: Iterable[NodeId],
        reliability: float
    ) -> GateDecision:
        neighbors = tuple(neighbors)

        def validate():
            self._require_ready()
            if not is_valid_node_id(node_id):
                raise RejectedRequest(f"Node id {node_id} is out of range")
            if node_id in self.model:
                raise RejectedRequest(f"A node with id {node_id} already exists")
            self._check_reliability(reliability)
            if len(set(neighbors)) != len(neighbors):
                raise RejectedRequest(f"Duplicate neighbors in {list(neighbors)}")
            for neighbor_id in neighbors:
                if neighbor_id == node_id:
                    raise RejectedRequest(f"Relay {node_id} cannot be its own neighbor")
                self._check_ceiling(self._require_node(neighbor_id))

        return self._forward(
            commands.Spawn(node_id, neighbors, reliability), validate,
            lambda: self.model.apply_spawn(node_id, neighbors, reliability, self._spawn_position()),
        )

    # ------------------------------------------------------------------
    # Domain requests
    # ------------------------------------------------------------------

    def request_send_message(self, src: NodeId, dest: NodeId, text: str) -> GateDecision:
        def validate():
            self._require_class(src, NodeClass.CLIENT)
            self._require_node(dest)
            if not text:
                raise RejectedRequest("Message is empty")

        return self._forward(commands.SendMessage(src, dest, text), validate)

    def request_register(self, client: NodeId, server: NodeId) -> GateDecision:
        return self._forward(
            commands.RegisterTo(client, server), lambda: self._require_pair(client, server)
        )

    def request_client_list(self, client: NodeId, server: NodeId) -> GateDecision:
        return self._forward(
            commands.GetClientList(client, server), lambda: self._require_pair(client, server)
        )

    def request_logout(self, client: NodeId, server: NodeId) -> GateDecision:
        return self._forward(
            commands.Logout(client, server), lambda: self._require_pair(client, server)
        )

    def request_file_list(self, client: NodeId, server: NodeId) -> GateDecision:
        return self._forward(
            commands.AskForFileList(client, server), lambda: self._require_pair(client, server)
        )

    def request_file(self, client: NodeId, server: NodeId, title: str) -> GateDecision:
        def validate():
            self._require_pair(client, server)
            if not title:
                raise RejectedRequest("File title is empty")

        return self._forward(commands.GetFile(client, server, title), validate)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _forward(
        self,
        command: Command,
        validate: Callable[[], None],
        apply: Optional[Callable[[], object]] = None
    ) -> GateDecision:
        try:
            validate()
        except RejectedRequest as e:
            logger.warning("Rejected %s: %s", command, e.reason)
            return GateDecision(accepted=False, reason=e.reason)

        self.channel.try_send(command)
        logger.info("Sent %s", command)

        if apply is not None:
            apply()
        return GateDecision(accepted=True, command=command)

    def _require_ready(self) -> None:
        if not self.model.ready:
            raise RejectedRequest("Topology has not been received yet")

    def _require_node(self, node_id: NodeId) -> Node:
        self._require_ready()
        node = self.model.get(node_id)
        if node is None:
            raise RejectedRequest(f"Unknown node {node_id}")
        return node

    def _require_class(self, node_id: NodeId, node_class: NodeClass) -> Node:
        node = self._require_node(node_id)
        if node.node_class != node_class:
            raise RejectedRequest(f"{node.label()} is not a {node_class.value}")
        return node

    def _require_relay(self, node_id: NodeId) -> Node:
        return self._require_class(node_id, NodeClass.RELAY)

    def _require_pair(self, client: NodeId, server: NodeId) -> None:
        self._require_class(client, NodeClass.CLIENT)
        self._require_node(server)

    def _check_floor(self, node: Node, losing: Node) -> None:
        """Reject if ``node`` would fall below its relay floor after losing a link."""
        if not losing.is_relay:
            return
        remaining = self.model.relay_degree(node.node_id) - 1
        if node.is_client and remaining < CLIENT_MIN_RELAYS:
            raise RejectedRequest(
                f"{node.label()} must stay connected to at least {CLIENT_MIN_RELAYS} relay"
            )
        if node.is_server and remaining < SERVER_MIN_RELAYS:
            raise RejectedRequest(
                f"{node.label()} must stay connected to at least {SERVER_MIN_RELAYS} relays"
            )

    def _check_ceiling(self, node: Node) -> None:
        """Reject if a client is already linked to as many relays as it may be."""
        if node.is_client and self.model.relay_degree(node.node_id) >= CLIENT_MAX_RELAYS:
            raise RejectedRequest(
                f"{node.label()} is already connected to {CLIENT_MAX_RELAYS} relays"
            )

    @staticmethod
    def _check_reliability(value: float) -> None:
        if not isinstance(value, (int, float)) or not math.isfinite(value) or not 0.0 <= value <= 1.0:
            raise RejectedRequest(f"Reliability must be between 0.0 and 1.0, got {value}")

    def _spawn_position(self) -> Position:
        (min_x, min_y), (max_x, max_y) = self.spawn_area
        return (float(self.rng.uniform(min_x, max_x)), float(self.rng.uniform(min_y, max_y)))
