"""Applies backend events to the local model and animation state."""

import logging
import time
from typing import Callable, Dict, List, Optional

import numpy as np

from netscope.config.schema import CanvasConfig, LayoutConfig
from netscope.core.animation import AnimationState
from netscope.core.inbox import Inbox
from netscope.core.model import TopologyModel
from netscope.core.types import (
    ACTIVE_EDGE_COLOR,
    DROPPED_COLOR,
    EDGE_COLOR,
    PACKET_COLORS,
    NodeId,
)
from netscope.layout import compute_layout
from netscope.protocol import events
from netscope.protocol.events import Event

logger = logging.getLogger(__name__)


class Reconciler:
    """Sole consumer of inbound events.

    Structural confirmations are re-applied idempotently, so an echo of a
    change the CommandGate already applied optimistically is a no-op.
    Events that reference unknown nodes are dropped with a log entry; any
    event other than Bootstrap that arrives before the first Bootstrap is
    a protocol violation and is dropped as well.
    """

    def __init__(
        self,
        model: TopologyModel,
        animation: AnimationState,
        inbox: Inbox,
        layout: Optional[LayoutConfig] = None,
        canvas: Optional[CanvasConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        animation_enabled: bool = True,
        rng: Optional[np.random.Generator] = None
    ):
        """Initialize reconciler.

        Args:
            model: Topology model to update
            animation: Marker store to update
            inbox: Store for domain responses
            layout: Layout settings used on bootstrap
            canvas: Drawing area for layout and spawned relays
            clock: Time source for markers
            animation_enabled: If False, traffic events are ignored
            rng: Random generator for positions of relays spawned elsewhere
        """
        self.model = model
        self.animation = animation
        self.inbox = inbox
        self.layout = layout or LayoutConfig()
        self.canvas = canvas or CanvasConfig()
        self.clock = clock
        self.animation_enabled = animation_enabled
        self.rng = rng if rng is not None else np.random.default_rng()

        self._handlers: Dict[type, Callable[[Event], bool]] = {
            events.Bootstrap: self._on_bootstrap,
            events.TrafficSent: self._on_traffic_sent,
            events.TrafficDropped: self._on_traffic_dropped,
            events.Spawned: self._on_spawned,
            events.Crashed: self._on_crashed,
            events.LinkAdded: self._on_link_added,
            events.LinkRemoved: self._on_link_removed,
            events.ReliabilitySet: self._on_reliability_set,
            events.FileList: self._on_file_list,
            events.ClientList: self._on_client_list,
            events.MessageReceived: self._on_message_received,
        }

    def handles(self, event_type: type) -> bool:
        return event_type in self._handlers

    def apply(self, event: Event) -> bool:
        """Apply one event.

        Args:
            event: Event received from the backend

        Returns:
            True if the event changed the model, animation or inbox

        Raises:
            TypeError: If the object is not a known event type
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"No handler for {type(event).__name__}")

        if not self.model.ready and not isinstance(event, events.Bootstrap):
            logger.error("Protocol violation: %s received before bootstrap, dropping", event)
            return False

        return handler(event)

    def decay(self, now: float) -> List[NodeId]:
        """Expire markers and rest the edge colors of sources that went quiet.

        Args:
            now: Current time on the reconciler clock

        Returns:
            Ids of nodes whose marker expired
        """
        expired = self.animation.decay(now)
        sending = {src for src, _ in self.animation.edge_markers}
        for node_id, color in self.model.edge_colors.items():
            if color != EDGE_COLOR and node_id not in sending:
                self.model.edge_colors[node_id] = EDGE_COLOR
        return expired

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_bootstrap(self, event: events.Bootstrap) -> bool:
        if self.model.ready:
            logger.warning("Received a second bootstrap, rebuilding topology")

        positions = compute_layout(event.topology, self.layout, self.canvas)
        self.model.bootstrap(event.topology, positions)
        self.animation.clear()
        self.inbox.clear()
        return True

    def _on_traffic_sent(self, event: events.TrafficSent) -> bool:
        if not self._animating(event) or not self._present(event, event.src, event.dest):
            return False

        now = self.clock()
        self.animation.mark_edge(event.src, event.dest, ACTIVE_EDGE_COLOR, now)
        self.model.edge_colors[event.src] = ACTIVE_EDGE_COLOR
        if self.model.nodes[event.src].is_relay:
            self.animation.mark_node(event.src, PACKET_COLORS[event.kind], now)
        return True

    def _on_traffic_dropped(self, event: events.TrafficDropped) -> bool:
        if not self._animating(event) or not self._present(event, event.at):
            return False

        self.animation.mark_node(event.at, DROPPED_COLOR, self.clock())
        return True

    def _on_spawned(self, event: events.Spawned) -> bool:
        # Relays spawned elsewhere have no position yet
        node = self.model.get(event.node_id)
        position = node.position if node else self._random_position()
        return self.model.apply_spawn(event.node_id, event.neighbors, event.reliability, position)

    def _on_crashed(self, event: events.Crashed) -> bool:
        changed = self.model.apply_crash(event.node_id)
        self.animation.purge(event.node_id)
        self.inbox.forget(event.node_id)
        return changed

    def _on_link_added(self, event: events.LinkAdded) -> bool:
        return self.model.apply_add_link(event.a, event.b)

    def _on_link_removed(self, event: events.LinkRemoved) -> bool:
        return self.model.apply_remove_link(event.a, event.b)

    def _on_reliability_set(self, event: events.ReliabilitySet) -> bool:
        return self.model.apply_set_reliability(event.node_id, event.value)

    def _on_file_list(self, event: events.FileList) -> bool:
        if not self._present(event, event.server):
            return False
        self.inbox.file_lists[event.server] = list(event.titles)
        return True

    def _on_client_list(self, event: events.ClientList) -> bool:
        if not self._present(event, event.client):
            return False
        self.inbox.client_lists[event.client] = list(event.clients)
        return True

    def _on_message_received(self, event: events.MessageReceived) -> bool:
        if not self._present(event, event.dest):
            return False
        self.inbox.record_message(event.src, event.dest, event.text)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _animating(self, event: Event) -> bool:
        if not self.animation_enabled:
            logger.debug("Animation disabled, ignoring %s", event)
        return self.animation_enabled

    def _present(self, event: Event, *node_ids: NodeId) -> bool:
        missing = [i for i in node_ids if i not in self.model]
        if missing:
            logger.info("Dropping stale %s: unknown nodes %s", event, missing)
            return False
        return True

    def _random_position(self):
        (min_x, min_y), (max_x, max_y) = self.canvas.margin, self.canvas.extent
        return (float(self.rng.uniform(min_x, max_x)), float(self.rng.uniform(min_y, max_y)))
