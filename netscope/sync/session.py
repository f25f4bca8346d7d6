"""Single-threaded tick loop tying the channel, reconciler and gate together."""

import logging
import time
from typing import Callable, Optional, TypeVar

import numpy as np

from netscope.channel.base import SyncChannel
from netscope.config.schema import MonitorConfig
from netscope.core.animation import AnimationState
from netscope.core.inbox import Inbox
from netscope.core.model import TopologyModel
from netscope.errors import PeerGone
from netscope.sync.gate import CommandGate
from netscope.sync.reconciler import Reconciler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MonitorSession:
    """Owns all monitor state for one connection to a backend.

    Each ``tick()`` drains at most one event into the reconciler and then
    decays expired markers. Operator requests go through ``submit`` so that
    a lost backend is noticed on either path. Losing the backend ends the
    session: it is reported once and every later tick or request is a no-op.

    Example:
        >>> session = MonitorSession(channel, load_config("monitor.yaml"))
        >>> session.run(ticks=100, interval=0.01)
        >>> session.submit(lambda gate: gate.request_crash(3))
    """

    def __init__(
        self,
        channel: SyncChannel,
        config: Optional[MonitorConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[np.random.Generator] = None
    ):
        """Initialize session.

        Args:
            channel: Monitor end of the sync channel
            config: Monitor configuration
            clock: Monotonic time source in seconds
            rng: Random generator for layout-free placements
        """
        self.channel = channel
        self.config = config or MonitorConfig()
        self.clock = clock
        self.disconnected = False

        rng = rng if rng is not None else np.random.default_rng(self.config.layout.seed)
        canvas = self.config.canvas

        self.model = TopologyModel()
        self.animation = AnimationState(decay_seconds=self.config.animation.decay_ms / 1000.0)
        self.inbox = Inbox()
        self.reconciler = Reconciler(
            self.model,
            self.animation,
            self.inbox,
            layout=self.config.layout,
            canvas=canvas,
            clock=clock,
            animation_enabled=self.config.animation.enabled,
            rng=rng,
        )
        self.gate = CommandGate(
            self.model,
            channel,
            spawn_area=(canvas.margin, canvas.extent),
            rng=rng,
        )

    def tick(self) -> bool:
        """Run one update cycle.

        Returns:
            False once the backend is gone, True otherwise
        """
        if self.disconnected:
            return False

        try:
            event = self.channel.try_receive()
        except PeerGone as e:
            self._lost(e)
            return False

        if event is not None and not self.reconciler.handles(type(event)):
            logger.error("Protocol violation: %s is not an event, dropping", event)
        elif event is not None:
            logger.debug("Received %s", event)
            self.reconciler.apply(event)

        self.reconciler.decay(self.clock())
        return True

    def submit(self, request: Callable[[CommandGate], T]) -> Optional[T]:
        """Run an operator request against the gate.

        Args:
            request: Callable taking the gate, e.g. ``lambda g: g.request_crash(3)``

        Returns:
            The request's result, or None if the backend is gone
        """
        if self.disconnected:
            logger.debug("Session disconnected, ignoring request")
            return None

        try:
            return request(self.gate)
        except PeerGone as e:
            self._lost(e)
            return None

    def run(self, ticks: int, interval: float = 0.0) -> int:
        """Tick repeatedly without a UI.

        Args:
            ticks: Maximum number of ticks
            interval: Seconds to sleep between ticks

        Returns:
            Number of ticks completed before the backend went away
        """
        completed = 0
        for _ in range(ticks):
            if not self.tick():
                break
            completed += 1
            if interval > 0:
                time.sleep(interval)
        return completed

    def close(self) -> None:
        self.channel.close()
        self.disconnected = True

    def _lost(self, error: PeerGone) -> None:
        if not self.disconnected:
            logger.error("Backend disconnected: %s", error)
        self.disconnected = True
