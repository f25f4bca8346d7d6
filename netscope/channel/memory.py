"""In-process channel built on thread-safe queues."""

import queue
import threading
from typing import Any, Optional, Tuple

from netscope.channel.base import SyncChannel
from netscope.errors import PeerGone


class _Link:
    """State shared by the two ends of a channel pair."""

    def __init__(self):
        self._lock = threading.Lock()
        self._closed = False

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed


class QueueChannel(SyncChannel):
    """One end of an in-process channel pair."""

    def __init__(self, inbound: queue.Queue, outbound: queue.Queue, link: _Link, name: str):
        self._inbound = inbound
        self._outbound = outbound
        self._link = link
        self.name = name

    def try_send(self, message: Any) -> None:
        if self._link.closed:
            raise PeerGone(f"{self.name}: channel closed")
        self._outbound.put_nowait(message)

    def try_receive(self) -> Optional[Any]:
        try:
            return self._inbound.get_nowait()
        except queue.Empty:
            if self._link.closed:
                raise PeerGone(f"{self.name}: channel closed") from None
            return None

    def close(self) -> None:
        self._link.close()

    @property
    def closed(self) -> bool:
        return self._link.closed

    def pending(self) -> int:
        """Number of messages waiting to be received on this end."""
        return self._inbound.qsize()


def channel_pair() -> Tuple[QueueChannel, QueueChannel]:
    """Create two connected channel ends.

    Returns:
        Tuple of (monitor end, backend end)
    """
    to_backend: queue.Queue = queue.Queue()
    to_monitor: queue.Queue = queue.Queue()
    link = _Link()
    monitor = QueueChannel(inbound=to_monitor, outbound=to_backend, link=link, name="monitor")
    backend = QueueChannel(inbound=to_backend, outbound=to_monitor, link=link, name="backend")
    return monitor, backend
