"""Base sync channel between the monitor and the backend."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class SyncChannel(ABC):
    """Non-blocking duplex message channel.

    A channel end sends one message vocabulary and receives the other: the
    monitor end sends commands and receives events, the backend end does
    the reverse. Neither operation ever blocks.
    """

    @abstractmethod
    def try_send(self, message: Any) -> None:
        """Queue a message for the peer.

        Raises:
            PeerGone: If the peer has disconnected
        """
        pass

    @abstractmethod
    def try_receive(self) -> Optional[Any]:
        """Take the next message from the peer, if one is waiting.

        Returns:
            The message, or None when nothing is pending

        Raises:
            PeerGone: If the peer has disconnected and nothing is buffered
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Disconnect; the peer sees PeerGone from then on."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass
