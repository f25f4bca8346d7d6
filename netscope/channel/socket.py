"""TCP sync channel using newline-delimited JSON frames."""

import logging
import select
import socket
from collections import deque
from typing import Any, Deque, Optional

from netscope.channel.base import SyncChannel
from netscope.errors import CodecError, PeerGone
from netscope.protocol.codec import decode, encode

logger = logging.getLogger(__name__)


class SocketChannel(SyncChannel):
    """Channel over a connected stream socket.

    Receiving polls the socket with a zero timeout, so it never blocks.
    Frames that fail to decode are logged and skipped; a closed or reset
    connection surfaces as PeerGone once every complete frame has been
    handed out.
    """

    def __init__(self, sock: socket.socket, recv_size: int = 4096):
        """Initialize channel.

        Args:
            sock: Connected stream socket; the channel takes ownership
            recv_size: Bytes read per poll
        """
        self._sock = sock
        self._recv_size = recv_size
        self._buffer = b""
        self._frames: Deque[bytes] = deque()
        self._eof = False
        self._closed = False

    @classmethod
    def connect(cls, host: str, port: int, timeout: float = 5.0) -> "SocketChannel":
        """Open a TCP connection to a backend.

        Raises:
            PeerGone: If the backend cannot be reached
        """
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise PeerGone(f"Could not connect to backend at {host}:{port}: {e}") from e
        sock.settimeout(None)
        logger.info("Connected to backend at %s:%d", host, port)
        return cls(sock)

    def try_send(self, message: Any) -> None:
        if self._closed or self._eof:
            raise PeerGone("Backend connection closed")
        try:
            self._sock.sendall(encode(message))
        except OSError as e:
            self._eof = True
            raise PeerGone(f"Backend connection lost: {e}") from e

    def try_receive(self) -> Optional[Any]:
        if self._closed:
            raise PeerGone("Backend connection closed")

        while True:
            if not self._frames and not self._eof:
                self._poll()

            if not self._frames:
                if self._eof:
                    raise PeerGone("Backend closed the connection")
                return None

            frame = self._frames.popleft()
            try:
                return decode(frame)
            except CodecError as e:
                logger.error("Dropping undecodable frame: %s", e)

    def _poll(self) -> None:
        try:
            readable, _, _ = select.select([self._sock], [], [], 0)
        except (OSError, ValueError) as e:
            logger.error("Polling backend socket failed: %s", e)
            self._eof = True
            return

        if not readable:
            return

        try:
            chunk = self._sock.recv(self._recv_size)
        except OSError as e:
            logger.error("Receiving from backend failed: %s", e)
            self._eof = True
            return

        if not chunk:
            self._eof = True
            return

        self._buffer += chunk
        *complete, self._buffer = self._buffer.split(b"\n")
        self._frames.extend(frame for frame in complete if frame.strip())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        except OSError as e:
            logger.debug("Error closing backend socket: %s", e)

    @property
    def closed(self) -> bool:
        return self._closed or self._eof
