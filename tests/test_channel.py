"""Tests for sync channel transports."""

import socket

import pytest

from netscope.channel import SocketChannel, channel_pair
from netscope.errors import PeerGone
from netscope.protocol import commands, encode, events


class TestQueueChannel:

    def test_messages_flow_both_ways(self, channels):
        monitor, backend = channels

        monitor.try_send(commands.Crash(1))
        backend.try_send(events.Crashed(1))

        assert backend.try_receive() == commands.Crash(1)
        assert monitor.try_receive() == events.Crashed(1)

    def test_receive_never_blocks(self, channels):
        monitor, _ = channels
        assert monitor.try_receive() is None

    def test_order_preserved(self, channels):
        monitor, backend = channels
        for node_id in range(5):
            monitor.try_send(commands.Crash(node_id))

        assert backend.pending() == 5
        assert [backend.try_receive().node_id for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_close_is_seen_by_both_ends(self):
        monitor, backend = channel_pair()
        backend.close()

        assert monitor.closed
        with pytest.raises(PeerGone):
            monitor.try_send(commands.Crash(1))
        with pytest.raises(PeerGone):
            monitor.try_receive()

    def test_buffered_messages_delivered_before_peer_gone(self):
        monitor, backend = channel_pair()
        backend.try_send(events.Crashed(1))
        backend.close()

        assert monitor.try_receive() == events.Crashed(1)
        with pytest.raises(PeerGone):
            monitor.try_receive()


@pytest.fixture
def socket_pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


class TestSocketChannel:

    def test_send_and_receive(self, socket_pair):
        left, right = socket_pair
        monitor, backend = SocketChannel(left), SocketChannel(right)

        monitor.try_send(commands.AddLink(1, 2))

        assert backend.try_receive() == commands.AddLink(1, 2)
        assert backend.try_receive() is None

    def test_partial_frames_are_buffered(self, socket_pair):
        left, right = socket_pair
        monitor = SocketChannel(left)
        frame = encode(events.LinkAdded(1, 2))

        right.sendall(frame[:5])
        assert monitor.try_receive() is None
        right.sendall(frame[5:] + encode(events.Crashed(3)))

        assert monitor.try_receive() == events.LinkAdded(1, 2)
        assert monitor.try_receive() == events.Crashed(3)

    def test_bad_frame_skipped(self, socket_pair, caplog):
        left, right = socket_pair
        monitor = SocketChannel(left)

        right.sendall(b"garbage\n" + encode(events.Crashed(3)))

        with caplog.at_level("ERROR", logger="netscope.channel.socket"):
            assert monitor.try_receive() == events.Crashed(3)
        assert "undecodable" in caplog.text

    def test_eof_is_peer_gone(self, socket_pair):
        """Frames already read are handed out before the loss is reported."""
        left, right = socket_pair
        monitor = SocketChannel(left)

        right.sendall(encode(events.Crashed(3)))
        right.close()

        assert monitor.try_receive() == events.Crashed(3)
        with pytest.raises(PeerGone):
            monitor.try_receive()
        assert monitor.closed
        with pytest.raises(PeerGone):
            monitor.try_send(commands.Crash(1))

    def test_connect_to_nothing(self):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        port = listener.getsockname()[1]
        listener.close()

        with pytest.raises(PeerGone):
            SocketChannel.connect("127.0.0.1", port, timeout=1.0)
