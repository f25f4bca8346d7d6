"""Transports between the monitor and the simulation backend."""

from netscope.channel.base import SyncChannel
from netscope.channel.memory import QueueChannel, channel_pair
from netscope.channel.socket import SocketChannel

__all__ = ["SyncChannel", "QueueChannel", "SocketChannel", "channel_pair"]
