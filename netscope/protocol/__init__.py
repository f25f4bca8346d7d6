"""Message vocabulary between the monitor and the simulation backend."""

from netscope.protocol import commands, events
from netscope.protocol.codec import decode, encode
from netscope.protocol.commands import Command
from netscope.protocol.events import Event

__all__ = ["commands", "events", "Command", "Event", "encode", "decode"]
