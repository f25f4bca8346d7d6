"""JSON wire format for commands and events.

Every message is one JSON object on its own line::

    {"type": "AddLink", "data": {"a": 1, "b": 4}}
"""

import json
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Union

from pydantic import TypeAdapter, ValidationError

from netscope.errors import CodecError
from netscope.protocol.commands import COMMAND_TYPES, Command
from netscope.protocol.events import EVENT_TYPES, Bootstrap, Event

Message = Union[Command, Event]

_REGISTRY: Dict[str, type] = {cls.__name__: cls for cls in COMMAND_TYPES + EVENT_TYPES}
_ADAPTERS: Dict[str, TypeAdapter] = {name: TypeAdapter(cls) for name, cls in _REGISTRY.items()}


def to_dict(message: Message) -> Dict[str, Any]:
    """Build the JSON envelope for a message."""
    name = type(message).__name__
    if _REGISTRY.get(name) is not type(message):
        raise CodecError(f"Not a protocol message: {message!r}")

    if isinstance(message, Bootstrap):
        data = {"topology": message.topology.model_dump(mode="json")}
    else:
        data = {
            key: (value.value if isinstance(value, Enum) else
                  list(value) if isinstance(value, tuple) else value)
            for key, value in asdict(message).items()
        }
    return {"type": name, "data": data}


def from_dict(envelope: Dict[str, Any]) -> Message:
    """Rebuild a message from its JSON envelope.

    The payload is validated against the message's field types, so a
    wrong-typed id or value never reaches the model.

    Raises:
        CodecError: If the type is unknown or the payload doesn't fit it
    """
    if not isinstance(envelope, dict) or "type" not in envelope:
        raise CodecError(f"Malformed envelope: {envelope!r}")

    adapter = _ADAPTERS.get(envelope["type"])
    if adapter is None:
        raise CodecError(f"Unknown message type: {envelope['type']!r}")

    data = envelope.get("data") or {}
    if not isinstance(data, dict):
        raise CodecError(f"Payload of {envelope['type']} must be an object")

    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise CodecError(f"Invalid {envelope['type']} payload: {e}") from e


def encode(message: Message) -> bytes:
    """Serialize a message to one newline-terminated JSON line."""
    return (json.dumps(to_dict(message)) + "\n").encode("utf-8")


def decode(line: Union[bytes, str]) -> Message:
    """Parse one JSON line into a message.

    Raises:
        CodecError: If the line is not valid JSON or not a known message
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"Frame is not UTF-8: {e}") from e
    try:
        envelope = json.loads(line)
    except json.JSONDecodeError as e:
        raise CodecError(f"Frame is not JSON: {e}") from e
    return from_dict(envelope)
