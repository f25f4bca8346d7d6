"""Store for domain responses coming back from the backend."""

from dataclasses import dataclass, field
from typing import Dict, List

from netscope.core.types import NodeId


@dataclass
class Inbox:
    """Latest domain answers, keyed by the node they concern.

    Attributes:
        file_lists: Server id -> titles it offers
        client_lists: Client id -> clients registered at its server
        messages: Client id -> received chat lines, oldest first
    """

    file_lists: Dict[NodeId, List[str]] = field(default_factory=dict)
    client_lists: Dict[NodeId, List[NodeId]] = field(default_factory=dict)
    messages: Dict[NodeId, List[str]] = field(default_factory=dict)

    def record_message(self, src: NodeId, dest: NodeId, text: str) -> None:
        self.messages.setdefault(dest, []).append(f"[{src}] -> {text}")

    def forget(self, node_id: NodeId) -> None:
        self.file_lists.pop(node_id, None)
        self.client_lists.pop(node_id, None)
        self.messages.pop(node_id, None)

    def clear(self) -> None:
        self.file_lists.clear()
        self.client_lists.clear()
        self.messages.clear()
