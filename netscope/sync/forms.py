"""Pending spawn form filled in by the operator."""

import math
from dataclasses import dataclass, field
from typing import List

from netscope.core.types import MAX_NODE_ID, MIN_NODE_ID, NodeId
from netscope.protocol.commands import Spawn


@dataclass
class SpawnForm:
    """Raw text fields for a relay spawn, parsed only when submitted.

    Attributes:
        id_text: Node id as typed
        neighbors: Selected neighbor ids, in selection order
        reliability_text: Packet drop rate as typed
    """

    id_text: str = ""
    neighbors: List[NodeId] = field(default_factory=list)
    reliability_text: str = ""

    def toggle_neighbor(self, node_id: NodeId) -> None:
        if node_id in self.neighbors:
            self.neighbors.remove(node_id)
        else:
            self.neighbors.append(node_id)

    def build(self) -> Spawn:
        """Parse the fields into a command.

        Raises:
            ValueError: If the id or reliability is malformed
        """
        try:
            node_id = int(self.id_text.strip())
        except ValueError:
            raise ValueError(f"Node id must be an integer, got {self.id_text!r}") from None
        if not MIN_NODE_ID <= node_id <= MAX_NODE_ID:
            raise ValueError(f"Node id must be between {MIN_NODE_ID} and {MAX_NODE_ID}")

        try:
            reliability = float(self.reliability_text.strip())
        except ValueError:
            raise ValueError(
                f"Reliability must be a number, got {self.reliability_text!r}"
            ) from None
        if not math.isfinite(reliability):
            raise ValueError("Reliability must be finite")

        return Spawn(node_id=node_id, neighbors=tuple(self.neighbors), reliability=reliability)

    def reset(self) -> None:
        self.id_text = ""
        self.neighbors = []
        self.reliability_text = ""
