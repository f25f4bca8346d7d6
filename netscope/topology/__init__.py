"""Bootstrap topology descriptions and sample generators."""

from netscope.topology.base import ClientSpec, RelaySpec, ServerSpec, TopologyDescription
from netscope.topology.generators import create_topology

__all__ = ["TopologyDescription", "RelaySpec", "ClientSpec", "ServerSpec", "create_topology"]
