"""Keeping the monitor in step with the simulation backend."""

from netscope.sync.forms import SpawnForm
from netscope.sync.gate import CommandGate, GateDecision
from netscope.sync.reconciler import Reconciler
from netscope.sync.session import MonitorSession

__all__ = ["CommandGate", "GateDecision", "Reconciler", "MonitorSession", "SpawnForm"]
