"""Configuration management for netscope."""

from netscope.config.schema import (
    AnimationConfig,
    BackendConfig,
    CanvasConfig,
    LayoutConfig,
    LoggingConfig,
    MonitorConfig,
)
from netscope.config.loader import load_config, save_config, load_topology, save_topology

__all__ = [
    "MonitorConfig",
    "CanvasConfig",
    "LayoutConfig",
    "AnimationConfig",
    "BackendConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
    "load_topology",
    "save_topology",
]
