"""Configuration loading and saving utilities."""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml
import json

from netscope.config.schema import MonitorConfig
from netscope.topology.base import TopologyDescription


def _read_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON mapping from disk.

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    # Load based on file extension
    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif path.suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    return data or {}


def _write_document(data: Dict[str, Any], path: Union[str, Path]) -> None:
    path = Path(path)

    with open(path, 'w') as f:
        if path.suffix in ['.yaml', '.yml']:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        elif path.suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                "Use .yaml, .yml, or .json"
            )


def load_config(config_path: Optional[Union[str, Path]] = None) -> MonitorConfig:
    """Load configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file (.yaml, .yml, or .json).
            When omitted, the defaults are returned.

    Returns:
        MonitorConfig object

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If config file doesn't exist
    """
    if config_path is None:
        return MonitorConfig()
    return MonitorConfig(**_read_document(config_path))


def save_config(config: MonitorConfig, output_path: Union[str, Path]) -> None:
    """Save configuration to YAML or JSON file.

    Args:
        config: MonitorConfig object to save
        output_path: Output file path (.yaml, .yml, or .json)

    Raises:
        ValueError: If file format is not supported
    """
    _write_document(config.model_dump(), output_path)


def load_topology(topology_path: Union[str, Path]) -> TopologyDescription:
    """Load a bootstrap topology description from YAML or JSON."""
    return TopologyDescription(**_read_document(topology_path))


def save_topology(topology: TopologyDescription, output_path: Union[str, Path]) -> None:
    """Save a topology description to YAML or JSON."""
    _write_document(topology.model_dump(mode="json"), output_path)
