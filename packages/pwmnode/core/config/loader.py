"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from pwmnode.core.config.models import NodeConfig
from pwmnode.core.devices.collection import DeviceCollection
from pwmnode.core.devices.store import load_devices
from pwmnode.core.utils.json import read_json
from pwmnode.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("node.json")
        'json'
        >>> detect_format("node.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Invalid YAML in {path}: expected a mapping, got {type(content).__name__}")
    return content


def load_node_config(path: str | Path) -> NodeConfig:
    """Load and validate a node configuration.

    Raises:
        FileNotFoundError: If config file does not exist
        ValidationError: If config is invalid

    Example:
        >>> config = load_node_config("node.yaml")
        >>> devices = config.build_collection()
    """
    raw_config = load_config(path)
    config = NodeConfig.model_validate(raw_config)
    logger.debug("Loaded node config %s with %d devices", path, len(config.devices))
    return config


def resolve_state_path(config_path: Path, state_file: str) -> Path:
    """Resolve a state file path relative to its config file's directory."""
    state_path = Path(state_file)
    if state_path.is_absolute():
        return state_path
    return config_path.parent / state_path


def load_node_devices(config_path: str | Path, config: NodeConfig) -> DeviceCollection:
    """Build the node's device collection.

    Devices are restored from the state file when the config names one and
    it exists; otherwise they are built from the configured definitions.
    """
    if config.state_file:
        state_path = resolve_state_path(Path(config_path), config.state_file)
        if state_path.exists():
            logger.info("Restoring device state from %s", state_path)
            return DeviceCollection(load_devices(state_path))
    return config.build_collection()


def configure_logging(config: NodeConfig | None = None) -> None:
    """Configure Python logging from node config.

    Args:
        config: NodeConfig instance (defaults when None)
    """
    if config is None:
        config = NodeConfig()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
