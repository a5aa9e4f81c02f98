"""Configuration management for pwmnode."""

from pwmnode.core.config.loader import (
    configure_logging,
    detect_format,
    load_config,
    load_node_config,
    load_node_devices,
    resolve_state_path,
)
from pwmnode.core.config.models import ConfigBase, DeviceConfig, LoggingConfig, NodeConfig

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_config",
    "load_node_config",
    "load_node_devices",
    "resolve_state_path",
    # Models
    "ConfigBase",
    "DeviceConfig",
    "LoggingConfig",
    "NodeConfig",
]
