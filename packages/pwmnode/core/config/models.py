"""Configuration models for a pwmnode node."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pwmnode.core.devices.builder import DeviceBuilder
from pwmnode.core.devices.collection import DeviceCollection
from pwmnode.core.devices.device import DEFAULT_FREQUENCY_HZ, DEFAULT_TARGET, Device
from pwmnode.core.devices.synonyms import ACTIONS, resolve_group_by_name


class ConfigBase(BaseModel):
    """Base class for file-backed configurations.

    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, or from default_path() when path is None.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        from pwmnode.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file (stdout when unset)")


class DeviceConfig(BaseModel):
    """Declarative description of one device.

    Action and group names use the registry vocabulary ("on", "up", "set",
    "lights", ...). Unset fields keep the builder defaults.
    """

    model_config = ConfigDict(extra="forbid")

    id: UUID = Field(..., description="Unique device identifier")
    name: str = Field(..., min_length=1, description="Device name")
    available_actions: list[str] | None = Field(
        default=None, description="Registered action names; builder default when unset"
    )
    default_target: int = Field(default=DEFAULT_TARGET, ge=0)
    duty_cycles: list[int | None] | None = Field(
        default=None, description="Eight optional percentages; builder default when unset"
    )
    target: int = Field(default=0, ge=0)
    frequency: int = Field(default=DEFAULT_FREQUENCY_HZ, ge=0, description="PWM frequency (Hz)")
    group: str | None = Field(default=None, description="Group name, e.g. 'lights' or 'fans'")
    reversed: bool = False

    @field_validator("available_actions", mode="before")
    @classmethod
    def _unquoted_on_off(cls, value: Any) -> Any:
        # YAML 1.1 reads bare on/off as booleans.
        if isinstance(value, list):
            return [
                ("on" if item else "off") if isinstance(item, bool) else item for item in value
            ]
        return value

    def build(self) -> Device:
        """Build the device through DeviceBuilder.

        Indices are lowered to 0 before a configured table is installed and
        raised afterwards, so any table that admits the configured targets
        is accepted.

        Raises:
            NotFoundError: If an action or group name is not registered
            InvariantError: If duty_cycles is malformed
            RangeError: If a target exceeds the configured table
        """
        builder = DeviceBuilder.create(self.id, self.name)

        if self.available_actions is not None:
            builder.set_available_actions(
                ACTIONS.by_name(name.lower()).value for name in self.available_actions
            )
        if self.duty_cycles is not None:
            builder.set_default_target(0).set_target(0).set_duty_cycle_table(self.duty_cycles)

        builder.set_default_target(self.default_target).set_target(self.target)
        builder.set_frequency(self.frequency).set_reversed(self.reversed)
        if self.group is not None:
            builder.set_group(resolve_group_by_name(self.group))

        return builder.build()


class NodeConfig(ConfigBase):
    """Node-level configuration: logging, devices and state persistence."""

    node_name: str = Field(default="pwmnode", description="Node name")
    logging: LoggingConfig = LoggingConfig()
    duty_cycle_scale: int = Field(
        default=255, ge=0, description="Hardware value for a 100% duty cycle"
    )
    state_file: str | None = Field(
        default=None,
        description="Device state JSON, relative to the config file; restored instead of devices",
    )
    devices: list[DeviceConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_devices(self) -> NodeConfig:
        names = [device.name for device in self.devices]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate device names in node config: {duplicates}")
        ids = [device.id for device in self.devices]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate device ids in node config")
        return self

    @classmethod
    def default_path(cls) -> Path:
        """Default path for node config."""
        return Path("node.yaml")

    def build_devices(self) -> list[Device]:
        return [device.build() for device in self.devices]

    def build_collection(self) -> DeviceCollection:
        """Build every configured device into a fresh shared collection."""
        return DeviceCollection(self.build_devices())
