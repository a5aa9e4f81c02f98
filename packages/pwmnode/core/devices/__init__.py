"""Device state: action vocabulary, duty cycle tables and the device state machine."""

from pwmnode.core.devices.actions import Action
from pwmnode.core.devices.builder import DeviceBuilder
from pwmnode.core.devices.collection import DeviceCollection
from pwmnode.core.devices.device import (
    DEFAULT_FREQUENCY_HZ,
    DEFAULT_TARGET,
    Device,
    default_available_actions,
)
from pwmnode.core.devices.duty_cycles import (
    DEFAULT_DUTY_CYCLES,
    DUTY_CYCLE_SLOTS,
    DutyCycleTable,
)
from pwmnode.core.devices.enums import ActionKind, DeviceGroup
from pwmnode.core.devices.errors import (
    DecodeError,
    DeviceError,
    InvariantError,
    MissingArgumentError,
    NotAvailableError,
    NotFoundError,
    PayloadError,
    RangeError,
)
from pwmnode.core.devices.store import load_devices, save_devices
from pwmnode.core.devices.synonyms import (
    ACTIONS,
    GROUPS,
    canonical_id,
    canonical_name,
    group_id,
    group_name,
    resolve_by_id,
    resolve_by_name,
    resolve_group_by_id,
    resolve_group_by_name,
)

__all__ = [
    # Vocabulary
    "Action",
    "ActionKind",
    "DeviceGroup",
    # Registry
    "ACTIONS",
    "GROUPS",
    "canonical_id",
    "canonical_name",
    "group_id",
    "group_name",
    "resolve_by_id",
    "resolve_by_name",
    "resolve_group_by_id",
    "resolve_group_by_name",
    # Duty cycles
    "DEFAULT_DUTY_CYCLES",
    "DUTY_CYCLE_SLOTS",
    "DutyCycleTable",
    # Devices
    "DEFAULT_FREQUENCY_HZ",
    "DEFAULT_TARGET",
    "Device",
    "DeviceBuilder",
    "DeviceCollection",
    "default_available_actions",
    # Persistence
    "load_devices",
    "save_devices",
    # Errors
    "DecodeError",
    "DeviceError",
    "InvariantError",
    "MissingArgumentError",
    "NotAvailableError",
    "NotFoundError",
    "PayloadError",
    "RangeError",
]
