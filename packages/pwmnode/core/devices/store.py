"""Persist device state to a JSON file and restore it."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from pwmnode.core.devices.device import Device
from pwmnode.core.devices.errors import DecodeError
from pwmnode.core.utils.json import write_json

logger = logging.getLogger(__name__)


class DeviceStateFile(BaseModel):
    """On-disk layout of a device state file."""

    model_config = ConfigDict(extra="forbid")

    devices: list[Device]


def save_devices(path: str | Path, devices: Iterable[Device]) -> None:
    """Write devices to ``path`` as ``{"devices": [...]}``.

    Args:
        path: Output file path (parent directories are created)
        devices: Devices to persist
    """
    documents = [device.model_dump(mode="json") for device in devices]
    write_json(path, {"devices": documents})
    logger.debug("Saved %d devices to %s", len(documents), path)


def load_devices(path: str | Path) -> list[Device]:
    """Read devices previously written by ``save_devices``.

    The file is validated as JSON, so devices must use the same wire form
    as ``Device.from_json``.

    Raises:
        FileNotFoundError: If the file does not exist
        DecodeError: If the file is not a valid device state document
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        state = DeviceStateFile.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Invalid device state file {path}: {e}") from e

    logger.debug("Loaded %d devices from %s", len(state.devices), path)
    return state.devices
