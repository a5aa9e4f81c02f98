"""Shared, lock-guarded collection of devices.

One lock guards one list. Handles produced by ``share()`` point at the same
list, so devices can be handed across threads without copying. Callers that
need a read-modify-write sequence spanning several calls (for example
``take_action`` followed by ``read_and_acknowledge``) must hold the lock via
``locked()`` for the whole sequence.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager

from pwmnode.core.devices.device import Device

logger = logging.getLogger(__name__)


class _SharedDevices:
    """The list and its lock, referenced by every handle."""

    def __init__(self, devices: Iterable[Device]) -> None:
        self.lock = threading.Lock()
        self.devices: list[Device] = list(devices)


class DeviceCollection:
    """Handle to a mutex-guarded list of devices."""

    def __init__(self, devices: Iterable[Device] = ()) -> None:
        self._shared = _SharedDevices(devices)

    @classmethod
    def _from_shared(cls, shared: _SharedDevices) -> DeviceCollection:
        handle = cls.__new__(cls)
        handle._shared = shared
        return handle

    def share(self) -> DeviceCollection:
        """Return another handle to the same underlying list (no copy)."""
        return self._from_shared(self._shared)

    def shares_with(self, other: DeviceCollection) -> bool:
        return self._shared is other._shared

    @contextmanager
    def locked(self) -> Iterator[list[Device]]:
        """Hold the lock and expose the underlying list.

        Example:
            >>> with devices.locked() as device_list:
            ...     device_list[0].take_action(Action.on())
            ...     value = device_list[0].read_and_acknowledge(255)
        """
        with self._shared.lock:
            yield self._shared.devices

    def merge(self, other: DeviceCollection) -> None:
        """Move every device from ``other`` into this collection.

        Both locks are held for the move. They are always taken in the same
        order, so two threads merging in opposite directions cannot deadlock.
        Merging two handles of the same list changes nothing.
        """
        if self.shares_with(other):
            logger.debug("Skipping merge of a device collection into itself")
            return

        first, second = sorted((self._shared, other._shared), key=id)
        with ExitStack() as stack:
            stack.enter_context(first.lock)
            stack.enter_context(second.lock)
            moved = other._shared.devices
            count = len(moved)
            self._shared.devices.extend(moved)
            moved.clear()
        logger.debug("Merged %d devices into collection", count)

    def append(self, device: Device) -> None:
        with self._shared.lock:
            self._shared.devices.append(device)

    def snapshot(self) -> list[Device]:
        """Shallow copy of the current list; the devices themselves are shared."""
        with self._shared.lock:
            return list(self._shared.devices)

    def find(self, name: str) -> Device | None:
        """Return the first device called ``name``, or None."""
        with self._shared.lock:
            return next((d for d in self._shared.devices if d.name == name), None)

    def __len__(self) -> int:
        with self._shared.lock:
            return len(self._shared.devices)
