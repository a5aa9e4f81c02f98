"""Error taxonomy for device state handling.

Every failure raised by the device core derives from DeviceError. Errors are
always returned to the caller; a device or builder is left unmodified when
one is raised.
"""

from __future__ import annotations


class DeviceError(Exception):
    """Base exception for all device state errors."""


class NotFoundError(DeviceError, KeyError):
    """Raised when an action or group name/identifier is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class MissingArgumentError(DeviceError, ValueError):
    """Raised when an action requires a numeric argument that was omitted."""


class PayloadError(DeviceError, ValueError):
    """Raised when an available action carries a non-canonical payload."""


class RangeError(DeviceError, ValueError):
    """Raised when an index or target exceeds the duty cycle table bounds."""


class InvariantError(DeviceError, ValueError):
    """Raised when a duty cycle table is malformed."""


class NotAvailableError(DeviceError):
    """Raised when an action is not currently permitted for a device."""


class DecodeError(DeviceError, ValueError):
    """Raised when serialized device or action input cannot be decoded."""
