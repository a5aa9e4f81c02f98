"""Device vocabulary enums."""

from enum import Enum


class ActionKind(str, Enum):
    """Closed set of commands a device can be asked to perform.

    Values double as the serialized tag names.

    Attributes:
        ON: Select the default target.
        OFF: Select target 0.
        INCREASE: Step the target up (optional step size).
        DECREASE: Step the target down (optional step size).
        MIN: Select the lowest non-off target.
        MAX: Select the highest active target.
        REVERSE: Toggle the reversed flag.
        SET_ABSOLUTE: Select an explicit target index.
    """

    ON = "On"
    OFF = "Off"
    INCREASE = "Increase"
    DECREASE = "Decrease"
    MIN = "Min"
    MAX = "Max"
    REVERSE = "Reverse"
    SET_ABSOLUTE = "SetAbsolute"


# Kinds whose payload travels with the request rather than the synonym table.
PAYLOAD_KINDS = frozenset({ActionKind.INCREASE, ActionKind.DECREASE, ActionKind.SET_ABSOLUTE})


class DeviceGroup(str, Enum):
    """Classification used to address groups of devices (all lights, all fans)."""

    LIGHT = "Light"
    FAN = "Fan"
