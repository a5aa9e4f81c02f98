"""Device entity and its action state machine.

A Device models a single PWM-driven output (a dimmable light, a variable
speed fan). Its duty cycle table holds the percentages the device can run at
and ``target`` selects one of them. Actions move the target; the hardware
layer polls ``needs_sync`` and calls ``read_and_acknowledge`` to fetch the
value to program.

Devices are plain mutable values owned by one thread at a time. Use
DeviceBuilder to construct them with validated, order-dependent setters.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    model_validator,
)

from pwmnode.core.devices.actions import Action
from pwmnode.core.devices.duty_cycles import DutyCycleTable
from pwmnode.core.devices.enums import ActionKind, DeviceGroup
from pwmnode.core.devices.errors import (
    DecodeError,
    InvariantError,
    NotAvailableError,
    PayloadError,
    RangeError,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 3
DEFAULT_FREQUENCY_HZ = 100


def default_available_actions() -> list[Action]:
    """Actions a freshly created device accepts (everything but Reverse)."""
    return [
        Action.on(),
        Action.off(),
        Action.increase(),
        Action.decrease(),
        Action.minimum(),
        Action.maximum(),
        Action.set_absolute(0),
    ]


def check_available_actions(actions: Iterable[Action]) -> None:
    """Ensure every available action uses its canonical placeholder payload.

    Increase/Decrease must carry no step and SetAbsolute must carry index 0;
    availability is decided by tag only, so any other payload is meaningless.

    Raises:
        PayloadError: If an entry carries a non-canonical payload
    """
    for action in actions:
        if action.kind in (ActionKind.INCREASE, ActionKind.DECREASE) and action.value is not None:
            raise PayloadError(
                f"Available action {action.kind.value} must not carry a step, got {action.value}"
            )
        if action.kind is ActionKind.SET_ABSOLUTE and action.value != 0:
            raise PayloadError(
                f"Available action SetAbsolute must carry index 0, got {action.value}"
            )


class Device(BaseModel):
    """A PWM-controlled device on a node.

    Attributes:
        id: Stable unique identifier
        name: Human-readable name, unique on the network
        action: What the device last did (the last accepted request)
        available_actions: Actions the device accepts, with canonical payloads
        default_target: Target selected by the On action
        duty_cycles: Table of selectable duty cycle percentages
        target: Index of the currently selected duty cycle
        frequency: PWM frequency in Hz, passed through to the hardware layer
        group: Optional classification for addressing groups of devices
        reversed: Direction flag for reversible devices (fan direction, heat vs. cool)
        dirty: True while a hardware resync is owed
    """

    model_config = ConfigDict(frozen=False, extra="forbid")

    id: UUID = Field(..., description="Unique device identifier")
    name: str = Field(..., description="Network-unique device name")
    action: Action = Field(default_factory=Action.off, description="Last accepted action")
    available_actions: list[Action] = Field(
        default_factory=default_available_actions, description="Accepted actions"
    )
    default_target: StrictInt = Field(
        default=DEFAULT_TARGET, ge=0, description="Target used by On"
    )
    duty_cycles: DutyCycleTable = Field(
        default_factory=DutyCycleTable, description="Selectable duty cycles"
    )
    target: StrictInt = Field(default=0, ge=0, description="Selected duty cycle index")
    frequency: StrictInt = Field(
        default=DEFAULT_FREQUENCY_HZ, ge=0, description="PWM frequency (Hz)"
    )
    group: DeviceGroup | None = Field(default=None, description="Device group")
    reversed: StrictBool = Field(default=False, description="Reversed direction")
    dirty: StrictBool = Field(default=True, description="Hardware resync owed")

    @model_validator(mode="after")
    def _check_invariants(self) -> Device:
        check_available_actions(self.available_actions)
        max_index = self.duty_cycles.max_active_index
        if self.default_target > max_index:
            raise RangeError(
                f"default_target {self.default_target} exceeds max active index {max_index}"
            )
        if self.target > max_index:
            raise RangeError(f"target {self.target} exceeds max active index {max_index}")
        return self

    @property
    def max_active_index(self) -> int:
        return self.duty_cycles.max_active_index

    def is_available(self, action: Action) -> bool:
        """Check whether the device currently accepts ``action``.

        Payload-carrying kinds match on tag only; every other kind must be
        present as an equal value.
        """
        if action.has_payload:
            return any(action.same_kind(available) for available in self.available_actions)
        return action in self.available_actions

    def take_action(self, action: Action) -> None:
        """Apply an action request to the device state.

        On success the requested action (with its original payload) becomes
        ``action`` and the device is marked dirty. On failure nothing changes.

        Args:
            action: Requested action

        Raises:
            NotAvailableError: If the device does not accept this kind of action
            RangeError: If SetAbsolute targets an index beyond the active table
        """
        if not self.is_available(action):
            raise NotAvailableError(
                f"Action {action.kind.value} is not available for device {self.name!r}"
            )

        max_index = self.max_active_index
        kind = action.kind

        if kind is ActionKind.ON:
            self.target = self.default_target
        elif kind is ActionKind.OFF:
            self.target = 0
        elif kind is ActionKind.INCREASE:
            amount = 1 if action.value is None else action.value
            self.target = min(self.target + amount, max_index)
        elif kind is ActionKind.DECREASE:
            amount = 1 if action.value is None else action.value
            self.target = self.target - amount if amount < self.target else 0
        elif kind is ActionKind.MIN:
            self.target = min(1, max_index)
        elif kind is ActionKind.MAX:
            self.target = max_index
        elif kind is ActionKind.REVERSE:
            self.reversed = not self.reversed
        elif kind is ActionKind.SET_ABSOLUTE:
            assert action.value is not None
            if action.value > max_index:
                raise RangeError(
                    f"Cannot set target {action.value} on device {self.name!r}: "
                    f"max active index is {max_index}"
                )
            self.target = action.value

        self.action = action
        self.dirty = True
        logger.debug(
            "Device %s took action %s: target=%d reversed=%s",
            self.name,
            kind.value,
            self.target,
            self.reversed,
        )

    def needs_sync(self) -> bool:
        """True while the hardware has not yet read the current duty cycle."""
        return self.dirty

    def read_and_acknowledge(self, scale: int) -> int:
        """Return the scaled duty cycle for the current target and clear ``dirty``.

        Any number of unacknowledged actions coalesce into a single pending
        sync; call this once per ``needs_sync`` poll that returns True.

        Args:
            scale: Hardware value corresponding to 100% (e.g. 255 for 8-bit PWM)

        Returns:
            ``duty_cycles[target] * scale // 100``

        Raises:
            RangeError: If scale is negative
            InvariantError: If the target selects an inactive slot
        """
        if scale < 0:
            raise RangeError(f"Scale must be non-negative, got {scale}")
        duty_cycle = self.duty_cycles[self.target]
        if duty_cycle is None:
            raise InvariantError(
                f"Device {self.name!r} targets inactive duty cycle slot {self.target}"
            )
        self.dirty = False
        return duty_cycle * scale // 100

    def to_json(self) -> str:
        """Encode the device as JSON."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str | bytes) -> Device:
        """Decode a device from JSON.

        Raises:
            DecodeError: If the document is malformed or violates device invariants
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise DecodeError(f"Could not decode device: {e}") from e
