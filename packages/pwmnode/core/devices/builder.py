"""Validated, chainable construction of Device objects.

Each setter checks its argument against whatever the builder currently
holds, so the order of calls matters: narrowing the duty cycle table before
lowering the targets, or raising a target before widening the table, is
rejected even though the opposite order would succeed. Existing callers rely
on this, so validation is never deferred to ``build()``.

Example:
    >>> device = (
    ...     DeviceBuilder.create(uuid4(), "porch")
    ...     .set_default_target(1)
    ...     .set_duty_cycle_table([0, 50, 100, None, None, None, None, None])
    ...     .set_group(DeviceGroup.LIGHT)
    ...     .build()
    ... )
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from pwmnode.core.devices.actions import Action
from pwmnode.core.devices.device import (
    DEFAULT_FREQUENCY_HZ,
    DEFAULT_TARGET,
    Device,
    check_available_actions,
    default_available_actions,
)
from pwmnode.core.devices.duty_cycles import DutyCycleTable
from pwmnode.core.devices.enums import DeviceGroup
from pwmnode.core.devices.errors import RangeError


class DeviceBuilder(BaseModel):
    """Intermediate device state awaiting ``build()``.

    A failed setter raises and leaves the builder unchanged.
    """

    model_config = ConfigDict(frozen=False)

    id: UUID = Field(..., description="Unique device identifier")
    name: str = Field(..., description="Network-unique device name")
    action: Action = Field(default_factory=Action.off)
    available_actions: list[Action] = Field(default_factory=default_available_actions)
    default_target: int = DEFAULT_TARGET
    duty_cycles: DutyCycleTable = Field(default_factory=DutyCycleTable)
    target: int = 0
    frequency: int = DEFAULT_FREQUENCY_HZ
    group: DeviceGroup | None = None
    reversed: bool = False
    dirty: bool = True

    @classmethod
    def create(cls, id: UUID, name: str) -> DeviceBuilder:
        """Start a builder with the mandatory identity and default structure."""
        return cls(id=id, name=name)

    @property
    def max_active_index(self) -> int:
        return self.duty_cycles.max_active_index

    def _check_index(self, field: str, index: int, max_index: int) -> None:
        if index < 0:
            raise RangeError(f"{field} must be non-negative, got {index}")
        if index > max_index:
            raise RangeError(
                f"{field} {index} exceeds max active index {max_index}; "
                "duty_cycles must have an active slot at that index"
            )

    def set_action(self, action: Action) -> DeviceBuilder:
        self.action = action
        return self

    def set_available_actions(self, actions: Iterable[Action]) -> DeviceBuilder:
        """Install the accepted actions.

        Raises:
            PayloadError: If Increase/Decrease carries a step or SetAbsolute a non-zero index
        """
        candidates = list(actions)
        check_available_actions(candidates)
        self.available_actions = candidates
        return self

    def set_default_target(self, index: int) -> DeviceBuilder:
        """Set the target used by On.

        Raises:
            RangeError: If index exceeds the installed table's max active index
        """
        self._check_index("default_target", index, self.max_active_index)
        self.default_target = index
        return self

    def set_duty_cycle_table(
        self, table: DutyCycleTable | Iterable[int | None]
    ) -> DeviceBuilder:
        """Install a new duty cycle table.

        Raises:
            InvariantError: If the table is malformed
            RangeError: If the installed target or default_target exceed the new table
        """
        if not isinstance(table, DutyCycleTable):
            table = DutyCycleTable.from_slots(table)
        max_index = table.max_active_index
        self._check_index("default_target", self.default_target, max_index)
        self._check_index("target", self.target, max_index)
        self.duty_cycles = table
        return self

    def set_target(self, index: int) -> DeviceBuilder:
        """Set the selected duty cycle index.

        Raises:
            RangeError: If index exceeds the installed table's max active index
        """
        self._check_index("target", index, self.max_active_index)
        self.target = index
        return self

    def set_frequency(self, frequency: int) -> DeviceBuilder:
        self.frequency = frequency
        return self

    def set_group(self, group: DeviceGroup | None) -> DeviceBuilder:
        self.group = group
        return self

    def set_reversed(self, reversed: bool) -> DeviceBuilder:
        self.reversed = reversed
        return self

    def set_dirty(self, dirty: bool) -> DeviceBuilder:
        self.dirty = dirty
        return self

    def build(self) -> Device:
        """Produce the finished Device."""
        fields = dict(self)
        fields["available_actions"] = list(self.available_actions)
        return Device(**fields)
