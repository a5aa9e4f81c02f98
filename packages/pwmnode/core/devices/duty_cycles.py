"""Duty cycle table model.

A device selects its output intensity by index into a fixed table of eight
slots. Each slot is either an active duty cycle percentage (0-100) or
inactive (``None``). Active slots form a contiguous prefix: once a slot is
inactive, every later slot is too.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Annotated

from pydantic import ConfigDict, Field, RootModel, StrictInt, ValidationError, model_validator

from pwmnode.core.devices.errors import InvariantError

DUTY_CYCLE_SLOTS = 8

# 100 can cause problems for some hardware, so the default tops out at 96.
DEFAULT_DUTY_CYCLES: tuple[int | None, ...] = (0, 2, 4, 8, 16, 32, 64, 96)

DutyCycle = Annotated[StrictInt, Field(ge=0, le=100)]


class DutyCycleTable(RootModel[tuple[DutyCycle | None, ...]]):
    """Fixed-length table of optional duty cycle percentages.

    Serializes as a plain JSON array of eight entries.

    Example:
        >>> table = DutyCycleTable.from_slots([0, 10, 50, 100, None, None, None, None])
        >>> table.max_active_index
        3
    """

    model_config = ConfigDict(frozen=True)

    root: tuple[DutyCycle | None, ...] = Field(
        default=DEFAULT_DUTY_CYCLES,
        min_length=DUTY_CYCLE_SLOTS,
        max_length=DUTY_CYCLE_SLOTS,
    )

    @model_validator(mode="after")
    def _check_active_prefix(self) -> DutyCycleTable:
        """Reject tables where an active slot follows an inactive one."""
        seen_inactive = False
        for index, slot in enumerate(self.root):
            if slot is None:
                seen_inactive = True
            elif seen_inactive:
                raise ValueError(
                    f"Active duty cycle at index {index} follows an inactive slot"
                )
        if self.root[0] is None:
            raise ValueError("Duty cycle table must have at least one active slot")
        return self

    @classmethod
    def from_slots(cls, slots: Iterable[int | None]) -> DutyCycleTable:
        """Build a table, reporting any malformation as InvariantError.

        Args:
            slots: Eight optional percentages

        Returns:
            Validated DutyCycleTable

        Raises:
            InvariantError: If the length, a slot value or the active prefix is invalid
        """
        values = tuple(slots)
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            raise InvariantError(f"Invalid duty cycle table {list(values)}: {reasons}") from e

    @property
    def slots(self) -> tuple[int | None, ...]:
        return self.root

    @property
    def active_count(self) -> int:
        return sum(1 for slot in self.root if slot is not None)

    @property
    def max_active_index(self) -> int:
        """Highest index that selects an active duty cycle."""
        return self.active_count - 1

    def __getitem__(self, index: int) -> int | None:
        return self.root[index]

    def __iter__(self) -> Iterator[int | None]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)
