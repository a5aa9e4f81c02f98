"""Tests for Device.take_action and the duty cycle reader."""

from __future__ import annotations

from uuid import UUID

import pytest

from pwmnode.core.devices import (
    Action,
    Device,
    DeviceBuilder,
    InvariantError,
    NotAvailableError,
    RangeError,
)


def make_device(fan_id: UUID, *, target: int = 0, **overrides) -> Device:
    device = DeviceBuilder.create(fan_id, "fan").set_target(target).build()
    for field, value in overrides.items():
        setattr(device, field, value)
    return device


class TestAvailability:
    """Requests for unavailable actions fail without mutating the device."""

    def test_empty_available_actions(self, fan_id: UUID) -> None:
        device = DeviceBuilder.create(fan_id, "fan").set_available_actions([]).set_target(2).build()
        before = device.model_copy(deep=True)

        with pytest.raises(NotAvailableError):
            device.take_action(Action.on())

        assert device == before
        assert device.target == 2

    def test_reverse_not_available_by_default(self, device: Device) -> None:
        device.dirty = False
        with pytest.raises(NotAvailableError):
            device.take_action(Action.reverse())
        assert device.reversed is False
        assert device.dirty is False

    def test_payload_kinds_match_on_tag(self, device: Device) -> None:
        assert device.is_available(Action.increase(4))
        assert device.is_available(Action.decrease(2))
        assert device.is_available(Action.set_absolute(5))

    def test_plain_kinds_match_on_value(self, fan_id: UUID) -> None:
        device = (
            DeviceBuilder.create(fan_id, "fan")
            .set_available_actions([Action.off(), Action.increase()])
            .build()
        )
        assert device.is_available(Action.off())
        assert not device.is_available(Action.on())
        assert not device.is_available(Action.set_absolute(0))


class TestOnOff:
    """On selects default_target, Off selects 0."""

    def test_on(self, fan_id: UUID) -> None:
        device = make_device(fan_id, dirty=False)
        device.take_action(Action.on())
        assert device.target == device.default_target == 3
        assert device.dirty is True
        assert device.action == Action.on()

    def test_off(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=5, dirty=False)
        device.take_action(Action.off())
        assert device.target == 0
        assert device.dirty is True
        assert device.action == Action.off()


class TestIncrease:
    """Increase steps up and saturates at max_active_index."""

    def test_default_step(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=2)
        device.take_action(Action.increase())
        assert device.target == 3

    def test_explicit_step(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=2)
        device.take_action(Action.increase(2))
        assert device.target == 4
        assert device.action == Action.increase(2)

    def test_zero_step_is_taken_verbatim(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=2)
        device.take_action(Action.increase(0))
        assert device.target == 2

    def test_already_at_max(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=7, dirty=False)
        device.take_action(Action.increase())
        assert device.target == 7
        assert device.dirty is True

    def test_repeated_increase_saturates(self, device: Device) -> None:
        for _ in range(20):
            device.take_action(Action.increase())
            assert 0 <= device.target <= device.max_active_index
        assert device.target == device.max_active_index

    def test_large_step_clamps(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=1)
        device.take_action(Action.increase(100))
        assert device.target == 7


class TestDecrease:
    """Decrease steps down and saturates at 0."""

    def test_default_step(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=4)
        device.take_action(Action.decrease())
        assert device.target == 3

    def test_explicit_step(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=5)
        device.take_action(Action.decrease(2))
        assert device.target == 3

    def test_step_equal_to_target_goes_to_zero(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=3)
        device.take_action(Action.decrease(3))
        assert device.target == 0

    def test_already_off(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=0)
        device.take_action(Action.decrease())
        assert device.target == 0

    def test_repeated_decrease_saturates(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=7)
        for _ in range(20):
            device.take_action(Action.decrease())
            assert 0 <= device.target <= device.max_active_index
        assert device.target == 0


class TestMinMax:
    """Min selects 1, Max selects the highest active index."""

    def test_min(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=6)
        device.take_action(Action.minimum())
        assert device.target == 1

    def test_max(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=1)
        device.take_action(Action.maximum())
        assert device.target == 7

    def test_max_follows_table(self, fan_id: UUID) -> None:
        device = (
            DeviceBuilder.create(fan_id, "fan")
            .set_default_target(0)
            .set_duty_cycle_table([0, 30, 60, 90, None, None, None, None])
            .build()
        )
        device.take_action(Action.maximum())
        assert device.target == 3

    def test_min_on_single_slot_table(self, fan_id: UUID) -> None:
        device = (
            DeviceBuilder.create(fan_id, "fan")
            .set_default_target(0)
            .set_duty_cycle_table([100, None, None, None, None, None, None, None])
            .build()
        )
        device.take_action(Action.minimum())
        assert device.target == 0


class TestReverse:
    """Reverse toggles the reversed flag and leaves target alone."""

    def test_toggle(self, reversible_fan: Device) -> None:
        reversible_fan.take_action(Action.reverse())
        assert reversible_fan.reversed is True
        assert reversible_fan.target == 2
        reversible_fan.take_action(Action.reverse())
        assert reversible_fan.reversed is False
        assert reversible_fan.action == Action.reverse()


class TestSetAbsolute:
    """SetAbsolute selects an index or rejects one beyond the table."""

    def test_set(self, device: Device) -> None:
        device.take_action(Action.set_absolute(5))
        assert device.target == 5
        assert device.action == Action.set_absolute(5)

    def test_set_max_index(self, device: Device) -> None:
        device.take_action(Action.set_absolute(7))
        assert device.target == 7

    def test_beyond_table_rejected(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=2, dirty=False)
        with pytest.raises(RangeError):
            device.take_action(Action.set_absolute(8))
        assert device.target == 2
        assert device.action == Action.off()
        assert device.dirty is False

    def test_beyond_narrow_table_rejected(self, fan_id: UUID) -> None:
        device = (
            DeviceBuilder.create(fan_id, "fan")
            .set_default_target(0)
            .set_duty_cycle_table([0, 50, 100, None, None, None, None, None])
            .build()
        )
        with pytest.raises(RangeError):
            device.take_action(Action.set_absolute(3))
        assert device.target == 0


class TestReader:
    """needs_sync / read_and_acknowledge handshake."""

    def test_increase_scenario(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=2)
        device.take_action(Action.increase(2))
        assert device.target == 4
        assert device.read_and_acknowledge(255) == 40  # 16 * 255 // 100

    def test_saturated_increase_scenario(self, fan_id: UUID) -> None:
        device = make_device(fan_id, target=7)
        device.take_action(Action.increase())
        assert device.target == 7
        assert device.read_and_acknowledge(255) == 244  # 96 * 255 // 100

    def test_acknowledge_clears_dirty(self, device: Device) -> None:
        assert device.needs_sync() is True
        device.take_action(Action.on())
        value = device.read_and_acknowledge(100)
        assert value == 8
        assert device.needs_sync() is False

    def test_second_read_returns_same_value(self, device: Device) -> None:
        device.take_action(Action.maximum())
        first = device.read_and_acknowledge(255)
        assert device.needs_sync() is False
        assert device.read_and_acknowledge(255) == first
        assert device.needs_sync() is False

    def test_pending_actions_coalesce(self, device: Device) -> None:
        device.take_action(Action.on())
        device.take_action(Action.increase())
        device.take_action(Action.increase())
        assert device.needs_sync() is True
        assert device.read_and_acknowledge(100) == 32
        assert device.needs_sync() is False

    def test_failed_action_does_not_mark_dirty(self, device: Device) -> None:
        device.read_and_acknowledge(255)
        with pytest.raises(RangeError):
            device.take_action(Action.set_absolute(9))
        assert device.needs_sync() is False

    def test_off_reads_zero(self, device: Device) -> None:
        device.take_action(Action.off())
        assert device.read_and_acknowledge(255) == 0

    def test_negative_scale(self, device: Device) -> None:
        with pytest.raises(RangeError):
            device.read_and_acknowledge(-1)
        assert device.needs_sync() is True

    def test_inactive_target_is_a_defect(self, fan_id: UUID) -> None:
        device = (
            DeviceBuilder.create(fan_id, "fan")
            .set_default_target(0)
            .set_duty_cycle_table([0, 50, None, None, None, None, None, None])
            .build()
        )
        device.target = 5  # bypasses the state machine
        with pytest.raises(InvariantError):
            device.read_and_acknowledge(255)
