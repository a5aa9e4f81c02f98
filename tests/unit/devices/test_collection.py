"""Tests for DeviceCollection sharing and merging."""

from __future__ import annotations

import threading
from uuid import uuid4

from pwmnode.core.devices import Action, Device, DeviceBuilder, DeviceCollection


def make_devices(*names: str) -> list[Device]:
    return [DeviceBuilder.create(uuid4(), name).build() for name in names]


class TestShare:
    def test_share_sees_same_list(self) -> None:
        devices = DeviceCollection(make_devices("a"))
        handle = devices.share()

        handle.append(make_devices("b")[0])

        assert devices.shares_with(handle)
        assert [d.name for d in devices.snapshot()] == ["a", "b"]

    def test_share_does_not_copy_devices(self) -> None:
        devices = DeviceCollection(make_devices("a"))
        handle = devices.share()

        with handle.locked() as device_list:
            device_list[0].take_action(Action.maximum())

        assert devices.find("a").target == 7

    def test_independent_collections(self) -> None:
        assert not DeviceCollection().shares_with(DeviceCollection())


class TestMerge:
    def test_moves_devices(self) -> None:
        left = DeviceCollection(make_devices("a", "b"))
        right = DeviceCollection(make_devices("c"))

        left.merge(right)

        assert [d.name for d in left.snapshot()] == ["a", "b", "c"]
        assert len(right) == 0

    def test_other_handles_see_emptied_list(self) -> None:
        left = DeviceCollection(make_devices("a"))
        right = DeviceCollection(make_devices("b", "c"))
        right_handle = right.share()

        left.merge(right)

        assert len(right_handle) == 0
        assert len(left) == 3

    def test_merge_with_own_handle_is_noop(self) -> None:
        devices = DeviceCollection(make_devices("a", "b"))

        devices.merge(devices.share())
        devices.merge(devices)

        assert [d.name for d in devices.snapshot()] == ["a", "b"]

    def test_merge_empty(self) -> None:
        devices = DeviceCollection(make_devices("a"))
        devices.merge(DeviceCollection())
        assert len(devices) == 1

    def test_opposite_merges_do_not_deadlock(self) -> None:
        left = DeviceCollection(make_devices(*[f"l{i}" for i in range(50)]))
        right = DeviceCollection(make_devices(*[f"r{i}" for i in range(50)]))
        barrier = threading.Barrier(2)

        def merge_many(into: DeviceCollection, source: DeviceCollection) -> None:
            barrier.wait()
            for _ in range(200):
                into.merge(source)

        threads = [
            threading.Thread(target=merge_many, args=(left, right)),
            threading.Thread(target=merge_many, args=(right, left)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert not any(thread.is_alive() for thread in threads)
        assert len(left) + len(right) == 100


class TestAccess:
    def test_find(self) -> None:
        devices = DeviceCollection(make_devices("porch", "hall"))
        assert devices.find("hall").name == "hall"
        assert devices.find("attic") is None

    def test_snapshot_is_a_copy_of_the_list(self) -> None:
        devices = DeviceCollection(make_devices("a"))
        snapshot = devices.snapshot()
        snapshot.clear()
        assert len(devices) == 1

    def test_concurrent_actions_under_lock(self) -> None:
        devices = DeviceCollection(make_devices("a"))

        def bump() -> None:
            handle = devices.share()
            for _ in range(100):
                with handle.locked() as device_list:
                    device = device_list[0]
                    device.take_action(Action.increase())
                    device.read_and_acknowledge(255)

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        device = devices.find("a")
        assert device.target == device.max_active_index
        assert device.needs_sync() is False
