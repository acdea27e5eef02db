"""Tests for the in-memory device directory."""

import pytest

from smartlight_hub.adapters.memory_device_directory import InMemoryDeviceDirectory
from smartlight_hub.domain.devices import DeviceStatus, default_device_name
from smartlight_hub.errors import DeviceAlreadyExists


def test_create_applies_defaults() -> None:
    directory = InMemoryDeviceDirectory()

    device = directory.create("d1", name="Desk lamp", address="10.0.0.7")

    assert device.status is DeviceStatus.DISCONNECTED
    assert device.last_heartbeat is None
    assert device.brightness == 128
    assert (device.color_r, device.color_g, device.color_b) == (255, 255, 255)
    assert device.servo1_angle is None
    assert directory.get("d1") == device


def test_create_rejects_duplicate_id() -> None:
    directory = InMemoryDeviceDirectory()
    directory.create("d1", name="Desk lamp", address="10.0.0.7")

    with pytest.raises(DeviceAlreadyExists):
        directory.create("d1", name="Other", address="10.0.0.8")


def test_auto_register_creates_then_revises_address() -> None:
    directory = InMemoryDeviceDirectory()

    created = directory.auto_register("smartlight_ff01", "10.0.0.9")
    revised = directory.auto_register("smartlight_ff01", "10.0.0.10")

    assert created.name == "Smart Light (ff01)"
    assert revised.address == "10.0.0.10"
    assert revised.created_at == created.created_at
    assert len(directory.list_devices()) == 1


def test_set_status_connected_refreshes_heartbeat() -> None:
    directory = InMemoryDeviceDirectory()
    directory.create("d1", name="Desk lamp", address="10.0.0.7")

    assert directory.set_status("d1", DeviceStatus.CONNECTED)
    connected = directory.get("d1")
    assert connected.last_heartbeat is not None

    directory.set_status("d1", DeviceStatus.DISCONNECTED)
    disconnected = directory.get("d1")
    assert disconnected.status is DeviceStatus.DISCONNECTED
    assert disconnected.last_heartbeat == connected.last_heartbeat

    assert not directory.set_status("missing", DeviceStatus.CONNECTED)


def test_cached_fields_only_overwrite_given_values() -> None:
    directory = InMemoryDeviceDirectory()
    directory.create("d1", name="Desk lamp", address="10.0.0.7")

    directory.set_cached_angles("d1", servo1_angle=10)
    directory.set_cached_angles("d1", servo2_angle=20)
    directory.set_cached_led("d1", r=1)

    device = directory.get("d1")
    assert (device.servo1_angle, device.servo2_angle) == (10, 20)
    assert (device.color_r, device.color_g, device.color_b) == (1, 255, 255)
    assert device.last_heartbeat is not None


def test_mutations_on_missing_device_are_ignored() -> None:
    directory = InMemoryDeviceDirectory()

    directory.set_cached_angles("ghost", servo1_angle=10)
    directory.set_cached_led("ghost", brightness=5)

    assert directory.list_devices() == []
    assert directory.rename("ghost", "x") is None
    assert directory.delete("ghost") is False


def test_rename_and_delete() -> None:
    directory = InMemoryDeviceDirectory()
    directory.create("d1", name="Desk lamp", address="10.0.0.7")

    renamed = directory.rename("d1", "Hall lamp")

    assert renamed.name == "Hall lamp"
    assert directory.delete("d1") is True
    assert directory.get("d1") is None


@pytest.mark.parametrize(
    ("device_id", "expected"),
    [
        ("smartlight_a1b2c3", "Smart Light (a1b2c3)"),
        ("abcdefghijkl", "Smart Light (abcdefgh)"),
        ("trailing_", "Smart Light (trailing)"),
    ],
)
def test_default_device_name(device_id: str, expected: str) -> None:
    assert default_device_name(device_id) == expected
