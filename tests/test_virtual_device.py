from types import SimpleNamespace

import pytest

from gt7link.gamepad_errors import ControllerDisconnected, UnsupportedPlatform
from gt7link.virtual_device import (
    VirtualClient,
    VirtualDS4Device,
    VirtualMethod,
    check_compatibility,
    check_permissions,
    ds4_hid_descriptor,
    system_info,
)


def _state():
    report = SimpleNamespace(
        buttons=0x0010,
        left_thumb_x=128,
        left_thumb_y=128,
        right_thumb_x=128,
        right_thumb_y=128,
        left_trigger=0,
        right_trigger=255,
    )
    return SimpleNamespace(report=report)


def test_client_creation():
    client = VirtualClient()
    assert client.initialized is True
    assert client.method is VirtualMethod.SIMULATION


def test_simulation_method_explicit():
    client = VirtualClient(VirtualMethod.SIMULATION)
    assert client.method is VirtualMethod.SIMULATION


def test_iokit_method_in_development_run():
    client = VirtualClient(VirtualMethod.IOKIT_USERSPACE)
    assert client.method is VirtualMethod.IOKIT_USERSPACE
    assert client.initialized is True


def test_driverkit_method_fails():
    with pytest.raises(UnsupportedPlatform) as info:
        VirtualClient(VirtualMethod.DRIVERKIT)
    assert info.value.platform == "macOS"


def test_ds4_device_creation():
    client = VirtualClient()
    device = VirtualDS4Device(client)
    method, device_id, connected = device.device_info()
    assert method is VirtualMethod.SIMULATION
    assert device_id == 1
    assert connected is True


def test_iokit_device_connects():
    device = VirtualDS4Device(VirtualClient(VirtualMethod.IOKIT_USERSPACE))
    assert device.device_info() == (VirtualMethod.IOKIT_USERSPACE, 1, True)


def test_compatibility_check():
    assert check_compatibility() is None
    assert system_info() == ("macOS", "simulated environment")


def test_controller_list():
    controllers = VirtualClient().list_controllers()
    assert len(controllers) == 3
    assert "DualShock 4 Wireless Controller" in controllers


def test_disconnect_and_reconnect():
    device = VirtualDS4Device(VirtualClient())
    device.disconnect()
    assert device.device_info()[2] is False
    device.disconnect()
    assert device.connected is False
    device.connect()
    assert device.connected is True


def test_update_when_disconnected_raises():
    device = VirtualDS4Device(VirtualClient())
    device.disconnect()
    with pytest.raises(ControllerDisconnected):
        device.update(_state())


def test_update_when_connected_keeps_connection():
    device = VirtualDS4Device(VirtualClient())
    device.update(_state())
    device.update(_state())
    assert device.connected is True


def test_context_manager_disconnects():
    with VirtualDS4Device(VirtualClient()) as device:
        assert device.connected is True
    assert device.connected is False


def test_close_disconnects():
    device = VirtualDS4Device(VirtualClient())
    device.close()
    assert device.device_info()[2] is False


def test_hid_descriptor_shape():
    descriptor = ds4_hid_descriptor()
    assert len(descriptor) == 94
    assert descriptor[:4] == bytes([0x05, 0x01, 0x09, 0x05])
    assert descriptor[-1] == 0xC0
    assert bytes([0x85, 0x01]) in descriptor


def test_check_permissions():
    permissions = check_permissions()
    assert len(permissions) == 3
    assert permissions[0].startswith("simulation mode")