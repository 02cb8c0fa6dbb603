"""Virtual DualShock 4 controller: buttons, sticks, triggers and the raw report."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from .gamepad_errors import InvalidInput
from .virtual_device import VirtualClient, VirtualDS4Device

log = logging.getLogger(__name__)

_REPORT = struct.Struct("<5BH3BHB6h5s12s")
_STICK_RANGE = "-1.0 to 1.0"
_TRIGGER_RANGE = "0.0 to 1.0"


class DS4Button(IntFlag):
    """Button bit masks of the DS4 report."""

    L1 = 0x0001
    R1 = 0x0002
    L2 = 0x0004
    R2 = 0x0008
    CROSS = 0x0010
    CIRCLE = 0x0020
    SQUARE = 0x0040
    TRIANGLE = 0x0080
    PLAYSTATION = 0x0100
    TOUCHPAD = 0x0200
    THUMB_LEFT = 0x0400
    THUMB_RIGHT = 0x0800
    SHARE = 0x1000
    OPTIONS = 0x2000


class DS4DPad(IntEnum):
    """Directional pad positions; NONE is the neutral position."""

    NORTH = 0x0
    NORTH_EAST = 0x1
    EAST = 0x2
    SOUTH_EAST = 0x3
    SOUTH = 0x4
    SOUTH_WEST = 0x5
    WEST = 0x6
    NORTH_WEST = 0x7
    NONE = 0x8


@dataclass
class DS4Report:
    """The input report sent to the virtual device; sticks are centred at 128."""

    report_id: int = 0x01
    left_thumb_x: int = 128
    left_thumb_y: int = 128
    right_thumb_x: int = 128
    right_thumb_y: int = 128
    buttons: int = 0
    dpad: int = DS4DPad.NONE
    left_trigger: int = 0
    right_trigger: int = 0
    timestamp: int = 0
    battery: int = 0
    gyro_x: int = 0
    gyro_y: int = 0
    gyro_z: int = 0
    accel_x: int = 0
    accel_y: int = 0
    accel_z: int = 0
    reserved: bytes = bytes(5)
    extension: bytes = bytes(12)

    def to_bytes(self) -> bytes:
        """Pack the report in its packed little-endian wire layout."""
        return _REPORT.pack(
            self.report_id,
            self.left_thumb_x,
            self.left_thumb_y,
            self.right_thumb_x,
            self.right_thumb_y,
            self.buttons,
            int(self.dpad),
            self.left_trigger,
            self.right_trigger,
            self.timestamp,
            self.battery,
            self.gyro_x,
            self.gyro_y,
            self.gyro_z,
            self.accel_x,
            self.accel_y,
            self.accel_z,
            bytes(self.reserved),
            bytes(self.extension),
        )


@dataclass
class DS4ControllerState:
    """Full controller state: the report plus LED colour and rumble."""

    report: DS4Report = field(default_factory=DS4Report)
    led_color: tuple[int, int, int] = (0, 0, 255)
    left_rumble: int = 0
    right_rumble: int = 0


def _stick_axis(value: float) -> int:
    return int((value + 1.0) * 127.5)


def _check_stick(name: str, x: float, y: float) -> None:
    if not (-1.0 <= x <= 1.0) or not (-1.0 <= y <= 1.0):
        raise InvalidInput(name, _STICK_RANGE, f"({x}, {y})")


def _check_trigger(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidInput(name, _TRIGGER_RANGE, str(value))


class DualShock4Controller:
    """A virtual DualShock 4; every change is pushed to the device at once."""

    def __init__(self, client: VirtualClient) -> None:
        self.device = VirtualDS4Device(client)
        self._state = DS4ControllerState()

    def __enter__(self) -> DualShock4Controller:
        return self

    def __exit__(self, *args) -> None:
        self.device.close()

    def press_button(self, button: DS4Button) -> None:
        """Hold down ``button``."""
        log.debug("press button: %r", button)
        self._state.report.buttons |= int(button)
        self.update()

    def release_button(self, button: DS4Button) -> None:
        """Let go of ``button``."""
        log.debug("release button: %r", button)
        self._state.report.buttons &= ~int(button) & 0xFFFF
        self.update()

    def set_dpad(self, direction: DS4DPad) -> None:
        """Set the directional pad."""
        log.debug("set dpad: %r", direction)
        self._state.report.dpad = DS4DPad(direction)
        self.update()

    def set_left_joystick(self, x: float, y: float) -> None:
        """Set the left stick; both axes in -1.0..1.0."""
        _check_stick("left_joystick", x, y)
        log.debug("set left joystick: x=%s, y=%s", x, y)
        self._state.report.left_thumb_x = _stick_axis(x)
        self._state.report.left_thumb_y = _stick_axis(y)
        self.update()

    def set_right_joystick(self, x: float, y: float) -> None:
        """Set the right stick; both axes in -1.0..1.0."""
        _check_stick("right_joystick", x, y)
        log.debug("set right joystick: x=%s, y=%s", x, y)
        self._state.report.right_thumb_x = _stick_axis(x)
        self._state.report.right_thumb_y = _stick_axis(y)
        self.update()

    def set_left_trigger(self, value: float) -> None:
        """Set the left trigger in 0.0..1.0."""
        _check_trigger("left_trigger", value)
        log.debug("set left trigger: %s", value)
        self._state.report.left_trigger = int(value * 255.0)
        self.update()

    def set_right_trigger(self, value: float) -> None:
        """Set the right trigger in 0.0..1.0."""
        _check_trigger("right_trigger", value)
        log.debug("set right trigger: %s", value)
        self._state.report.right_trigger = int(value * 255.0)
        self.update()

    def reset(self) -> None:
        """Return every input to its default."""
        log.info("resetting controller state")
        self._state = DS4ControllerState()
        self.update()

    def state(self) -> DS4ControllerState:
        """The current controller state."""
        return self._state

    def update(self) -> None:
        """Push the current state to the device."""
        self.device.update(self._state)


class VGamepadClient:
    """Owns the platform backend and creates virtual controllers."""

    def __init__(self) -> None:
        log.info("initialising virtual gamepad client")
        self.inner = VirtualClient()

    def create_dualshock4(self) -> DualShock4Controller:
        """Create a new connected DualShock 4 controller."""
        log.info("creating DualShock4 virtual controller")
        return DualShock4Controller(self.inner)