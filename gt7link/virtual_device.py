"""Simulated virtual DualShock 4 device backend.

Creating a real virtual HID device on this platform needs either an IOKit
userspace device (with System Integrity Protection disabled) or a signed
DriverKit extension. The simulation method is always available and is what
the default client uses.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from .gamepad_errors import (
    ControllerDisconnected,
    InsufficientPermissions,
    UnsupportedPlatform,
)

log = logging.getLogger(__name__)

_LOG_INTERVAL = 0.1
_DRIVERKIT_UNAVAILABLE = "DriverKit method is not implemented"

_DS4_HID_DESCRIPTOR = bytes(
    [
        0x05, 0x01,        # Usage Page (Generic Desktop Ctrls)
        0x09, 0x05,        # Usage (Game Pad)
        0xA1, 0x01,        # Collection (Application)
        0x85, 0x01,        #   Report ID (1)
        # sticks
        0x09, 0x30,        #   Usage (X)
        0x09, 0x31,        #   Usage (Y)
        0x09, 0x32,        #   Usage (Z)
        0x09, 0x35,        #   Usage (Rz)
        0x15, 0x00,        #   Logical Minimum (0)
        0x26, 0xFF, 0x00,  #   Logical Maximum (255)
        0x75, 0x08,        #   Report Size (8)
        0x95, 0x04,        #   Report Count (4)
        0x81, 0x02,        #   Input (Data,Var,Abs)
        # buttons
        0x05, 0x09,        #   Usage Page (Button)
        0x19, 0x01,        #   Usage Minimum (0x01)
        0x29, 0x0E,        #   Usage Maximum (0x0E)
        0x15, 0x00,        #   Logical Minimum (0)
        0x25, 0x01,        #   Logical Maximum (1)
        0x75, 0x01,        #   Report Size (1)
        0x95, 0x0E,        #   Report Count (14)
        0x81, 0x02,        #   Input (Data,Var,Abs)
        # padding
        0x75, 0x02,        #   Report Size (2)
        0x95, 0x01,        #   Report Count (1)
        0x81, 0x03,        #   Input (Cnst,Var,Abs)
        # hat switch
        0x05, 0x01,        #   Usage Page (Generic Desktop Ctrls)
        0x09, 0x39,        #   Usage (Hat switch)
        0x15, 0x00,        #   Logical Minimum (0)
        0x25, 0x07,        #   Logical Maximum (7)
        0x35, 0x00,        #   Physical Minimum (0)
        0x46, 0x3B, 0x01,  #   Physical Maximum (315)
        0x65, 0x14,        #   Unit (English Rotation)
        0x75, 0x04,        #   Report Size (4)
        0x95, 0x01,        #   Report Count (1)
        0x81, 0x42,        #   Input (Data,Var,Abs,Null State)
        # padding
        0x75, 0x04,        #   Report Size (4)
        0x95, 0x01,        #   Report Count (1)
        0x81, 0x03,        #   Input (Cnst,Var,Abs)
        # triggers
        0x05, 0x01,        #   Usage Page (Generic Desktop Ctrls)
        0x09, 0x32,        #   Usage (Z)
        0x09, 0x35,        #   Usage (Rz)
        0x15, 0x00,        #   Logical Minimum (0)
        0x26, 0xFF, 0x00,  #   Logical Maximum (255)
        0x75, 0x08,        #   Report Size (8)
        0x95, 0x02,        #   Report Count (2)
        0x81, 0x02,        #   Input (Data,Var,Abs)
        0xC0,              # End Collection
    ]
)


class VirtualMethod(Enum):
    """How the virtual controller is presented to the system."""

    SIMULATION = "simulation"
    IOKIT_USERSPACE = "iokit"
    DRIVERKIT = "driverkit"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    VirtualMethod.SIMULATION: "simulation",
    VirtualMethod.IOKIT_USERSPACE: "IOKit",
    VirtualMethod.DRIVERKIT: "DriverKit",
}


def _iokit_access_available() -> bool:
    # Only development (non-optimised) runs are treated as having IOKit access.
    return __debug__


class VirtualClient:
    """Entry point that decides how virtual controllers are created."""

    def __init__(self, method: VirtualMethod = VirtualMethod.SIMULATION) -> None:
        log.info("initialising virtual controller client")
        if method is VirtualMethod.SIMULATION:
            log.info("using simulation mode - no real device will be created")
        elif method is VirtualMethod.IOKIT_USERSPACE:
            log.warning("IOKit userspace devices require SIP to be disabled")
            log.warning("this may reduce system security")
            if not _iokit_access_available():
                raise InsufficientPermissions("IOKit HID device creation")
        else:
            log.warning(
                "DriverKit requires a developer account, the HIDDriverKit "
                "entitlement, and code signing with notarisation"
            )
            raise UnsupportedPlatform(
                "macOS", "DriverKit virtual controllers need special entitlements"
            )
        self.method = method
        self.initialized = True
        log.info("virtual controller client initialised")

    def list_controllers(self) -> list[str]:
        """Names of the game controllers known to be available."""
        log.info("enumerating available game controllers")
        return [
            "DualShock 4 Wireless Controller",
            "Xbox Wireless Controller",
            "Generic MFi Controller",
        ]


class VirtualDS4Device:
    """A virtual DualShock 4 created through a :class:`VirtualClient`.

    The device connects on creation; use it as a context manager or call
    :meth:`close` to disconnect.
    """

    def __init__(self, client: VirtualClient) -> None:
        log.info("creating virtual DS4 device")
        method = client.method
        if method is VirtualMethod.SIMULATION:
            log.info("creating simulated virtual controller")
        elif method is VirtualMethod.IOKIT_USERSPACE:
            log.info("creating IOKit HID virtual device")
            log.warning("IOKit HID device creation needs system permissions")
        else:
            raise UnsupportedPlatform("macOS", _DRIVERKIT_UNAVAILABLE)

        self.method = method
        self.device_id = 1
        self.connected = False
        self._last_update = time.monotonic()
        self.connect()

    def connect(self) -> None:
        """Attach the device to the system."""
        log.info("connecting virtual DS4 device")
        if self.method is VirtualMethod.DRIVERKIT:
            raise UnsupportedPlatform("macOS", _DRIVERKIT_UNAVAILABLE)
        self.connected = True
        log.info("virtual DS4 device connected (%s)", self.method.label)

    def disconnect(self) -> None:
        """Detach the device; does nothing if it is not connected."""
        if not self.connected:
            return
        log.info("disconnecting virtual DS4 device (%s)", self.method.label)
        self.connected = False
        log.info("virtual DS4 device disconnected")

    def update(self, state) -> None:
        """Send a controller state to the device.

        ``state`` carries a ``report`` with the DS4 report fields.
        """
        if not self.connected:
            raise ControllerDisconnected()
        if self.method is VirtualMethod.DRIVERKIT:
            raise UnsupportedPlatform("macOS", _DRIVERKIT_UNAVAILABLE)

        now = time.monotonic()
        if now - self._last_update <= _LOG_INTERVAL:
            return
        self._last_update = now
        if self.method is VirtualMethod.SIMULATION:
            report = state.report
            log.debug(
                "DS4 state (simulated): buttons=0x%04X, L=(%d,%d), R=(%d,%d), "
                "triggers=(%d,%d)",
                report.buttons,
                report.left_thumb_x,
                report.left_thumb_y,
                report.right_thumb_x,
                report.right_thumb_y,
                report.left_trigger,
                report.right_trigger,
            )
        else:
            log.debug("sending HID report to IOKit device")

    def device_info(self) -> tuple[VirtualMethod, int, bool]:
        """Return ``(method, device_id, connected)``."""
        return self.method, self.device_id, self.connected

    def close(self) -> None:
        """Release the device."""
        log.info("cleaning up virtual DS4 device")
        self.disconnect()

    def __enter__(self) -> VirtualDS4Device:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def ds4_hid_descriptor() -> bytes:
    """HID report descriptor of a DualShock 4 gamepad."""
    return _DS4_HID_DESCRIPTOR


def check_compatibility() -> None:
    """Log what each virtual controller method requires."""
    log.info("checking virtual controller compatibility")
    log.warning("virtual controller methods:")
    log.warning("1. simulation: suitable for testing and development")
    log.warning("2. IOKit: requires SIP to be disabled, a security risk")
    log.warning("3. DriverKit: requires a developer account and entitlements")


def system_info() -> tuple[str, str]:
    """Return ``(platform, environment)``."""
    return "macOS", "simulated environment"


def check_permissions() -> list[str]:
    """Describe which virtual controller methods are usable."""
    return [
        "simulation mode: available",
        "IOKit mode: requires SIP to be disabled",
        "DriverKit mode: requires developer entitlements",
    ]