"""Exceptions raised by the virtual gamepad side of the package."""

from __future__ import annotations


class VGamepadError(Exception):
    """Base class for all virtual gamepad errors."""

    def is_vigem_error(self) -> bool:
        """True for errors coming from the ViGEm bus driver."""
        return isinstance(self, (ViGEmError, ViGEmLibraryError, ViGEmFunctionError))

    def is_iokit_error(self) -> bool:
        """True for IOKit HID errors."""
        return isinstance(self, IOKitError)

    def is_recoverable(self) -> bool:
        """True for errors after which the controller is still usable."""
        return isinstance(self, (ControllerUpdateError, InvalidInput))


class ViGEmError(VGamepadError):
    def __init__(self, message: str, code: int) -> None:
        self.message = message
        self.code = code
        super().__init__(f"ViGEm driver error: {message} (error code: 0x{code:08X})")


class ViGEmLibraryError(VGamepadError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"cannot load ViGEmClient.dll: {reason}")


class ViGEmFunctionError(VGamepadError):
    def __init__(self, function: str, reason: str) -> None:
        self.function = function
        self.reason = reason
        super().__init__(f"ViGEm function '{function}' failed: {reason}")


class IOKitError(VGamepadError):
    def __init__(self, message: str, status: int) -> None:
        self.message = message
        self.status = status
        super().__init__(f"IOKit HID error: {message} (status: {status})")


class ControllerInitError(VGamepadError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"controller initialisation failed: {reason}")


class ControllerConnectionError(VGamepadError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"controller connection failed: {reason}")


class ControllerDisconnected(VGamepadError):
    def __init__(self) -> None:
        super().__init__("controller is disconnected")


class ControllerUpdateError(VGamepadError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"controller state update failed: {reason}")


class InvalidInput(VGamepadError):
    def __init__(self, field: str, expected: str, actual: str) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"invalid input for {field}: expected {expected}, got {actual}"
        )


class UnsupportedPlatform(VGamepadError):
    def __init__(self, platform: str, feature: str) -> None:
        self.platform = platform
        self.feature = feature
        super().__init__(f"platform '{platform}' does not support: {feature}")


class DriverNotInstalled(VGamepadError):
    def __init__(self, driver: str, download_url: str) -> None:
        self.driver = driver
        self.download_url = download_url
        super().__init__(
            f"required driver not installed: {driver} (see {download_url})"
        )


class InsufficientPermissions(VGamepadError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"insufficient permissions: {operation} requires administrator rights"
        )


class GamepadSystemError(VGamepadError):
    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"system error: {cause}")