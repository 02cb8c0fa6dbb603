"""Exceptions raised by the telemetry side of the package."""

from __future__ import annotations


class GT7Error(Exception):
    """Base class for all telemetry errors."""

    def is_network_error(self) -> bool:
        """True for network, socket and address errors."""
        return isinstance(self, (NetworkError, SocketError, AddressParseError))

    def is_packet_error(self) -> bool:
        """True for errors about malformed or unexpected packets."""
        return isinstance(
            self,
            (
                PacketParseError,
                PacketVersionMismatch,
                ChecksumError,
                InvalidPacketFormat,
                IncompleteData,
            ),
        )

    def is_recoverable(self) -> bool:
        """True for errors after which retrying makes sense."""
        return isinstance(
            self,
            (TelemetryTimeoutError, GameNotConnected, IncompleteData, NetworkError),
        )

    def is_config_error(self) -> bool:
        """True for errors caused by bad settings."""
        return isinstance(self, (ConfigError, InvalidIPAddress, InvalidPort))


class NetworkError(GT7Error):
    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"network connection to {address} failed: {reason}")


class SocketError(GT7Error):
    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"UDP socket error: {cause}")


class AddressParseError(GT7Error):
    def __init__(self, cause: ValueError) -> None:
        self.cause = cause
        super().__init__(f"IP address parse error: {cause}")


class PacketParseError(GT7Error):
    def __init__(self, message: str, offset: int, length: int) -> None:
        self.message = message
        self.offset = offset
        self.length = length
        super().__init__(
            f"packet parse error: {message} (offset: {offset}, length: {length})"
        )


class PacketVersionMismatch(GT7Error):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"packet version mismatch: expected {expected}, got {actual}"
        )


class InvalidIPAddress(GT7Error):
    def __init__(self, ip: str) -> None:
        self.ip = ip
        super().__init__(f"invalid IP address: {ip} (must be a valid IPv4 address)")


class InvalidPort(GT7Error):
    def __init__(self, port: int) -> None:
        self.port = port
        super().__init__(f"invalid port: {port} (valid range: 1-65535)")


class TelemetryTimeoutError(GT7Error):
    def __init__(self, operation: str, timeout_ms: int) -> None:
        self.operation = operation
        self.timeout_ms = timeout_ms
        super().__init__(f"operation '{operation}' timed out ({timeout_ms}ms)")


class GameNotConnected(GT7Error):
    def __init__(self, last_heartbeat: str) -> None:
        self.last_heartbeat = last_heartbeat
        super().__init__(
            f"game not connected or data unavailable (last heartbeat: {last_heartbeat})"
        )


class IncompleteData(GT7Error):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"incomplete data: expected {expected} bytes, got {actual} bytes"
        )


class ChecksumError(GT7Error):
    def __init__(self, calculated: int, expected: int) -> None:
        self.calculated = calculated
        self.expected = expected
        super().__init__(
            f"packet checksum error: calculated 0x{calculated:04X}, "
            f"expected 0x{expected:04X}"
        )


class InvalidPacketFormat(GT7Error):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"invalid packet format: field {field} is invalid")


class InvalidGameState(GT7Error):
    def __init__(self, current_state: str, operation: str) -> None:
        self.current_state = current_state
        self.operation = operation
        super().__init__(
            f"invalid game state: state {current_state} does not allow {operation}"
        )


class ConfigError(GT7Error):
    def __init__(self, field: str, value: str, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"configuration error: {field} = {value} (reason: {reason})")


class FileOperationError(GT7Error):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"file operation failed: {operation}")


class SerializationError(GT7Error):
    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"serialization error: {cause}")


class MultiClientError(GT7Error):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"multi-client management error: {message}")