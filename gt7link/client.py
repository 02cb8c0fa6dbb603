"""UDP telemetry client that can follow several consoles at once."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
import time
from dataclasses import dataclass, field

from .packet import GT7TelemetryPacket
from .telemetry_errors import (
    ConfigError,
    GT7Error,
    InvalidIPAddress,
    InvalidPort,
    NetworkError,
)
from .telemetry_types import (
    GT7_HEARTBEAT,
    GT7_PACKET_SIZE,
    GT7_TELEMETRY_PORT,
    TelemetryConfig,
    is_valid_gt7_ip,
)

log = logging.getLogger(__name__)

_QUEUE_SIZE = 1000
_RECEIVE_BUFFER = GT7_PACKET_SIZE * 2
_RECEIVE_PAUSE = 0.001
_MONITOR_PERIOD = 1.0


@dataclass
class _Connection:
    address: tuple[str, int]
    sock: socket.socket
    last_received: float = field(default_factory=time.monotonic)
    last_heartbeat: float = field(default_factory=time.monotonic)
    is_connected: bool = False
    packet_count: int = 0


class GT7TelemetryClient:
    """Receives telemetry from one or more consoles and fans packets out to subscribers.

    Each subscriber gets an ``asyncio.Queue`` of ``(ip, packet)`` tuples.
    """

    def __init__(self, config: TelemetryConfig | None = None) -> None:
        self.config = config if config is not None else TelemetryConfig()
        self._connections: dict[str, _Connection] = {}
        self._subscribers: list[asyncio.Queue] = []
        self._running = False
        self._tasks: list[asyncio.Task] = []

    async def __aenter__(self) -> GT7TelemetryClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
        for connection in self._connections.values():
            connection.sock.close()
        self._connections.clear()

    def subscribe(self) -> asyncio.Queue:
        """Return a new queue that receives every accepted ``(ip, packet)``."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=_QUEUE_SIZE)
        self._subscribers.append(queue)
        return queue

    async def add_connection(self, ip: str, port: int | None = None) -> None:
        """Start following the console at ``ip``; ``port`` defaults to the config's."""
        if not is_valid_gt7_ip(ip):
            raise InvalidIPAddress(ip)

        port = self.config.port if port is None else port
        if port == 0:
            raise InvalidPort(port)

        try:
            host = str(ipaddress.IPv4Address(ip))
        except ValueError:
            raise InvalidIPAddress(ip) from None
        if not 0 < port <= 0xFFFF:
            raise InvalidPort(port)
        address = (host, port)
        address_text = f"{host}:{port}"

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            raise NetworkError(address_text, str(exc)) from exc
        try:
            sock.bind(("0.0.0.0", 0))
            sock.setblocking(False)
        except OSError as exc:
            sock.close()
            raise NetworkError(address_text, str(exc)) from exc

        previous = self._connections.get(ip)
        if previous is not None:
            previous.sock.close()
        self._connections[ip] = _Connection(address=address, sock=sock)
        log.info("added GT7 connection: %s -> %s", ip, address_text)

    async def remove_connection(self, ip: str) -> None:
        """Stop following ``ip``; raise if it was never added."""
        connection = self._connections.pop(ip, None)
        if connection is None:
            raise NetworkError(ip, "connection does not exist")
        connection.sock.close()
        log.info("removed GT7 connection: %s", ip)

    def connection_status(self) -> dict[str, bool]:
        """Map each followed IP to whether it is currently delivering packets."""
        return {ip: conn.is_connected for ip, conn in self._connections.items()}

    async def start(self) -> None:
        """Start receiving packets, sending heartbeats and watching for timeouts."""
        if self._running:
            raise ConfigError("client_state", "running", "client is already running")
        self._running = True
        log.info("starting GT7 telemetry client")
        self._tasks = [
            asyncio.create_task(self._receive_packets()),
            asyncio.create_task(self._send_heartbeats()),
            asyncio.create_task(self._monitor_connections()),
        ]

    async def stop(self) -> None:
        """Stop all background work."""
        self._running = False
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        log.info("stopped GT7 telemetry client")

    def _publish(self, ip: str, packet: GT7TelemetryPacket) -> None:
        for queue in self._subscribers:
            try:
                queue.put_nowait((ip, packet))
            except asyncio.QueueFull:
                log.warning("packet queue is full, dropping packet")

    def _handle_datagram(self, ip: str, connection: _Connection, data: bytes) -> None:
        if len(data) < GT7_PACKET_SIZE:
            log.warning("packet from %s has wrong size: %d bytes", ip, len(data))
            return
        try:
            packet = GT7TelemetryPacket.from_bytes(data[:GT7_PACKET_SIZE])
        except GT7Error as exc:
            log.warning("failed to parse packet from %s: %s", ip, exc)
            return
        try:
            packet.validate()
        except GT7Error:
            log.warning("packet from %s failed validation", ip)
            return

        connection.last_received = time.monotonic()
        connection.is_connected = True
        connection.packet_count += 1
        self._publish(ip, packet)
        log.debug("received packet #%d from %s", connection.packet_count, ip)

    async def _receive_packets(self) -> None:
        while self._running:
            for ip, connection in list(self._connections.items()):
                try:
                    data = connection.sock.recv(_RECEIVE_BUFFER)
                except BlockingIOError:
                    continue
                except OSError as exc:
                    log.warning("error receiving from %s: %s", ip, exc)
                    continue
                self._handle_datagram(ip, connection, data)
            await asyncio.sleep(_RECEIVE_PAUSE)

    async def _send_heartbeats(self) -> None:
        interval = self.config.heartbeat_interval / 1000.0
        while self._running:
            await asyncio.sleep(interval)
            for ip, connection in list(self._connections.items()):
                now = time.monotonic()
                if now - connection.last_heartbeat < interval:
                    continue
                try:
                    connection.sock.sendto(GT7_HEARTBEAT, connection.address)
                except OSError as exc:
                    log.warning("failed to send heartbeat to %s: %s", ip, exc)
                    continue
                connection.last_heartbeat = now
                log.debug("sent heartbeat to %s", ip)

    async def _monitor_connections(self) -> None:
        timeout = self.config.timeout
        while self._running:
            now = time.monotonic()
            for ip, connection in list(self._connections.items()):
                silent_for = now - connection.last_received
                if silent_for > timeout and connection.is_connected:
                    connection.is_connected = False
                    log.warning("GT7 device %s timed out (%d s)", ip, int(silent_for))
            await asyncio.sleep(_MONITOR_PERIOD)


class SimpleGT7Client:
    """A client that follows exactly one console."""

    def __init__(self, client: GT7TelemetryClient, ip: str) -> None:
        self.client = client
        self.ip = ip

    @classmethod
    async def create(cls, ip: str, port: int | None = None) -> SimpleGT7Client:
        """Build a client already connected to ``ip``."""
        config = TelemetryConfig(
            console_ip=ip,
            port=GT7_TELEMETRY_PORT if port is None else port,
        )
        client = GT7TelemetryClient(config)
        await client.add_connection(ip, port)
        return cls(client, ip)

    async def __aenter__(self) -> SimpleGT7Client:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.client.__aexit__(*exc_info)

    def subscribe(self) -> asyncio.Queue:
        """Return a new queue of ``(ip, packet)`` tuples."""
        return self.client.subscribe()

    async def start(self) -> None:
        """Start the underlying client."""
        await self.client.start()

    async def stop(self) -> None:
        """Stop the underlying client."""
        await self.client.stop()

    def is_connected(self) -> bool:
        """True while the console is delivering packets."""
        return self.client.connection_status().get(self.ip, False)