# gt7link

A Python library for Gran Turismo 7 telemetry and for modelling a virtual
DualShock 4 controller.

It has two parts:

- **Telemetry**: it decodes 296-byte GT7 telemetry packets and runs an
  asyncio UDP client. The client sends heartbeats to one or more consoles and
  passes the packets it receives on to subscribers.
- **Gamepad**: it models the state of a DualShock 4 controller (buttons,
  D-pad, sticks and triggers) and sends each change to a simulated virtual
  device backend.

The package has no dependencies outside the standard library. The `test`
extra adds pytest and pytest-asyncio for running the test suite.

## Parsing a packet

```python
from gt7link.packet import GT7TelemetryPacket

packet = GT7TelemetryPacket.from_bytes(raw)   # raw must be exactly 296 bytes
packet.validate()
print(packet.speed_kmh(), packet.gear_display(), packet.is_in_race())
print(packet.best_lap_time())                 # a timedelta, or None
```

`from_bytes` checks the length, the magic number and the packet version.
`validate` also checks that throttle, brake and track wetness lie between
0.0 and 1.0. A bad packet raises an error from `gt7link.telemetry_errors`,
such as `IncompleteData`, `InvalidPacketFormat` or `PacketVersionMismatch`.
All of these derive from `GT7Error`, which has helpers for sorting errors into
groups: `is_packet_error()`, `is_network_error()`, `is_recoverable()` and
`is_config_error()`.

The decoded data types (`Vector3`, `Position`, `TireInfo`, `EngineInfo`,
`RaceInfo`, `TrackData`, `GameStateType`, `WeatherCondition`, ...) and the
constants `GT7_TELEMETRY_PORT`, `GT7_PACKET_SIZE` and `GT7_HEARTBEAT` live in
`gt7link.telemetry_types`.

## Receiving telemetry

```python
import asyncio
from gt7link.client import GT7TelemetryClient
from gt7link.telemetry_types import TelemetryConfig

async def main():
    async with GT7TelemetryClient(TelemetryConfig()) as client:
        packets = client.subscribe()
        await client.add_connection("192.168.1.30", None)
        await client.start()
        ip, packet = await packets.get()
        print(ip, packet.speed_kmh())
        print(client.connection_status())

asyncio.run(main())
```

Each call to `subscribe()` returns a new `asyncio.Queue` of `(ip, packet)`
tuples. Only packets that decode and pass `validate()` are delivered. A
connection counts as connected once a valid packet arrives, and drops back to
disconnected after `TelemetryConfig.timeout` seconds without one. Heartbeats
are sent every `heartbeat_interval` milliseconds. Calling `start()` on a
running client raises `ConfigError`, and `remove_connection()` on an unknown
address raises `NetworkError`.

For a single console, use `await SimpleGT7Client.create(ip, port)`. It has the
methods `start()`, `stop()`, `subscribe()` and `is_connected()`, and can also
be used with `async with`.

`add_connection` accepts only local-network IPv4 addresses (`192.168.*`,
`10.*`, `172.*` or `127.0.0.1`). Other addresses raise `InvalidIPAddress`,
and port 0 raises `InvalidPort`. Use `is_valid_gt7_ip` to check an address
before adding it.

## Driving a virtual controller

```python
from gt7link.controller import VGamepadClient, DS4Button, DS4DPad

with VGamepadClient().create_dualshock4() as pad:
    pad.press_button(DS4Button.CROSS)
    pad.set_dpad(DS4DPad.NORTH)
    pad.set_left_joystick(0.5, -0.5)
    pad.set_right_trigger(1.0)
    pad.release_button(DS4Button.CROSS)
    print(pad.state().report.to_bytes().hex())
    pad.reset()
```

Values out of range raise `InvalidInput` from `gt7link.gamepad_errors`. Stick
values must lie between -1.0 and 1.0, and trigger values between 0.0 and 1.0.
`DS4Report.to_bytes()` packs the report into its 42-byte little-endian layout.

The device backend lives in `gt7link.virtual_device`. `VirtualClient` uses
`VirtualMethod.SIMULATION` by default. `VirtualMethod.DRIVERKIT` raises
`UnsupportedPlatform`. `VirtualMethod.IOKIT_USERSPACE` is accepted only when
Python runs without optimisation; otherwise it raises
`InsufficientPermissions`. `VirtualDS4Device` connects on creation, and
`update()` on a disconnected device raises `ControllerDisconnected`. The
module also offers `ds4_hid_descriptor()`, `check_compatibility()`,
`system_info()` and `check_permissions()`.

## What it does not do

- No real virtual gamepad is created. Every backend method only records state
  and logs; nothing is presented to the operating system as an input device.
- There is no command-line program. The package is a library only.
- Packets are decoded but not stored or recorded. `TelemetryConfig.enable_logging`
  and `log_file_path` are carried in the configuration but not acted on.