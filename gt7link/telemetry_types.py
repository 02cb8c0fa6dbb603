"""Data types carried by GT7 telemetry packets, plus client configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

GT7_TELEMETRY_PORT = 33740
"""Default UDP port the console sends telemetry from."""

GT7_PACKET_SIZE = 296
"""Size in bytes of one telemetry packet."""

GT7_HEARTBEAT = b"A"
"""Payload sent to the console to keep the telemetry stream alive."""

_PRIVATE_PREFIXES = ("192.168.", "10.", "172.")


def is_valid_gt7_ip(ip: str) -> bool:
    """Return True if ``ip`` looks like a local-network console address."""
    return ip.startswith(_PRIVATE_PREFIXES) or ip == "127.0.0.1"


@dataclass(frozen=True)
class Vector3:
    """A three-component vector."""

    x: float
    y: float
    z: float

    def magnitude(self) -> float:
        """Euclidean length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class Position:
    """Car position and motion in world space."""

    world: Vector3
    velocity: Vector3
    angular_velocity: Vector3
    rotation: Vector3


@dataclass(frozen=True)
class TireData:
    """State of a single tyre."""

    temperature: float
    wear: float
    suspension_travel: float
    wheel_speed: float
    radius: float


@dataclass(frozen=True)
class TireInfo:
    """State of all four tyres."""

    front_left: TireData
    front_right: TireData
    rear_left: TireData
    rear_right: TireData

    def __iter__(self):
        yield from (self.front_left, self.front_right, self.rear_left, self.rear_right)


@dataclass(frozen=True)
class EngineInfo:
    """Engine, pedal and fuel readings."""

    rpm: float
    max_rpm: float
    throttle: float
    brake: float
    clutch: float
    gear: int
    suggested_gear: int
    fuel_remaining: float
    fuel_consumption: float
    fuel_capacity: float
    fuel_level: float


@dataclass
class RaceInfo:
    """Race progress; lap times are in milliseconds."""

    current_lap: int
    total_laps: int
    position: int
    total_participants: int
    best_lap_time: int | None
    last_lap_time: int | None
    current_lap_time: int
    track_progress: float


class GameStateType(IntEnum):
    """What the game is currently doing; unknown raw values map to UNKNOWN."""

    IN_MENU = 0
    IN_RACE = 1
    PAUSED = 2
    REPLAY = 3
    GARAGE = 4
    LOADING = 5
    UNKNOWN = 255

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int):
            return cls.UNKNOWN
        return None


class WeatherCondition(IntEnum):
    """Weather on track; unknown raw values map to UNKNOWN."""

    CLEAR = 0
    CLOUDY = 1
    LIGHT_RAIN = 2
    HEAVY_RAIN = 3
    FOG = 4
    SNOW = 5
    UNKNOWN = 255

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int):
            return cls.UNKNOWN
        return None


@dataclass
class TrackData:
    """Static and environmental information about the track."""

    track_id: int
    track_name: str
    track_length: float
    altitude: float
    weather: WeatherCondition
    road_temperature: float
    air_temperature: float


@dataclass
class CarConfiguration:
    """Descriptive information about the car."""

    car_id: int
    car_name: str
    car_category: str
    weight: float
    power: float
    torque: float
    drivetrain: str
    tire_type: str


@dataclass
class TelemetryConfig:
    """Settings for a telemetry client."""

    console_ip: str = "192.168.1.30"
    port: int = GT7_TELEMETRY_PORT
    timeout: int = 5
    """Seconds without packets before a connection is considered lost."""
    heartbeat_interval: int = 100
    """Milliseconds between heartbeats."""
    enable_logging: bool = False
    log_file_path: str | None = None