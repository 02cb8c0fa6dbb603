"""Decoding of GT7 telemetry packets."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import timedelta

from .telemetry_errors import IncompleteData, InvalidPacketFormat, PacketVersionMismatch
from .telemetry_types import (
    GT7_PACKET_SIZE,
    CarConfiguration,
    EngineInfo,
    GameStateType,
    Position,
    RaceInfo,
    TireData,
    TireInfo,
    TrackData,
    Vector3,
    WeatherCondition,
)

GT7_PACKET_VERSION = 1
"""Packet version this decoder understands."""

GT7_PACKET_MAGIC = 0x47375053
"""Magic number at the start of every packet (little endian u32)."""

_HEADER = struct.Struct("<IHI")
_GAME_STATE = struct.Struct("<BBBI")
_RACE = struct.Struct("<HHBBIIIf")
_MOTION = struct.Struct("<12f")
_TIRE = struct.Struct("<5f")
_ENGINE = struct.Struct("<7f2bf")
_TRACK = struct.Struct("<IffBffBf32s")
_TIMESTAMP = struct.Struct("<Q")

_GAME_STATE_OFFSET = 10
_RACE_OFFSET = _GAME_STATE_OFFSET + _GAME_STATE.size
_CAR_OFFSET = 50
_TIRES_OFFSET = _CAR_OFFSET + _MOTION.size
_ENGINE_OFFSET = _TIRES_OFFSET + 4 * _TIRE.size
_TRACK_OFFSET = 200
_TIMESTAMP_OFFSET = 280


@dataclass
class GameState:
    """What the game is doing, with race details while racing."""

    state_type: GameStateType
    race_info: RaceInfo | None
    is_paused: bool
    is_replay: bool
    menu_id: int


@dataclass
class CarInfo:
    """Motion, tyres and engine of the player's car."""

    position: Position
    tires: TireInfo
    engine: EngineInfo
    configuration: CarConfiguration | None = None


@dataclass
class TrackInfo:
    """Track data together with live track conditions."""

    track_data: TrackData
    current_sector: int
    track_wetness: float


def _parse_race_info(data) -> RaceInfo:
    (
        current_lap,
        total_laps,
        position,
        total_participants,
        best_raw,
        last_raw,
        current_lap_time,
        track_progress,
    ) = _RACE.unpack_from(data, _RACE_OFFSET)
    return RaceInfo(
        current_lap=current_lap,
        total_laps=total_laps,
        position=position,
        total_participants=total_participants,
        best_lap_time=best_raw or None,
        last_lap_time=last_raw or None,
        current_lap_time=current_lap_time,
        track_progress=track_progress,
    )


def _parse_game_state(data) -> GameState:
    state_raw, paused, replay, menu_id = _GAME_STATE.unpack_from(data, _GAME_STATE_OFFSET)
    state_type = GameStateType(state_raw)
    race_info = _parse_race_info(data) if state_type is GameStateType.IN_RACE else None
    return GameState(
        state_type=state_type,
        race_info=race_info,
        is_paused=paused != 0,
        is_replay=replay != 0,
        menu_id=menu_id,
    )


def _parse_car_info(data) -> CarInfo:
    motion = _MOTION.unpack_from(data, _CAR_OFFSET)
    world, velocity, rotation, angular = (
        Vector3(*motion[start : start + 3]) for start in range(0, 12, 3)
    )
    position = Position(
        world=world,
        velocity=velocity,
        angular_velocity=angular,
        rotation=rotation,
    )

    tires = TireInfo(
        *(
            TireData(*_TIRE.unpack_from(data, _TIRES_OFFSET + index * _TIRE.size))
            for index in range(4)
        )
    )

    (
        fuel_remaining,
        fuel_capacity,
        rpm,
        max_rpm,
        throttle,
        brake,
        clutch,
        gear,
        suggested_gear,
        fuel_consumption,
    ) = _ENGINE.unpack_from(data, _ENGINE_OFFSET)
    fuel_level = fuel_remaining / fuel_capacity if fuel_capacity > 0.0 else 0.0
    engine = EngineInfo(
        rpm=rpm,
        max_rpm=max_rpm,
        throttle=throttle,
        brake=brake,
        clutch=clutch,
        gear=gear,
        suggested_gear=suggested_gear,
        fuel_remaining=fuel_remaining,
        fuel_consumption=fuel_consumption,
        fuel_capacity=fuel_capacity,
        fuel_level=fuel_level,
    )
    return CarInfo(position=position, tires=tires, engine=engine)


def _parse_track_info(data) -> TrackInfo:
    (
        track_id,
        track_length,
        altitude,
        weather_raw,
        road_temperature,
        air_temperature,
        current_sector,
        track_wetness,
        name_bytes,
    ) = _TRACK.unpack_from(data, _TRACK_OFFSET)
    track_name = name_bytes.decode("utf-8", errors="replace").rstrip("\0")
    track_data = TrackData(
        track_id=track_id,
        track_name=track_name,
        track_length=track_length,
        altitude=altitude,
        weather=WeatherCondition(weather_raw),
        road_temperature=road_temperature,
        air_temperature=air_temperature,
    )
    return TrackInfo(
        track_data=track_data,
        current_sector=current_sector,
        track_wetness=track_wetness,
    )


@dataclass
class GT7TelemetryPacket:
    """One decoded telemetry packet."""

    version: int
    game_state: GameState
    car_info: CarInfo
    track_info: TrackInfo
    timestamp: int
    packet_id: int

    @classmethod
    def from_bytes(cls, data) -> GT7TelemetryPacket:
        """Decode a packet of exactly ``GT7_PACKET_SIZE`` bytes."""
        if len(data) != GT7_PACKET_SIZE:
            raise IncompleteData(GT7_PACKET_SIZE, len(data))

        magic, version, packet_id = _HEADER.unpack_from(data, 0)
        if magic != GT7_PACKET_MAGIC:
            raise InvalidPacketFormat("magic")
        if version != GT7_PACKET_VERSION:
            raise PacketVersionMismatch(GT7_PACKET_VERSION, version)

        (timestamp,) = _TIMESTAMP.unpack_from(data, _TIMESTAMP_OFFSET)
        return cls(
            version=version,
            game_state=_parse_game_state(data),
            car_info=_parse_car_info(data),
            track_info=_parse_track_info(data),
            timestamp=timestamp,
            packet_id=packet_id,
        )

    def validate(self) -> None:
        """Raise if the version or any ranged value is out of bounds."""
        if self.version != GT7_PACKET_VERSION:
            raise PacketVersionMismatch(GT7_PACKET_VERSION, self.version)
        engine = self.car_info.engine
        if engine.throttle < 0.0 or engine.throttle > 1.0:
            raise InvalidPacketFormat("throttle value out of range")
        if engine.brake < 0.0 or engine.brake > 1.0:
            raise InvalidPacketFormat("brake value out of range")
        wetness = self.track_info.track_wetness
        if wetness < 0.0 or wetness > 1.0:
            raise InvalidPacketFormat("track wetness out of range")

    def speed_kmh(self) -> float:
        """Current speed in km/h."""
        return self.car_info.position.velocity.magnitude() * 3.6

    def is_in_race(self) -> bool:
        """True while a race is running."""
        return self.game_state.state_type is GameStateType.IN_RACE

    def is_in_menu(self) -> bool:
        """True while in a menu."""
        return self.game_state.state_type is GameStateType.IN_MENU

    def gear_display(self) -> str:
        """Gear as shown on a dashboard: 'R' for 0, the number when forward, else 'N'."""
        gear = self.car_info.engine.gear
        if gear == 0:
            return "R"
        if gear > 0:
            return str(gear)
        return "N"

    def best_lap_time(self) -> timedelta | None:
        """Best lap time of the current race, if one has been set."""
        race = self.game_state.race_info
        if race is None or race.best_lap_time is None:
            return None
        return timedelta(milliseconds=race.best_lap_time)