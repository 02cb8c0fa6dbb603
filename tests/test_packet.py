import struct
from dataclasses import replace
from datetime import timedelta

import pytest

from gt7link.packet import (
    GT7_PACKET_MAGIC,
    GT7_PACKET_VERSION,
    GT7TelemetryPacket,
)
from gt7link.telemetry_errors import (
    IncompleteData,
    InvalidPacketFormat,
    PacketVersionMismatch,
)
from gt7link.telemetry_types import GT7_PACKET_SIZE, GameStateType, WeatherCondition

DEFAULT_TIRES = (
    (80.0, 0.25, 0.5, 40.0, 0.375),
    (81.0, 0.25, 0.5, 41.0, 0.375),
    (82.0, 0.5, 0.25, 42.0, 0.5),
    (83.0, 0.5, 0.25, 43.0, 0.5),
)


def build_packet(
    *,
    magic=GT7_PACKET_MAGIC,
    version=1,
    packet_id=7,
    state=1,
    paused=0,
    replay=0,
    menu_id=9,
    race=(3, 10, 2, 16, 83456, 84000, 12000, 0.25),
    world=(1.0, 2.0, 3.0),
    velocity=(3.0, 4.0, 0.0),
    rotation=(0.5, 0.25, 0.125),
    angular=(0.0, 1.0, 0.0),
    tires=DEFAULT_TIRES,
    fuel_remaining=30.0,
    fuel_capacity=60.0,
    rpm=6500.0,
    max_rpm=8000.0,
    throttle=0.75,
    track_id=5 << 16,
    track_length=5807.0,
    altitude=12.5,
    weather=3,
    road_temp=31.5,
    air_temp=22.5,
    sector=2,
    wetness=0.5,
    name=b"Suzuka",
    timestamp=1234567890123,
):
    data = bytearray(GT7_PACKET_SIZE)
    struct.pack_into("<IHI", data, 0, magic, version, packet_id)
    struct.pack_into("<BBBI", data, 10, state, paused, replay, menu_id)
    struct.pack_into("<HHBBIIIf", data, 17, *race)
    struct.pack_into("<12f", data, 50, *world, *velocity, *rotation, *angular)
    for index, tire in enumerate(tires):
        struct.pack_into("<5f", data, 98 + index * 20, *tire)
    # brake, clutch, gears and fuel consumption are left to what the track block writes
    struct.pack_into(
        "<6f", data, 178, fuel_remaining, fuel_capacity, rpm, max_rpm, throttle, 0.0
    )
    struct.pack_into(
        "<IffBffBf32s",
        data,
        200,
        track_id,
        track_length,
        altitude,
        weather,
        road_temp,
        air_temp,
        sector,
        wetness,
        name,
    )
    struct.pack_into("<Q", data, 280, timestamp)
    return bytes(data)


def with_engine(packet, **changes):
    engine = replace(packet.car_info.engine, **changes)
    return replace(packet, car_info=replace(packet.car_info, engine=engine))


@pytest.fixture
def packet():
    return GT7TelemetryPacket.from_bytes(build_packet())


@pytest.mark.parametrize("size", [0, 100, GT7_PACKET_SIZE - 1, GT7_PACKET_SIZE + 1])
def test_wrong_length_is_incomplete(size):
    with pytest.raises(IncompleteData) as info:
        GT7TelemetryPacket.from_bytes(bytes(size))
    assert info.value.expected == GT7_PACKET_SIZE
    assert info.value.actual == size


def test_bad_magic_rejected():
    with pytest.raises(InvalidPacketFormat) as info:
        GT7TelemetryPacket.from_bytes(build_packet(magic=0x12345678))
    assert info.value.field == "magic"


def test_magic_bytes_on_the_wire():
    data = build_packet()
    assert data[:4] == b"SP7G"
    assert GT7TelemetryPacket.from_bytes(data).packet_id == 7


def test_version_mismatch_rejected():
    with pytest.raises(PacketVersionMismatch) as info:
        GT7TelemetryPacket.from_bytes(build_packet(version=2))
    assert info.value.expected == GT7_PACKET_VERSION
    assert info.value.actual == 2


def test_header_and_timestamp(packet):
    assert packet.version == GT7_PACKET_VERSION
    assert packet.packet_id == 7
    assert packet.timestamp == 1234567890123


def test_race_state_parsed(packet):
    state = packet.game_state
    assert state.state_type is GameStateType.IN_RACE
    assert packet.is_in_race()
    assert not packet.is_in_menu()
    assert state.menu_id == 9
    race = state.race_info
    assert (race.current_lap, race.total_laps) == (3, 10)
    assert (race.position, race.total_participants) == (2, 16)
    assert race.best_lap_time == 83456
    assert race.last_lap_time == 84000
    assert race.current_lap_time == 12000
    assert race.track_progress == 0.25


def test_zero_lap_times_become_none():
    packet = GT7TelemetryPacket.from_bytes(
        build_packet(race=(1, 5, 1, 8, 0, 0, 500, 0.0))
    )
    assert packet.game_state.race_info.best_lap_time is None
    assert packet.game_state.race_info.last_lap_time is None
    assert packet.best_lap_time() is None


def test_best_lap_time_as_timedelta(packet):
    assert packet.best_lap_time() == timedelta(milliseconds=83456)


def test_menu_state_has_no_race_info():
    packet = GT7TelemetryPacket.from_bytes(build_packet(state=0, paused=1, replay=1))
    assert packet.is_in_menu()
    assert not packet.is_in_race()
    assert packet.game_state.race_info is None
    assert packet.game_state.is_paused is True
    assert packet.game_state.is_replay is True
    assert packet.best_lap_time() is None


def test_unknown_state_maps_to_unknown():
    packet = GT7TelemetryPacket.from_bytes(build_packet(state=200))
    assert packet.game_state.state_type is GameStateType.UNKNOWN
    assert packet.game_state.race_info is None


def test_flags_false_when_zero(packet):
    assert packet.game_state.is_paused is False
    assert packet.game_state.is_replay is False


def test_car_motion_parsed(packet):
    position = packet.car_info.position
    assert (position.world.x, position.world.y, position.world.z) == (1.0, 2.0, 3.0)
    assert (position.velocity.x, position.velocity.y) == (3.0, 4.0)
    assert position.rotation.z == 0.125
    assert position.angular_velocity.y == 1.0
    assert packet.car_info.configuration is None


def test_speed_kmh(packet):
    assert packet.speed_kmh() == pytest.approx(18.0)


def test_tires_in_order(packet):
    tires = packet.car_info.tires
    temperatures = [tire.temperature for tire in tires]
    assert temperatures == [80.0, 81.0, 82.0, 83.0]
    assert tires.rear_right.wheel_speed == 43.0
    assert tires.front_left.radius == 0.375
    assert tires.rear_left.suspension_travel == 0.25


def test_engine_values(packet):
    engine = packet.car_info.engine
    assert engine.rpm == 6500.0
    assert engine.max_rpm == 8000.0
    assert engine.throttle == 0.75
    assert engine.fuel_remaining == 30.0
    assert engine.fuel_capacity == 60.0
    assert engine.fuel_level == pytest.approx(0.5)


def test_zero_capacity_gives_zero_fuel_level():
    packet = GT7TelemetryPacket.from_bytes(build_packet(fuel_capacity=0.0))
    assert packet.car_info.engine.fuel_level == 0.0


def test_engine_tail_overlaps_track_block():
    data = build_packet()
    packet = GT7TelemetryPacket.from_bytes(data)
    assert packet.car_info.engine.gear == struct.unpack_from("<b", data, 206)[0]
    assert packet.car_info.engine.suggested_gear == struct.unpack_from("<b", data, 207)[0]
    assert packet.car_info.engine.fuel_consumption == packet.track_info.track_data.altitude


def test_track_parsed(packet):
    track = packet.track_info
    assert track.track_data.track_id == 5 << 16
    assert track.track_data.track_name == "Suzuka"
    assert track.track_data.track_length == 5807.0
    assert track.track_data.altitude == 12.5
    assert track.track_data.weather is WeatherCondition.HEAVY_RAIN
    assert track.track_data.road_temperature == 31.5
    assert track.track_data.air_temperature == 22.5
    assert track.current_sector == 2
    assert track.track_wetness == 0.5


def test_unknown_weather():
    packet = GT7TelemetryPacket.from_bytes(build_packet(weather=42))
    assert packet.track_info.track_data.weather is WeatherCondition.UNKNOWN


def test_full_length_track_name():
    name = b"N" * 32
    packet = GT7TelemetryPacket.from_bytes(build_packet(name=name))
    assert packet.track_info.track_data.track_name == "N" * 32


def test_parsed_packet_validates(packet):
    assert packet.validate() is None
    assert packet.car_info.engine.brake == 0.0


def test_accepts_bytearray():
    packet = GT7TelemetryPacket.from_bytes(bytearray(build_packet(packet_id=11)))
    assert packet.packet_id == 11


@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_throttle_out_of_range(packet, value):
    with pytest.raises(InvalidPacketFormat):
        with_engine(packet, throttle=value).validate()


@pytest.mark.parametrize("value", [-0.5, 2.0])
def test_brake_out_of_range(packet, value):
    with pytest.raises(InvalidPacketFormat):
        with_engine(packet, brake=value).validate()


@pytest.mark.parametrize("value", [-0.01, 1.01])
def test_wetness_out_of_range(packet, value):
    bad = replace(packet, track_info=replace(packet.track_info, track_wetness=value))
    with pytest.raises(InvalidPacketFormat):
        bad.validate()


def test_boundaries_accepted(packet):
    edge = with_engine(packet, throttle=1.0, brake=1.0)
    edge = replace(edge, track_info=replace(edge.track_info, track_wetness=0.0))
    assert edge.validate() is None
    assert edge.car_info.engine.throttle == 1.0


def test_validate_checks_version(packet):
    bad = replace(packet, version=3)
    with pytest.raises(PacketVersionMismatch) as info:
        bad.validate()
    error = info.value
    assert error.actual == 3
    assert error.expected == GT7_PACKET_VERSION
    assert bad.packet_id == packet.packet_id


@pytest.mark.parametrize("gear, shown", [(0, "R"), (3, "3"), (-1, "N")])
def test_gear_display(packet, gear, shown):
    assert with_engine(packet, gear=gear).gear_display() == shown