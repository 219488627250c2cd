import math

import pytest

from mpcpilot.aircraft import Aircraft, Drone, limit_to_180, limit_to_360
from mpcpilot.core import GRAVITY, State, Vector3


@pytest.mark.parametrize("angle", [370.0, -370.0, 720.0, 45.0, -1000.5, 359.9])
def test_limit_to_360_range_and_equivalence(angle):
    result = limit_to_360(Vector3(angle, angle, angle))
    for value in result:
        assert -360.0 < value < 360.0
        assert math.remainder(value - angle, 360.0) == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("angle", [190.0, -190.0, 90.0, 540.5, -725.0, 180.0])
def test_limit_to_180_range_and_equivalence(angle):
    result = limit_to_180(Vector3(angle, -angle, angle))
    for value, original in zip(result, (angle, -angle, angle)):
        assert -180.0 <= value <= 180.0
        assert math.remainder(value - original, 360.0) == pytest.approx(0.0, abs=1e-9)


def test_limit_to_180_keeps_small_angles():
    v = Vector3(10.0, -20.0, 179.0)
    assert limit_to_180(v) == v


def test_aircraft_is_abstract():
    with pytest.raises(TypeError):
        Aircraft()


def test_output_limits():
    drone = Drone()
    assert drone.output_size == 4
    assert drone.min_output(0) == 10
    assert drone.max_output(2) == 1000


def test_output_index_is_clamped():
    drone = Drone()
    assert drone.max_output(99) == drone.max_output(3)
    assert drone.min_output(-5) == drone.min_output(0)


def test_mode_valid_accepts_everything():
    assert Drone().mode_valid(7) is True


def test_grounded_without_thrust_stays_put():
    drone = Drone()
    state = State()
    drone.simulate(0.01, state)
    assert state.airborne is False
    assert state.acceleration.z == pytest.approx(-GRAVITY)
    assert state.position == Vector3()


def test_full_throttle_lifts_off():
    drone = Drone()
    state = State(output=[1000, 1000, 1000, 1000])
    drone.simulate(0.01, state)
    assert state.airborne is True
    assert state.velocity.z > 0
    assert state.position.z > 0


def test_full_throttle_matches_specific_max_acc():
    drone = Drone()
    state = State(output=[1000, 1000, 1000, 1000])
    drone.simulate(0.01, state)
    assert state.acceleration.z == pytest.approx(drone.max_acc(True).z)


def test_symmetric_outputs_produce_no_roll_or_pitch():
    drone = Drone()
    state = State(output=[500, 500, 500, 500], airborne=True)
    drone.simulate(0.01, state)
    assert state.angular_acc.x == pytest.approx(0.0)
    assert state.angular_acc.y == pytest.approx(0.0)
    assert state.angular_acc.z == pytest.approx(0.0)


def test_left_motors_roll_positive():
    drone = Drone()
    state = State(output=[1000, 0, 1000, 0], airborne=True)
    drone.simulate(0.01, state)
    assert state.angular_acc.x > 0
    assert state.orientation.x > 0
    assert state.angular_rates.x > 0


def test_orientation_stays_wrapped():
    drone = Drone()
    state = State(output=[500, 500, 500, 500], airborne=True)
    state.orientation = Vector3(179.9, 0.0, 0.0)
    state.angular_rates = Vector3(100.0, 0.0, 0.0)
    drone.simulate(0.01, state)
    assert -180.0 <= state.orientation.x <= 180.0
    assert state.orientation.x < 0


def test_max_acc_descending_is_uniform():
    drone = Drone()
    acc = drone.max_acc(False)
    assert acc.x == acc.y == acc.z
    assert acc.x > 0


def test_max_acc_ascending_limits_vertical():
    drone = Drone()
    drone.state.velocity = Vector3(0.0, 0.0, 1.0)
    acc = drone.max_acc(False)
    assert acc.x == acc.y
    assert acc.z < acc.x


def test_max_angular_acc():
    assert Drone().max_angular_acc() == Vector3(9000.0, 9000.0, 50.0)