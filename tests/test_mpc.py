import random

import pytest

from mpcpilot.aircraft import Drone
from mpcpilot.control_mode import Mode
from mpcpilot.core import HORIZON, Input, TimeStep
from mpcpilot.guidance import Guidance
from mpcpilot.mpc import MAX_SAMPLING_TIME, MPC
from mpcpilot.optimization import Strategy


def _mpc():
    random.seed(5)
    drone = Drone()
    drone.state.airborne = True
    guidance = Guidance()
    return MPC(drone, TimeStep(0.01), guidance), drone, guidance


def _within_limits(drone, motors):
    return len(motors) == drone.output_size and all(
        drone.min_output(i) <= value <= drone.max_output(i) for i, value in enumerate(motors)
    )


def test_defaults():
    mpc, _, _ = _mpc()
    assert mpc.control_mode is Mode.IDLE
    assert mpc.sampling_time == 0
    assert mpc.strategy is Strategy.MOPSO


@pytest.mark.parametrize("value", [-1, MAX_SAMPLING_TIME + 1])
def test_sampling_time_out_of_range(value):
    mpc, _, _ = _mpc()
    with pytest.raises(ValueError):
        mpc.sampling_time = value
    assert mpc.sampling_time == 0


def test_sampling_time_round_trip():
    mpc, _, _ = _mpc()
    mpc.sampling_time = 250
    assert mpc.sampling_time == 250


def test_compute_every_step_without_sampling_time():
    mpc, drone, _ = _mpc()
    motors = mpc.compute()
    assert len(motors) == drone.output_size
    for index, value in enumerate(motors):
        assert drone.min_output(index) <= value <= drone.max_output(index)


def test_plan_is_replayed_until_used_up():
    mpc, drone, _ = _mpc()
    mpc.sampling_time = 1000
    replayed = [mpc.compute() for _ in range(HORIZON - 1)]
    assert all(m == [0] * drone.output_size for m in replayed)

    fresh = mpc.compute()
    assert _within_limits(drone, fresh)
    follow_up = mpc.compute()
    assert _within_limits(drone, follow_up)


def test_mode_change_forces_optimisation():
    mpc, drone, guidance = _mpc()
    mpc.sampling_time = 1000
    mpc.control_mode = Mode.ANGLE
    assert mpc.control_mode is Mode.ANGLE
    assert guidance.usage.orientation.x and guidance.usage.orientation.y
    assert _within_limits(drone, mpc.compute())


def test_input_updates_setpoint():
    mpc, _, guidance = _mpc()
    mpc.control_mode = Mode.ANGLE
    mpc.input(Input(x1=0, y1=0, x2=20, y2=-10))
    assert guidance.setpoint.orientation.x == 20.0
    assert guidance.setpoint.orientation.y == -10.0
    assert guidance.deviation is True


def test_compute_does_not_touch_aircraft_state():
    mpc, drone, _ = _mpc()
    before = drone.state.copy()
    mpc.compute()
    assert drone.state == before