import pytest

from mpcpilot.aircraft import Drone
from mpcpilot.control_mode import ControlMode, Mode
from mpcpilot.core import HORIZON, Input, TimeStep, Vector3
from mpcpilot.guidance import Guidance, Setpoint
from mpcpilot.modes_assisted import AltHold
from mpcpilot.modes_manual import Idle


def make_control(input_filter=False):
    drone = Drone()
    guidance = Guidance(input_filter=input_filter)
    return ControlMode(drone, TimeStep(0.01), guidance), drone, guidance


def test_starts_idle():
    control, _, _ = make_control()
    assert control.mode == Mode.IDLE
    assert control.num_objectives == Idle.num_objectives


def test_mode_selection():
    control, _, _ = make_control()
    control.mode = Mode.ALT_HOLD
    assert control.mode == Mode.ALT_HOLD
    assert control.num_objectives == AltHold.num_objectives


def test_unknown_mode_rejected():
    control, _, _ = make_control()
    with pytest.raises(ValueError):
        control.mode = 42
    assert control.mode == Mode.IDLE
    assert control.num_objectives == Idle.num_objectives


def test_alt_hold_selection_runs_stabilisation():
    control, _, guidance = make_control()
    control.mode = Mode.ALT_HOLD
    usage = guidance.usage
    assert usage.orientation.x and usage.orientation.y
    assert usage.position.z and not usage.velocity.z
    assert usage.orientation.z and not usage.rate.z


def test_mode_change_resets_setpoint():
    control, _, guidance = make_control()
    control.mode = Mode.POSITION
    control.input(Input(x1=1, y1=2, x2=3, y2=2))
    assert guidance.setpoint != Setpoint()
    control.mode = Mode.ACRO
    assert guidance.setpoint == Setpoint()


def test_idle_ignores_input():
    control, _, guidance = make_control()
    control.input(Input(x1=10, y1=20, x2=30, y2=40))
    assert guidance.setpoint == Setpoint()


def test_position_input_sets_target():
    control, _, guidance = make_control()
    control.mode = Mode.POSITION
    control.input(Input(x1=5, y1=3, x2=1, y2=2))
    assert guidance.setpoint.position == Vector3(1.0, 2.0, 3.0)
    assert guidance.setpoint.orientation.z == 5


def test_filtered_input_moves_part_way():
    control, _, guidance = make_control(input_filter=True)
    control.mode = Mode.POSITION
    control.input(Input(x2=2))
    assert 0 < guidance.setpoint.position.x < 2


def test_idle_cost_lowest_at_minimum_outputs():
    control, drone, _ = make_control()
    low = control.cost_function([[float(drone.min_output(i)) for i in range(4)]] * HORIZON)
    high = control.cost_function([[float(drone.max_output(i)) for i in range(4)]] * HORIZON)
    assert len(low) == control.num_objectives
    assert low[0] == 0
    assert high[0] > low[0]


def test_cost_function_leaves_aircraft_state_untouched():
    control, drone, _ = make_control()
    control.mode = Mode.ANGLE
    drone.state.airborne = True
    before = drone.state.copy()
    control.cost_function([[500.0, 600.0, 700.0, 800.0]] * HORIZON)
    assert drone.state == before


def test_cost_function_without_objectives():
    control, _, _ = make_control()
    control.mode = Mode.CRUISE
    assert control.cost_function([[500.0] * 4] * HORIZON) == []


def test_costs_are_non_negative():
    control, drone, _ = make_control()
    control.mode = Mode.LOITER
    drone.state.airborne = True
    cost = control.cost_function([[900.0, 100.0, 900.0, 100.0]] * HORIZON)
    assert len(cost) == control.num_objectives
    assert all(c >= 0 for c in cost)


def test_update_follows_thrust_input():
    control, _, guidance = make_control()
    control.mode = Mode.ANGLE
    assert not guidance.usage.thrust
    assert guidance.usage.position.z

    control.input(Input(y1=50))
    control.update()
    assert guidance.usage.thrust
    assert not guidance.usage.velocity.z and not guidance.usage.position.z

    control.input(Input(y1=0))
    control.update()
    assert not guidance.usage.thrust
    assert guidance.usage.position.z