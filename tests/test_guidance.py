import pytest

from mpcpilot.core import Axes, Vector3
from mpcpilot.guidance import Guidance, Setpoint, Usage


def test_defaults():
    guidance = Guidance()
    assert guidance.setpoint == Setpoint()
    assert guidance.usage == Usage()
    assert guidance.input_filter is False
    assert guidance.deviation is False


def test_unfiltered_setpoint_is_taken_as_is():
    guidance = Guidance()
    target = Setpoint(position=Vector3(1.0, 2.0, 3.0), thrust=2)
    guidance.set_setpoint(target)
    assert guidance.setpoint == target


def test_stored_setpoint_is_a_copy():
    guidance = Guidance()
    target = Setpoint(position=Vector3(1.0, 2.0, 3.0))
    guidance.set_setpoint(target)
    target.position.x = 50.0
    assert guidance.setpoint.position.x == 1.0


def test_filter_moves_part_way_toward_small_change():
    guidance = Guidance(input_filter=True)
    guidance.set_setpoint(Setpoint(orientation=Vector3(2.0, 0.0, 0.0)), alpha=0.3)
    assert guidance.deviation is False
    assert 0.0 < guidance.setpoint.orientation.x < 2.0


def test_filter_with_alpha_one_reaches_target():
    guidance = Guidance(input_filter=True)
    target = Setpoint(velocity=Vector3(1.0, -1.5, 3.0))
    guidance.set_setpoint(target, alpha=1.0)
    assert list(guidance.setpoint.velocity) == pytest.approx(list(target.velocity))


def test_filter_converges_after_repeated_updates():
    guidance = Guidance(input_filter=True)
    target = Setpoint(rate=Vector3(3.0, 0.0, -3.0))
    for _ in range(200):
        guidance.set_setpoint(target)
    assert list(guidance.setpoint.rate) == pytest.approx(list(target.rate), abs=1e-6)


def test_filtered_thrust_truncates():
    guidance = Guidance(input_filter=True)
    guidance.set_setpoint(Setpoint(thrust=3), alpha=0.1)
    assert guidance.setpoint.thrust == 0


def test_large_jump_bypasses_filter():
    guidance = Guidance(input_filter=True)
    target = Setpoint(position=Vector3(-30.0, 20.0, 0.0))
    guidance.set_setpoint(target)
    assert guidance.deviation is True
    assert guidance.setpoint == target


def test_thrust_jump_counts_as_deviation():
    guidance = Guidance(input_filter=True)
    guidance.set_setpoint(Setpoint(thrust=50))
    assert guidance.deviation is True
    assert guidance.setpoint.thrust == 50


def test_deviation_resets_on_small_change():
    guidance = Guidance(input_filter=True)
    guidance.set_setpoint(Setpoint(thrust=50))
    guidance.set_setpoint(Setpoint(thrust=51))
    assert guidance.deviation is False


def test_usage_copy_is_independent():
    usage = Usage(position=Axes(True, False, True), thrust=True)
    clone = usage.copy()
    clone.position.x = False
    assert usage.position.x is True
    assert clone == Usage(position=Axes(False, False, True), thrust=True)


def test_setpoint_copy_is_independent():
    setpoint = Setpoint(rate=Vector3(1.0, 2.0, 3.0), thrust=4)
    clone = setpoint.copy()
    clone.rate.z = 9.0
    assert setpoint.rate.z == 3.0
    assert clone.thrust == setpoint.thrust