"""Control modes in which the controller assists the pilot by holding altitude or position."""

from __future__ import annotations

import math
from typing import ClassVar

from .core import HORIZON, Axes, Input, State, clamp
from .guidance import Guidance, Setpoint, Usage
from .stabilization import (
    ModeBehaviour,
    References,
    add_cost,
    overshoot_error,
    stabilize_angular_rate_z,
    stabilize_orientation_x,
    stabilize_orientation_y,
    stabilize_velocity_z,
)


def _constraint_violations(
    state: State, refs: References, max_roll: float, max_pitch: float, max_yaw: float
) -> float:
    violations = 0.0
    if abs(state.orientation.x) > max_roll:
        violations += abs(state.orientation.x) - max_roll
    if abs(state.orientation.y) > max_pitch:
        violations += abs(state.orientation.y) - max_pitch
    if abs(state.angular_rates.z) > max_yaw:
        violations += abs(state.angular_rates.z) - max_yaw

    if refs.guidance.usage.position.z:
        error = refs.aircraft.max_acc(True).z
        if error < 0:
            violations += abs(error)
    return violations


def _braking_error(
    tilt: float, speed: float, acceleration: float, max_angular_decel: float, dt: float
) -> float:
    """How far the tilt exceeds what can be levelled before the vehicle stops."""
    denominator = abs(acceleration) * dt
    if denominator == 0:
        remaining_steps = math.nan if speed == 0 else math.inf
    else:
        remaining_steps = abs(speed) / denominator
    return abs(tilt) - max_angular_decel * dt * dt * remaining_steps


def _apply_assisted_input(
    setpoint: Setpoint,
    user_input: Input,
    max_roll: float,
    max_pitch: float,
    max_yaw: float,
    max_vertical_vel: float,
) -> None:
    setpoint.velocity.z = max_vertical_vel * (clamp(user_input.y1, -100, 100) / 100.0)
    setpoint.orientation.x = float(clamp(user_input.x2, -max_roll, max_roll))
    setpoint.orientation.y = float(clamp(user_input.y2, -max_pitch, max_pitch))
    setpoint.rate.z = float(clamp(user_input.x1, -max_yaw, max_yaw))


def _apply_assisted_usage(usage: Usage) -> None:
    usage.orientation = Axes(True, True, False)
    usage.rate.z = True
    usage.velocity.z = True


class _AssistedMode(ModeBehaviour):
    """Pilot sets roll and pitch angles, yaw rate and vertical velocity."""

    num_objectives: ClassVar[int] = 5
    MAX_PITCH: ClassVar[float] = 90.0
    MAX_ROLL: ClassVar[float] = 90.0
    MAX_YAW: ClassVar[float] = 200.0
    MAX_VERTICAL_VEL: ClassVar[float] = 3.0  # m/s

    def _apply_input(self, setpoint: Setpoint, user_input: Input) -> None:
        _apply_assisted_input(
            setpoint, user_input, self.MAX_ROLL, self.MAX_PITCH, self.MAX_YAW, self.MAX_VERTICAL_VEL
        )

    def _violations(self, state: State, refs: References) -> float:
        return _constraint_violations(state, refs, self.MAX_ROLL, self.MAX_PITCH, self.MAX_YAW)


class AltHold(_AssistedMode):
    """Pilot sets roll, pitch, yaw rate and vertical velocity.

    A centred thrust stick brings the vertical velocity to zero and then
    holds the altitude reached.
    """

    MAX_YAW: ClassVar[float] = 50.0

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        aircraft = refs.aircraft
        usage = refs.guidance.usage
        setpoint = refs.guidance.setpoint

        o_error = overshoot_error(
            state.angular_rates, aircraft.max_angular_acc(), setpoint.orientation - state.orientation
        )
        p_error = overshoot_error(
            state.velocity, aircraft.max_acc(False), setpoint.position - state.position
        )
        v_decel = aircraft.max_acc(False)

        cost = [0.0] * self.num_objectives
        cost[0] = self._violations(state, refs) ** 2
        cost[1] = add_cost(
            setpoint.orientation.x, state.orientation.x, state.angular_rates.x, o_error.x
        )
        cost[2] = add_cost(
            setpoint.orientation.y, state.orientation.y, state.angular_rates.y, o_error.y
        )

        # velocity z -> position z
        if usage.velocity.z:
            error = abs(state.velocity.z) - v_decel.z * refs.step * HORIZON
            cost[3] = add_cost(setpoint.velocity.z, state.velocity.z, state.acceleration.z, error)
        elif usage.position.z:
            cost[3] = add_cost(setpoint.position.z, state.position.z, state.velocity.z, p_error.z)

        # yaw rate -> yaw
        if usage.rate.z:
            cost[4] = add_cost(setpoint.rate.z, state.angular_rates.z, state.angular_acc.z, -1)
        elif usage.orientation.z:
            cost[4] = add_cost(
                setpoint.orientation.z, state.orientation.z, state.angular_rates.z, o_error.z
            )
        return cost

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        self._apply_input(setpoint, user_input)

    def init_usage(self, usage: Usage) -> None:
        _apply_assisted_usage(usage)

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        stabilize_velocity_z(guidance, state)
        stabilize_angular_rate_z(guidance, state)


class Loiter(_AssistedMode):
    """Pilot sets roll, pitch, yaw rate and vertical velocity.

    Released sticks bring the vehicle to a stop, after which it holds its
    position, heading and altitude until the pilot commands otherwise.
    """

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        aircraft = refs.aircraft
        usage = refs.guidance.usage
        setpoint = refs.guidance.setpoint
        dt = refs.step

        o_error = overshoot_error(
            state.angular_rates, aircraft.max_angular_acc(), setpoint.orientation - state.orientation
        )
        p_error = overshoot_error(
            state.velocity, aircraft.max_acc(False), setpoint.position - state.position
        )
        v_decel = aircraft.max_acc(False)
        r_decel = aircraft.max_angular_acc()

        cost = [0.0] * self.num_objectives
        cost[0] = self._violations(state, refs)

        # velocity z -> position z
        if usage.velocity.z:
            error = abs(state.velocity.z) - v_decel.z * dt * HORIZON
            cost[1] = add_cost(setpoint.velocity.z, state.velocity.z, state.acceleration.z, error)
        elif usage.position.z:
            cost[1] = add_cost(setpoint.position.z, state.position.z, state.velocity.z, p_error.z)

        # roll -> velocity y -> position y
        if usage.orientation.x:
            cost[2] = add_cost(
                setpoint.orientation.x, state.orientation.x, state.angular_rates.x, o_error.x
            )
        elif usage.velocity.y:
            error = _braking_error(
                state.orientation.x, state.velocity.y, state.acceleration.y, r_decel.x, dt
            )
            cost[2] = add_cost(setpoint.velocity.y, state.velocity.y, state.acceleration.y, error)
        elif usage.position.y:
            cost[2] = add_cost(setpoint.position.y, state.position.y, state.velocity.y, p_error.y)

        # pitch -> velocity x -> position x
        if usage.orientation.y:
            cost[3] = add_cost(
                setpoint.orientation.y, state.orientation.y, state.angular_rates.y, o_error.y
            )
        elif usage.velocity.x:
            error = _braking_error(
                state.orientation.y, state.velocity.x, state.acceleration.x, r_decel.y, dt
            )
            cost[3] = add_cost(setpoint.velocity.x, state.velocity.x, state.acceleration.x, error)
        elif usage.position.x:
            cost[3] = add_cost(setpoint.position.x, state.position.x, state.velocity.x, p_error.x)

        # yaw rate -> yaw
        if usage.rate.z:
            cost[4] = add_cost(setpoint.rate.z, state.angular_rates.z, state.angular_acc.z, -1)
        elif usage.orientation.z:
            cost[4] = add_cost(
                setpoint.orientation.z, state.orientation.z, state.angular_rates.z, o_error.z
            )
        return cost

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        self._apply_input(setpoint, user_input)

    def init_usage(self, usage: Usage) -> None:
        _apply_assisted_usage(usage)

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        stabilize_orientation_x(guidance, state)
        stabilize_orientation_y(guidance, state)
        stabilize_angular_rate_z(guidance, state)
        stabilize_velocity_z(guidance, state)