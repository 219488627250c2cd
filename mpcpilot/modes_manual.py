"""Control modes driven directly by the pilot, plus idle and reserved modes."""

from __future__ import annotations

from typing import ClassVar

from .core import EPSILON, HORIZON, Axes, Input, State, Vector3, clamp
from .guidance import Guidance, Setpoint, Usage
from .stabilization import (
    ModeBehaviour,
    References,
    add_cost,
    overshoot_error,
    stabilize_angular_rate_z,
    stabilize_thrust,
    static_thrust_cost,
)


class Acro(ModeBehaviour):
    """Pilot sets the angular rates on all axes and the total thrust."""

    num_objectives: ClassVar[int] = 4

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        aircraft = refs.aircraft
        setpoint = refs.guidance.setpoint
        max_deceleration = aircraft.max_angular_acc()
        brake_window = refs.step * HORIZON

        cost = [static_thrust_cost(aircraft, setpoint.thrust, aircraft.output_size)]
        for target, rate, decel in zip(setpoint.rate, state.angular_rates, max_deceleration):
            value = abs(target - rate)
            error = abs(rate) - decel * brake_window
            if error > EPSILON:
                value += error
            cost.append(value)
        return cost

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        setpoint.rate = Vector3(float(user_input.x2), float(user_input.y2), float(user_input.x1))
        setpoint.thrust = user_input.y1

    def init_usage(self, usage: Usage) -> None:
        usage.rate = Axes(True, True, True)
        usage.thrust = True

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        """Rates are held as commanded; nothing switches over."""


def _limit_violations(state: State, max_roll: float, max_pitch: float, max_yaw: float) -> float:
    violations = 0.0
    if abs(state.orientation.x) > max_roll:
        violations += abs(state.orientation.x) - max_roll
    if abs(state.orientation.y) > max_pitch:
        violations += abs(state.orientation.y) - max_pitch
    if abs(state.angular_rates.z) > max_yaw:
        violations += abs(state.angular_rates.z) - max_yaw
    return violations


class Angle(ModeBehaviour):
    """Pilot sets roll and pitch angles, yaw rate and thrust.

    A centred thrust stick brings the vertical velocity to zero and then
    holds the altitude reached.
    """

    num_objectives: ClassVar[int] = 5
    MAX_PITCH: ClassVar[float] = 90.0
    MAX_ROLL: ClassVar[float] = 90.0
    MAX_YAW: ClassVar[float] = 200.0

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        aircraft = refs.aircraft
        usage = refs.guidance.usage
        setpoint = refs.guidance.setpoint

        overshoot = overshoot_error(
            state.angular_rates, aircraft.max_angular_acc(), setpoint.orientation - state.orientation
        )
        max_acc = aircraft.max_acc(False)

        cost = [0.0] * self.num_objectives
        cost[0] = self._constraint_violations(state, refs)

        # thrust -> velocity z -> position z
        if usage.thrust:
            cost[1] = static_thrust_cost(aircraft, setpoint.thrust, aircraft.output_size)
        elif usage.velocity.z:
            error = abs(state.velocity.z) - max_acc.z * refs.step * HORIZON
            cost[1] = add_cost(setpoint.velocity.z, state.velocity.z, state.acceleration.z, error)
        elif usage.position.z:
            cost[1] = add_cost(setpoint.position.z, state.position.z, state.velocity.z, -1)

        cost[2] = add_cost(
            setpoint.orientation.x, state.orientation.x, state.angular_rates.x, overshoot.x
        )
        cost[3] = add_cost(
            setpoint.orientation.y, state.orientation.y, state.angular_rates.y, overshoot.y
        )

        # yaw rate -> yaw
        if usage.rate.z:
            cost[4] = add_cost(setpoint.rate.z, state.angular_rates.z, state.angular_acc.z, -1)
        elif usage.orientation.z:
            cost[4] = add_cost(
                setpoint.orientation.z, state.orientation.z, state.angular_rates.z, overshoot.z
            )
        return cost

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        setpoint.orientation.x = float(clamp(user_input.x2, -self.MAX_ROLL, self.MAX_ROLL))
        setpoint.orientation.y = float(clamp(user_input.y2, -self.MAX_PITCH, self.MAX_PITCH))
        setpoint.rate.z = float(clamp(user_input.x1, -self.MAX_YAW, self.MAX_YAW))
        setpoint.thrust = int(clamp(user_input.y1, -100, 100))

    def init_usage(self, usage: Usage) -> None:
        usage.orientation = Axes(True, True, False)
        usage.rate.z = True
        usage.thrust = True

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        stabilize_angular_rate_z(guidance, state)
        stabilize_thrust(guidance, state)

    def _constraint_violations(self, state: State, refs: References) -> float:
        violations = _limit_violations(state, self.MAX_ROLL, self.MAX_PITCH, self.MAX_YAW)
        if refs.guidance.usage.position.z:
            error = refs.aircraft.max_acc(True).z
            if error < 0:
                violations += abs(error)
        return violations


class Position(ModeBehaviour):
    """Pilot sets a target position and heading."""

    num_objectives: ClassVar[int] = 5
    MAX_PITCH: ClassVar[float] = 90.0
    MAX_ROLL: ClassVar[float] = 90.0

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        setpoint = refs.guidance.setpoint
        p_error = overshoot_error(
            state.velocity, refs.aircraft.max_acc(False), setpoint.position - state.position
        )

        cost = [self._constraint_violations(state)]
        for current, target, over, speed in zip(
            state.position, setpoint.position, p_error, state.velocity
        ):
            value = abs(current - target)
            if over > EPSILON:
                value += abs(speed)
            cost.append(value)
        cost.append(abs(state.orientation.z - setpoint.orientation.z))
        return cost

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        setpoint.position = Vector3(
            float(user_input.x2), float(user_input.y2), float(user_input.y1)
        )
        setpoint.orientation.z = float(user_input.x1)

    def init_usage(self, usage: Usage) -> None:
        usage.position = Axes(True, True, True)
        usage.orientation.z = True

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        """The position setpoint is held as given; nothing switches over."""

    def _constraint_violations(self, state: State) -> float:
        violations = 0.0
        if abs(state.orientation.x) > self.MAX_ROLL:
            violations += abs(state.orientation.x) - self.MAX_ROLL
        if abs(state.orientation.y) > self.MAX_PITCH:
            violations += abs(state.orientation.y) - self.MAX_ROLL
        return violations


class Idle(ModeBehaviour):
    """Drives every output down to its minimum."""

    num_objectives: ClassVar[int] = 1
    accepts_input: ClassVar[bool] = False
    sets_usage: ClassVar[bool] = False
    stabilizes: ClassVar[bool] = False

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        aircraft = refs.aircraft
        excess = 0.0
        for index in range(aircraft.output_size):
            minimum = aircraft.min_output(index)
            if state.output[index] > minimum:
                excess += state.output[index] - minimum
        return [excess]


class Cruise(ModeBehaviour):
    """Reserved mode without objectives."""

    num_objectives: ClassVar[int] = 0

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        return []

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        """Cruise ignores pilot input."""

    def init_usage(self, usage: Usage) -> None:
        """Cruise tracks nothing."""

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        """Cruise has nothing to stabilise."""


class Waypoint(ModeBehaviour):
    """Reserved mode without objectives that takes no pilot input."""

    num_objectives: ClassVar[int] = 0
    accepts_input: ClassVar[bool] = False

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        return []

    def init_usage(self, usage: Usage) -> None:
        """Waypoint tracking marks nothing up front."""

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        """Waypoint tracking has nothing to stabilise."""