"""Cost terms and setpoint stabilisation shared by the control modes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .aircraft import Aircraft
from .core import EPSILON, Input, State, TimeStep, Vector3
from .guidance import Guidance, Setpoint, Usage

INPUT_THRESHOLD = 1.0
VELOCITY_THRESHOLD = 0.1
RATE_THRESHOLD = 5.0


@dataclass
class References:
    """What a control mode needs to evaluate a predicted state."""

    aircraft: Aircraft
    dt: TimeStep
    guidance: Guidance

    @property
    def step(self) -> float:
        """Current time step in seconds."""
        return float(self.dt)


class ModeBehaviour:
    """Behaviour of one control mode.

    The class flags say which hooks the mode provides; the controller skips
    the hooks a mode does not provide.
    """

    num_objectives: ClassVar[int] = 0
    accepts_input: ClassVar[bool] = True
    sets_usage: ClassVar[bool] = True
    stabilizes: ClassVar[bool] = True

    def calculate_cost(self, refs: References, state: State) -> list[float]:
        """Cost of each objective for the given state."""
        return [0.0] * self.num_objectives

    def input(self, setpoint: Setpoint, user_input: Input) -> None:
        """Write the pilot's input into the setpoint."""

    def init_usage(self, usage: Usage) -> None:
        """Mark the setpoint parts the mode tracks from the start."""

    def update_dependencies(self, guidance: Guidance, state: State) -> None:
        """Switch tracked setpoint parts as the vehicle settles."""


def add_cost(setpoint: float, current: float, first_derivative: float, over: float) -> float:
    """Distance to the setpoint, penalising wrong-way motion and overshoot."""
    diff = setpoint - current
    out = abs(diff)
    if diff * first_derivative < -EPSILON:
        out += abs(first_derivative)
    if over > EPSILON:
        out += abs(diff) + 0.01 * abs(over)
    return out


def static_thrust_cost(aircraft: Aircraft, target_thrust: int, num_outputs: int) -> float:
    """Distance of the mean relative output (in percent) to the target thrust."""
    outputs = aircraft.state.output
    thrust = sum(outputs[j] / aircraft.max_output(j) for j in range(num_outputs))
    thrust /= num_outputs
    return abs(thrust * 100 - float(target_thrust))


def overshoot_error(speed: Vector3, max_deceleration: Vector3, distance: Vector3) -> Vector3:
    """How far the current speed exceeds what can still be braked within the distance."""
    distance = Vector3(abs(distance.x), abs(distance.y), abs(distance.z))
    diff = speed * speed - max_deceleration * distance * 0.25 * 2
    return Vector3(max(diff.x, 0.0), max(diff.y, 0.0), max(diff.z, 0.0))


def stabilize_thrust(guidance: Optional[Guidance], state: State) -> None:
    """Hand over from raw thrust to vertical velocity and then altitude hold."""
    if guidance is None:
        return
    usage = guidance.usage
    if guidance.setpoint.thrust == 0:
        if usage.thrust:
            usage.thrust = False
            usage.velocity.z = True
            guidance.setpoint.velocity.z = 0.0
        if usage.velocity.z and abs(state.velocity.z) < VELOCITY_THRESHOLD:
            usage.velocity.z = False
            usage.position.z = True
            guidance.setpoint.position.z = state.position.z
    else:
        usage.thrust = True
        usage.velocity.z = False
        usage.position.z = False


def _stabilize_velocity(guidance: Optional[Guidance], state: State, axis: str) -> None:
    if guidance is None:
        return
    usage = guidance.usage
    if abs(getattr(guidance.setpoint.velocity, axis)) < INPUT_THRESHOLD:
        if getattr(usage.velocity, axis) and abs(getattr(state.velocity, axis)) < VELOCITY_THRESHOLD:
            setattr(usage.velocity, axis, False)
            setattr(usage.position, axis, True)
            setattr(guidance.setpoint.position, axis, getattr(state.position, axis))
    else:
        setattr(usage.velocity, axis, True)
        setattr(usage.position, axis, False)


def _stabilize_orientation(
    guidance: Optional[Guidance], state: State, axis: str, velocity_axis: str
) -> None:
    if guidance is None:
        return
    usage = guidance.usage
    if abs(getattr(guidance.setpoint.orientation, axis)) < INPUT_THRESHOLD:
        if getattr(usage.orientation, axis):
            setattr(usage.orientation, axis, False)
            setattr(usage.velocity, velocity_axis, True)
            setattr(guidance.setpoint.velocity, velocity_axis, 0.0)
        if (
            getattr(usage.velocity, velocity_axis)
            and abs(getattr(state.velocity, velocity_axis)) < VELOCITY_THRESHOLD
        ):
            setattr(usage.velocity, velocity_axis, False)
            setattr(usage.position, velocity_axis, True)
            setattr(guidance.setpoint.position, velocity_axis, getattr(state.position, velocity_axis))
    else:
        setattr(usage.orientation, axis, True)
        setattr(usage.position, velocity_axis, False)
        setattr(usage.velocity, velocity_axis, False)


def _stabilize_rate(guidance: Optional[Guidance], state: State, axis: str) -> None:
    if guidance is None:
        return
    usage = guidance.usage
    if abs(getattr(guidance.setpoint.rate, axis)) < INPUT_THRESHOLD:
        if getattr(usage.rate, axis) and abs(getattr(state.angular_rates, axis)) < RATE_THRESHOLD:
            setattr(usage.rate, axis, False)
            setattr(usage.orientation, axis, True)
            setattr(guidance.setpoint.orientation, axis, getattr(state.orientation, axis))
    else:
        setattr(usage.rate, axis, True)
        setattr(usage.orientation, axis, False)


def stabilize_velocity_x(guidance: Optional[Guidance], state: State) -> None:
    """Hold x position once the x velocity input is released and the vehicle stopped."""
    _stabilize_velocity(guidance, state, "x")


def stabilize_velocity_y(guidance: Optional[Guidance], state: State) -> None:
    """Hold y position once the y velocity input is released and the vehicle stopped."""
    _stabilize_velocity(guidance, state, "y")


def stabilize_velocity_z(guidance: Optional[Guidance], state: State) -> None:
    """Hold altitude once the vertical velocity input is released and the vehicle stopped."""
    _stabilize_velocity(guidance, state, "z")


def stabilize_orientation_x(guidance: Optional[Guidance], state: State) -> None:
    """Turn a released roll input into stopping, then holding, the y position."""
    _stabilize_orientation(guidance, state, "x", "y")


def stabilize_orientation_y(guidance: Optional[Guidance], state: State) -> None:
    """Turn a released pitch input into stopping, then holding, the x position."""
    _stabilize_orientation(guidance, state, "y", "x")


def stabilize_angular_rate_x(guidance: Optional[Guidance], state: State) -> None:
    """Hold roll once the roll-rate input is released and the rotation slowed."""
    _stabilize_rate(guidance, state, "x")


def stabilize_angular_rate_y(guidance: Optional[Guidance], state: State) -> None:
    """Hold pitch once the pitch-rate input is released and the rotation slowed."""
    _stabilize_rate(guidance, state, "y")


def stabilize_angular_rate_z(guidance: Optional[Guidance], state: State) -> None:
    """Hold heading once the yaw-rate input is released and the rotation slowed."""
    _stabilize_rate(guidance, state, "z")