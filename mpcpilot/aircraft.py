"""Vehicle models used for prediction and simulation."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from .core import (
    GRAVITY,
    RAD_TO_DEG,
    PI,
    State,
    Vector3,
    body_to_inertial,
    clamp,
)


def _wrap_360(angle: float) -> float:
    return math.fmod(angle, 360.0)


def _wrap_180(angle: float) -> float:
    angle = _wrap_360(angle)
    if angle > 180:
        angle -= 360
    elif angle < -180:
        angle += 360
    return angle


def limit_to_360(v: Vector3) -> Vector3:
    """Reduce each angle modulo 360 degrees, keeping its sign."""
    return Vector3(_wrap_360(v.x), _wrap_360(v.y), _wrap_360(v.z))


def limit_to_180(v: Vector3) -> Vector3:
    """Wrap each angle into the range [-180, 180] degrees."""
    return Vector3(_wrap_180(v.x), _wrap_180(v.y), _wrap_180(v.z))


class Aircraft(ABC):
    """A vehicle the controller can predict and command."""

    def __init__(self) -> None:
        self.state = State()

    @abstractmethod
    def simulate(self, dt: float, state: State) -> None:
        """Advance the given state by one time step, in place."""

    @abstractmethod
    def mode_valid(self, mode: int) -> bool:
        """Whether the vehicle supports the given control mode."""

    @property
    @abstractmethod
    def output_size(self) -> int:
        """Number of control outputs."""

    @abstractmethod
    def min_output(self, index: int) -> int:
        """Smallest value of the output at index."""

    @abstractmethod
    def max_output(self, index: int) -> int:
        """Largest value of the output at index."""

    @abstractmethod
    def max_acc(self, specific: bool) -> Vector3:
        """Maximum linear acceleration."""

    @abstractmethod
    def max_angular_acc(self) -> Vector3:
        """Maximum angular acceleration."""


class Drone(Aircraft):
    """Quadcopter with motors ordered front-left, front-right, back-left, back-right."""

    MAX_OUTPUT = (1000, 1000, 1000, 1000)
    MIN_OUTPUT = (10, 10, 10, 10)

    MASS = 0.8            # kg
    DISTANCE_X = 0.1      # m, motor to centre of mass
    DISTANCE_Y = 0.1      # m
    INERTIA_X = 0.00295   # kg m^2
    INERTIA_Y = 0.00295
    INERTIA_Z = 0.0059

    MAX_THRUST_P_M = 650.0  # g per motor
    KV_RATING = 5000.0
    MAX_AMPS = 4.4

    NUM_OUTPUTS = 4
    MAX_THRUST = MAX_THRUST_P_M * (9.81 / 1000) * NUM_OUTPUTS / MASS  # m/s^2
    THRUST_COEFF = MAX_THRUST_P_M * (9.81 / 1000)
    THRUST_COEFF_X = THRUST_COEFF * DISTANCE_X
    THRUST_COEFF_Y = THRUST_COEFF * DISTANCE_Y
    KT = 60.0 / (2.0 * PI * KV_RATING)
    KT_OPT = KT * MAX_AMPS

    INV_MASS = 1.0 / MASS
    INV_INERTIA = Vector3(1.0 / INERTIA_X, 1.0 / INERTIA_Y, 1.0 / INERTIA_Z)

    @property
    def output_size(self) -> int:
        return self.NUM_OUTPUTS

    def _index(self, index: int) -> int:
        return int(clamp(index, 0, self.NUM_OUTPUTS - 1))

    def min_output(self, index: int) -> int:
        return self.MIN_OUTPUT[self._index(index)]

    def max_output(self, index: int) -> int:
        return self.MAX_OUTPUT[self._index(index)]

    def mode_valid(self, mode: int) -> bool:
        return True

    def simulate(self, dt: float, state: State) -> None:
        relative = [out / maximum for out, maximum in zip(state.output, self.MAX_OUTPUT)]
        thrust = self.THRUST_COEFF * sum(relative) * self.INV_MASS

        state.acceleration = body_to_inertial(Vector3(0.0, 0.0, thrust), state.orientation)
        state.acceleration.z -= GRAVITY

        # A grounded vehicle stays put until its thrust lifts it off.
        if state.acceleration.z > 0:
            state.airborne = True
        if not state.airborne:
            return

        state.position = state.position + state.velocity * dt + state.acceleration * dt * dt * 0.5
        state.velocity = state.velocity + state.acceleration * dt

        fl, fr, bl, br = relative
        torque = Vector3(
            self.THRUST_COEFF_X * (fl + bl - fr - br),
            self.THRUST_COEFF_Y * (bl + br - fl - fr),
            self.KT_OPT * (-fl + fr + bl - br),
        )

        state.angular_acc = torque * self.INV_INERTIA * RAD_TO_DEG
        state.orientation = (
            state.orientation + state.angular_rates * dt + state.angular_acc * dt * dt * 0.5
        )
        state.angular_rates = state.angular_rates + state.angular_acc * dt
        state.orientation = limit_to_180(state.orientation)

    def max_acc(self, specific: bool) -> Vector3:
        if specific:
            out = body_to_inertial(Vector3(0.0, 0.0, self.MAX_THRUST), self.state.orientation)
            out.z -= GRAVITY
            return out
        limit = self.MAX_THRUST * 0.8
        if self.state.velocity.z <= 0:
            return Vector3(limit, limit, limit)
        return Vector3(limit, limit, GRAVITY * 0.8)

    def max_angular_acc(self) -> Vector3:
        return Vector3(9000.0, 9000.0, 50.0)