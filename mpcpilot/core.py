"""Shared value types, configuration constants and numeric helpers."""

from __future__ import annotations

import copy
import math
import random
from dataclasses import dataclass, field, fields
from typing import Iterable, Iterator, Union

# Physical constants
GRAVITY = 9.80665
EPSILON = 1e-6
PI = 3.14159265359
DEG_TO_RAD = PI / 180
RAD_TO_DEG = 180 / PI

# Aircraft configuration
MAX_OUTPUTS = 4

# Controller configuration
HORIZON = 5
MAX_OBJECTIVES = 10
USE_WARM_START = True
MAX_DEVIATION = 4

# Swarm optimiser configuration
PARTICLES = 30
ITERATIONS = PARTICLES
PARETO_FRONT_SIZE = PARTICLES
STAGNATION_LIMIT = ITERATIONS
PARTICLE_PROBABILITY = 0.0
INDIVIDUAL_PROBABILITY = 0.0
WARM_START_FACTOR = 0.5

Number = Union[int, float]


@dataclass
class Vector3:
    """Three-component vector; x/y/z double as roll/pitch/yaw for angles."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Vector3 | Number) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, (int, float)):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, other: Number) -> Vector3:
        if isinstance(other, (int, float)):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __truediv__(self, other: Vector3) -> Vector3:
        return Vector3(self.x / other.x, self.y / other.y, self.z / other.z)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction, or the zero vector."""
        length = self.norm()
        if length == 0:
            return Vector3(0.0, 0.0, 0.0)
        inverse = 1.0 / length
        return Vector3(self.x * inverse, self.y * inverse, self.z * inverse)


@dataclass
class Axes:
    """One flag per axis."""

    x: bool = False
    y: bool = False
    z: bool = False


@dataclass
class Input:
    """Stick positions of a two-stick controller."""

    x1: int = 0  # left stick: left <-> right
    y1: int = 0  # left stick: down <-> up
    x2: int = 0  # right stick: left <-> right
    y2: int = 0  # right stick: down <-> up

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, int(getattr(self, f.name)))


@dataclass
class State:
    """Kinematic state of a vehicle and its current actuator outputs."""

    output: list[int] = field(default_factory=lambda: [0] * MAX_OUTPUTS)
    airborne: bool = False
    position: Vector3 = field(default_factory=Vector3)        # m
    velocity: Vector3 = field(default_factory=Vector3)        # m/s
    acceleration: Vector3 = field(default_factory=Vector3)    # m/s^2
    orientation: Vector3 = field(default_factory=Vector3)     # deg
    angular_rates: Vector3 = field(default_factory=Vector3)   # deg/s
    angular_acc: Vector3 = field(default_factory=Vector3)     # deg/s^2

    def copy(self) -> State:
        """Independent deep copy."""
        return copy.deepcopy(self)


@dataclass
class TimeStep:
    """Mutable time step in seconds, shared between components."""

    value: float = 0.01

    def __float__(self) -> float:
        return float(self.value)


def float_to_motor(values: Iterable[float]) -> list[int]:
    """Round values to motor commands; negative values become 0."""
    return [0 if v < 0 else math.floor(v + 0.5) for v in values]


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def uniform_random_number(low: float, high: float) -> float:
    """Uniformly distributed random number in [low, high]."""
    return low + (high - low) * random.random()


def normal_distribution(mu: float, sigma: float) -> float:
    """Normally distributed random number (Box-Muller)."""
    u1 = uniform_random_number(1e-10, 1.0)
    u2 = uniform_random_number(0.0, 1.0)
    z = math.sqrt(-2 * math.log(u1)) * math.cos(2 * PI * u2)
    return mu + sigma * z


def body_to_inertial(vector: Vector3, orientation: Vector3) -> Vector3:
    """Rotate a body-frame vector into the inertial frame.

    Inertial frame: x+ forward, y+ left, z+ up. Orientation is in degrees,
    roll+ rotates to y-, pitch+ rotates to x+, yaw+ turns right.
    """
    o = orientation * DEG_TO_RAD
    cr, sr = math.cos(o.x), math.sin(o.x)
    cp, sp = math.cos(o.y), math.sin(o.y)
    cy, sy = math.cos(o.z), math.sin(o.z)

    rotation = (
        (cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr),
        (sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr),
        (-sp, cp * sr, cp * cr),
    )
    x, y, z = (row[0] * vector.x + row[1] * vector.y + row[2] * vector.z for row in rotation)
    return Vector3(x, y, z)