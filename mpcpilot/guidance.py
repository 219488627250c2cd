"""Setpoints and the flags that say which of them are being tracked."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from .core import MAX_DEVIATION, Axes, Vector3


@dataclass
class Setpoint:
    """Target values for the vehicle."""

    position: Vector3 = field(default_factory=Vector3)
    velocity: Vector3 = field(default_factory=Vector3)
    orientation: Vector3 = field(default_factory=Vector3)
    rate: Vector3 = field(default_factory=Vector3)
    thrust: int = 0

    def copy(self) -> Setpoint:
        """Independent deep copy."""
        return copy.deepcopy(self)


@dataclass
class Usage:
    """Which parts of the setpoint are currently tracked."""

    position: Axes = field(default_factory=Axes)
    velocity: Axes = field(default_factory=Axes)
    orientation: Axes = field(default_factory=Axes)
    rate: Axes = field(default_factory=Axes)
    thrust: bool = False

    def copy(self) -> Usage:
        """Independent deep copy."""
        return copy.deepcopy(self)


def _vectors(setpoint: Setpoint) -> tuple[Vector3, Vector3, Vector3, Vector3]:
    return setpoint.position, setpoint.velocity, setpoint.orientation, setpoint.rate


class Guidance:
    """Holds the active setpoint, optionally low-pass filtering new ones."""

    def __init__(self, input_filter: bool = False) -> None:
        self.setpoint = Setpoint()
        self.usage = Usage()
        self.input_filter = input_filter
        self._deviation = False

    @property
    def deviation(self) -> bool:
        """Whether the last new setpoint jumped by more than the allowed deviation."""
        return self._deviation

    def set_setpoint(self, setpoint: Setpoint, alpha: float = 0.1) -> None:
        """Adopt a new setpoint, filtered unless it deviates too far."""
        self._deviation = self._deviates(setpoint, MAX_DEVIATION)
        if self.input_filter and not self._deviation:
            self._filter(setpoint, alpha)
        else:
            self.setpoint = setpoint.copy()

    def _deviates(self, setpoint: Setpoint, threshold: float) -> bool:
        t = float(threshold)
        vectors_deviate = any(
            abs(old - new) > t
            for old_vec, new_vec in zip(_vectors(self.setpoint), _vectors(setpoint))
            for old, new in zip(old_vec, new_vec)
        )
        return vectors_deviate or abs(self.setpoint.thrust - setpoint.thrust) > t

    def _filter(self, setpoint: Setpoint, alpha: float) -> None:
        def blend(new: Vector3, old: Vector3) -> Vector3:
            return new * alpha + old * (1 - alpha)

        current = self.setpoint
        self.setpoint = Setpoint(
            position=blend(setpoint.position, current.position),
            velocity=blend(setpoint.velocity, current.velocity),
            orientation=blend(setpoint.orientation, current.orientation),
            rate=blend(setpoint.rate, current.rate),
            thrust=int(float(setpoint.thrust) * alpha + float(current.thrust) * (1 - alpha)),
        )