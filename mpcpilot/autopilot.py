"""Top-level autopilot tying guidance, navigation and the predictive controller together."""

from __future__ import annotations

from typing import Optional

from .aircraft import Aircraft
from .control_mode import Mode
from .core import Input, TimeStep
from .guidance import Guidance
from .mpc import MPC
from .navigation import Navigation, SensorData
from .optimization import Strategy


class Autopilot:
    """Flies an aircraft by turning pilot input into motor outputs."""

    def __init__(
        self, aircraft: Aircraft, dt: TimeStep, sensors: Optional[SensorData] = None
    ) -> None:
        self.guidance = Guidance()
        self.navigation = Navigation(aircraft, dt, sensors)
        self.control = MPC(aircraft, dt, self.guidance)

    def compute(self) -> list[int]:
        """Motor outputs for the current time step."""
        return self.control.compute()

    def input(self, user_input: Input) -> None:
        """Apply the pilot's stick positions."""
        self.control.input(user_input)

    @property
    def input_filter(self) -> bool:
        """Whether small setpoint changes are low-pass filtered."""
        return self.guidance.input_filter

    @input_filter.setter
    def input_filter(self, enabled: bool) -> None:
        self.guidance.input_filter = bool(enabled)

    @property
    def strategy(self) -> Strategy:
        """The optimisation strategy in use."""
        return self.control.strategy

    @strategy.setter
    def strategy(self, strategy: Strategy) -> None:
        self.control.strategy = strategy

    @property
    def control_mode(self) -> Mode:
        """The active control mode."""
        return self.control.control_mode

    @control_mode.setter
    def control_mode(self, mode: Mode) -> None:
        self.control.control_mode = mode

    @property
    def sampling_time(self) -> int:
        """Time between optimisations in milliseconds."""
        return self.control.sampling_time

    @sampling_time.setter
    def sampling_time(self, ms: int) -> None:
        self.control.sampling_time = ms