"""Model predictive controller: plans outputs over the horizon and replays them between samples."""

from __future__ import annotations

from .aircraft import Aircraft
from .control_mode import ControlMode, Mode
from .core import HORIZON, MAX_OUTPUTS, Input, TimeStep, float_to_motor
from .guidance import Guidance
from .optimization import Optimization, Strategy, Trajectory

MAX_SAMPLING_TIME = 0xFFFF  # ms


class MPC:
    """Computes motor outputs for the active control mode."""

    def __init__(self, aircraft: Aircraft, dt: TimeStep, guidance: Guidance) -> None:
        self.aircraft = aircraft
        self.dt = dt
        self.guidance = guidance
        self.control = ControlMode(aircraft, dt, guidance)
        self.optimization = Optimization(aircraft, self.control)

        self._trajectory: Trajectory = [[0.0] * MAX_OUTPUTS for _ in range(HORIZON)]
        self._motors: list[int] = [0] * aircraft.output_size
        self._sampling_time = 0        # ms
        self._elapsed = 0.0            # s
        self._skipped = 0
        self._warm_start = False

    @property
    def control_mode(self) -> Mode:
        """The active control mode."""
        return self.control.mode

    @control_mode.setter
    def control_mode(self, mode: Mode) -> None:
        if mode != self.control.mode:
            self._warm_start = False
        self.control.mode = mode
        # Force a fresh optimisation on the next step.
        self._elapsed = float(self._sampling_time)

    @property
    def sampling_time(self) -> int:
        """Time between optimisations in milliseconds; 0 optimises every step."""
        return self._sampling_time

    @sampling_time.setter
    def sampling_time(self, ms: int) -> None:
        ms = int(ms)
        if not 0 <= ms <= MAX_SAMPLING_TIME:
            raise ValueError(f"sampling time must be within 0..{MAX_SAMPLING_TIME} ms")
        self._sampling_time = ms

    @property
    def strategy(self) -> Strategy:
        """The optimisation strategy in use."""
        return self.optimization.strategy

    @strategy.setter
    def strategy(self, strategy: Strategy) -> None:
        self.optimization.strategy = Strategy(strategy)

    def input(self, user_input: Input) -> None:
        """Apply pilot input; a large setpoint jump drops the warm start."""
        self.control.input(user_input)
        if self.guidance.deviation:
            self._warm_start = False

    def compute(self) -> list[int]:
        """Motor outputs for the current step."""
        outputs = self.aircraft.output_size
        self.control.update()
        self._elapsed += float(self.dt)

        if self._elapsed >= self._sampling_time * 0.001:
            self._trajectory = self.optimization.compute(self._trajectory, self._warm_start)
            self._motors = float_to_motor(self._trajectory[0][:outputs])
            self._elapsed = 0.0
            self._skipped = 0
        elif self._skipped < HORIZON - 1:
            # Replay the next step of the last plan.
            self._skipped += 1
            self._motors = float_to_motor(self._trajectory[self._skipped][:outputs])

        self._warm_start = True

        if self._skipped == HORIZON - 1:
            # The plan is used up; optimise again next step.
            self._elapsed = float(self._sampling_time)
            self._skipped = 0
            self._warm_start = False

        return list(self._motors)