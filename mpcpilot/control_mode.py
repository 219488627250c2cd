"""Selection of the active control mode and evaluation of predicted trajectories."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

from .aircraft import Aircraft
from .core import EPSILON, HORIZON, Input, TimeStep, float_to_motor
from .guidance import Guidance, Setpoint, Usage
from .modes_assisted import AltHold, Loiter
from .modes_manual import Acro, Angle, Cruise, Idle, Position, Waypoint
from .stabilization import ModeBehaviour, References


class Mode(IntEnum):
    """Available control modes."""

    IDLE = 0
    POSITION = 1
    ANGLE = 2
    ACRO = 3
    ALT_HOLD = 4
    LOITER = 5
    CRUISE = 6
    WAYPOINT = 7


_BEHAVIOURS: dict[Mode, type[ModeBehaviour]] = {
    Mode.IDLE: Idle,
    Mode.POSITION: Position,
    Mode.ANGLE: Angle,
    Mode.ACRO: Acro,
    Mode.ALT_HOLD: AltHold,
    Mode.LOITER: Loiter,
    Mode.CRUISE: Cruise,
    Mode.WAYPOINT: Waypoint,
}


class ControlMode:
    """Routes pilot input, stabilisation and cost evaluation to the active mode."""

    def __init__(self, aircraft: Aircraft, dt: TimeStep, guidance: Guidance) -> None:
        self.refs = References(aircraft, dt, guidance)
        self._mode = Mode.IDLE
        self._behaviour: ModeBehaviour = Idle()
        self.mode = Mode.IDLE

    @property
    def mode(self) -> Mode:
        """The active mode. Selecting one resets the setpoint and usage."""
        return self._mode

    @mode.setter
    def mode(self, mode: int) -> None:
        mode = Mode(mode)
        aircraft = self.refs.aircraft
        guidance = self.refs.guidance
        if not aircraft.mode_valid(mode):
            return

        self._mode = mode
        self._behaviour = _BEHAVIOURS[mode]()

        guidance.set_setpoint(Setpoint())
        if self._behaviour.sets_usage:
            usage = Usage()
            self._behaviour.init_usage(usage)
            guidance.usage = usage
        if self._behaviour.stabilizes:
            self._behaviour.update_dependencies(guidance, aircraft.state)

    @property
    def behaviour(self) -> ModeBehaviour:
        """Behaviour object of the active mode."""
        return self._behaviour

    @property
    def num_objectives(self) -> int:
        """Number of objectives the active mode optimises."""
        return self._behaviour.num_objectives

    def cost_function(self, motors: Sequence[Sequence[float]]) -> list[float]:
        """Cost of each objective when flying the given outputs over the horizon.

        Each step's cost is summed, with an extra penalty whenever an
        objective gets worse than in the step before.
        """
        aircraft = self.refs.aircraft
        outputs = aircraft.output_size
        behaviour = self._behaviour

        sim_state = aircraft.state.copy()
        previous = behaviour.calculate_cost(self.refs, sim_state)
        cost = [0.0] * behaviour.num_objectives

        for step_outputs in motors[:HORIZON]:
            sim_state.output[:outputs] = float_to_motor(step_outputs[:outputs])
            aircraft.simulate(self.refs.step, sim_state)
            current = behaviour.calculate_cost(self.refs, sim_state)
            cost = [
                total + now + (now - before if now > before + EPSILON else 0.0)
                for total, now, before in zip(cost, current, previous)
            ]
            previous = current
        return cost

    def input(self, user_input: Input) -> None:
        """Apply pilot input to the setpoint, keeping values the mode does not set."""
        if not self._behaviour.accepts_input:
            return
        guidance = self.refs.guidance
        setpoint = guidance.setpoint.copy()
        self._behaviour.input(setpoint, user_input)
        guidance.set_setpoint(setpoint)

    def update(self) -> None:
        """Update which setpoint parts are tracked as the vehicle settles."""
        if not self._behaviour.stabilizes:
            return
        self._behaviour.update_dependencies(self.refs.guidance, self.refs.aircraft.state)