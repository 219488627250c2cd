"""Closed-loop simulation of the autopilot flying a quadcopter."""

from __future__ import annotations

import argparse
import random
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, TextIO

from .aircraft import Drone
from .autopilot import Autopilot
from .control_mode import Mode
from .core import Input, State, TimeStep, Vector3, uniform_random_number

# Iteration after which a new target attitude is commanded, and the target.
_SCHEDULE = {200: Vector3(10.0, -5.0, 0.0), 500: Vector3(0.0, 0.0, 0.0)}


@dataclass
class SimulationSummary:
    """Peak values and averages gathered during a simulation run."""

    iterations: int
    dt: float
    wall_time: float
    peak_position: Vector3 = field(default_factory=Vector3)
    peak_velocity: Vector3 = field(default_factory=Vector3)
    peak_acceleration: Vector3 = field(default_factory=Vector3)
    peak_orientation: Vector3 = field(default_factory=Vector3)
    peak_rates: Vector3 = field(default_factory=Vector3)
    peak_angular_acc: Vector3 = field(default_factory=Vector3)
    average_outputs: list[float] = field(default_factory=list)
    iterations_to_height: int = 0


def _peak(current: Vector3, value: Vector3) -> Vector3:
    """Per axis, the signed value with the larger magnitude."""
    return Vector3(
        *(new if abs(new) > abs(old) else old for old, new in zip(current, value))
    )


def _data_line(state: State) -> str:
    vectors = (
        state.acceleration,
        state.velocity,
        state.position,
        state.angular_acc,
        state.angular_rates,
        state.orientation,
    )
    groups = [",".join(f"{c:g}" for c in v) for v in vectors]
    groups.append(",".join(str(o) for o in state.output))
    return ";".join(groups) + "\n"


def _noise(amount: float) -> float:
    return uniform_random_number(-amount, amount)


def run_simulation(
    iterations: int, dt: float, noise: float, data_file: Optional[TextIO]
) -> SimulationSummary:
    """Fly the drone in altitude-hold mode for a number of steps.

    Each step's state is written to data_file as one line, if given.
    """
    if iterations < 1:
        raise ValueError("iterations must be at least 1")

    drone = Drone()
    drone.state.airborne = True
    step = TimeStep(dt)

    ap = Autopilot(drone, step)
    ap.control_mode = Mode.ALT_HOLD
    ap.sampling_time = 0
    ap.input_filter = True

    setpoint = Vector3(-30.0, 20.0, 0.0)
    thrust = 0.0
    summary = SimulationSummary(iterations=iterations, dt=dt, wall_time=0.0)
    rotor_sums = [0] * drone.output_size

    start = time.perf_counter()
    for i in range(iterations):
        noisy_thrust = int(thrust + _noise(noise))
        noisy = Vector3(
            setpoint.x + _noise(noise), setpoint.y + _noise(noise), setpoint.z + _noise(noise)
        )
        ap.input(Input(x1=int(setpoint.z), y1=noisy_thrust, x2=int(noisy.x), y2=int(noisy.y)))

        outputs = ap.compute()
        drone.state.output[: len(outputs)] = outputs
        rotor_sums = [total + value for total, value in zip(rotor_sums, drone.state.output)]
        drone.simulate(float(step), drone.state)

        state = drone.state
        summary.peak_position = _peak(summary.peak_position, state.position)
        summary.peak_velocity = _peak(summary.peak_velocity, state.velocity)
        summary.peak_acceleration = _peak(summary.peak_acceleration, state.acceleration)
        summary.peak_orientation = _peak(summary.peak_orientation, state.orientation)
        summary.peak_rates = _peak(summary.peak_rates, state.angular_rates)
        summary.peak_angular_acc = _peak(summary.peak_angular_acc, state.angular_acc)

        if i in _SCHEDULE:
            setpoint = _SCHEDULE[i]
            thrust = 0.0

        if data_file is not None:
            data_file.write(_data_line(state))

    summary.wall_time = time.perf_counter() - start
    summary.average_outputs = [total / iterations for total in rotor_sums]
    return summary


def _axes(label: str, names: tuple[str, str, str], v: Vector3) -> str:
    a, b, c = names
    return f"{label}:\n\t{a}: {v.x:f}\t,{b}: {v.y:f}\t,{c}: {v.z:f}"


def format_summary(summary: SimulationSummary) -> str:
    """Human-readable report of a simulation run."""
    xyz = ("X", "Y", "Z")
    rpy = ("Roll", "Pitch", "Yaw")
    rotors = "\t".join(
        f"{name}: {value:f}" for name, value in zip(("FL", "FR", "BL", "BR"), summary.average_outputs)
    )
    lines = [
        f"{summary.dt:f}",
        f"Elapsed Time: {summary.wall_time:f} / {summary.iterations * summary.dt:f}",
        "MAX Values:",
        f"Iterations to height: {summary.iterations_to_height} / {summary.iterations}",
        _axes("Position", xyz, summary.peak_position),
        _axes("Velocity", xyz, summary.peak_velocity),
        _axes("Acceleration", xyz, summary.peak_acceleration),
        _axes("Orientation", rpy, summary.peak_orientation),
        _axes("Rates", rpy, summary.peak_rates),
        _axes("A. Acc", rpy, summary.peak_angular_acc),
        f"Avg. Rotors:\n\t{rotors}",
    ]
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the simulation, write per-step data and print a summary."""
    parser = argparse.ArgumentParser(description="Simulate the autopilot flying a quadcopter.")
    parser.add_argument("--iterations", type=int, default=2000, help="number of time steps")
    parser.add_argument("--dt", type=float, default=0.01, help="time step in seconds")
    parser.add_argument("--noise", type=float, default=0.0, help="amplitude of input noise")
    parser.add_argument("--data", default="Data.txt", help="file for per-step state data")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)

    if args.iterations < 1:
        parser.error("--iterations must be at least 1")
    if args.seed is not None:
        random.seed(args.seed)

    with open(args.data, "w", encoding="utf-8") as data_file:
        summary = run_simulation(args.iterations, args.dt, args.noise, data_file)
    print(format_summary(summary))
    return 0