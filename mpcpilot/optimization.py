"""Multi-objective particle swarm optimisation of the output trajectory.

A Pareto archive keeps the non-dominated candidate trajectories. Each
particle is guided by a leader picked at random from the archive, and a
full archive replaces the solution in its most crowded region.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from .aircraft import Aircraft
from .control_mode import ControlMode
from .core import (
    EPSILON,
    HORIZON,
    INDIVIDUAL_PROBABILITY,
    ITERATIONS,
    MAX_OUTPUTS,
    PARETO_FRONT_SIZE,
    PARTICLE_PROBABILITY,
    PARTICLES,
    STAGNATION_LIMIT,
    USE_WARM_START,
    WARM_START_FACTOR,
    clamp,
    normal_distribution,
    uniform_random_number,
)

Trajectory = list[list[float]]

BOUNDARY_DISTANCE = 1e10


def _zero_trajectory() -> Trajectory:
    return [[0.0] * MAX_OUTPUTS for _ in range(HORIZON)]


def _copy_trajectory(trajectory: Sequence[Sequence[float]]) -> Trajectory:
    return [list(row) for row in trajectory]


class Strategy(Enum):
    """Available optimisation strategies."""

    MOPSO = 0


@dataclass
class ArchiveSolution:
    """A non-dominated trajectory kept in the Pareto archive."""

    position: Trajectory = field(default_factory=_zero_trajectory)
    fitness: list[float] = field(default_factory=list)
    crowding_distance: float = 0.0


@dataclass
class Particle:
    """A candidate trajectory with its personal best."""

    position: Trajectory = field(default_factory=_zero_trajectory)
    fitness: list[float] = field(default_factory=list)
    p_best: Trajectory = field(default_factory=_zero_trajectory)
    p_best_fitness: list[float] = field(default_factory=list)


def dominates(f1: Sequence[float], f2: Sequence[float], num_objectives: int) -> bool:
    """Whether f1 is no worse than f2 in every objective and better in at least one."""
    better = False
    for a, b in zip(f1[:num_objectives], f2[:num_objectives]):
        if a > b + EPSILON:
            return False
        if a < b - EPSILON:
            better = True
    return better


def update_archive(
    archive: list[ArchiveSolution], particle: Particle, num_objectives: int
) -> bool:
    """Offer a particle to the archive; return whether it was taken in."""
    i = 0
    while i < len(archive):
        solution = archive[i]
        is_equal = all(
            abs(old - new) < EPSILON
            for old, new in zip(
                solution.fitness[:num_objectives], particle.fitness[:num_objectives]
            )
        )
        if is_equal or dominates(solution.fitness, particle.fitness, num_objectives):
            return False
        if dominates(particle.fitness, solution.fitness, num_objectives):
            archive[i] = archive[-1]
            archive.pop()
            continue
        i += 1

    entry = ArchiveSolution(
        position=_copy_trajectory(particle.position),
        fitness=list(particle.fitness),
        crowding_distance=-1.0,
    )
    if len(archive) < PARETO_FRONT_SIZE:
        archive.append(entry)
        return True

    index = 0
    for i, solution in enumerate(archive):
        # Prefer replacing solutions that already took part in a ranking.
        if archive[index].crowding_distance < -EPSILON and solution.crowding_distance > EPSILON:
            index = i
            continue
        if solution.crowding_distance < archive[index].crowding_distance - EPSILON:
            index = i
    archive[index] = entry
    return True


def calculate_crowding_distance(archive: list[ArchiveSolution], num_objectives: int) -> None:
    """Assign each solution its crowding distance; reorders the archive."""
    if not archive:
        return
    for solution in archive:
        solution.crowding_distance = 0.0

    for objective in range(num_objectives):
        archive.sort(key=lambda s: s.fitness[objective])
        spread = archive[-1].fitness[objective] - archive[0].fitness[objective]
        value_range = EPSILON if spread <= EPSILON else spread

        archive[0].crowding_distance = BOUNDARY_DISTANCE
        archive[-1].crowding_distance = BOUNDARY_DISTANCE
        for before, current, after in zip(archive, archive[1:], archive[2:]):
            distance = after.fitness[objective] - before.fitness[objective]
            current.crowding_distance += distance / value_range


def select_final_solution(archive: Sequence[ArchiveSolution], num_objectives: int) -> int:
    """Index of the solution closest to the ideal point in normalised objective space."""
    if not archive:
        raise ValueError("archive is empty")

    columns = [
        [solution.fitness[j] for solution in archive] for j in range(num_objectives)
    ]
    lows = [min(column) for column in columns]
    highs = [max(column) for column in columns]

    def distance(solution: ArchiveSolution) -> float:
        total = 0.0
        for value, low, high in zip(solution.fitness, lows, highs):
            div = high - low
            if div != 0:
                total += ((value - low) / div) ** 2
        return total ** 0.5

    distances = [distance(solution) for solution in archive]
    return min(range(len(archive)), key=distances.__getitem__)


def choose_global_guide(archive: Sequence[ArchiveSolution]) -> int:
    """Pick a leader: the less crowded of two randomly chosen neighbours."""
    if not archive:
        raise ValueError("archive is empty")
    size = len(archive)
    i = int(uniform_random_number(0, size - 1))
    j = int(uniform_random_number(0, size - 1))

    if size <= 1:
        return i

    if i == j:
        if j == size - 1:
            j -= 1
        elif j == 0:
            j += 1
        elif uniform_random_number(0, 1) < 0.5:
            j -= 1
        else:
            j += 1

    first, second = archive[i].crowding_distance, archive[j].crowding_distance
    if first > second:
        return i
    if first < second:
        return j
    return i if uniform_random_number(0, 1) < 0.5 else j


def _init_particle(
    aircraft: Aircraft,
    mode: ControlMode,
    previous: Sequence[Sequence[float]],
    warm_start: bool,
) -> Particle:
    position = _zero_trajectory()
    for i in range(aircraft.output_size):
        low, high = aircraft.min_output(i), aircraft.max_output(i)
        if warm_start:
            # Shift the previous plan one step ahead and append a random last step.
            for row, earlier in zip(position, previous[1:]):
                row[i] = earlier[i]
            position[-1][i] = uniform_random_number(low, high)
        else:
            for row in position:
                row[i] = uniform_random_number(low, high)

    fitness = mode.cost_function(position)
    return Particle(
        position=position,
        fitness=fitness,
        p_best=_copy_trajectory(position),
        p_best_fitness=list(fitness),
    )


def _update_particle(
    aircraft: Aircraft, mode: ControlMode, particle: Particle, guide: ArchiveSolution
) -> None:
    num_objectives = mode.num_objectives
    mutate = uniform_random_number(0, 1) < PARTICLE_PROBABILITY

    for i in range(aircraft.output_size):
        low, high = aircraft.min_output(i), aircraft.max_output(i)
        for row, best_row, guide_row in zip(particle.position, particle.p_best, guide.position):
            mean = 0.5 * (best_row[i] + guide_row[i])
            stddev = abs(best_row[i] - guide_row[i])
            value = normal_distribution(mean, stddev)
            if mutate and uniform_random_number(0, 1) < INDIVIDUAL_PROBABILITY:
                value = uniform_random_number(low, high)
            row[i] = clamp(value, low, high)

    particle.fitness = mode.cost_function(particle.position)

    if dominates(particle.fitness, particle.p_best_fitness, num_objectives) or (
        not dominates(particle.p_best_fitness, particle.fitness, num_objectives)
        and uniform_random_number(0, 1) < 0.5
    ):
        particle.p_best = _copy_trajectory(particle.position)
        particle.p_best_fitness = list(particle.fitness)


def mopso(
    aircraft: Aircraft,
    mode: ControlMode,
    previous: Sequence[Sequence[float]],
    warm_start: bool,
) -> Trajectory:
    """Optimise the output trajectory for the active mode over the horizon.

    With warm_start, part of the swarm starts from the previous trajectory
    shifted by one step.
    """
    num_objectives = mode.num_objectives
    swarm: list[Particle] = []
    archive: list[ArchiveSolution] = []

    for i in range(PARTICLES):
        if i >= PARTICLES * WARM_START_FACTOR:
            warm_start = False
        particle = _init_particle(aircraft, mode, previous, warm_start)
        swarm.append(particle)
        update_archive(archive, particle, num_objectives)

    stagnation = 0
    for _ in range(ITERATIONS):
        for particle in swarm:
            guide = choose_global_guide(archive)
            _update_particle(aircraft, mode, particle, archive[guide])

        improved = False
        for particle in swarm:
            improved |= update_archive(archive, particle, num_objectives)

        stagnation = 0 if improved else stagnation + 1
        if stagnation >= STAGNATION_LIMIT:
            break

    index = select_final_solution(archive, num_objectives)
    return _copy_trajectory(archive[index].position)


_STRATEGIES: dict[Strategy, Callable[..., Trajectory]] = {Strategy.MOPSO: mopso}


class Optimization:
    """Runs the selected optimisation strategy for a control mode."""

    def __init__(
        self, aircraft: Aircraft, control_mode: ControlMode, strategy: Strategy = Strategy.MOPSO
    ) -> None:
        self.aircraft = aircraft
        self.control_mode = control_mode
        self.strategy = strategy

    def compute(self, previous: Sequence[Sequence[float]], warm_start: bool) -> Trajectory:
        """Return a new output trajectory, optionally warm-started from the previous one."""
        run = _STRATEGIES[self.strategy]
        return run(self.aircraft, self.control_mode, previous, warm_start and USE_WARM_START)