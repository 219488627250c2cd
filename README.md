# mpcpilot

A small flight controller for multirotor aircraft built on model-predictive
control. At every control step it simulates a short horizon of motor outputs,
scores each candidate against the objectives of the active flight mode, and
picks a balanced solution from the Pareto front found by a multi-objective
particle swarm optimizer (MOPSO).

Pure Python, no third-party dependencies.

## Installation

```
pip install .
```

With the test extra:

```
pip install ".[test]"
pytest
```

## Command line

The package installs an `mpcpilot` command. It flies the simulated quadcopter
in altitude-hold mode through a fixed sequence of stick inputs (new attitude
targets after steps 200 and 500), writes one line of state data per step, and
prints the peak values reached and the average motor outputs:

```
mpcpilot
mpcpilot --iterations 500 --dt 0.02 --noise 2 --data run.txt --seed 1
```

Options:

- `--iterations` number of time steps (default 2000, at least 1)
- `--dt` time step in seconds (default 0.01)
- `--noise` amplitude of uniform noise added to the stick inputs (default 0)
- `--data` file for per-step state data (default `Data.txt`)
- `--seed` random seed

Each data line holds acceleration, velocity, position, angular acceleration,
angular rates and orientation as comma-separated triples, followed by the four
motor outputs, with groups separated by `;`.

## Using the library

```python
from mpcpilot.aircraft import Drone
from mpcpilot.autopilot import Autopilot
from mpcpilot.control_mode import Mode
from mpcpilot.core import Input, TimeStep

drone = Drone()
drone.state.airborne = True
step = TimeStep(0.01)

pilot = Autopilot(drone, step)
pilot.control_mode = Mode.ALT_HOLD
pilot.input_filter = True

for _ in range(100):
    pilot.input(Input(x1=0, y1=0, x2=-30, y2=20))
    drone.state.output[:] = pilot.compute()
    drone.simulate(float(step), drone.state)

print(drone.state.orientation, drone.state.position)
```

`Autopilot.compute` returns the motor outputs for the step; it does not write
them into the aircraft state, so the caller applies them. With
`sampling_time` (milliseconds, 0 to 65535) above zero, it replays later steps
of the last plan between optimizations.

### Modules

- `mpcpilot.core`: `Vector3`, `State`, `Input`, `TimeStep`, configuration
  constants and helpers such as `clamp`, `float_to_motor` and
  `body_to_inertial`.
- `mpcpilot.aircraft`: the abstract `Aircraft` and the quadcopter model
  `Drone`.
- `mpcpilot.guidance`: `Setpoint`, `Usage` and `Guidance`, with an optional
  low-pass input filter that is bypassed whenever the setpoint jumps by more
  than the allowed deviation.
- `mpcpilot.control_mode`: `Mode` (`IDLE`, `POSITION`, `ANGLE`, `ACRO`,
  `ALT_HOLD`, `LOITER`, `CRUISE`, `WAYPOINT`) and `ControlMode`, which
  evaluates predicted trajectories for the active mode.
- `mpcpilot.modes_manual` and `mpcpilot.modes_assisted`: the per-mode cost
  functions, input handling and stabilization; `mpcpilot.stabilization`
  holds the shared cost terms and hand-over rules (for example, from vertical
  velocity to altitude hold once the stick is centred and the vehicle stopped).
- `mpcpilot.optimization`: `mopso`, the optimizer, and `Optimization`.
- `mpcpilot.mpc`: `MPC`, the predictive controller.
- `mpcpilot.navigation`: `Navigation`, a scalar Kalman-style filter over IMU,
  GPS and barometer readings, and `pressure_to_height`.
- `mpcpilot.cli`: `run_simulation`, `format_summary` and `main`.

## Limitations

- `Autopilot.compute` does not run the navigation filter; state estimation
  happens only when `Navigation.update` is called directly, with sensor data
  attached.
- `CRUISE` and `WAYPOINT` have no objectives and take no effect on the
  outputs beyond what the optimizer picks at random; there is no waypoint list.
- The simulation summary's "iterations to height" is not measured and is
  always reported as 0.
- There is no hardware interface: the package drives only the built-in
  simulated quadcopter.