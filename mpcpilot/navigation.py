"""State estimation from IMU, GPS and barometer readings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .aircraft import Aircraft
from .core import TimeStep, Vector3

_ONES = Vector3(1.0, 1.0, 1.0)


@dataclass
class GPSData:
    """GPS fix."""

    position: Vector3 = field(default_factory=Vector3)


@dataclass
class IMUData:
    """Inertial measurement."""

    accel: Vector3 = field(default_factory=Vector3)  # m/s^2
    gyro: Vector3 = field(default_factory=Vector3)
    mag: Vector3 = field(default_factory=Vector3)    # uT


@dataclass
class BMPData:
    """Barometric altitude."""

    height: float = 0.0


@dataclass
class SensorData:
    """Latest readings of all sensors."""

    gps: GPSData = field(default_factory=GPSData)
    imu: IMUData = field(default_factory=IMUData)
    bmp: BMPData = field(default_factory=BMPData)


@dataclass
class _KalmanTerms:
    imu: Vector3 = field(default_factory=Vector3)
    gps: Vector3 = field(default_factory=Vector3)
    bmp: float = 0.0


class Navigation:
    """Fuses sensor readings into the aircraft state with scalar Kalman filters."""

    def __init__(
        self, aircraft: Aircraft, dt: TimeStep, sensors: Optional[SensorData] = None
    ) -> None:
        self.aircraft = aircraft
        self.dt = dt
        self.sensors = sensors
        self.use_imu = True
        self.use_gps = True
        self.use_bmp = True

        self.gain = _KalmanTerms()
        self.measurement_variance = _KalmanTerms(
            imu=Vector3(0.1, 0.1, 0.1), gps=Vector3(25.0, 25.0, 100.0), bmp=2.25
        )
        self.process_variance = _KalmanTerms(
            imu=Vector3(0.1, 0.1, 0.1), gps=Vector3(0.1, 0.1, 0.1), bmp=0.1
        )
        self.process_noise = _KalmanTerms(
            imu=Vector3(0.01, 0.01, 0.01), gps=Vector3(0.01, 0.01, 0.01), bmp=0.01
        )

    def _readings(self) -> SensorData:
        if self.sensors is None:
            raise RuntimeError("no sensor data attached")
        return self.sensors

    def update(self) -> None:
        """Correct the aircraft state with the readings of the active sensors."""
        state = self.aircraft.state
        dt = float(self.dt)

        predict = state.copy()
        self.aircraft.simulate(dt, predict)

        gain, noise = self.gain, self.process_noise
        variance, measurement = self.process_variance, self.measurement_variance

        if self.use_imu:
            measured = self._readings().imu.accel
            variance.imu = (_ONES - gain.imu) * variance.imu + noise.imu
            gain.imu = variance.imu / (variance.imu + measurement.imu)
            state.acceleration = predict.acceleration + gain.imu * (
                measured - predict.acceleration
            )
            state.position = (
                state.position + state.velocity * dt + state.acceleration * dt * dt * 0.5
            )
            state.velocity = state.velocity + state.acceleration * dt

        if self.use_bmp:
            height = self._readings().bmp.height
            variance.bmp = (1 - gain.bmp) * variance.bmp + noise.bmp
            gain.bmp = variance.bmp / (variance.bmp + measurement.bmp)
            before = state.position.z
            state.position.z = state.position.z + gain.bmp * (height - state.position.z)
            delta = state.position.z - before
            state.velocity.z += delta * (1 / dt)
            state.acceleration.z += delta * (1 / (dt * dt))

        if self.use_gps:
            fix = self._readings().gps.position
            variance.gps = (_ONES - gain.gps) * variance.gps + noise.gps
            gain.gps = variance.gps / (variance.gps + measurement.gps)
            before_position = state.position
            state.position = state.position + gain.gps * (fix - state.position)
            shift = state.position - before_position
            state.velocity = state.velocity + shift * (1 / dt)
            state.acceleration = state.acceleration + shift * (1 / (dt * dt))

    def pressure_to_height(self, current: float, reference: float) -> float:
        """Height in metres above the level where the reference pressure was taken."""
        if current <= 0 or reference <= 0:
            raise ValueError("pressures must be positive")
        return 44330.0 * (1.0 - (current / reference) ** (1 / 5.255))

    def set_active_sensors(self, imu: bool, gps: bool, bmp: bool) -> None:
        """Choose which sensors take part in the update."""
        self.use_imu = imu
        self.use_gps = gps
        self.use_bmp = bmp

    def disable_imu(self) -> None:
        """Stop using the IMU."""
        self.use_imu = False

    def disable_gps(self) -> None:
        """Stop using the GPS."""
        self.use_gps = False

    def disable_bmp(self) -> None:
        """Stop using the barometer."""
        self.use_bmp = False