"""
6-DOF state vector for aircraft flight dynamics.

State includes:
- Position (north, east, down) in NED inertial frame
- Attitude Euler angles (phi, theta, psi)
- Velocity (u, v, w) in body frame
- Angular rates (p, q, r) in body frame

plus the air-relative auxiliaries (alpha, beta, true airspeed, alpha-dot)
and the simulation time.
"""

import numpy as np
from typing import NamedTuple, Optional, Tuple

from archimedes import struct

from .frames import air_data, body_to_ned_matrix, ned_to_body_matrix

STATE_SIZE = 12

# Indices into the 12-element state vector
NORTH, EAST, DOWN = 0, 1, 2
PHI, THETA, PSI = 3, 4, 5
U, V, W = 6, 7, 8
P, Q, R = 9, 10, 11


class WindParameters(NamedTuple):
    """Air-relative flow in wind axes."""
    true_airspeed: float  # ft/s
    beta: float           # rad
    alpha: float          # rad


@struct(frozen=True)
class SimulationState:
    """
    Immutable snapshot of the aircraft state at one instant.

    State variables (12 total):
    - Position: north, east, down (NED inertial frame, ft)
    - Attitude: phi, theta, psi (ZYX Euler angles, rad)
    - Velocity: u, v, w (body frame, ft/s)
    - Angular rates: p, q, r (body frame, rad/s)
    """

    north: float = 0.0
    east: float = 0.0
    down: float = 0.0  # negative altitude

    phi: float = 0.0
    theta: float = 0.0
    psi: float = 0.0

    u: float = 0.0
    v: float = 0.0
    w: float = 0.0

    p: float = 0.0
    q: float = 0.0
    r: float = 0.0

    # Air-relative auxiliaries
    alpha: float = 0.0
    beta: float = 0.0
    true_airspeed: float = 0.0
    alpha_dot: float = 0.0

    time: float = 0.0

    @property
    def position(self) -> np.ndarray:
        """Position vector in NED frame (ft)."""
        return np.array([self.north, self.east, self.down])

    @property
    def euler_angles(self) -> np.ndarray:
        """Euler angles [phi, theta, psi] (rad)."""
        return np.array([self.phi, self.theta, self.psi])

    @property
    def velocity_body(self) -> np.ndarray:
        """Velocity vector in body frame (ft/s)."""
        return np.array([self.u, self.v, self.w])

    @property
    def angular_rates(self) -> np.ndarray:
        """Angular rate vector in body frame (rad/s)."""
        return np.array([self.p, self.q, self.r])

    @property
    def altitude(self) -> float:
        """Altitude above reference (ft, positive up)."""
        return -self.down

    @property
    def wind_parameters(self) -> WindParameters:
        return WindParameters(self.true_airspeed, self.beta, self.alpha)

    @property
    def ned_to_body(self) -> np.ndarray:
        return ned_to_body_matrix(self.phi, self.theta, self.psi)

    @property
    def body_to_ned(self) -> np.ndarray:
        return body_to_ned_matrix(self.phi, self.theta, self.psi)

    @property
    def velocity_ned(self) -> np.ndarray:
        """Inertial velocity in NED frame (ft/s)."""
        return self.body_to_ned @ self.velocity_body

    def to_array(self) -> np.ndarray:
        """
        Convert state to numpy array.

        Returns:
        --------
        x : np.ndarray, shape (12,)
            [north, east, down, phi, theta, psi, u, v, w, p, q, r]
        """
        return np.array([
            self.north, self.east, self.down,
            self.phi, self.theta, self.psi,
            self.u, self.v, self.w,
            self.p, self.q, self.r
        ], dtype=float)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))

    @classmethod
    def from_array(cls, x: np.ndarray, time: float = 0.0, alpha_dot: float = 0.0,
                   wind_ned: Optional[np.ndarray] = None) -> 'SimulationState':
        """
        Build a state from a 12-element vector.

        The air-relative auxiliaries are recomputed from the body velocity
        minus the wind (given in NED frame).
        """
        x = np.asarray(x, dtype=float)
        velocity_air = x[U:W + 1]
        if wind_ned is not None:
            velocity_air = velocity_air - ned_to_body_matrix(*x[PHI:PSI + 1]) @ np.asarray(wind_ned, dtype=float)
        tas, beta, alpha = air_data(velocity_air)

        return cls(
            north=float(x[NORTH]), east=float(x[EAST]), down=float(x[DOWN]),
            phi=float(x[PHI]), theta=float(x[THETA]), psi=float(x[PSI]),
            u=float(x[U]), v=float(x[V]), w=float(x[W]),
            p=float(x[P]), q=float(x[Q]), r=float(x[R]),
            alpha=alpha, beta=beta, true_airspeed=tas,
            alpha_dot=float(alpha_dot), time=float(time)
        )

    @classmethod
    def from_flight_condition(cls, altitude: float, airspeed: float,
                              alpha: float = 0.0, beta: float = 0.0,
                              euler_angles: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                              north: float = 0.0, east: float = 0.0,
                              angular_rates: Tuple[float, float, float] = (0.0, 0.0, 0.0)
                              ) -> 'SimulationState':
        """
        Build a state from airspeed and flow angles (still air).

        Parameters:
        -----------
        altitude : float
            Altitude (ft, positive up)
        airspeed : float
            True airspeed (ft/s)
        alpha, beta : float
            Angle of attack and sideslip (rad)
        """
        u = airspeed * np.cos(alpha) * np.cos(beta)
        v = airspeed * np.sin(beta)
        w = airspeed * np.sin(alpha) * np.cos(beta)

        x = np.hstack([north, east, -altitude, euler_angles, u, v, w, angular_rates])
        return cls.from_array(x)

    def __str__(self) -> str:
        """Pretty print state."""
        return (
            f"Aircraft State (t = {self.time:.3f} s):\n"
            f"  Position (NED):   [{self.north:8.1f}, {self.east:8.1f}, {self.down:8.1f}] ft\n"
            f"  Altitude:         {self.altitude:8.1f} ft\n"
            f"  Velocity (body):  [{self.u:7.2f}, {self.v:7.2f}, {self.w:7.2f}] ft/s\n"
            f"  Airspeed:         {self.true_airspeed:7.2f} ft/s\n"
            f"  Euler angles:     [{np.degrees(self.phi):6.2f}, {np.degrees(self.theta):6.2f}, "
            f"{np.degrees(self.psi):6.2f}] deg\n"
            f"  Alpha, Beta:      [{np.degrees(self.alpha):6.2f}, {np.degrees(self.beta):6.2f}] deg\n"
            f"  Angular rates:    [{self.p:7.4f}, {self.q:7.4f}, {self.r:7.4f}] rad/s"
        )
