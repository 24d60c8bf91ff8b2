"""
Saturation limits on forces, moments and state rates.

Clamps computed quantities to plausible physical bounds so that transient
spikes (e.g. at first ground contact) cannot blow up the integrator.
Clamping is routine and silent.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

Bounds = Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]


@dataclass(frozen=True)
class SaturationLimits:
    """Per-axis (minimum, maximum) bounds."""

    # ft/s^2, excludes gravity
    linear_acceleration: Bounds = ((-500.0, 500.0), (-500.0, 500.0), (-500.0, 500.0))
    # ft*lbf
    moment: Bounds = ((-1.0e5, 1.0e5), (-1.0e5, 1.0e5), (-1.0e5, 1.0e5))
    # ft/s, body axes
    linear_velocity: Bounds = ((-300.0, 1000.0), (-500.0, 500.0), (-500.0, 500.0))
    # rad/s
    angular_rate: Bounds = ((-10.0, 10.0), (-10.0, 10.0), (-10.0, 10.0))


DEFAULT_LIMITS = SaturationLimits()


def _clamp(values: np.ndarray, bounds: Bounds) -> np.ndarray:
    lower, upper = np.asarray(bounds, dtype=float).T
    return np.clip(np.asarray(values, dtype=float), lower, upper)


def limit_linear_accelerations(accel: np.ndarray, limits: SaturationLimits = DEFAULT_LIMITS) -> np.ndarray:
    """Clamp body linear accelerations [ax, ay, az] (ft/s^2)."""
    return _clamp(accel, limits.linear_acceleration)


def limit_total_moments(moment: np.ndarray, limits: SaturationLimits = DEFAULT_LIMITS) -> np.ndarray:
    """Clamp body moments [L, M, N] (ft*lbf)."""
    return _clamp(moment, limits.moment)


def limit_linear_velocities(velocity: np.ndarray, limits: SaturationLimits = DEFAULT_LIMITS) -> np.ndarray:
    """Clamp body velocities [u, v, w] (ft/s)."""
    return _clamp(velocity, limits.linear_velocity)


def limit_angular_rates(rates: np.ndarray, limits: SaturationLimits = DEFAULT_LIMITS) -> np.ndarray:
    """Clamp body angular rates [p, q, r] (rad/s)."""
    return _clamp(rates, limits.angular_rate)


def limit_euler_angles(angles: np.ndarray) -> np.ndarray:
    """
    Keep Euler angles in their principal ranges.

    phi and psi are wrapped to [-pi, pi), theta is clamped to
    [-pi/2, pi/2].
    """
    phi, theta, psi = np.asarray(angles, dtype=float)
    return np.array([
        (phi + np.pi) % (2 * np.pi) - np.pi,
        np.clip(theta, -np.pi / 2, np.pi / 2),
        (psi + np.pi) % (2 * np.pi) - np.pi,
    ])
