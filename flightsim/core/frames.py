"""
Coordinate frame transformations for Euler-angle attitude.

Convention: ZYX (yaw-pitch-roll) Euler angles describing the rotation
from the NED inertial frame to the body frame (x forward, y right, z down).
"""

import numpy as np
from typing import Tuple

# Smallest |cos(theta)| used in the Euler kinematics (theta ~ +/-89.99994 deg)
MIN_COS_THETA = 1e-6


def ned_to_body_matrix(phi: float, theta: float, psi: float) -> np.ndarray:
    """
    Direction cosine matrix from NED to body frame.

    Parameters:
    -----------
    phi, theta, psi : float
        Roll, pitch and yaw angles (rad)

    Returns:
    --------
    R : np.ndarray, shape (3, 3)
        v_body = R @ v_ned
    """
    cphi, sphi = np.cos(phi), np.sin(phi)
    cth, sth = np.cos(theta), np.sin(theta)
    cpsi, spsi = np.cos(psi), np.sin(psi)

    return np.array([
        [cth * cpsi, cth * spsi, -sth],
        [sphi * sth * cpsi - cphi * spsi, sphi * sth * spsi + cphi * cpsi, sphi * cth],
        [cphi * sth * cpsi + sphi * spsi, cphi * sth * spsi - sphi * cpsi, cphi * cth]
    ])


def body_to_ned_matrix(phi: float, theta: float, psi: float) -> np.ndarray:
    """Direction cosine matrix from body to NED frame (transpose of NED to body)."""
    return ned_to_body_matrix(phi, theta, psi).T


def euler_rates(euler_angles: np.ndarray, angular_rates: np.ndarray) -> np.ndarray:
    """
    Euler angle rates from body angular rates.

    The 1/cos(theta) terms are singular at +/-90 deg pitch, so cos(theta)
    is kept at least MIN_COS_THETA in magnitude.

    Parameters:
    -----------
    euler_angles : np.ndarray, shape (3,)
        [phi, theta, psi] (rad)
    angular_rates : np.ndarray, shape (3,)
        [p, q, r] body rates (rad/s)

    Returns:
    --------
    rates : np.ndarray, shape (3,)
        [phi_dot, theta_dot, psi_dot] (rad/s)
    """
    phi, theta, _ = euler_angles
    p, q, r = angular_rates

    cphi, sphi = np.cos(phi), np.sin(phi)
    cth = np.cos(theta)
    if abs(cth) < MIN_COS_THETA:
        cth = np.copysign(MIN_COS_THETA, cth)
    sth = np.sin(theta)

    phi_dot = p + (q * sphi + r * cphi) * sth / cth
    theta_dot = q * cphi - r * sphi
    psi_dot = (q * sphi + r * cphi) / cth

    return np.array([phi_dot, theta_dot, psi_dot])


def wind_to_body_matrix(alpha: float, beta: float) -> np.ndarray:
    """
    Rotation from wind axes to body axes.

    Wind-axis forces [-D, C, -L] map to body forces via F_body = R @ F_wind.
    """
    ca, sa = np.cos(alpha), np.sin(alpha)
    cb, sb = np.cos(beta), np.sin(beta)

    return np.array([
        [ca * cb, -ca * sb, -sa],
        [sb, cb, 0.0],
        [sa * cb, -sa * sb, ca]
    ])


def air_data(velocity_body: np.ndarray, min_airspeed: float = 1e-6) -> Tuple[float, float, float]:
    """
    True airspeed, sideslip and angle of attack from air-relative velocity.

    Parameters:
    -----------
    velocity_body : np.ndarray, shape (3,)
        Air-relative velocity in body frame [u, v, w] (ft/s)

    Returns:
    --------
    (true_airspeed, beta, alpha) : tuple of float
        Angles are zero when the airspeed is below min_airspeed
    """
    u, v, w = velocity_body
    V = float(np.linalg.norm(velocity_body))
    if V < min_airspeed:
        return V, 0.0, 0.0

    alpha = float(np.arctan2(w, u))
    beta = float(np.arcsin(np.clip(v / V, -1.0, 1.0)))
    return V, beta, alpha
