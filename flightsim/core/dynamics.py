"""
6-DOF equations of motion for aircraft flight dynamics.

Implements the rigid body dynamics equations:
- Translational dynamics (Newton's 2nd law)
- Rotational dynamics (Euler's equations)
- Euler angle kinematics
"""

import numpy as np
from typing import Mapping, Optional, Tuple

from .aerodynamics import AerodynamicModel
from .aircraft import Aircraft
from .forces import ForceMomentAggregator, ForceMomentBundle
from .frames import euler_rates
from .ground_reaction import AIRBORNE, GroundContact, GroundReaction
from .saturation import DEFAULT_LIMITS, SaturationLimits
from .state import STATE_SIZE, SimulationState
from ..control.controls import FlightControl
from ..environment.environment import EnvironmentParameter, wind_vector


class AircraftDynamics:
    """
    6-DOF rigid body dynamics for aircraft.

    Equations of motion in body frame:
    - Forces: F = m * (v_dot + omega x v) - m * R_nb * [0, 0, g]
    - Moments: M = I * omega_dot + omega x (I * omega)
    - Kinematics: Euler angle rates from body rates

    Parameters
    ----------
    aircraft : Aircraft
        Static aircraft definition
    ground_reaction : GroundReaction, optional
        Landing gear model; None means always airborne
    limits : SaturationLimits, optional
        Bounds on accelerations and moments
    min_airspeed : float, optional
        Airspeed floor for non-dimensional rates (ft/s)
    """

    def __init__(self, aircraft: Aircraft,
                 ground_reaction: Optional[GroundReaction] = None,
                 limits: SaturationLimits = DEFAULT_LIMITS,
                 min_airspeed: float = 1.0):
        self.aircraft = aircraft
        self.engines = aircraft.engines
        self.ground_reaction = ground_reaction
        self.aero_model = AerodynamicModel(aircraft, min_airspeed=min_airspeed)
        self.aggregator = ForceMomentAggregator(aircraft, self.aero_model, limits)

        self.inertia = aircraft.inertia
        self.inertia_inv = np.linalg.inv(self.inertia)

    def evaluate(self, x: np.ndarray,
                 controls: Mapping[FlightControl, float],
                 environment: Mapping[EnvironmentParameter, float],
                 alpha_dot: float = 0.0,
                 time: float = 0.0) -> Tuple[np.ndarray, ForceMomentBundle, GroundContact]:
        """
        Compute the state derivative and the loads behind it.

        Parameters
        ----------
        x : np.ndarray, shape (12,)
            State vector [north, east, down, phi, theta, psi, u, v, w, p, q, r]
        controls : dict
            Control map (held for the tick)
        environment : dict
            Environment parameters (held for the tick)
        alpha_dot : float
            Rate of change of angle of attack (rad/s)
        time : float
            Simulation time (s)

        Returns
        -------
        x_dot : np.ndarray, shape (12,)
            Time derivative of state vector
        bundle : ForceMomentBundle
            Saturated acceleration and moment with their components
        contact : GroundContact
            Ground reaction at this state
        """
        state = SimulationState.from_array(x, time, alpha_dot, wind_vector(environment))

        if self.ground_reaction is not None:
            contact = self.ground_reaction.evaluate(state, controls)
        else:
            contact = AIRBORNE

        bundle = self.aggregator.compute(state, controls, environment, self.engines, contact)

        vel_body = state.velocity_body
        omega = state.angular_rates

        # === Translational Dynamics ===
        # v_dot = F/m + R_nb * [0, 0, g] - omega x v
        g = environment[EnvironmentParameter.GRAVITY]
        g_body = state.ned_to_body @ np.array([0.0, 0.0, g])
        vel_body_dot = bundle.linear_acceleration + g_body - np.cross(omega, vel_body)

        # === Rotational Dynamics ===
        # omega_dot = I^-1 * (M - omega x (I * omega))
        omega_dot = self.inertia_inv @ (bundle.total_moment - np.cross(omega, self.inertia @ omega))

        # === Kinematics ===
        pos_dot = state.body_to_ned @ vel_body
        angles_dot = euler_rates(state.euler_angles, omega)

        x_dot = np.zeros(STATE_SIZE)
        x_dot[0:3] = pos_dot
        x_dot[3:6] = angles_dot
        x_dot[6:9] = vel_body_dot
        x_dot[9:12] = omega_dot

        return x_dot, bundle, contact

    def state_derivative(self, x: np.ndarray,
                         controls: Mapping[FlightControl, float],
                         environment: Mapping[EnvironmentParameter, float],
                         alpha_dot: float = 0.0,
                         time: float = 0.0) -> np.ndarray:
        """Time derivative of the 12-element state vector."""
        return self.evaluate(x, controls, environment, alpha_dot, time)[0]


def angle_of_attack_rate(x: np.ndarray, x_dot: np.ndarray) -> float:
    """
    alpha_dot = (u * w_dot - w * u_dot) / (u^2 + w^2)

    Zero when u and w are both near zero.
    """
    u, w = x[6], x[8]
    u_dot, w_dot = x_dot[6], x_dot[8]
    denom = u**2 + w**2
    if denom < 1e-6:
        return 0.0
    return float((u * w_dot - w * u_dot) / denom)
