"""
Trim Calculation

Finds equilibrium flight conditions by solving for control inputs
that result in zero state derivatives (steady flight).
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np
from scipy.optimize import least_squares

from .controls import ControlMap, FlightControl, neutral_controls
from ..core.dynamics import AircraftDynamics
from ..core.state import SimulationState, U, W, Q
from ..environment.environment import Environment

logger = logging.getLogger(__name__)

ALPHA_BOUND = np.radians(15.0)


class TrimSolver:
    """
    Trim solver for finding equilibrium flight conditions.

    Finds control settings and state parameters that result in steady flight
    (zero accelerations and angular accelerations).

    Parameters
    ----------
    dynamics : AircraftDynamics
        Equations of motion; evaluated without ground contact
    environment : Environment, optional
        Atmosphere and gravity model
    """

    def __init__(self, dynamics: AircraftDynamics, environment: Optional[Environment] = None):
        self.dynamics = dynamics
        self.environment = environment if environment is not None else Environment()

    def _level_state(self, altitude: float, airspeed: float, alpha: float) -> SimulationState:
        return SimulationState.from_flight_condition(altitude, airspeed, alpha=alpha,
                                                     euler_angles=(0.0, alpha, 0.0))

    def _controls(self, elevator: float, throttle: float, flaps: float) -> ControlMap:
        controls = neutral_controls()
        controls[FlightControl.ELEVATOR] = float(elevator)
        controls[FlightControl.THROTTLE] = float(throttle)
        controls[FlightControl.FLAPS] = float(flaps)
        return controls

    def trim_straight_level(self,
                            altitude: float,
                            airspeed: float,
                            flaps: float = 0.0,
                            initial_guess: Optional[Dict] = None) -> Tuple[SimulationState, ControlMap, Dict]:
        """
        Find trim for straight and level flight.

        Level flight means zero flight path angle, so pitch attitude equals
        angle of attack and only alpha, elevator and throttle are unknown.

        Parameters
        ----------
        altitude : float
            Target altitude (ft)
        airspeed : float
            Target airspeed (ft/s)
        flaps : float, optional
            Fixed flap deflection (rad)
        initial_guess : dict, optional
            Initial guess for unknowns: {'alpha', 'elevator', 'throttle'}

        Returns
        -------
        state_trim : SimulationState
            Trimmed state
        controls_trim : dict
            Trimmed control inputs
        info : dict
            Optimization info (success, residual, iterations)
        """
        if initial_guess is None:
            initial_guess = {
                'alpha': np.radians(2),
                'elevator': 0.0,
                'throttle': 0.5
            }

        x0 = np.array([
            initial_guess['alpha'],
            initial_guess['elevator'],
            initial_guess['throttle']
        ])

        environment = self.environment.parameters(altitude)

        def residuals(x):
            alpha, elevator, throttle = x
            state = self._level_state(altitude, airspeed, alpha)
            controls = self._controls(elevator, throttle, flaps)

            x_dot = self.dynamics.state_derivative(state.to_array(), controls, environment)

            return np.array([x_dot[U], x_dot[W], x_dot[Q]])

        lower = [-ALPHA_BOUND, FlightControl.ELEVATOR.minimum, FlightControl.THROTTLE.minimum]
        upper = [ALPHA_BOUND, FlightControl.ELEVATOR.maximum, FlightControl.THROTTLE.maximum]
        x0 = np.clip(x0, lower, upper)

        result = least_squares(residuals, x0, bounds=(lower, upper), xtol=1e-12, ftol=1e-12, gtol=1e-12)

        alpha_trim, elevator_trim, throttle_trim = result.x
        state_trim = self._level_state(altitude, airspeed, alpha_trim)
        controls_trim = self._controls(elevator_trim, throttle_trim, flaps)

        info = {
            'success': result.success,
            'residual_norm': float(np.linalg.norm(result.fun)),
            'iterations': result.nfev,
            'message': result.message,
            'alpha_deg': np.degrees(alpha_trim),
            'theta_deg': np.degrees(alpha_trim),
            'elevator_deg': np.degrees(elevator_trim),
            'throttle_pct': throttle_trim * 100
        }

        logger.debug(f"Trim at {altitude:.0f} ft, {airspeed:.1f} ft/s: alpha={info['alpha_deg']:.2f} deg, "
                     f"elevator={info['elevator_deg']:.2f} deg, throttle={info['throttle_pct']:.1f}%, "
                     f"residual={info['residual_norm']:.2e}")
        if not result.success or info['residual_norm'] > 1e-3:
            logger.warning(f"Trim did not converge: {result.message}")

        return state_trim, controls_trim, info
