"""
Aerodynamic model for 6-DOF flight dynamics.

Linear stability-derivative model (with an optional tabulated lift curve)
giving body-frame forces and moments about the aerodynamic center.
"""

import numpy as np
from typing import Dict, Mapping

from .aircraft import Aircraft
from .frames import wind_to_body_matrix
from .state import WindParameters
from ..control.controls import FlightControl
from ..environment.environment import EnvironmentParameter


class AerodynamicModel:
    """
    Linear aerodynamic model using stability derivatives.

    Suitable for small perturbations from trim conditions. Uses standard
    stability derivative notation.

    Parameters:
    -----------
    aircraft : Aircraft
        Geometry and derivatives
    min_airspeed : float
        Floor on the airspeed used to non-dimensionalize rates (ft/s)
    """

    def __init__(self, aircraft: Aircraft, min_airspeed: float = 1.0):
        self.aircraft = aircraft
        self.derivatives = aircraft.derivatives
        self.S_ref = aircraft.geometry.S
        self.b_ref = aircraft.geometry.b
        self.c_ref = aircraft.geometry.c
        self.min_airspeed = min_airspeed

    def coefficients(self, wind: WindParameters, angular_rates: np.ndarray,
                     controls: Mapping[FlightControl, float],
                     alpha_dot: float = 0.0) -> Dict[str, float]:
        """
        Compute force and moment coefficients.

        Returns:
        --------
        coefficients : dict
            CL, CD, CY (wind axes) and Cl, Cm, Cn (body axes)
        """
        d = self.derivatives

        delta_e = controls.get(FlightControl.ELEVATOR, 0.0)
        delta_a = controls.get(FlightControl.AILERON, 0.0)
        delta_r = controls.get(FlightControl.RUDDER, 0.0)
        delta_f = controls.get(FlightControl.FLAPS, 0.0)

        V, beta, alpha = wind
        V = max(V, self.min_airspeed)

        # Non-dimensional angular rates
        p, q, r = angular_rates
        p_hat = p * self.b_ref / (2 * V)
        q_hat = q * self.c_ref / (2 * V)
        r_hat = r * self.b_ref / (2 * V)
        alpha_dot_hat = alpha_dot * self.c_ref / (2 * V)

        if self.aircraft.lift_table is not None:
            CL_static = self.aircraft.lift_table.lookup(alpha)
        else:
            CL_static = d.CL_0 + d.CL_alpha * alpha

        CL = CL_static + d.CL_alphadot * alpha_dot_hat + d.CL_q * q_hat + \
            d.CL_de * delta_e + d.CL_df * delta_f
        CD = d.CD_0 + d.CD_alpha * abs(alpha) + d.CD_alpha2 * alpha**2 + \
            d.CD_de * abs(delta_e) + d.CD_df * delta_f
        CY = d.CY_beta * beta + d.CY_dr * delta_r

        Cl = d.Cl_beta * beta + d.Cl_p * p_hat + d.Cl_r * r_hat + \
            d.Cl_da * delta_a + d.Cl_dr * delta_r
        Cm = d.Cm_0 + d.Cm_alpha * alpha + d.Cm_alphadot * alpha_dot_hat + d.Cm_q * q_hat + \
            d.Cm_de * delta_e + d.Cm_df * delta_f
        Cn = d.Cn_beta * beta + d.Cn_p * p_hat + d.Cn_r * r_hat + \
            d.Cn_da * delta_a + d.Cn_dr * delta_r

        return {'CL': CL, 'CD': CD, 'CY': CY, 'Cl': Cl, 'Cm': Cm, 'Cn': Cn}

    @staticmethod
    def dynamic_pressure(wind: WindParameters, environment: Mapping[EnvironmentParameter, float]) -> float:
        """q_bar = 0.5 * rho * V^2 (lbf/ft^2)."""
        return 0.5 * environment[EnvironmentParameter.DENSITY] * wind.true_airspeed**2

    def body_forces(self, wind: WindParameters, angular_rates: np.ndarray,
                    environment: Mapping[EnvironmentParameter, float],
                    controls: Mapping[FlightControl, float],
                    alpha_dot: float = 0.0) -> np.ndarray:
        """
        Compute aerodynamic forces in body frame.

        Returns:
        --------
        forces : np.ndarray, shape (3,)
            [Fx, Fy, Fz] (lbf)
        """
        coeffs = self.coefficients(wind, angular_rates, controls, alpha_dot)
        q_bar = self.dynamic_pressure(wind, environment)

        # Forces in wind frame
        L_aero = q_bar * self.S_ref * coeffs['CL']
        D = q_bar * self.S_ref * coeffs['CD']
        Y = q_bar * self.S_ref * coeffs['CY']

        return wind_to_body_matrix(wind.alpha, wind.beta) @ np.array([-D, Y, -L_aero])

    def aero_moments(self, wind: WindParameters, angular_rates: np.ndarray,
                     environment: Mapping[EnvironmentParameter, float],
                     controls: Mapping[FlightControl, float],
                     alpha_dot: float = 0.0) -> np.ndarray:
        """
        Compute aerodynamic moments about the aerodynamic center.

        Returns:
        --------
        moments : np.ndarray, shape (3,)
            [L, M, N] (ft*lbf)
        """
        coeffs = self.coefficients(wind, angular_rates, controls, alpha_dot)
        q_bar = self.dynamic_pressure(wind, environment)

        L_moment = q_bar * self.S_ref * self.b_ref * coeffs['Cl']
        M_moment = q_bar * self.S_ref * self.c_ref * coeffs['Cm']
        N_moment = q_bar * self.S_ref * self.b_ref * coeffs['Cn']

        return np.array([L_moment, M_moment, N_moment])
