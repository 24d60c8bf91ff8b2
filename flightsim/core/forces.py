"""
Force and moment aggregation.

Combines aerodynamic, propulsive and ground reaction contributions into
the net body-frame linear acceleration and moment about the CG, both
passed through the saturation limits. Gravity is added by the equations
of motion.
"""

import numpy as np
from dataclasses import dataclass
from typing import Mapping

from .aerodynamics import AerodynamicModel
from .aircraft import Aircraft
from .ground_reaction import GroundContact
from .propulsion import EngineSet
from .saturation import DEFAULT_LIMITS, SaturationLimits, limit_linear_accelerations, limit_total_moments
from .state import SimulationState
from ..control.controls import FlightControl
from ..environment.environment import EnvironmentParameter


@dataclass(frozen=True)
class ForceMomentBundle:
    """
    Net acceleration and moment for one evaluation.

    linear_acceleration and total_moment are saturated; the component
    terms are raw and kept for logging.
    """
    linear_acceleration: np.ndarray  # ft/s^2, body
    total_moment: np.ndarray         # ft*lbf, about CG
    aero_force: np.ndarray
    aero_moment: np.ndarray          # about the aerodynamic center
    thrust_force: np.ndarray
    thrust_moment: np.ndarray
    ground_force: np.ndarray
    ground_moment: np.ndarray


class ForceMomentAggregator:
    """
    Sums all force and moment sources acting on the aircraft.

    Parameters
    ----------
    aircraft : Aircraft
        Mass and reference points
    aero_model : AerodynamicModel
        Aerodynamic force/moment model
    limits : SaturationLimits, optional
        Bounds applied to the results
    """

    def __init__(self, aircraft: Aircraft, aero_model: AerodynamicModel,
                 limits: SaturationLimits = DEFAULT_LIMITS):
        self.aircraft = aircraft
        self.aero_model = aero_model
        self.limits = limits
        self.lever_arm = aircraft.aero_lever_arm

    def transport_moment(self, aero_force: np.ndarray) -> np.ndarray:
        """
        Moment about the CG of the aerodynamic force acting at the AC.

        M = (r_ac - r_cg) x F
        """
        return np.cross(self.lever_arm, aero_force)

    def compute(self, state: SimulationState,
                controls: Mapping[FlightControl, float],
                environment: Mapping[EnvironmentParameter, float],
                engines: EngineSet,
                ground: GroundContact) -> ForceMomentBundle:
        """
        Evaluate every source once and build the saturated bundle.

        Parameters
        ----------
        state : SimulationState
            State with up-to-date air data and alpha_dot
        controls : dict
            Control map for this tick
        environment : dict
            Environment parameters for this tick
        engines : EngineSet
            Propulsion units
        ground : GroundContact
            Ground reaction for this state
        """
        wind = state.wind_parameters
        rates = state.angular_rates

        aero_force = self.aero_model.body_forces(wind, rates, environment, controls, state.alpha_dot)
        aero_moment = self.aero_model.aero_moments(wind, rates, environment, controls, state.alpha_dot)
        thrust_force, thrust_moment = engines.compute_thrust(controls, environment, wind.true_airspeed)

        net_force = aero_force + thrust_force + ground.force
        accel = limit_linear_accelerations(net_force / self.aircraft.mass, self.limits)

        net_moment = aero_moment + self.transport_moment(aero_force) + thrust_moment + ground.moment
        moment = limit_total_moments(net_moment, self.limits)

        return ForceMomentBundle(accel, moment, aero_force, aero_moment,
                                 thrust_force, thrust_moment, ground.force, ground.moment)

    def linear_acceleration(self, state: SimulationState,
                            controls: Mapping[FlightControl, float],
                            environment: Mapping[EnvironmentParameter, float],
                            engines: EngineSet,
                            ground: GroundContact) -> np.ndarray:
        """Saturated linear acceleration in body frame, excluding gravity (ft/s^2)."""
        return self.compute(state, controls, environment, engines, ground).linear_acceleration

    def total_moment(self, state: SimulationState,
                     controls: Mapping[FlightControl, float],
                     environment: Mapping[EnvironmentParameter, float],
                     engines: EngineSet,
                     ground: GroundContact) -> np.ndarray:
        """Saturated total moment about the CG (ft*lbf)."""
        return self.compute(state, controls, environment, engines, ground).total_moment
