"""
Propulsion models for 6-DOF flight dynamics.

Provides:
- Base engine interface
- Constant (jet-like) thrust engine
- Piston/propeller engine with altitude power lapse

Each engine returns its thrust vector and the moment of that thrust about
the center of gravity.
"""

import numpy as np
from typing import Mapping, Sequence, Tuple
from abc import ABC, abstractmethod

from ..control.controls import FlightControl
from ..environment.atmosphere import StandardAtmosphere
from ..environment.environment import EnvironmentParameter

HP_TO_FTLBF_S = 550.0


class Engine(ABC):
    """
    Base class for propulsion units.

    Parameters:
    -----------
    position : sequence of float, shape (3,), optional
        Thrust line offset from CG [x, y, z] (ft)
        Causes moments if offset from CG
    """

    def __init__(self, position: Sequence[float] = None, name: str = 'engine'):
        self.name = name
        if position is None:
            self.position = np.zeros(3)
        else:
            self.position = np.asarray(position, dtype=float)

    @abstractmethod
    def thrust_magnitude(self, throttle: float, density_ratio: float, airspeed: float) -> float:
        """Thrust along the body x-axis (lbf)."""

    def compute_thrust(self, controls: Mapping[FlightControl, float],
                       environment: Mapping[EnvironmentParameter, float],
                       airspeed: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute thrust forces and moments.

        Parameters:
        -----------
        controls : dict
            Control map; only THROTTLE is used
        environment : dict
            Environment parameters; only DENSITY is used
        airspeed : float
            True airspeed (ft/s)

        Returns:
        --------
        forces : np.ndarray, shape (3,)
            Thrust forces in body frame [Fx, Fy, Fz] (lbf)
        moments : np.ndarray, shape (3,)
            Thrust moments in body frame [L, M, N] (ft·lbf)
        """
        throttle = controls.get(FlightControl.THROTTLE, 0.0)
        sigma = environment[EnvironmentParameter.DENSITY] / StandardAtmosphere.rho0

        forces = np.array([self.thrust_magnitude(throttle, sigma, airspeed), 0.0, 0.0])
        moments = np.cross(self.position, forces)

        return forces, moments


class ConstantThrustEngine(Engine):
    """
    Jet-like engine: thrust proportional to throttle and density ratio.

    Parameters:
    -----------
    max_thrust : float
        Sea-level thrust at full throttle (lbf)
    """

    def __init__(self, max_thrust: float = 500.0, position: Sequence[float] = None,
                 name: str = 'jet'):
        super().__init__(position, name)
        self.max_thrust = max_thrust

    def thrust_magnitude(self, throttle: float, density_ratio: float, airspeed: float) -> float:
        return self.max_thrust * throttle * density_ratio


class PropellerEngine(Engine):
    """
    Piston engine driving a fixed-pitch propeller.

    Shaft power lapses with altitude (Gagg-Ferrar); thrust follows
    T = eta * P / V and is capped by the static thrust at low speed.

    Parameters:
    -----------
    power_max : float
        Sea-level rated power (HP)
    prop_efficiency : float
        Propeller efficiency [0, 1]
    static_thrust : float
        Sea-level static thrust at full throttle (lbf)
    """

    def __init__(self, power_max: float = 260.0, prop_efficiency: float = 0.8,
                 static_thrust: float = 1000.0, position: Sequence[float] = None,
                 name: str = 'propeller'):
        super().__init__(position, name)
        self.power_max = power_max
        self.prop_efficiency = prop_efficiency
        self.static_thrust = static_thrust

        self.power_max_ftlb_s = power_max * HP_TO_FTLBF_S

    def shaft_power(self, throttle: float, density_ratio: float) -> float:
        """Available shaft power (ft·lbf/s)."""
        lapse = max(density_ratio - (1.0 - density_ratio) / 7.55, 0.0)
        return self.power_max_ftlb_s * throttle * lapse

    def thrust_magnitude(self, throttle: float, density_ratio: float, airspeed: float) -> float:
        V = max(airspeed, 1.0)  # Avoid singularity
        thrust = self.prop_efficiency * self.shaft_power(throttle, density_ratio) / V
        return min(thrust, self.static_thrust * throttle * density_ratio)


class EngineSet(tuple):
    """Immutable collection of engines queried together."""

    def compute_thrust(self, controls: Mapping[FlightControl, float],
                       environment: Mapping[EnvironmentParameter, float],
                       airspeed: float) -> Tuple[np.ndarray, np.ndarray]:
        """Sum of forces and moments of all engines."""
        forces = np.zeros(3)
        moments = np.zeros(3)
        for engine in self:
            F, M = engine.compute_thrust(controls, environment, airspeed)
            forces += F
            moments += M
        return forces, moments
