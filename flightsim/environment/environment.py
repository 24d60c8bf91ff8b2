"""
Environment parameters seen by the aircraft each tick.

Combines the standard atmosphere with a constant wind and gravity into a
mapping keyed by EnvironmentParameter.
"""

from enum import Enum
from typing import Dict, Optional, Sequence

import numpy as np

from .atmosphere import StandardAtmosphere

GRAVITY = 32.174  # ft/s^2


class EnvironmentParameter(Enum):
    DENSITY = 'density'                  # slug/ft^3
    TEMPERATURE = 'temperature'          # Rankine
    PRESSURE = 'pressure'                # lbf/ft^2
    SPEED_OF_SOUND = 'speed_of_sound'    # ft/s
    GRAVITY = 'gravity'                  # ft/s^2
    WIND_NORTH = 'wind_north'            # ft/s
    WIND_EAST = 'wind_east'              # ft/s
    WIND_DOWN = 'wind_down'              # ft/s


EnvironmentParameters = Dict[EnvironmentParameter, float]


class Environment:
    """
    Atmosphere, wind and gravity as a function of altitude.

    Parameters
    ----------
    wind_ned : sequence of float, optional
        Constant wind velocity [north, east, down] (ft/s)
    gravity : float, optional
        Gravitational acceleration (ft/s^2)
    """

    def __init__(self, wind_ned: Optional[Sequence[float]] = None, gravity: float = GRAVITY):
        self.wind_ned = np.zeros(3) if wind_ned is None else np.asarray(wind_ned, dtype=float)
        self.gravity = gravity

    def parameters(self, altitude: float) -> EnvironmentParameters:
        """
        Look up the environment at an altitude.

        Parameters
        ----------
        altitude : float
            Geometric altitude (ft)

        Returns
        -------
        dict
            EnvironmentParameter -> value
        """
        atm = StandardAtmosphere(altitude)

        return {
            EnvironmentParameter.DENSITY: atm.density,
            EnvironmentParameter.TEMPERATURE: atm.temperature,
            EnvironmentParameter.PRESSURE: atm.pressure,
            EnvironmentParameter.SPEED_OF_SOUND: atm.speed_of_sound,
            EnvironmentParameter.GRAVITY: self.gravity,
            EnvironmentParameter.WIND_NORTH: float(self.wind_ned[0]),
            EnvironmentParameter.WIND_EAST: float(self.wind_ned[1]),
            EnvironmentParameter.WIND_DOWN: float(self.wind_ned[2]),
        }


def wind_vector(environment: EnvironmentParameters) -> np.ndarray:
    """Wind velocity [north, east, down] (ft/s) from an environment map."""
    return np.array([
        environment[EnvironmentParameter.WIND_NORTH],
        environment[EnvironmentParameter.WIND_EAST],
        environment[EnvironmentParameter.WIND_DOWN],
    ])
