"""
US Standard Atmosphere 1976 Model

Provides atmospheric properties as a function of altitude:
- Temperature
- Pressure
- Density
- Speed of sound

Units: US Customary (feet, slugs, lbf, Rankine)
"""

import numpy as np


class StandardAtmosphere:
    """
    US Standard Atmosphere 1976 model.

    Parameters
    ----------
    altitude : float
        Geometric altitude in feet above MSL. Values outside
        [MIN_ALTITUDE, MAX_ALTITUDE] are evaluated at the nearest bound.

    Attributes
    ----------
    temperature : float
        Static temperature (Rankine)
    pressure : float
        Static pressure (lbf/ft²)
    density : float
        Air density (slugs/ft³)
    speed_of_sound : float
        Speed of sound (ft/s)

    Notes
    -----
    Model covers three atmospheric layers:
    - Troposphere: up to 36,089 ft (temperature decreases linearly)
    - Lower Stratosphere: 36,089 - 65,617 ft (isothermal)
    - Upper Stratosphere: 65,617 - 80,000 ft (temperature increases)

    Reference: U.S. Standard Atmosphere, 1976, NOAA/NASA/USAF
    """

    # Sea level conditions
    T0 = 518.67  # Rankine (59°F)
    P0 = 2116.22  # lbf/ft² (14.696 psi)
    rho0 = 0.002377  # slugs/ft³

    R = 1716.59  # ft·lbf/(slug·°R)
    gamma = 1.4
    g0 = 32.174  # ft/s²

    # Layer boundaries (ft)
    h_trop = 36089.0
    h_strat1 = 65617.0

    # Temperature lapse rates (°R/ft)
    lapse_trop = -0.00356616
    lapse_strat2 = 0.00054864

    MIN_ALTITUDE = -2000.0
    MAX_ALTITUDE = 80000.0

    def __init__(self, altitude: float = 0.0):
        self.update(altitude)

    def update(self, altitude: float):
        """Recompute properties for a new altitude (ft)."""
        self.altitude = altitude
        h = min(max(altitude, self.MIN_ALTITUDE), self.MAX_ALTITUDE)

        T_trop = self.T0 + self.lapse_trop * self.h_trop
        P_trop = self.P0 * (T_trop / self.T0)**(-self.g0 / (self.lapse_trop * self.R))

        if h <= self.h_trop:
            self.temperature = self.T0 + self.lapse_trop * h
            self.pressure = self.P0 * (self.temperature / self.T0)**(-self.g0 / (self.lapse_trop * self.R))

        elif h <= self.h_strat1:
            # Isothermal layer
            self.temperature = T_trop
            self.pressure = P_trop * np.exp(-self.g0 * (h - self.h_trop) / (self.R * T_trop))

        else:
            P_strat1 = P_trop * np.exp(-self.g0 * (self.h_strat1 - self.h_trop) / (self.R * T_trop))
            self.temperature = T_trop + self.lapse_strat2 * (h - self.h_strat1)
            self.pressure = P_strat1 * (self.temperature / T_trop)**(-self.g0 / (self.lapse_strat2 * self.R))

        # Ideal gas law
        self.density = self.pressure / (self.R * self.temperature)
        self.speed_of_sound = np.sqrt(self.gamma * self.R * self.temperature)

    def __repr__(self):
        return (f"StandardAtmosphere(altitude={self.altitude:.0f} ft, "
                f"T={self.temperature-459.67:.1f}°F, "
                f"P={self.pressure/144:.2f} psi, "
                f"rho={self.density:.6f} slug/ft³)")
