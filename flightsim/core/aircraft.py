"""
Static aircraft definition.

Holds mass properties, reference geometry, stability and control
derivatives, the reference points for moment transport, the landing
gear contact geometry and the engines. An Aircraft is immutable for the
length of a run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .propulsion import EngineSet
from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class MassProperties:
    """Mass (slug) and moments/products of inertia (slug*ft^2)."""
    mass: float
    Ixx: float
    Iyy: float
    Izz: float
    Ixz: float = 0.0

    @property
    def inertia(self) -> np.ndarray:
        """Inertia tensor in body frame."""
        return np.array([
            [self.Ixx, 0.0, -self.Ixz],
            [0.0, self.Iyy, 0.0],
            [-self.Ixz, 0.0, self.Izz]
        ])


@dataclass(frozen=True)
class ReferenceGeometry:
    """Wing reference area (ft^2), span (ft) and mean aerodynamic chord (ft)."""
    S: float
    b: float
    c: float


@dataclass(frozen=True)
class StabilityDerivatives:
    """
    Non-dimensional stability and control derivatives.

    Angles and deflections in radians; rate derivatives are with respect
    to the non-dimensional rates p*b/2V, q*c/2V, r*b/2V and alpha_dot*c/2V.
    Control suffixes: de elevator, da aileron, dr rudder, df flaps.
    """

    # Lift
    CL_0: float = 0.0
    CL_alpha: float = 5.0
    CL_alphadot: float = 0.0
    CL_q: float = 0.0
    CL_de: float = 0.4
    CL_df: float = 0.0

    # Drag
    CD_0: float = 0.02
    CD_alpha: float = 0.1
    CD_alpha2: float = 0.5
    CD_de: float = 0.0
    CD_df: float = 0.0

    # Side force
    CY_beta: float = -0.2
    CY_dr: float = 0.1

    # Roll
    Cl_beta: float = -0.1
    Cl_p: float = -0.4
    Cl_r: float = 0.1
    Cl_da: float = 0.2
    Cl_dr: float = 0.01

    # Pitch
    Cm_0: float = 0.0
    Cm_alpha: float = -0.5
    Cm_alphadot: float = 0.0
    Cm_q: float = -10.0
    Cm_de: float = -1.0
    Cm_df: float = 0.0

    # Yaw
    Cn_beta: float = 0.1
    Cn_p: float = -0.05
    Cn_r: float = -0.2
    Cn_da: float = -0.05
    Cn_dr: float = -0.1


@dataclass(frozen=True)
class LiftTable:
    """
    Static lift curve CL(alpha) for linear interpolation.

    Replaces CL_0 + CL_alpha * alpha when present, which lets the
    lift curve include stall.
    """
    alpha: Tuple[float, ...]  # rad, increasing
    CL: Tuple[float, ...]

    def lookup(self, alpha: float) -> float:
        return float(np.interp(alpha, self.alpha, self.CL))


class BrakeSide(Enum):
    NONE = 'none'
    LEFT = 'left'
    RIGHT = 'right'


@dataclass(frozen=True)
class GroundContactPoint:
    """
    Landing gear or airframe contact point.

    position is measured from the center of gravity in body axes (ft).
    """
    name: str
    position: Tuple[float, float, float]
    stiffness: float = 4000.0          # lbf/ft
    damping: float = 500.0             # lbf*s/ft
    rolling_friction: float = 0.02
    side_friction: float = 0.8
    brake: BrakeSide = BrakeSide.NONE
    braking_friction: float = 0.5
    steerable: bool = False
    steering_ratio: float = 0.0        # wheel angle per unit rudder deflection


@dataclass(frozen=True)
class Aircraft:
    """
    Complete static aircraft definition.

    center_of_gravity and aerodynamic_center are body-axis positions
    (x forward, y right, z down, ft) from a common datum.
    """
    name: str
    mass_properties: MassProperties
    geometry: ReferenceGeometry
    derivatives: StabilityDerivatives = field(default_factory=StabilityDerivatives)
    center_of_gravity: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    aerodynamic_center: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    lift_table: Optional[LiftTable] = None
    ground_contact: Tuple[GroundContactPoint, ...] = ()
    engines: EngineSet = field(default_factory=EngineSet)

    @property
    def mass(self) -> float:
        return self.mass_properties.mass

    @property
    def inertia(self) -> np.ndarray:
        return self.mass_properties.inertia

    @property
    def aero_lever_arm(self) -> np.ndarray:
        """Vector from the center of gravity to the aerodynamic center (ft)."""
        return np.asarray(self.aerodynamic_center, dtype=float) - np.asarray(self.center_of_gravity, dtype=float)

    def validate(self):
        """
        Check the definition is physically meaningful.

        Raises
        ------
        ConfigurationError
            On non-finite values, non-positive mass or reference
            dimensions, or an inertia tensor that is not positive definite
        """
        mp = self.mass_properties
        numbers = [mp.mass, mp.Ixx, mp.Iyy, mp.Izz, mp.Ixz,
                   self.geometry.S, self.geometry.b, self.geometry.c,
                   *self.center_of_gravity, *self.aerodynamic_center,
                   *vars(self.derivatives).values()]
        if not np.all(np.isfinite(np.asarray(numbers, dtype=float))):
            raise ConfigurationError(f"Aircraft '{self.name}' has non-finite properties")

        if mp.mass <= 0.0:
            raise ConfigurationError(f"Aircraft mass must be positive, got {mp.mass}")

        if np.any(np.linalg.eigvalsh(mp.inertia) <= 0.0):
            raise ConfigurationError(f"Inertia tensor of '{self.name}' is not positive definite")

        geo = self.geometry
        if min(geo.S, geo.b, geo.c) <= 0.0:
            raise ConfigurationError(f"Reference geometry must be positive, got S={geo.S}, b={geo.b}, c={geo.c}")

        if self.lift_table is not None:
            alphas = np.asarray(self.lift_table.alpha, dtype=float)
            if len(alphas) != len(self.lift_table.CL) or len(alphas) < 2:
                raise ConfigurationError("Lift table needs matching alpha and CL arrays of length >= 2")
            if np.any(np.diff(alphas) <= 0.0):
                raise ConfigurationError("Lift table alpha values must be strictly increasing")

        for point in self.ground_contact:
            if len(point.position) != 3 or not np.all(np.isfinite(point.position)):
                raise ConfigurationError(f"Contact point '{point.name}' needs a finite 3-element position")
            if point.stiffness <= 0.0 or point.damping < 0.0:
                raise ConfigurationError(f"Contact point '{point.name}' needs positive stiffness and non-negative damping")
